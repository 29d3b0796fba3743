# nwdamage

`nwdamage` analyses the step records written by a neutron transport
simulation of a target material. By default the target is iron. Each record
describes one step of a recoiling matrix atom, the primary knock-on atom
(PKA). From these records the package works out:

- the distances between successive PKA positions, both as raw values and as
  histograms on an equal-interval and a logarithmic (power-interval) scale;
- how far each PKA lies from the axis of the incoming beam;
- the nearest neighbour of every PKA, found with a linked-cell search;
- how many PKAs fall into each square zone around the beam centre.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from nwdamage.parameters import SimParameters
from nwdamage.records import read_events
from nwdamage.analysis import Analysis
from nwdamage.analysis_new import NewAnalysis

params = SimParameters()            # default run settings
params.out_path = "results"         # directory for the output files

events = read_events("OutPutResult.txt", params)
result = Analysis(parameters=params).run(events)
print(result.distances[:5], result.equal_bins[:3])

NewAnalysis(parameters=params).run(events)
```

`Analysis` searches for nearest neighbours over a full three-dimensional
grid of cells. `NewAnalysis` first shifts every PKA by whole cells into the
central column around the beam. It then searches along depth only, so PKAs
from different columns are compared as if they had landed in the same place.
Its depth range ends at half of the world's half height.

### The main pieces

- `nwdamage.parameters.SimParameters` holds the run settings:
  - the recording mode, as a `ConcentReaction`;
  - the output directory and the column width;
  - the linked-cell sizes and the cut-off energy;
  - the target `Material` (`nwdamage.materials`) and the `Beam` (`nwdamage.beam`).
- `nwdamage.records.read_events(path, parameters)` reads a record file into
  a dict that maps each event id to a list of `TrackInfo`. Each `TrackInfo`
  holds a list of `StepInfo`. Steps below the cut-off energy are dropped.
  Malformed lines raise `ValueError`.
- `Analysis.run(events)` and `NewAnalysis.run(events)` write the result files
  and return an `AnalysisResult`. It holds the distances, the deviations from
  the beam axis, the end reasons, the bounding box, the histograms and a
  `LinkCellSummary`.
- `nwdamage.linkcell.min_distance_linked_cell` and
  `nwdamage.linkcell_new.shifted_min_distance_linked_cell` run the
  nearest-neighbour searches directly on any text streams.
- `nwdamage.analysis.equal_interval_bins`,
  `nwdamage.analysis.power_interval_bins` and
  `nwdamage.analysis.deviation_from_axis` are the histogram and geometry
  helpers.
- `nwdamage.textnum.extract_numbers(text)` pulls numeric tokens out of a
  line of text:

```python
from nwdamage.textnum import extract_numbers

extract_numbers("x=1.5, -2)")  # ['1.5', '-2']
```

### Input

The record file starts with one header line. After that comes one line per
step, with whitespace-separated columns in this order:

1. the event, track and step identifiers;
2. the energies before and after the step, and their difference;
3. the time of the step;
4. the beam direction;
5. the beam origin;
6. the positions before and after the step;
7. the process name;
8. the particle name;
9. the track status.

In isotope mode (`ConcentReaction.ISO`), the atomic number and the baryon
number come before the track status.

### Output

`Analysis.run` writes these files into `parameters.out_path`. If that is
empty, it writes them into the current directory.

| File | Contents |
| --- | --- |
| `DistanceResult_OriginDistance.txt` | every distance between successive PKAs |
| `DistanceResult_Analysis_EqualInterval.txt` | equal-interval histogram of the distances |
| `DistanceResult_Analysis_PowerInterval.txt` | logarithmic histogram of the distances |
| `DistanceResult_Analysis_EndReason.txt` | end process and energy of each event (last-elastic mode) |
| `DistanceResult_Analysis_DeviateAxesDistance.txt` | distance of each PKA from the beam axis |
| `DistanceResult_Analysis_DistanceXYZ.txt` | nearest neighbour of each PKA |
| `DistanceResult_Analysis_linkedCellPosition.txt` | header of the cell position table only |
| `ZoneCount.txt` | number of PKAs per zone |
| `CeilCount.txt` | number of PKAs per cell of each zone |

`NewAnalysis.run` writes the same set of files with a `New_` prefix on
every name. Its nearest-neighbour table also holds the true position and the
shifted position of each PKA.

## What the package does not do

- It does not run the transport simulation. It only reads the records that
  such a simulation produced.
- It installs no command-line program. Run the analysis from Python as shown
  above.