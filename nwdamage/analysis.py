"""Distance statistics of recorded steps."""

from __future__ import annotations

import bisect
import logging
import math
import os
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from .beam import Vector3
from .linkcell import LinkCellSummary, min_distance_linked_cell
from .parameters import ConcentReaction, SimParameters
from .records import Process, TrackInfo, process_from_name

logger = logging.getLogger(__name__)

ORIGINAL_DISTANCE_FILE = "DistanceResult_OriginDistance.txt"
EQUAL_INTERVAL_FILE = "DistanceResult_Analysis_EqualInterval.txt"
POWER_INTERVAL_FILE = "DistanceResult_Analysis_PowerInterval.txt"
END_REASON_FILE = "DistanceResult_Analysis_EndReason.txt"
DEVIATE_AXES_FILE = "DistanceResult_Analysis_DeviateAxesDistance.txt"
DISTANCE_XYZ_FILE = "DistanceResult_Analysis_DistanceXYZ.txt"
LINKED_CELL_POSITION_FILE = "DistanceResult_Analysis_linkedCellPosition.txt"
ZONE_COUNT_FILE = "ZoneCount.txt"
CEIL_COUNT_FILE = "CeilCount.txt"

_DISTANCE_XYZ_COLUMNS = (
    "SubjectZONEID",
    "SubjectLinkedID",
    "SubjectEventID",
    "SubjectTrackID",
    "SubjectStepID",
    "ObjectZONEID",
    "ObjectLinkedID",
    "ObjectEventID",
    "ObjectTrackID",
    "ObjectStepID",
    "MinDeltaX(mm)",
    "MinDeltaY(mm)",
    "MinDeltaZ(mm)",
    "MinDeltaDist(mm)",
)
_LINKED_CELL_COLUMNS = ("CellID", "ZoneID", "cent_x(mm)", "cent_y(mm)", "cent_z(mm)")
_ZONE_COLUMNS = ("ZoneID", "Count")
_CEIL_COLUMNS = ("ZoneID", "CeilXYID", "ZoneX", "ZoneY", "Count")

_BINNED_REACTIONS = frozenset(
    {
        ConcentReaction.INLET_TO_LAST_EST,
        ConcentReaction.INLET_TO_FIRST_NON_EST,
        ConcentReaction.INLET_EST_AND_IN_EST_TILL_END,
        ConcentReaction.MATRIX_ATOM,
    }
)


def equal_interval_bins(
    distances: Sequence[float], bins_per_power: int, min_precision: float
) -> list[tuple[float, float]]:
    """Histogram with ``bins_per_power`` linear bins in each decade.

    Each pair is (upper bin end, score); a distance falls in the first bin
    whose end exceeds it. Scores beyond the first decade are divided by the
    decade's power of ten. No distances, or no positive one, gives no bins.
    """
    if bins_per_power <= 0:
        raise ValueError("bins per power must be positive")
    if not distances or max(distances) <= 0:
        return []
    lowest = max(min_precision, min(distances))
    min_log = math.floor(math.log10(lowest))
    max_log = math.ceil(math.log10(max(distances)))
    bin_count = (max_log - min_log) * bins_per_power

    ends = []
    for i in range(bin_count):
        base = 10.0 ** (min_log + i // bins_per_power)
        ends.append(base + (i % bins_per_power) * base * 9 / bins_per_power)

    scores = [0.0] * bin_count
    for distance in distances:
        position = bisect.bisect_right(ends, distance)
        if position < bin_count:
            scores[position] += 1

    return [
        (end, score / 10.0 ** (max(i - 1, 0) // bins_per_power))
        for i, (end, score) in enumerate(zip(ends, scores))
    ]


def power_interval_bins(
    distances: Iterable[float], bin_count: int, low: float, high: float
) -> list[tuple[float, int]]:
    """Histogram with ``bin_count`` logarithmically equal bins from ``low`` to ``high``.

    Each pair is (lower bin end, count); distances outside [low, high] are
    ignored and ``high`` itself counts in the last bin.
    """
    if bin_count <= 0:
        raise ValueError("bin count must be positive")
    if not 0 < low < high:
        raise ValueError("bin range must satisfy 0 < low < high")
    delta = (math.log10(high) - math.log10(low)) / bin_count
    ends = [low * 10.0 ** (i * delta) for i in range(bin_count)]
    counts = [0] * bin_count
    for distance in distances:
        if low <= distance <= high:
            position = math.floor((math.log10(distance) - math.log10(low)) / delta)
            counts[min(max(position, 0), bin_count - 1)] += 1
    return list(zip(ends, counts))


def deviation_from_axis(position: Vector3, origin: Vector3, direction: Vector3) -> float:
    """Distance of ``position`` from the line through ``origin`` along ``direction``."""
    to_origin = position - origin
    length = to_origin.mag()
    direction_length = direction.mag()
    if length <= 0 or direction_length <= 0:
        return 0.0
    cosine = abs(to_origin.dot(direction)) / (length * direction_length)
    return length * math.sqrt(max(0.0, 1.0 - cosine * cosine))


@dataclass
class AnalysisResult:
    """What an analysis run computed."""

    distances: list[float] = field(default_factory=list)
    deviations: list[tuple[int, float]] = field(default_factory=list)
    end_reasons: list[tuple[int, Process, float]] = field(default_factory=list)
    boundary: list[list[float]] = field(default_factory=list)
    equal_bins: list[tuple[float, float]] = field(default_factory=list)
    power_bins: list[tuple[float, int]] = field(default_factory=list)
    link_cells: LinkCellSummary | None = None


def _header(columns: Sequence[str], width: int) -> str:
    return "".join(f"{name:>{width}}" for name in columns) + "\n"


@dataclass
class Analysis:
    """Distance analysis of the steps read from a record file."""

    parameters: SimParameters = field(default_factory=SimParameters)
    bins_per_power: int = 100
    power_bin_count: int = 200
    power_min: float = 0.01
    power_max: float = 200.0
    min_precision: float = 1e-7

    file_prefix = ""

    def _output_path(self, name: str) -> Path:
        name = self.file_prefix + name
        if self.parameters.out_path:
            return Path(self.parameters.out_path) / name
        return Path(name)

    def _open(self, stack: ExitStack, name: str) -> TextIO:
        return stack.enter_context(open(self._output_path(name), "w", encoding="utf-8"))

    def _link_cells(
        self,
        events: dict[int, list[TrackInfo]],
        boundary: list[list[float]],
        distance_stream: TextIO,
        zone_stream: TextIO,
        ceil_stream: TextIO,
    ) -> LinkCellSummary:
        return min_distance_linked_cell(
            events, boundary, self.parameters, distance_stream, zone_stream, ceil_stream
        )

    def run(self, events: dict[int, list[TrackInfo]]) -> AnalysisResult:
        """Analyse ``events`` and write the result files."""
        params = self.parameters
        reaction = params.concent_reaction
        width = params.out_width
        last_elastic = reaction == ConcentReaction.INLET_TO_LAST_EST
        result = AnalysisResult(boundary=[[1.0e32, -1.0e32] for _ in range(3)])
        boundary = result.boundary

        with ExitStack() as stack:
            original = self._open(stack, ORIGINAL_DISTANCE_FILE)
            equal = self._open(stack, EQUAL_INTERVAL_FILE)
            power = self._open(stack, POWER_INTERVAL_FILE)
            end_reason = self._open(stack, END_REASON_FILE)
            end_reason.write(_header(("EventID:", "EndReason", "EndEnergy"), width))
            deviate = self._open(stack, DEVIATE_AXES_FILE)
            deviate.write(_header(("EventID:", "ToOrgVector(mm)"), width))
            distance_xyz = self._open(stack, DISTANCE_XYZ_FILE)
            distance_xyz.write(_header(self._distance_columns(), width))
            cell_position = self._open(stack, LINKED_CELL_POSITION_FILE)
            cell_position.write(_header(_LINKED_CELL_COLUMNS, width))
            zone = self._open(stack, ZONE_COUNT_FILE)
            zone.write(_header(_ZONE_COLUMNS, width))
            ceil = self._open(stack, CEIL_COUNT_FILE)
            ceil.write(_header(_CEIL_COLUMNS, width))

            for event_id, tracks in sorted(events.items()):
                index = 0
                previous = Vector3()
                for track in tracks:
                    for step in track.steps:
                        if last_elastic and step.process_name != "hadElastic":
                            process = process_from_name(step.process_name)
                            result.end_reasons.append(
                                (event_id, process, step.pre_energy)
                            )
                            end_reason.write(
                                f"{event_id:>{width}}{int(process):>{width}}"
                                f"{step.pre_energy:>{width}.6e}\n"
                            )
                            break

                        index += 1
                        position = step.post_position if last_elastic else step.pre_position
                        if index > 1:
                            distance = (previous - position).mag()
                            original.write(f"{distance:.7e}\n")
                            result.distances.append(distance)
                        previous = position

                        for axis, value in enumerate(position):
                            boundary[axis][0] = min(value, boundary[axis][0])
                            boundary[axis][1] = max(value, boundary[axis][1])
                        self._adjust_boundary(boundary)

                        deviation = deviation_from_axis(
                            position, step.origin_position, step.origin_direction
                        )
                        result.deviations.append((event_id, deviation))
                        deviate.write(f"{event_id:>{width}}{deviation:>{width}.7e}\n")

            self._finish_boundary(boundary)

            if reaction in _BINNED_REACTIONS:
                if result.distances:
                    logger.info("minDistance: %g", min(result.distances))
                    logger.info("maxDistance: %g", max(result.distances))
                result.equal_bins = equal_interval_bins(
                    result.distances, self.bins_per_power, self.min_precision
                )
                result.power_bins = power_interval_bins(
                    result.distances, self.power_bin_count, self.power_min, self.power_max
                )
                for end, score in result.equal_bins:
                    equal.write(f"{end:>{width}.7e}{score:>{width}.7e}\n")
                for end, count in result.power_bins:
                    power.write(f"{end:>{width}.7e}{count:>{width}}\n")

            result.link_cells = self._link_cells(events, boundary, distance_xyz, zone, ceil)

        return result

    def _distance_columns(self) -> Sequence[str]:
        return _DISTANCE_XYZ_COLUMNS

    def _adjust_boundary(self, boundary: list[list[float]]) -> None:
        """Hook applied after each boundary update."""

    def _finish_boundary(self, boundary: list[list[float]]) -> None:
        """Hook applied once all steps have been seen."""


def output_files(directory: str | os.PathLike[str]) -> list[Path]:
    """Paths of every file an :class:`Analysis` run writes into ``directory``."""
    names = (
        ORIGINAL_DISTANCE_FILE,
        EQUAL_INTERVAL_FILE,
        POWER_INTERVAL_FILE,
        END_REASON_FILE,
        DEVIATE_AXES_FILE,
        DISTANCE_XYZ_FILE,
        LINKED_CELL_POSITION_FILE,
        ZONE_COUNT_FILE,
        CEIL_COUNT_FILE,
    )
    return [Path(directory) / name for name in names]