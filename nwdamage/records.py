"""Reading step records written by the simulation."""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field
from enum import IntEnum

from .beam import Vector3
from .parameters import ConcentReaction, SimParameters

logger = logging.getLogger(__name__)


class Process(IntEnum):
    """Processes of the QGSP_BIC_HP physics list that end a step."""

    N_FISSION = 0
    N_CAPTURE = 1
    NEUTRON_INELASTIC = 2
    HAD_ELASTIC = 3
    DECAY = 4
    TRANSPORTATION = 5


_PROCESS_NAMES = {
    Process.N_FISSION: "nFission",
    Process.N_CAPTURE: "nCapture",
    Process.NEUTRON_INELASTIC: "neutronInelastic",
    Process.HAD_ELASTIC: "hadElastic",
    Process.DECAY: "Decay",
    Process.TRANSPORTATION: "Transportation",
}
_PROCESS_BY_NAME = {name: process for process, name in _PROCESS_NAMES.items()}


def process_from_name(name: str) -> Process:
    """The process with the given name."""
    try:
        return _PROCESS_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Unknown process name in QGSP_BIC_HP model: {name}") from None


def process_name(process: Process | int) -> str:
    """The name of the given process."""
    try:
        return _PROCESS_NAMES[Process(process)]
    except ValueError:
        raise ValueError(f"Unknown process ID in QGSP_BIC_HP model: {process}") from None


@dataclass
class StepInfo:
    """One recorded step."""

    step_id: int
    pre_energy: float = 0.0
    post_energy: float = 0.0
    delta_energy: float = 0.0
    delta_time: float = 0.0
    origin_direction: Vector3 = field(default_factory=Vector3)
    origin_position: Vector3 = field(default_factory=Vector3)
    pre_position: Vector3 = field(default_factory=Vector3)
    post_position: Vector3 = field(default_factory=Vector3)
    process_name: str = ""
    particle_name: str = ""
    atom_number: int = 0
    baryon_number: int = 0


@dataclass
class TrackInfo:
    """The recorded steps of one track."""

    track_id: int
    steps: list[StepInfo] = field(default_factory=list)


@dataclass
class EventInfo:
    """The recorded tracks of one event."""

    event_id: int = 0
    tracks: list[TrackInfo] = field(default_factory=list)


_PRE_ENERGY_CUT = frozenset(
    {
        ConcentReaction.INLET_EST_AND_IN_EST_TILL_END,
        ConcentReaction.INLET_TO_FIRST_NON_EST,
        ConcentReaction.MATRIX_ATOM,
    }
)


def _vector(values: list[str]) -> Vector3:
    x, y, z = (float(value) for value in values)
    return Vector3(x, y, z)


def _parse_line(
    fields: list[str], with_isotope: bool, line_number: int
) -> tuple[int, int, StepInfo]:
    expected = 24 if with_isotope else 22
    if len(fields) < expected:
        raise ValueError(
            f"line {line_number}: expected {expected} fields, found {len(fields)}"
        )
    try:
        event_id, track_id, step_id = (int(value) for value in fields[0:3])
        pre, post, delta, delta_time = (float(value) for value in fields[3:7])
        step = StepInfo(
            step_id=step_id,
            pre_energy=pre,
            post_energy=post,
            delta_energy=delta,
            delta_time=delta_time,
            origin_direction=_vector(fields[7:10]),
            origin_position=_vector(fields[10:13]),
            pre_position=_vector(fields[13:16]),
            post_position=_vector(fields[16:19]),
            process_name=fields[19],
            particle_name=fields[20],
        )
        if with_isotope:
            step.atom_number = int(fields[21])
            step.baryon_number = int(fields[22])
        int(fields[expected - 1])  # track status, checked but not kept
    except ValueError as error:
        raise ValueError(f"line {line_number}: {error}") from None
    return event_id, track_id, step


def _keep(step: StepInfo, reaction: ConcentReaction, cut: float) -> bool:
    if reaction in _PRE_ENERGY_CUT:
        return step.pre_energy >= cut
    if reaction == ConcentReaction.INLET_TO_LAST_EST:
        return step.delta_energy >= cut
    return True


def read_events(
    path: str | os.PathLike[str], parameters: SimParameters
) -> dict[int, list[TrackInfo]]:
    """Read a step record file into tracks grouped by event id, in event order.

    The first line is a header. Steps below the analysis cut energy are
    dropped: by pre-step energy, or by energy loss when recording up to the
    last elastic reaction.
    """
    reaction = parameters.concent_reaction
    cut = parameters.analysis_cut_energy
    with_isotope = reaction == ConcentReaction.ISO
    events: dict[int, list[TrackInfo]] = {}

    with open(path, encoding="utf-8") as handle:
        next(handle, None)
        for line_number, line in enumerate(handle, start=2):
            fields = line.split()
            if not fields:
                continue
            event_id, track_id, step = _parse_line(fields, with_isotope, line_number)

            if event_id % 100 == 0:
                logger.debug("reading event %d", event_id)

            if not _keep(step, reaction, cut):
                continue

            tracks = events.setdefault(event_id, [])
            track = next((t for t in tracks if t.track_id == track_id), None)
            if track is None:
                track = TrackInfo(track_id)
                tracks.append(track)

            if any(existing.step_id == step.step_id for existing in track.steps):
                warnings.warn(
                    f"There are duplicate case for event: {event_id}"
                    f" track : {track_id} step : {step.step_id}",
                    RuntimeWarning,
                    stacklevel=2,
                )
            track.steps.append(step)

    return dict(sorted(events.items()))