"""Nearest-neighbour distances between recorded steps on a linked-cell grid."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import NamedTuple, Sequence, TextIO

from .beam import Vector3
from .parameters import ConcentReaction, SimParameters
from .records import StepInfo, TrackInfo

logger = logging.getLogger(__name__)

MAX_CELLS_X = 885
MAX_CELLS_Y = 885
MAX_CELLS_Z = 10
MAX_CELLS = MAX_CELLS_X * MAX_CELLS_Y * MAX_CELLS_Z

NO_DISTANCE = 1.0e32

Boundary = Sequence[Sequence[float]]


class ZoneCell(NamedTuple):
    """One x-y cell of a square zone ring around the grid centre."""

    offset_x: int
    offset_y: int
    cell_x: int
    cell_y: int


@dataclass
class NeighbourRecord:
    """The nearest step found for one subject step."""

    subject_zone: int
    subject_cell: int
    subject_event: int
    subject_track: int
    subject_step: int
    object_zone: int
    object_cell: int
    object_event: int
    object_track: int
    object_step: int
    delta: Vector3
    distance: float


@dataclass
class LinkCellSummary:
    """Grid layout and results of a linked-cell nearest-neighbour search."""

    cells: tuple[int, int, int]
    intervals: tuple[float, float, float]
    bounds: tuple[tuple[float, float], tuple[float, float], tuple[float, float]]
    zone_counts: list[int] = field(default_factory=list)
    xy_counts: Counter = field(default_factory=Counter)
    records: list[NeighbourRecord] = field(default_factory=list)


@dataclass
class _Entry:
    event_id: int
    track_id: int
    step: StepInfo
    position: Vector3

    @property
    def key(self) -> tuple[int, int, int]:
        return self.event_id, self.track_id, self.step.step_id


def zone_cells(zone_id: int, zone_center: tuple[int, int]) -> list[ZoneCell]:
    """The cells of the square ring ``zone_id`` cells away from the centre.

    Rows run from bottom to top; the first and last rows are complete, the
    others hold only their two end cells.
    """
    if zone_id < 0:
        raise ValueError("zone id must not be negative")
    center_x, center_y = zone_center
    cells: list[ZoneCell] = []
    for j in range(-zone_id, zone_id + 1):
        step = 1 if j in (-zone_id, zone_id) else 2 * zone_id
        for i in range(-zone_id, zone_id + 1, step):
            cells.append(ZoneCell(i, j, center_x + i, center_y + j))
    return cells


def _step_position(step: StepInfo, reaction: ConcentReaction) -> Vector3:
    if reaction == ConcentReaction.INLET_TO_LAST_EST:
        return step.post_position
    return step.pre_position


def _cell_index(offset: float, interval: float, count: int) -> int:
    if interval <= 0:
        return 0
    return max(min(int(offset / interval), count - 1), 0)


def _zone_of(i: int, j: int, center: int) -> int:
    return max(abs(i - center), abs(j - center))


def _fmt_float(value: float, width: int) -> str:
    return f"{value:>{width}.7e}"


def _fmt_int(value: int, width: int) -> str:
    return f"{value:>{width}}"


def min_distance_linked_cell(
    events: dict[int, list[TrackInfo]],
    boundary: Boundary,
    parameters: SimParameters,
    distance_stream: TextIO,
    zone_stream: TextIO,
    ceil_stream: TextIO,
) -> LinkCellSummary:
    """Find, for every step inside the grid, its nearest other step.

    The x-y grid is centred on the beam and sized to cover ``boundary``;
    the z range of ``boundary`` is split into the configured number of cells.
    The search grows shell by shell around the subject's cell and stops at the
    first shell holding any other step. Results are written to
    ``distance_stream``, per-cell counts to ``ceil_stream`` and per-zone counts
    to ``zone_stream``.
    """
    interval_xy = float(parameters.link_cell_interval_xy)
    if interval_xy <= 0:
        raise ValueError("link cell x-y interval must be positive")
    n_z = int(parameters.link_cell_num_z)
    if n_z <= 0:
        raise ValueError("link cell number in z must be positive")

    reaction = parameters.concent_reaction
    width = parameters.out_width
    center = parameters.beam.flux_center()
    (x_lo, x_hi), (y_lo, y_hi), (z_lo, z_hi) = (tuple(b) for b in boundary)
    lows = (x_lo, y_lo)
    highs = (x_hi, y_hi)

    counts = []
    for axis in range(2):
        extent = max(center[axis] - lows[axis], highs[axis] - center[axis])
        counts.append(max(2 * math.ceil(extent / interval_xy) + 1, 3))
    n_xy = max(counts)
    n_x = n_y = n_xy
    interval_z = float(math.ceil((z_hi - z_lo) / n_z))

    logger.info("boundary_x %g %g", x_lo, x_hi)
    logger.info("boundary_y %g %g", y_lo, y_hi)
    logger.info("boundary_z %g %g", z_lo, z_hi)

    if n_x * n_y * n_z > MAX_CELLS:
        logger.warning(
            "cell grid %d x %d x %d exceeds the limit %d; only a zone of "
            "%d x %d x %d cells is considered",
            n_x, n_y, n_z, MAX_CELLS, MAX_CELLS_X, MAX_CELLS_Y, MAX_CELLS_Z,
        )
        n_x, n_y, n_z = MAX_CELLS_X, MAX_CELLS_Y, MAX_CELLS_Z
        interval_z = float(math.ceil((z_hi - z_lo) / n_z))

    logger.info("cellnum_x %d", n_x)
    logger.info("cellnum_y %d", n_y)
    logger.info("cellnum_z %d", n_z)

    zone_num = n_x // 2 + 1
    zone_center = zone_num - 1
    half = (zone_num - 1 + 0.5) * interval_xy
    bounds = (
        (center[0] - half, center[0] + half),
        (center[1] - half, center[1] + half),
        (z_lo, z_hi),
    )
    logger.info("new_boundary_x %g %g", *bounds[0])
    logger.info("new_boundary_y %g %g", *bounds[1])
    logger.info("new_boundary_z %g %g", *bounds[2])

    def link_id(i: int, j: int, k: int) -> int:
        return k * n_x * n_y + j * n_x + i

    cells: dict[tuple[int, int, int], list[_Entry]] = {}
    for event_id, tracks in sorted(events.items()):
        for track in tracks:
            for step in track.steps:
                if (
                    reaction == ConcentReaction.INLET_TO_LAST_EST
                    and step.process_name != "hadElastic"
                ):
                    break
                position = _step_position(step, reaction)
                coords = tuple(position)
                if any(
                    value < low or value > high
                    for value, (low, high) in zip(coords, bounds)
                ):
                    continue
                i = _cell_index(position.x - bounds[0][0], interval_xy, n_x)
                j = _cell_index(position.y - bounds[1][0], interval_xy, n_y)
                k = _cell_index(position.z - bounds[2][0], interval_z, n_z)
                cells.setdefault((i, j, k), []).append(
                    _Entry(event_id, track.track_id, step, position)
                )

    summary = LinkCellSummary(
        cells=(n_x, n_y, n_z),
        intervals=(interval_xy, interval_xy, interval_z),
        bounds=bounds,
    )
    max_shell = max(n_x, n_y, n_z)

    for i, j, k in sorted(cells, key=lambda cell: (cell[1], cell[0], cell[2])):
        subject_zone = _zone_of(i, j, zone_center)
        subject_link = link_id(i, j, k)
        for subject in cells[(i, j, k)]:
            summary.xy_counts[(i, j)] += 1

            best: _Entry | None = None
            best_link = -1
            best_zone = -1
            best_delta = Vector3()
            min_dist = NO_DISTANCE
            shell = 1
            while best is None and shell <= max_shell:
                for kk in range(max(k - shell, 0), min(k + shell + 1, n_z)):
                    for jj in range(max(j - shell, 0), min(j + shell + 1, n_y)):
                        for ii in range(max(i - shell, 0), min(i + shell + 1, n_x)):
                            for other in cells.get((ii, jj, kk), ()):
                                if other.key == subject.key:
                                    continue
                                diff = subject.position - other.position
                                distance = diff.mag()
                                if distance < min_dist:
                                    min_dist = distance
                                    best = other
                                    best_link = link_id(ii, jj, kk)
                                    best_zone = _zone_of(ii, jj, zone_center)
                                    best_delta = Vector3(
                                        abs(diff.x), abs(diff.y), abs(diff.z)
                                    )
                shell += 1

            record = NeighbourRecord(
                subject_zone=subject_zone,
                subject_cell=subject_link,
                subject_event=subject.event_id,
                subject_track=subject.track_id,
                subject_step=subject.step.step_id,
                object_zone=best_zone,
                object_cell=best_link,
                object_event=best.event_id if best else -1,
                object_track=best.track_id if best else -1,
                object_step=best.step.step_id if best else -1,
                delta=best_delta,
                distance=min_dist,
            )
            summary.records.append(record)
            distance_stream.write(
                "".join(
                    _fmt_int(value, width)
                    for value in (
                        record.subject_zone,
                        record.subject_cell,
                        record.subject_event,
                        record.subject_track,
                        record.subject_step,
                        record.object_zone,
                        record.object_cell,
                        record.object_event,
                        record.object_track,
                        record.object_step,
                    )
                )
                + "".join(
                    _fmt_float(value, width)
                    for value in (*record.delta, record.distance)
                )
                + "\n"
            )

    for zone_id in range(zone_num):
        zone_count = 0
        for cell in zone_cells(zone_id, (zone_center, zone_center)):
            count = summary.xy_counts.get((cell.cell_x, cell.cell_y), 0)
            zone_count += count
            ceil_stream.write(
                _fmt_int(zone_id, width)
                + _fmt_int(cell.cell_y * n_x + cell.cell_x, width)
                + _fmt_int(cell.offset_x, width)
                + _fmt_int(cell.offset_y, width)
                + _fmt_int(count, width)
                + "\n"
            )
        summary.zone_counts.append(zone_count)
        zone_stream.write(_fmt_int(zone_id, width) + _fmt_int(zone_count, width) + "\n")

    return summary