"""Nearest-neighbour distances on a depth-layered grid with x-y cells folded onto the centre."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import TextIO

from .beam import Vector3
from .linkcell import (
    NO_DISTANCE,
    Boundary,
    LinkCellSummary,
    NeighbourRecord,
    zone_cells,
)
from .parameters import ConcentReaction, SimParameters
from .records import StepInfo, TrackInfo

logger = logging.getLogger(__name__)


@dataclass
class ShiftedNeighbourRecord(NeighbourRecord):
    """A nearest-neighbour record that also keeps the subject's true and shifted positions."""

    true_position: Vector3 = field(default_factory=Vector3)
    shifted_position: Vector3 = field(default_factory=Vector3)


@dataclass
class _Entry:
    event_id: int
    track_id: int
    step: StepInfo
    position: Vector3
    shifted: Vector3
    zone: int

    @property
    def key(self) -> tuple[int, int, int]:
        return self.event_id, self.track_id, self.step.step_id


def _step_position(step: StepInfo, reaction: ConcentReaction) -> Vector3:
    if reaction == ConcentReaction.INLET_TO_LAST_EST:
        return step.post_position
    return step.pre_position


def _cell_index(offset: float, interval: float, count: int) -> int:
    return max(min(int(offset / interval), count - 1), 0)


def _fmt_float(value: float, width: int) -> str:
    return f"{value:>{width}.7e}"


def _fmt_int(value: int, width: int) -> str:
    return f"{value:>{width}}"


def shifted_min_distance_linked_cell(
    events: dict[int, list[TrackInfo]],
    boundary: Boundary,
    parameters: SimParameters,
    distance_stream: TextIO,
    zone_stream: TextIO,
    ceil_stream: TextIO,
) -> LinkCellSummary:
    """Find, for every step inside the grid, its nearest other step after folding.

    The x-y grid is centred on the beam and sized to cover ``boundary``. Every
    step is moved by whole cells in x and y so that it lands in the central
    x-y cell; distances are measured between these shifted positions. Depth
    is split into layers of the configured z interval, counted downwards from
    the top of ``boundary``, and the search grows layer by layer around the
    subject's layer until a layer range holds another step.
    """
    interval_xy = float(parameters.link_cell_interval_xy)
    if interval_xy <= 0:
        raise ValueError("link cell x-y interval must be positive")
    interval_z = float(parameters.link_cell_interval_z)
    if interval_z <= 0:
        raise ValueError("link cell z interval must be positive")

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
    n_x = n_y = max(counts)
    n_z = max(math.ceil((z_hi - z_lo) / interval_z), 1)

    logger.info("boundary_x %g %g", x_lo, x_hi)
    logger.info("boundary_y %g %g", y_lo, y_hi)
    logger.info("boundary_z %g %g", z_lo, z_hi)
    logger.info("cellnum_x %d", n_x)
    logger.info("cellnum_y %d", n_y)
    logger.info("cellnum_z %d", n_z)

    zone_num = n_x // 2 + 1
    zone_center = zone_num - 1
    half = (zone_num - 1 + 0.5) * interval_xy
    bounds = (
        (center[0] - half, center[0] + half),
        (center[1] - half, center[1] + half),
        (z_hi - n_z * interval_z, z_hi),
    )
    logger.info("new_boundary_x %g %g", *bounds[0])
    logger.info("new_boundary_y %g %g", *bounds[1])
    logger.info("new_boundary_z %g %g", *bounds[2])

    summary = LinkCellSummary(
        cells=(n_x, n_y, n_z),
        intervals=(interval_xy, interval_xy, interval_z),
        bounds=bounds,
        xy_counts=Counter(),
    )

    layers: dict[int, list[_Entry]] = {}
    for event_id, tracks in sorted(events.items()):
        for track in tracks:
            for step in track.steps:
                if (
                    reaction == ConcentReaction.INLET_TO_LAST_EST
                    and step.process_name != "hadElastic"
                ):
                    break
                position = _step_position(step, reaction)
                if any(
                    value < low or value > high
                    for value, (low, high) in zip(position, bounds)
                ):
                    continue
                i = _cell_index(position.x - bounds[0][0], interval_xy, n_x)
                j = _cell_index(position.y - bounds[1][0], interval_xy, n_y)
                k = _cell_index(bounds[2][1] - position.z, interval_z, n_z)
                summary.xy_counts[(i, j)] += 1
                shifted = Vector3(
                    position.x - (i - zone_center) * interval_xy,
                    position.y - (j - zone_center) * interval_xy,
                    position.z,
                )
                zone = max(abs(i - zone_center), abs(j - zone_center))
                layers.setdefault(k, []).append(
                    _Entry(event_id, track.track_id, step, position, shifted, zone)
                )

    for k in range(n_z):
        for subject in layers.get(k, ()):
            best: _Entry | None = None
            best_layer = -1
            best_delta = Vector3()
            min_dist = NO_DISTANCE
            shell = 0
            while best is None and shell <= n_z:
                for kk in range(max(k - shell, 0), min(k + shell + 1, n_z)):
                    for other in layers.get(kk, ()):
                        if other.key == subject.key:
                            continue
                        diff = subject.shifted - other.shifted
                        distance = diff.mag()
                        if distance < min_dist:
                            min_dist = distance
                            best = other
                            best_layer = kk
                            best_delta = Vector3(abs(diff.x), abs(diff.y), abs(diff.z))
                shell += 1

            record = ShiftedNeighbourRecord(
                subject_zone=subject.zone,
                subject_cell=k,
                subject_event=subject.event_id,
                subject_track=subject.track_id,
                subject_step=subject.step.step_id,
                object_zone=best.zone if best else -1,
                object_cell=best_layer,
                object_event=best.event_id if best else -1,
                object_track=best.track_id if best else -1,
                object_step=best.step.step_id if best else -1,
                delta=best_delta,
                distance=min_dist,
                true_position=subject.position,
                shifted_position=subject.shifted,
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
                    for value in (
                        *record.true_position,
                        *record.shifted_position,
                        *record.delta,
                        record.distance,
                    )
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