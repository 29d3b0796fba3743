"""Distance analysis on a depth-layered grid with x-y cells folded onto the beam centre."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TextIO

from .analysis import Analysis, AnalysisResult
from .linkcell import LinkCellSummary
from .linkcell_new import shifted_min_distance_linked_cell
from .records import TrackInfo

NEW_FILE_PREFIX = "New_"

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
    "TruePos_X(mm)",
    "TruePos_Y(mm)",
    "TruePos_Z(mm)",
    "ShiftPos_X(mm)",
    "ShiftPos_Y(mm)",
    "ShiftPos_Z(mm)",
    "MinDeltaX(mm)",
    "MinDeltaY(mm)",
    "MinDeltaZ(mm)",
    "MinDeltaDist(mm)",
)


@dataclass
class NewAnalysis(Analysis):
    """Analysis whose nearest-neighbour search folds every step onto the central x-y cell.

    Output file names carry the ``New_`` prefix. The top of the depth range is
    fixed at half of the target's half height instead of the highest step.
    """

    file_prefix = NEW_FILE_PREFIX

    def run(self, events: dict[int, list[TrackInfo]]) -> AnalysisResult:
        """Analyse ``events`` and write the ``New_`` result files."""
        return super().run(events)

    def _distance_columns(self) -> Sequence[str]:
        return _DISTANCE_XYZ_COLUMNS

    def _finish_boundary(self, boundary: list[list[float]]) -> None:
        boundary[2][1] = 0.5 * self.parameters.half_world_z

    def _link_cells(
        self,
        events: dict[int, list[TrackInfo]],
        boundary: list[list[float]],
        distance_stream: TextIO,
        zone_stream: TextIO,
        ceil_stream: TextIO,
    ) -> LinkCellSummary:
        return shifted_min_distance_linked_cell(
            events, boundary, self.parameters, distance_stream, zone_stream, ceil_stream
        )