"""Per-event bookkeeping of tracks seen while stepping."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class OneTrack:
    """Identity and last process of one track."""

    parent_track_id: int = -1
    current_track_id: int = -1
    end_process_name: str = ""
    particle_name: str = ""

    def clean(self) -> None:
        """Reset to an unassigned track."""
        self.parent_track_id = -1
        self.current_track_id = -1
        self.end_process_name = ""
        self.particle_name = ""


@dataclass
class OneEvent:
    """The tracks of one event, keyed by track id."""

    event_id: int = -1
    tracks: dict[int, OneTrack] = field(default_factory=dict)

    def clean(self) -> None:
        """Forget the event id and every track."""
        self.event_id = -1
        self.tracks = {}