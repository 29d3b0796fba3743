"""Beam description and primary particle placement."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Protocol

MM = 1.0
CM = 10.0
MEV = 1.0


@dataclass(frozen=True)
class Vector3:
    """A three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def mag(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def dot(self, other: Vector3) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z


class BeamMode(IntEnum):
    """How primary particles are spread over the flux area."""

    AREA_RANDOM = 0
    AREA_UNIFORM = 1


class _UniformSource(Protocol):
    def random(self) -> float: ...


FluxRange = tuple[tuple[float, float], tuple[float, float]]


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass
class Beam:
    """A particle beam hitting the target over a rectangular area."""

    mode: BeamMode = BeamMode.AREA_RANDOM
    energy: float = 14.4 * MEV
    particle_name: str = "neutron"
    direction: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, -1.0))
    flux_range: FluxRange = ((-10 * MM, 10 * MM), (-10 * MM, 10 * MM))

    def clean(self) -> None:
        """Reset every field to its empty state."""
        self.mode = BeamMode.AREA_RANDOM
        self.energy = 0.0
        self.particle_name = ""
        self.direction = Vector3(0.0, 0.0, -1.0)
        self.flux_range = ((0.0, 0.0), (0.0, 0.0))

    def describe(self) -> str:
        """Human-readable summary of the beam."""
        (x0, x1), (y0, y1) = self.flux_range
        d = self.direction
        return "\n".join(
            [
                f"The gun turnOn Mode is: {int(self.mode)}",
                f"The gun energy is: {_fmt(self.energy)}",
                f"The gun particle name is: {self.particle_name}",
                f"The beam start direction: {_fmt(d.x)} {_fmt(d.y)} {_fmt(d.z)}",
                f"The FluxRange x is from {_fmt(x0)} to {_fmt(x1)}"
                f" The FluxRange y is from {_fmt(y0)} to {_fmt(y1)}",
            ]
        )

    def flux_center(self) -> tuple[float, float]:
        """Centre of the flux area in x and y."""
        (x0, x1), (y0, y1) = self.flux_range
        return 0.5 * (x0 + x1), 0.5 * (y0 + y1)

    def origin_position_xy(
        self,
        event_index: int,
        total_events: int,
        z_pos: float,
        rng: _UniformSource | None = None,
    ) -> Vector3:
        """Starting position of the primary particle of one event."""
        (x0, x1), (y0, y1) = self.flux_range
        x_length = abs(x0 - x1)
        y_length = abs(y0 - y1)

        if self.mode == BeamMode.AREA_RANDOM:
            source = rng if rng is not None else random
            x = x0 + x_length * source.random()
            y = y0 + y_length * source.random()
            return Vector3(x, y, z_pos)

        if self.mode == BeamMode.AREA_UNIFORM:
            if total_events <= 0:
                raise ValueError("total number of events must be positive")
            interval = math.sqrt(x_length * y_length / total_events)
            x_cells = math.ceil(x_length / interval)
            x = interval * (event_index % x_cells + 0.5)
            y = interval * (event_index // x_cells + 0.5)
            return Vector3(x, y, z_pos)

        raise ValueError(f"Unknown turnon mode type: {self.mode}")