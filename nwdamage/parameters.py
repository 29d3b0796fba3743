"""Simulation and analysis parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .beam import CM, MEV, MM, Beam, BeamMode, Vector3
from .materials import Material, MaterialType

SIM_MODE = "sim"
ANALYSIS_MODE = "analysis"


class ConcentReaction(IntEnum):
    """Which reactions the simulation records."""

    INLET_TO_LAST_EST = 0
    INLET_TO_FIRST_NON_EST = 1
    INLET_EST_AND_IN_EST_TILL_END = 2
    MATRIX_ATOM = 3
    ISO = 4


def _default_material() -> Material:
    material = Material()
    material.construct_simple(MaterialType.G4_FE)
    return material


@dataclass
class SimParameters:
    """All settings of a run; a fresh instance holds the default values."""

    concent_reaction: ConcentReaction = ConcentReaction.MATRIX_ATOM
    out_path: str = ""
    out_width: int = 20
    flush_frequency: int = 100
    half_world_x: float = 10000 * CM
    half_world_y: float = 10000 * CM
    half_world_z: float = 10000 * CM
    event_loops: int = 0
    link_cell_interval_xy: float = 20 * MM
    link_cell_num_z: int = 10
    link_cell_interval_z: float = 20 * MM
    analysis_cut_energy: float = 0.0 * MEV
    target_material: Material = field(default_factory=_default_material)
    beam: Beam = field(default_factory=Beam)

    def clean(self) -> None:
        """Reset every field to its base value."""
        self.concent_reaction = ConcentReaction.INLET_TO_LAST_EST
        self.out_path = ""
        self.out_width = 20
        self.flush_frequency = 100
        self.half_world_x = 10000 * CM
        self.half_world_y = 10000 * CM
        self.half_world_z = 10000 * CM
        self.event_loops = 0
        self.link_cell_interval_xy = 20 * MM
        self.link_cell_num_z = 10
        self.link_cell_interval_z = 20 * MM
        self.analysis_cut_energy = 5.5e-5 * MEV
        self.beam.clean()
        self.target_material.clean()

    def set_default_values(self) -> None:
        """Apply the default run settings; the event loop count is left alone."""
        self.out_path = ""
        self.out_width = 20
        self.flush_frequency = 100
        self.half_world_x = 10000 * CM
        self.half_world_y = 10000 * CM
        self.half_world_z = 10000 * CM

        self.concent_reaction = ConcentReaction.MATRIX_ATOM
        self.link_cell_interval_xy = 20 * MM
        self.link_cell_interval_z = 20 * MM
        self.link_cell_num_z = 10
        self.analysis_cut_energy = 0.0 * MEV

        self.beam.mode = BeamMode.AREA_RANDOM
        self.beam.energy = 14.4
        self.beam.particle_name = "neutron"
        self.beam.direction = Vector3(0.0, 0.0, -1.0)
        self.beam.flux_range = ((-10 * MM, 10 * MM), (-10 * MM, 10 * MM))

        self.target_material.construct_simple(MaterialType.G4_FE)

    def describe(self) -> str:
        """Human-readable summary of the parameters."""
        return "\n".join(
            [
                "###  The parameters summary ###",
                f"The event loops number is: {self.event_loops}",
                f"The target material is: {self.target_material.name}",
                f"The target atom number is: {self.target_material.atom_number}",
                f"The out path is : {self.out_path}",
                self.beam.describe(),
                "### End of the parameters summary ###",
            ]
        )