"""Target material descriptions used by the simulation and analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# Internal unit system: millimetre, nanosecond, MeV, positron charge.
_E_SI = 1.602176634e-19
_JOULE = 1.0e-6 / _E_SI
_SECOND = 1.0e9
_METRE = 1000.0
KILOGRAM = _JOULE * _SECOND * _SECOND / (_METRE * _METRE)
GRAM = 1.0e-3 * KILOGRAM
MOLE = 1.0
CM3 = 1000.0


class MaterialModel(IntEnum):
    """Whether the material comes from the built-in database or is user defined."""

    G4_DEFAULT = 0
    USER_DEF = 1


class MaterialType(IntEnum):
    """The simple materials that can be constructed."""

    G4_W = 0
    G4_ZR = 1
    USER_W = 2
    USER_ZR = 3
    G4_FE = 4


_PRESETS: dict[MaterialType, dict[str, object]] = {
    MaterialType.G4_W: {
        "model": MaterialModel.G4_DEFAULT,
        "name": "G4_W",
        "atom_number": 74,
    },
    MaterialType.G4_ZR: {
        "model": MaterialModel.G4_DEFAULT,
        "name": "G4_Zr",
        "atom_number": 40,
    },
    MaterialType.USER_W: {
        "model": MaterialModel.USER_DEF,
        "name": "W",
        "atom_number": 74,
        "baryon_number": 184,
        "density": 19.3 * GRAM / CM3,
        "mole_mass": 183.84 * GRAM / MOLE,
    },
    MaterialType.USER_ZR: {
        "model": MaterialModel.USER_DEF,
        "name": "Zr",
        "atom_number": 40,
        "baryon_number": 90,
        "density": 6.506 * GRAM / CM3,
        "mole_mass": 91.224 * GRAM / MOLE,
    },
    MaterialType.G4_FE: {
        "model": MaterialModel.G4_DEFAULT,
        "name": "G4_Fe",
        "atom_number": 26,
    },
}


@dataclass
class Material:
    """A target material; a fresh one is user-defined tungsten."""

    model: MaterialModel = MaterialModel.USER_DEF
    name: str = "W"
    atom_number: int = 74
    baryon_number: int = 184
    mole_mass: float = 183.84 * GRAM / MOLE
    density: float = 19.3 * GRAM / CM3

    def construct_simple(self, material_type: MaterialType | int) -> None:
        """Fill in the fields of a preset material.

        Database materials only set model, name and atomic number; the other
        fields keep their previous values.
        """
        kind = MaterialType(material_type)
        for attribute, value in _PRESETS[kind].items():
            setattr(self, attribute, value)

    def clean(self) -> None:
        """Reset to user-defined tungsten."""
        self.construct_simple(MaterialType.USER_W)