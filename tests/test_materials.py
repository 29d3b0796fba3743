import pytest

from nwdamage.materials import (
    CM3,
    GRAM,
    MOLE,
    Material,
    MaterialModel,
    MaterialType,
)


def test_default_is_user_tungsten():
    material = Material()
    assert material.model is MaterialModel.USER_DEF
    assert material.name == "W"
    assert material.atom_number == 74
    assert material.baryon_number == 184
    assert material.density == pytest.approx(19.3 * GRAM / CM3)
    assert material.mole_mass == pytest.approx(183.84 * GRAM / MOLE)


def test_user_zirconium():
    material = Material()
    material.construct_simple(MaterialType.USER_ZR)
    assert material.name == "Zr"
    assert material.atom_number == 40
    assert material.baryon_number == 90
    assert material.density == pytest.approx(6.506 * GRAM / CM3)
    assert material.mole_mass == pytest.approx(91.224 * GRAM / MOLE)


def test_database_material_keeps_other_fields():
    material = Material()
    material.construct_simple(MaterialType.USER_ZR)
    material.construct_simple(MaterialType.G4_FE)
    assert material.model is MaterialModel.G4_DEFAULT
    assert material.name == "G4_Fe"
    assert material.atom_number == 26
    assert material.baryon_number == 90
    assert material.density == pytest.approx(6.506 * GRAM / CM3)


@pytest.mark.parametrize(
    "kind, name, atom",
    [
        (MaterialType.G4_W, "G4_W", 74),
        (MaterialType.G4_ZR, "G4_Zr", 40),
        (MaterialType.G4_FE, "G4_Fe", 26),
    ],
)
def test_database_presets(kind, name, atom):
    material = Material()
    material.construct_simple(kind)
    assert (material.name, material.atom_number) == (name, atom)
    assert material.model is MaterialModel.G4_DEFAULT


def test_clean_restores_default():
    material = Material()
    material.construct_simple(MaterialType.USER_ZR)
    material.clean()
    assert material == Material()


def test_unknown_type_raises():
    with pytest.raises(ValueError):
        Material().construct_simple(99)