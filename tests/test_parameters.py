import pytest

from nwdamage.beam import CM, MM, Beam
from nwdamage.materials import Material
from nwdamage.parameters import ConcentReaction, SimParameters


def test_fresh_parameters_hold_defaults():
    params = SimParameters()
    assert params.concent_reaction is ConcentReaction.MATRIX_ATOM
    assert params.out_path == ""
    assert params.out_width == 20
    assert params.flush_frequency == 100
    assert params.half_world_z == pytest.approx(10000 * CM)
    assert params.link_cell_interval_xy == pytest.approx(20 * MM)
    assert params.link_cell_num_z == 10
    assert params.analysis_cut_energy == 0.0
    assert params.event_loops == 0


def test_default_material_is_iron_over_tungsten():
    material = SimParameters().target_material
    assert material.name == "G4_Fe"
    assert material.atom_number == 26
    assert material.baryon_number == Material().baryon_number


def test_clean_then_defaults_matches_fresh():
    params = SimParameters()
    params.out_width = 3
    params.concent_reaction = ConcentReaction.ISO
    params.clean()
    params.set_default_values()
    assert params == SimParameters()


def test_clean_values():
    params = SimParameters()
    params.clean()
    assert params.concent_reaction is ConcentReaction.INLET_TO_LAST_EST
    assert params.analysis_cut_energy == pytest.approx(5.5e-5)
    assert params.beam.energy == 0.0
    assert params.target_material == Material()


def test_defaults_keep_event_loops():
    params = SimParameters()
    params.event_loops = 42
    params.set_default_values()
    assert params.event_loops == 42
    assert params.beam == Beam()


def test_describe_mentions_material_and_beam():
    text = SimParameters().describe()
    lines = text.splitlines()
    assert lines[0] == "###  The parameters summary ###"
    assert lines[-1] == "### End of the parameters summary ###"
    assert "The target material is: G4_Fe" in lines
    assert "The gun particle name is: neutron" in lines


def test_instances_do_not_share_beam():
    first = SimParameters()
    second = SimParameters()
    first.beam.particle_name = "proton"
    assert second.beam.particle_name == "neutron"