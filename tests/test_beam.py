import math

import pytest

from nwdamage.beam import MM, Beam, BeamMode, Vector3


class _FixedSource:
    def __init__(self, values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


def test_vector_mag_and_dot_agree():
    v = Vector3(1.0, -2.0, 2.5)
    assert v.dot(v) == pytest.approx(v.mag() ** 2)


def test_vector_sub_add_round_trip():
    a = Vector3(1.5, 2.0, -3.0)
    b = Vector3(-0.5, 4.0, 7.0)
    assert (a - b) + b == a
    assert -(-a) == a


def test_vector_mag_known():
    assert Vector3(3.0, 4.0, 0.0).mag() == pytest.approx(5.0)


def test_default_beam():
    beam = Beam()
    assert beam.mode is BeamMode.AREA_RANDOM
    assert beam.energy == pytest.approx(14.4)
    assert beam.particle_name == "neutron"
    assert beam.direction == Vector3(0, 0, -1)
    assert beam.flux_range == ((-10 * MM, 10 * MM), (-10 * MM, 10 * MM))


def test_clean_empties_beam():
    beam = Beam()
    beam.clean()
    assert beam.energy == 0.0
    assert beam.particle_name == ""
    assert beam.flux_range == ((0.0, 0.0), (0.0, 0.0))
    assert beam.direction == Vector3(0, 0, -1)


def test_flux_center_is_midpoint():
    beam = Beam(flux_range=((2.0, 6.0), (-8.0, 4.0)))
    cx, cy = beam.flux_center()
    assert cx == pytest.approx((2.0 + 6.0) / 2)
    assert cy == pytest.approx((-8.0 + 4.0) / 2)


def test_random_position_uses_source():
    beam = Beam(flux_range=((2.0, 6.0), (-8.0, 4.0)))
    pos = beam.origin_position_xy(0, 10, 7.5, _FixedSource([0.0, 1.0]))
    assert pos == Vector3(2.0, 4.0, 7.5)


def test_random_position_inside_flux():
    beam = Beam()
    pos = beam.origin_position_xy(3, 10, -1.0)
    assert -10 * MM <= pos.x <= 10 * MM
    assert -10 * MM <= pos.y <= 10 * MM
    assert pos.z == -1.0


def test_uniform_positions_are_distinct_grid():
    beam = Beam(mode=BeamMode.AREA_UNIFORM)
    points = [beam.origin_position_xy(i, 4, 1.0) for i in range(4)]
    assert len(set(points)) == 4
    assert all(p.z == 1.0 for p in points)
    xs = sorted({p.x for p in points})
    ys = sorted({p.y for p in points})
    assert len(xs) == 2 and len(ys) == 2
    assert xs[1] - xs[0] == pytest.approx(ys[1] - ys[0])


def test_uniform_rejects_zero_events():
    beam = Beam(mode=BeamMode.AREA_UNIFORM)
    with pytest.raises(ValueError):
        beam.origin_position_xy(0, 0, 0.0)


def test_unknown_mode_raises():
    beam = Beam()
    beam.mode = 7
    with pytest.raises(ValueError):
        beam.origin_position_xy(0, 1, 0.0)


def test_describe_lists_fields():
    lines = Beam().describe().splitlines()
    assert len(lines) == 5
    assert lines[2] == "The gun particle name is: neutron"
    assert lines[0].endswith(str(int(BeamMode.AREA_RANDOM)))
    assert not math.isnan(Beam().energy)