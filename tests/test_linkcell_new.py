import io

import pytest

from nwdamage.beam import Vector3
from nwdamage.linkcell import NO_DISTANCE
from nwdamage.linkcell_new import shifted_min_distance_linked_cell
from nwdamage.parameters import ConcentReaction, SimParameters
from nwdamage.records import StepInfo, TrackInfo

BOUNDARY = [[-5.0, 5.0], [-5.0, 5.0], [-100.0, 0.0]]


def _step(step_id, pre, post=None, process="hadElastic"):
    return StepInfo(
        step_id=step_id,
        pre_position=Vector3(*pre),
        post_position=Vector3(*(post if post is not None else pre)),
        process_name=process,
    )


def _run(events, parameters=None, boundary=BOUNDARY):
    parameters = parameters or SimParameters()
    streams = io.StringIO(), io.StringIO(), io.StringIO()
    summary = shifted_min_distance_linked_cell(events, boundary, parameters, *streams)
    return summary, streams


def test_pair_in_same_cell_are_mutual_neighbours():
    events = {0: [TrackInfo(1, [_step(1, (0, 0, -1)), _step(2, (0, 0, -4))])]}
    summary, _ = _run(events)
    assert len(summary.records) == 2
    first, second = summary.records
    assert first.object_step == second.subject_step
    assert second.object_step == first.subject_step
    assert first.distance == pytest.approx(3.0)
    assert second.distance == pytest.approx(first.distance)


def test_steps_in_neighbouring_xy_cells_fold_onto_each_other():
    events = {
        0: [TrackInfo(1, [_step(1, (0, 0, -1))])],
        1: [TrackInfo(1, [_step(1, (20, 0, -1))])],
    }
    summary, _ = _run(events, boundary=[[-5.0, 25.0], [-5.0, 5.0], [-100.0, 0.0]])
    far = next(r for r in summary.records if r.subject_event == 1)
    assert far.shifted_position == Vector3(0.0, 0.0, -1.0)
    assert far.true_position == Vector3(20.0, 0.0, -1.0)
    assert far.distance == pytest.approx(0.0)
    assert far.subject_zone == 1
    assert far.object_zone == 0


def test_single_step_has_no_neighbour():
    events = {3: [TrackInfo(2, [_step(1, (0, 0, -1))])]}
    summary, _ = _run(events)
    (record,) = summary.records
    assert record.object_event == -1
    assert record.object_cell == -1
    assert record.distance == NO_DISTANCE


def test_steps_outside_grid_are_skipped_and_counts_add_up():
    events = {
        0: [
            TrackInfo(
                1,
                [
                    _step(1, (0, 0, -1)),
                    _step(2, (1, 1, -30)),
                    _step(3, (500, 0, -1)),
                    _step(4, (0, 0, 10)),
                ],
            )
        ]
    }
    summary, (distance, zone, ceil) = _run(events)
    assert len(summary.records) == 2
    assert sum(summary.zone_counts) == 2
    assert sum(summary.xy_counts.values()) == 2
    assert len(distance.getvalue().splitlines()) == len(summary.records)
    assert len(zone.getvalue().splitlines()) == len(summary.zone_counts)


def test_ceil_stream_lists_every_ring_cell():
    events = {0: [TrackInfo(1, [_step(1, (0, 0, -1)), _step(2, (0, 0, -2))])]}
    summary, (_, _, ceil) = _run(events)
    n_x = summary.cells[0]
    assert len(ceil.getvalue().splitlines()) == n_x * n_x


def test_depth_layers_count_down_from_top():
    events = {0: [TrackInfo(1, [_step(1, (0, 0, -1)), _step(2, (0, 0, -99))])]}
    summary, _ = _run(events)
    layers = {r.subject_step: r.subject_cell for r in summary.records}
    assert layers[1] == 0
    assert layers[2] == summary.cells[2] - 1
    assert summary.bounds[2][1] == BOUNDARY[2][1]


def test_last_elastic_mode_uses_post_position_and_stops_at_other_process():
    params = SimParameters()
    params.concent_reaction = ConcentReaction.INLET_TO_LAST_EST
    events = {
        0: [
            TrackInfo(
                1,
                [
                    _step(1, (0, 0, -50), post=(0, 0, -1)),
                    _step(2, (0, 0, -50), post=(0, 0, -3)),
                    _step(3, (0, 0, -2), process="nCapture"),
                ],
            )
        ]
    }
    summary, _ = _run(events, params)
    assert [r.subject_step for r in summary.records] == [1, 2]
    assert summary.records[0].distance == pytest.approx(2.0)


def test_output_line_holds_twenty_columns():
    events = {0: [TrackInfo(1, [_step(1, (0, 0, -1)), _step(2, (0, 0, -4))])]}
    _, (distance, _, _) = _run(events)
    for line in distance.getvalue().splitlines():
        assert len(line.split()) == 20


@pytest.mark.parametrize(
    "attribute", ["link_cell_interval_xy", "link_cell_interval_z"]
)
def test_non_positive_interval_is_rejected(attribute):
    params = SimParameters()
    setattr(params, attribute, 0.0)
    with pytest.raises(ValueError):
        _run({}, params)