import numpy as np
import pytest

from knapsack_stepper.engine.session import KnapsackSession
from knapsack_stepper.model.items import KnapsackModel
from knapsack_stepper.utils.config_loader import cfg


def _complete_dp(session):
    while session.step_forward("dp"):
        pass


def test_from_config_loads_default_instance():
    session = KnapsackSession.from_config(cfg)
    assert [it.name for it in session.dp.items] == ["A", "B", "C"]
    assert session.dp.capacity == 10
    assert session.speed_ms == cfg.autoplay.speed_ms


def test_full_walkthrough(abc_session):
    _complete_dp(abc_session)
    assert abc_session.start_backtrack()
    while abc_session.step_forward("backtrack"):
        pass
    while abc_session.step_forward("greedy"):
        pass

    view = abc_session.snapshot()
    assert view.dp_complete
    assert view.table[3, 10] == 22
    assert view.chosen == {1, 2}
    assert view.backtrack_index == view.backtrack_length == 3
    assert view.total_value == pytest.approx(24)
    assert view.greedy_step == view.greedy_total_steps == 3
    assert not view.is_playing


def test_snapshot_table_is_a_copy(abc_session):
    abc_session.step_forward()
    view = abc_session.snapshot()
    abc_session.step_forward()
    abc_session.step_forward()
    abc_session.step_forward()
    assert view.fill_step == 1
    assert not view.table.any()
    assert view.next_cell == (1, 1)


@pytest.mark.parametrize("mutate", [
    lambda s: s.add_item("D", 3, 1),
    lambda s: s.update_item(0, "value", 7),
    lambda s: s.delete_item(0),
    lambda s: s.set_capacity(12),
])
def test_any_edit_invalidates_progress(abc_session, mutate):
    _complete_dp(abc_session)
    abc_session.start_backtrack()
    abc_session.step_forward("backtrack")
    abc_session.step_forward("greedy")

    mutate(abc_session)

    assert abc_session.dp.fill_step == 0
    assert abc_session.dp.history_length == 1
    assert not abc_session.dp.complete
    assert not abc_session.backtrack.active
    assert abc_session.backtrack.chosen == frozenset()
    assert abc_session.greedy.step_index == 0


def test_edit_changes_table_shape(abc_session):
    abc_session.add_item()
    abc_session.set_capacity("4")
    assert abc_session.dp.table.shape == (5, 5)


def test_backtrack_needs_complete_dp(abc_session):
    abc_session.step_forward()
    assert abc_session.start_backtrack() is False
    assert abc_session.step_forward("backtrack") is False


def test_stepping_dp_back_drops_backtrack(abc_session):
    _complete_dp(abc_session)
    abc_session.start_backtrack()
    abc_session.step_forward("backtrack")
    assert abc_session.step_backward("dp")
    assert not abc_session.backtrack.active


def test_reset_rewinds_everything(abc_session):
    _complete_dp(abc_session)
    abc_session.start_backtrack()
    abc_session.step_forward("greedy")
    abc_session.reset()
    assert abc_session.dp.fill_step == 0
    assert not abc_session.dp.table.any()
    assert not abc_session.backtrack.active
    assert abc_session.greedy.step_index == 0


def test_reset_single_target(abc_session):
    abc_session.step_forward("dp")
    abc_session.step_forward("greedy")
    abc_session.reset("greedy")
    assert abc_session.greedy.step_index == 0
    assert abc_session.dp.fill_step == 1


def test_unknown_target_is_rejected(abc_session):
    with pytest.raises(ValueError):
        abc_session.step_forward("bfs")
    with pytest.raises(ValueError):
        abc_session.reset("bfs")


def test_zero_capacity_session():
    session = KnapsackSession(KnapsackModel.from_tuples([("A", 6, 2)], 0))
    _complete_dp(session)
    assert session.start_backtrack()
    while session.step_forward("backtrack"):
        pass
    view = session.snapshot()
    assert np.array_equal(view.table, np.zeros((2, 1)))
    assert view.chosen == frozenset()
    assert view.greedy_total_steps == 0


def test_integral_and_real_views_of_the_same_input():
    session = KnapsackSession(KnapsackModel.from_tuples([("A", "7.5", "2.5")], "5.5"))
    assert session.dp.capacity == 5
    assert session.dp.items[0].weight == 2
    assert session.greedy.plan.capacity == 5.5
    assert session.greedy.entries[0].weight == 2.5
