import random

import pytest

from knapsack_stepper.engine.greedy import FractionalStepper, compute_plan
from knapsack_stepper.model.items import Item
from knapsack_stepper.solvers.reference import fractional_lp_optimum, knapsack_brute_force


def test_concrete_scenario(abc_items):
    plan = compute_plan(abc_items, 10)
    assert [e.name for e in plan.entries] == ["A", "B", "C"]
    assert [e.ratio for e in plan.entries] == [3, 2.5, 2]
    assert [e.fraction for e in plan.entries[:2]] == [1.0, 1.0]
    assert plan.entries[2].fraction == pytest.approx(4 / 6)
    assert plan.entries[2].taken_weight == pytest.approx(4)
    assert plan.total_steps == 3
    assert plan.total_value == pytest.approx(24)


def test_input_index_survives_sorting():
    items = [Item("low", 1, 1), Item("high", 10, 1)]
    plan = compute_plan(items, 5)
    assert [(e.name, e.idx) for e in plan.entries] == [("high", 1), ("low", 0)]


def test_equal_ratios_keep_input_order():
    items = [Item("x", 4, 2), Item("y", 2, 1), Item("z", 6, 3), Item("top", 9, 1)]
    plan = compute_plan(items, 4)
    assert [e.name for e in plan.entries] == ["top", "x", "y", "z"]
    assert [e.fraction for e in plan.entries] == [1.0, 1.0, 1.0, 0.0]


def test_weightless_items_are_skipped():
    items = [Item("free", 5, 0), Item("A", 4, 2)]
    plan = compute_plan(items, 10)
    free = next(e for e in plan.entries if e.name == "free")
    assert free.ratio == 0
    assert free.fraction == 0
    assert plan.total_steps == 1


def test_rows_after_capacity_runs_out_are_not_steps():
    items = [Item("A", 6, 2), Item("B", 1, 5), Item("C", 1, 9)]
    plan = compute_plan(items, 2)
    assert [e.fraction for e in plan.entries] == [1.0, 0.0, 0.0]
    assert plan.total_steps == 1


@pytest.mark.parametrize("items, capacity", [([], 10), ([Item("A", 6, 2)], 0)])
def test_boundaries_have_no_steps(items, capacity):
    stepper = FractionalStepper(items, capacity)
    assert stepper.total_steps == 0
    assert stepper.step_forward() is False
    assert stepper.total_value == 0
    assert stepper.current_row is None


def test_cursor_and_running_totals(abc_items):
    stepper = FractionalStepper(abc_items, 10)
    assert (stepper.used_weight, stepper.total_value, stepper.remaining) == (0, 0, 10)
    assert stepper.current_row == 0

    stepper.step_forward()
    stepper.step_forward()
    assert stepper.used_weight == 6
    assert stepper.total_value == 16
    assert stepper.remaining == 4
    assert stepper.row_state(0).applied and stepper.row_state(1).applied
    assert stepper.row_state(2).is_current

    stepper.step_forward()
    assert stepper.is_complete
    assert stepper.step_forward() is False
    assert stepper.total_value == pytest.approx(24)
    assert stepper.remaining == pytest.approx(0)
    assert stepper.current_row == 2

    stepper.step_backward()
    assert stepper.total_value == 16
    stepper.reset()
    assert stepper.step_backward() is False


def test_load_recomputes_plan_and_resets_cursor(abc_items):
    stepper = FractionalStepper(abc_items, 10)
    stepper.run_to_end()
    stepper.load(abc_items[:1], 1)
    assert stepper.step_index == 0
    assert stepper.entries[0].fraction == pytest.approx(0.5)


def test_greedy_is_optimal_for_the_fractional_relaxation():
    rng = random.Random(99)
    for _ in range(60):
        n = rng.randint(0, 7)
        items = [Item(f"I{k}", rng.uniform(0, 20), rng.uniform(0.5, 9)) for k in range(n)]
        capacity = rng.uniform(0, 25)
        greedy_value = compute_plan(items, capacity).total_value
        lp_value = fractional_lp_optimum(weights=[it.weight for it in items],
                                         values=[it.value for it in items],
                                         capacity=capacity)
        assert greedy_value == pytest.approx(lp_value)


def test_fractional_value_bounds_the_01_optimum():
    rng = random.Random(3)
    for _ in range(40):
        items = [Item(f"I{k}", rng.randint(1, 20), rng.randint(1, 8)) for k in range(rng.randint(1, 7))]
        capacity = rng.randint(0, 20)
        best, _ = knapsack_brute_force(weights=[it.weight for it in items],
                                       values=[it.value for it in items],
                                       capacity=capacity)
        assert compute_plan(items, capacity).total_value >= best - 1e-9


def test_skipped_row_before_a_taken_row():
    # "free" sorts first (ratio 0, input order) but is never taken; "Z" fits
    stepper = FractionalStepper([Item("free", 5, 0), Item("Z", 0, 1)], 5)
    assert [(e.name, e.fraction) for e in stepper.entries] == [("free", 0.0), ("Z", 1.0)]
    assert stepper.total_steps == 2

    stepper.step_forward()
    assert not stepper.row_state(0).applied
    assert stepper.row_state(1).is_current

    stepper.step_forward()
    assert stepper.row_state(1).applied
    assert stepper.total_value == 0
    assert stepper.used_weight == 1


def test_progress_and_step_guards(abc_items):
    stepper = FractionalStepper(abc_items, 10)
    assert stepper.progress() == (0, 3)
    assert stepper.can_step_forward() and not stepper.can_step_backward()
    stepper.run_to_end()
    assert stepper.progress() == (3, 3)
    assert stepper.can_step_backward() and not stepper.can_step_forward()
