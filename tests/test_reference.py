import random

import pytest

from knapsack_stepper.solvers.reference import (
    fractional_lp_optimum,
    knapsack_01_1d,
    knapsack_01_2d,
    knapsack_branch_and_bound,
    knapsack_brute_force,
)

WEIGHTS, VALUES = [2, 4, 6], [6, 10, 12]


def test_concrete_scenario():
    kwargs = dict(weights=WEIGHTS, values=VALUES, capacity=10)
    assert knapsack_01_2d(**kwargs)[3, 10] == 22
    assert knapsack_01_1d(**kwargs) == 22
    assert knapsack_branch_and_bound(**kwargs) == 22
    assert knapsack_brute_force(**kwargs) == (22, [1, 2])
    assert fractional_lp_optimum(**kwargs) == pytest.approx(24)


def test_exact_solvers_agree():
    rng = random.Random(17)
    for _ in range(50):
        n = rng.randint(0, 8)
        weights = [rng.randint(0, 9) for _ in range(n)]
        values = [rng.randint(0, 25) for _ in range(n)]
        capacity = rng.randint(0, 20)
        kwargs = dict(weights=weights, values=values, capacity=capacity)
        best, subset = knapsack_brute_force(**kwargs)
        assert sum(weights[i] for i in subset) <= capacity
        assert knapsack_01_2d(**kwargs)[n, capacity] == best
        assert knapsack_01_1d(**kwargs) == best
        assert knapsack_branch_and_bound(**kwargs) == best


def test_lp_optimum_takes_weightless_items_for_free():
    assert fractional_lp_optimum(weights=[0, 4], values=[5, 8], capacity=2) == pytest.approx(9)
