# knapsack_stepper/solvers/reference.py
# -*- coding: utf-8 -*-


'''
Independent, non-stepping solvers used to check the stepping engines.
Algorithms list:
- 0/1 knapsack with a full 2D DP table (the table the DP stepper must reproduce)
- 0/1 knapsack with a 1D space-optimized DP array
- brute-force subset enumeration for small instances
- branch-and-bound with a fractional upper bound
- fractional knapsack optimum by enumerating LP vertices
'''


# Library imports
from itertools import combinations
from queue import PriorityQueue
from typing import List, Tuple

import numpy as np


# Basic dynamic programming to solve the 0/1 knapsack problem
def knapsack_01_2d(*, weights: list, values: list, capacity: int) -> np.ndarray:
    """
    Solves the 0/1 knapsack problem using a 2D DP array.

    Args:
        weights (list): A list of integer weights for each item.
        values (list): A list of integer values for each item.
        capacity (int): The maximum capacity of the knapsack.

    Returns:
        np.ndarray: The complete (n+1) x (capacity+1) table; the answer is table[n, capacity].
    """
    n = len(weights)
    # dp[i][j] stores the maximum value using the first 'i' items
    # with a knapsack capacity of 'j'.
    dp = np.zeros((n + 1, capacity + 1), dtype=np.int64)

    for i in range(1, n + 1):
        current_weight = weights[i - 1]
        current_value = values[i - 1]

        for j in range(capacity + 1):
            # Case 1: Don't include the current item
            dp[i][j] = dp[i - 1][j]

            # Case 2: Include the current item (if capacity allows)
            if j >= current_weight:
                dp[i][j] = max(dp[i][j], current_value + dp[i - 1][j - current_weight])

    return dp


# Optimized dynamic programming on space complexity to solve the 0/1 knapsack problem
def knapsack_01_1d(*, weights: list, values: list, capacity: int) -> int:
    """
    Solves the 0/1 knapsack problem using a 1D space-optimized DP array.

    Returns:
        int: The maximum total value that can be obtained.
    """
    dp = [0] * (capacity + 1)

    for current_weight, current_value in zip(weights, values):
        # Reverse order: dp[j - current_weight] still holds the previous item's row
        for j in range(capacity, current_weight - 1, -1):
            dp[j] = max(dp[j], current_value + dp[j - current_weight])

    return dp[capacity]


def knapsack_brute_force(*, weights: list, values: list, capacity: float) -> Tuple[float, List[int]]:
    """
    Enumerates every subset. Only meant for small n (2^n subsets).

    Returns:
        Tuple[float, List[int]]: (best value, indices of one best subset)
    """
    n = len(weights)
    best_value, best_subset = 0, []
    for size in range(1, n + 1):
        for subset in combinations(range(n), size):
            weight = sum(weights[i] for i in subset)
            if weight > capacity:
                continue
            value = sum(values[i] for i in subset)
            if value > best_value:
                best_value, best_subset = value, list(subset)
    return best_value, best_subset


# Branch and bound for 0/1 knapsack problem
def knapsack_branch_and_bound(*, weights: list, values: list, capacity: float) -> float:
    """
    Solves the 0/1 knapsack problem using a branch-and-bound approach.
    Branches are pruned using an upper bound from the fractional relaxation.

    Returns:
        float: The maximum total value that can be obtained.
    """
    n = len(weights)
    # Sort by density, weightless items first (they are free)
    items = sorted(
        [(values[i], weights[i], values[i] / weights[i] if weights[i] > 0 else float('inf')) for i in range(n)],
        key=lambda x: x[2],
        reverse=True
    )

    def calculate_upper_bound(current_weight, current_value, k):
        bound = current_value
        remaining_capacity = capacity - current_weight
        for i in range(k, n):
            val, w, _ = items[i]
            if w <= remaining_capacity:
                remaining_capacity -= w
                bound += val
            else:
                # take the fraction that fills the knapsack
                bound += val * (remaining_capacity / w)
                break
        return bound

    # (-upper_bound, tie_breaker, current_value, current_weight, index); negated for a max-heap
    pq = PriorityQueue()
    counter = 0
    pq.put((-calculate_upper_bound(0, 0, 0), counter, 0, 0, 0))
    max_value = 0

    while not pq.empty():
        upper_bound_neg, _, current_value, current_weight, k = pq.get()
        if -upper_bound_neg < max_value:
            continue
        if k == n:
            max_value = max(max_value, current_value)
            continue

        item_value, item_weight, _ = items[k]

        # branch 1: skip item k
        next_upper_bound = calculate_upper_bound(current_weight, current_value, k + 1)
        if next_upper_bound >= max_value:
            counter += 1
            pq.put((-next_upper_bound, counter, current_value, current_weight, k + 1))

        # branch 2: take item k if it fits
        if current_weight + item_weight <= capacity:
            new_weight = current_weight + item_weight
            new_value = current_value + item_value
            max_value = max(max_value, new_value)
            next_upper_bound = calculate_upper_bound(new_weight, new_value, k + 1)
            if next_upper_bound >= max_value:
                counter += 1
                pq.put((-next_upper_bound, counter, new_value, new_weight, k + 1))

    return max_value


def fractional_lp_optimum(*, weights: list, values: list, capacity: float) -> float:
    """
    Optimal value of the fractional knapsack (the LP relaxation of 0/1).

    Every vertex of {0 <= x <= 1, w.x <= W} has at most one fractional
    coordinate, so the optimum is the best of: a feasible set of whole items
    plus at most one extra item cut to fit. Exponential; small n only.
    """
    n = len(weights)
    best = 0.0
    for size in range(0, n + 1):
        for subset in combinations(range(n), size):
            weight = sum(weights[i] for i in subset)
            if weight > capacity:
                continue
            value = float(sum(values[i] for i in subset))
            room = capacity - weight
            extra = 0.0
            for j in range(n):
                if j in subset:
                    continue
                if weights[j] <= 0:
                    extra = max(extra, float(values[j]))
                else:
                    extra = max(extra, values[j] * min(1.0, room / weights[j]))
            best = max(best, value + extra)
    return best
