# Scripts/verify_engine.py
import argparse
import logging
import math
import os
import random
import sys
import time
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from knapsack_stepper.engine.session import KnapsackSession
from knapsack_stepper.model.items import KnapsackModel
from knapsack_stepper.solvers.reference import (
    fractional_lp_optimum,
    knapsack_01_1d,
    knapsack_01_2d,
    knapsack_branch_and_bound,
    knapsack_brute_force,
)
from knapsack_stepper.utils.config_loader import cfg
from knapsack_stepper.utils.generator import generate_knapsack_instance
from knapsack_stepper.utils.logger import setup_logger
from knapsack_stepper.utils.run_utils import create_run_name

logger = logging.getLogger(__name__)

# Subset enumeration is 2^n; skip it above this size
BRUTE_FORCE_MAX_N = 12


def verify_instance(items: List[tuple], capacity: int) -> Dict[str, Any]:
    """
    Drives every stepper of a fresh session to completion and checks the
    results against the reference solvers.

    Returns:
        Dict[str, Any]: One result record; every 'ok_*' column must be True.
    """
    session = KnapsackSession(KnapsackModel.from_tuples(items, capacity))
    weights = [int(w) for _, _, w in items]
    values = [int(v) for _, v, _ in items]
    start_time = time.time()

    # --- 1. DP table vs. the canonical 2D table ---
    session.dp.run_to_end()
    expected_table = knapsack_01_2d(weights=weights, values=values, capacity=capacity)
    dp_value = session.dp.optimal_value
    record = {
        "n": len(items),
        "capacity": capacity,
        "dp_value": dp_value,
        "ok_table": bool(np.array_equal(session.dp.table, expected_table)),
        "ok_1d": dp_value == knapsack_01_1d(weights=weights, values=values, capacity=capacity),
        "ok_bnb": math.isclose(dp_value, knapsack_branch_and_bound(weights=weights, values=values, capacity=capacity)),
    }
    if len(items) <= BRUTE_FORCE_MAX_N:
        brute_value, _ = knapsack_brute_force(weights=weights, values=values, capacity=capacity)
        record["ok_brute_force"] = dp_value == brute_value

    # --- 2. Undo everything, then replay ---
    total = session.dp.total_steps
    while session.step_backward("dp"):
        pass
    record["ok_round_trip"] = session.dp.fill_step == 0 and not session.dp.table.any()
    session.dp.run_to_end()
    record["ok_replay"] = session.dp.fill_step == total and bool(np.array_equal(session.dp.table, expected_table))

    # --- 3. Backtracking soundness ---
    session.start_backtrack()
    session.backtrack.run_to_end()
    record["ok_backtrack"] = (session.backtrack.chosen_weight <= capacity
                              and session.backtrack.chosen_value == dp_value)

    # --- 4. Greedy vs. the fractional optimum ---
    session.greedy.run_to_end()
    greedy_value = session.greedy.total_value
    record["greedy_value"] = greedy_value
    if len(items) <= BRUTE_FORCE_MAX_N:
        lp_value = fractional_lp_optimum(weights=weights, values=values, capacity=capacity)
        record["ok_greedy"] = math.isclose(greedy_value, lp_value, rel_tol=1e-9, abs_tol=1e-9)

    record["time_seconds"] = time.time() - start_time
    return record


def main(argv: Optional[List[str]] = None):
    """
    Generates random instances, verifies the stepping engines on each of them
    and writes a CSV report.
    """
    vcfg = cfg.verification
    parser = argparse.ArgumentParser(description="Verify the stepping engines against reference solvers.")
    parser.add_argument("--instances-per-n", type=int, default=vcfg.instances_per_n)
    parser.add_argument("--seed", type=int, default=vcfg.seed)
    parser.add_argument("--correlation", type=str, default=vcfg.correlation)
    parser.add_argument("--output-dir", type=str, default=cfg.paths.results)
    args = parser.parse_args(argv)

    # --- 1. Unique name for this run ---
    run_name = create_run_name(cfg, prefix="verify")
    setup_logger(run_name=run_name, log_dir=cfg.paths.logs)
    logger.info(f"--- Starting verification run: {run_name} ---")

    # --- 2. Generate and verify ---
    rng = random.Random(args.seed)
    start_n, stop_n, step_n = vcfg.n_range
    range_of_n = range(start_n, stop_n + 1, step_n)
    records = []
    with tqdm(total=len(range_of_n) * args.instances_per_n, desc="Verifying") as pbar:
        for n in range_of_n:
            for _ in range(args.instances_per_n):
                items, capacity = generate_knapsack_instance(
                    n=n,
                    correlation=args.correlation,
                    max_weight=vcfg.max_weight,
                    max_value=vcfg.max_value,
                    capacity_ratio=vcfg.capacity_ratio,
                    rng=rng,
                )
                records.append(verify_instance(items, capacity))
                pbar.update(1)

    # --- 3. Report ---
    results_df = pd.DataFrame(records)
    os.makedirs(args.output_dir, exist_ok=True)
    save_path = os.path.join(args.output_dir, f"{run_name}.csv")
    results_df.to_csv(save_path, index=False)
    logger.info(f"Results saved to {save_path}")

    check_columns = [c for c in results_df.columns if c.startswith("ok_")]
    failures = results_df[~results_df[check_columns].fillna(True).all(axis=1)]
    if not failures.empty:
        logger.error(f"{len(failures)} of {len(results_df)} instances failed verification:")
        logger.error("\n" + failures.to_string())
        sys.exit(1)
    logger.info(f"All {len(results_df)} instances passed ({', '.join(check_columns)}).")


if __name__ == "__main__":
    main()
