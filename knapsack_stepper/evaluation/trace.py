# knapsack_stepper/evaluation/trace.py
# -*- coding: utf-8 -*-


'''
Plain-text presentation of engine state: the DP table with the current cell
and its dependencies marked, a one-line explanation of each computed cell,
the backtracking progress and the greedy plan. Everything here only reads
from the steppers.
'''

import logging
from typing import List, Optional

import pandas as pd

from knapsack_stepper.engine.backtrack import BacktrackStepper
from knapsack_stepper.engine.dp_stepper import CellStep, DPStepper
from knapsack_stepper.engine.greedy import FractionalStepper

logger = logging.getLogger(__name__)

CELL_WIDTH = 5


def _progress(stepper) -> str:
    position, total = stepper.progress()
    return f"({position} / {total})"


def _num(x) -> str:
    return f"{x:g}" if isinstance(x, float) else str(x)


def _cell_text(dp: DPStepper, i: int, w: int) -> str:
    state = dp.cell_state(i, w)
    text = str(int(dp.table[i, w])) if state.filled else "."
    if state.is_current:
        return f"[{text}]"
    if state.is_dependency:
        return f"*{text}"
    return text


def format_dp_table(dp: DPStepper) -> str:
    """
    Renders the DP table. Unfilled cells show '.', the next cell to compute
    is bracketed and the cells it reads from are starred.
    """
    lines = []
    header = "        " + "".join(f"{w:>{CELL_WIDTH}d}" for w in range(dp.capacity + 1))
    lines.append(header)
    lines.append("        " + "-" * (CELL_WIDTH * (dp.capacity + 1)))
    for i in range(dp.n + 1):
        label = "i=0" if i == 0 else f"{i}.{dp.items[i - 1].name}"[:6]
        cells = "".join(f"{_cell_text(dp, i, w):>{CELL_WIDTH}}" for w in range(dp.capacity + 1))
        lines.append(f"{label:<6}| {cells}")
    position, total = dp.progress()
    lines.append(f"Step {position} / {total}" + (" (complete)" if dp.complete else ""))
    return "\n".join(lines)


def explain_step(step: Optional[CellStep]) -> str:
    """One sentence describing how a cell got its value."""
    if step is None:
        return "Initial row (i = 0): with no items, value is 0 for all capacities."
    item = step.item
    prefix = f"Considering item {item.name} (w={_num(item.weight)}, v={_num(item.value)}) at capacity {step.w}: "
    if step.reason == "heavy":
        return prefix + f"weight exceeds capacity, so we copy up -> value stays {step.from_up}."
    take_value = step.from_diag + int(item.value)
    return prefix + (
        f"compare skip = up = {step.from_up} vs take = diag + v = {step.from_diag} + {_num(item.value)} "
        f"= {take_value} -> choose {'take' if step.take else 'skip'} = {step.value}."
    )


def format_backtrack(bt: BacktrackStepper) -> str:
    if not bt.active:
        return "Backtracking not started."
    lines = []
    for k, decision in enumerate(bt.decisions):
        marker = ">" if k == bt.backtrack_index else " "
        verdict = ("take" if decision.chosen else "skip") if k < bt.backtrack_index else "?"
        lines.append(f"{marker} row {decision.i:>2d}  w={decision.w:<4d} {verdict}")
    chosen = ", ".join(it.name for it in bt.chosen_items) or "-"
    lines.append(f"Chosen: {{{chosen}}}  weight={bt.chosen_weight}  value={bt.chosen_value}  "
                 f"{_progress(bt)}")
    return "\n".join(lines)


def format_plan(greedy: FractionalStepper) -> str:
    """Greedy plan table; applied rows are ticked and the current row is marked."""
    lines = [f"  {'item':<10}{'value':>8}{'weight':>8}{'ratio':>8}{'frac':>8}{'taken w':>9}{'taken v':>9}"]
    for row, entry in enumerate(greedy.entries):
        state = greedy.row_state(row)
        marker = ">" if state.is_current else ("x" if state.applied else " ")
        lines.append(
            f"{marker} {entry.name:<10}{entry.value:>8g}{entry.weight:>8g}{entry.ratio:>8.3g}"
            f"{entry.fraction:>8.3g}{entry.taken_weight:>9.4g}{entry.taken_value:>9.4g}"
        )
    lines.append(f"Used {greedy.used_weight:g} / {greedy.plan.capacity:g}, remaining {greedy.remaining:g}, "
                 f"value {greedy.total_value:g}  {_progress(greedy)}")
    return "\n".join(lines)


def cell_steps_to_frame(dp: DPStepper) -> pd.DataFrame:
    """One row per computed cell, in fill order."""
    records: List[dict] = [
        {
            "step": k + 1,
            "i": s.i,
            "w": s.w,
            "item": s.item.name,
            "reason": s.reason,
            "from_up": s.from_up,
            "from_diag": s.from_diag,
            "take": s.take,
            "value": s.value,
        }
        for k, s in enumerate(dp.cell_steps)
    ]
    columns = ["step", "i", "w", "item", "reason", "from_up", "from_diag", "take", "value"]
    return pd.DataFrame.from_records(records, columns=columns)


def save_trace_to_csv(dp: DPStepper, save_path: str) -> str:
    frame = cell_steps_to_frame(dp)
    frame.to_csv(save_path, index=False)
    logger.info(f"Cell trace ({len(frame)} rows) saved to {save_path}")
    return save_path
