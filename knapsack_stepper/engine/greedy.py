# knapsack_stepper/engine/greedy.py
import logging
from dataclasses import dataclass
from typing import Dict, Any, List, NamedTuple, Optional, Sequence, Tuple

from knapsack_stepper.engine.interface import StepperInterface
from knapsack_stepper.model.items import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanEntry:
    """One row of the greedy allocation, in ratio order."""
    idx: int              # position in the input list
    name: str
    value: float
    weight: float
    ratio: float
    fraction: float
    taken_weight: float
    taken_value: float


@dataclass(frozen=True)
class GreedyPlan:
    entries: Tuple[PlanEntry, ...]
    capacity: float
    total_steps: int

    @property
    def total_value(self) -> float:
        return sum(e.taken_value for e in self.entries)

    @property
    def used_weight(self) -> float:
        return sum(e.taken_weight for e in self.entries)


class RowState(NamedTuple):
    """Rendering flags for one plan row."""
    applied: bool
    is_current: bool


def compute_plan(items: Sequence[Item], capacity: float) -> GreedyPlan:
    """
    Greedy allocation for the fractional knapsack.

    Items are visited by value/weight ratio, highest first; equal ratios keep
    their input order. Each item is taken whole while it fits, the first one
    that does not fit is taken in the fraction that fills the knapsack, and
    everything after that gets nothing. Weightless items are never taken.

    Args:
        items (Sequence[Item]): Sanitized items (real-valued).
        capacity (float): Non-negative capacity.

    Returns:
        GreedyPlan: Entries in visiting order and the number of steppable rows.
    """
    capacity = max(0.0, capacity)
    # sorted() is stable, also with reverse=True
    order = sorted(enumerate(items), key=lambda pair: pair[1].ratio, reverse=True)

    remaining = capacity
    entries: List[PlanEntry] = []
    for idx, item in order:
        if remaining <= 0 or item.weight <= 0:
            fraction, taken_weight, taken_value = 0.0, 0.0, 0.0
        elif item.weight <= remaining:
            fraction, taken_weight, taken_value = 1.0, item.weight, item.value
            remaining -= item.weight
        else:
            fraction = remaining / item.weight
            taken_weight, taken_value = remaining, item.value * fraction
            remaining = 0.0
        entries.append(PlanEntry(idx, item.name, item.value, item.weight, item.ratio,
                                 fraction, taken_weight, taken_value))

    # Rows after the last one that takes anything are never stepped into
    last_taken = max((pos for pos, e in enumerate(entries) if e.fraction > 0), default=-1)
    return GreedyPlan(tuple(entries), capacity, last_taken + 1)


class FractionalStepper(StepperInterface):
    """
    Read cursor over a greedy plan. The plan is recomputed wholesale on load;
    stepping never recomputes it and needs no history.
    """
    def __init__(self, items: Sequence[Item] = (), capacity: float = 0.0, config: Dict[str, Any] = None):
        super().__init__(config)
        self.name = "Fractional Greedy"
        self.load(items, capacity)

    def load(self, items: Sequence[Item], capacity: float) -> None:
        self._plan = compute_plan(items, capacity)
        self._step_index = 0
        logger.info(f"Greedy plan computed: {len(self._plan.entries)} entries, "
                    f"total_steps={self._plan.total_steps}, value={self._plan.total_value:g}")

    def reset(self) -> None:
        self._step_index = 0

    def step_forward(self) -> bool:
        if self._step_index >= self._plan.total_steps:
            logger.debug("Greedy step forward refused: plan exhausted")
            return False
        entry = self._plan.entries[self._step_index]
        self._step_index += 1
        logger.debug(f"Greedy took {entry.fraction:.4g} of '{entry.name}' (value {entry.taken_value:g})")
        return True

    def step_backward(self) -> bool:
        if self._step_index <= 0:
            logger.debug("Greedy step backward refused: already at the start")
            return False
        self._step_index -= 1
        return True

    # --- Read state ---

    @property
    def plan(self) -> GreedyPlan:
        return self._plan

    @property
    def entries(self) -> Tuple[PlanEntry, ...]:
        return self._plan.entries

    @property
    def position(self) -> int:
        return self._step_index

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def total_steps(self) -> int:
        return self._plan.total_steps

    @property
    def applied(self) -> Tuple[PlanEntry, ...]:
        return self._plan.entries[:self._step_index]

    @property
    def used_weight(self) -> float:
        return sum(e.taken_weight for e in self.applied)

    @property
    def total_value(self) -> float:
        return sum(e.taken_value for e in self.applied)

    @property
    def remaining(self) -> float:
        return max(0.0, self._plan.capacity - self.used_weight)

    @property
    def current_row(self) -> Optional[int]:
        """Row to highlight: the next row to apply, or the last one once done."""
        if self._plan.total_steps == 0:
            return None
        return min(self._step_index, self._plan.total_steps - 1)

    def row_state(self, row: int) -> RowState:
        """A row counts as applied only if some of its item was actually taken."""
        applied = row < self._step_index and self._plan.entries[row].fraction > 0
        return RowState(applied, row == self.current_row)
