# knapsack_stepper/engine/backtrack.py
import logging
from dataclasses import dataclass
from typing import Dict, Any, FrozenSet, List, Optional, Set, Tuple

from knapsack_stepper.engine.dp_stepper import DPStepper
from knapsack_stepper.engine.interface import StepperInterface
from knapsack_stepper.model.items import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacktrackDecision:
    """Verdict for row i at tracked capacity w: was item i taken?"""
    i: int
    w: int
    chosen: bool
    item_index: int


def build_decisions(table, items) -> List[BacktrackDecision]:
    """
    Walks a completed DP table from the bottom-right corner up to row 1.

    If dp[i][w] equals dp[i-1][w] the item was not needed and w stays put;
    otherwise the item is in the optimal set and w shrinks by its weight.

    Args:
        table: Completed (n+1) x (W+1) DP table.
        items: The n items the table was built from, in row order.

    Returns:
        List[BacktrackDecision]: One decision per row, from i = n down to i = 1.
    """
    n = len(items)
    w = table.shape[1] - 1
    decisions = []
    for i in range(n, 0, -1):
        chosen = bool(table[i, w] != table[i - 1, w])
        decisions.append(BacktrackDecision(i=i, w=w, chosen=chosen, item_index=i - 1))
        if chosen:
            w -= int(items[i - 1].weight)
            assert w >= 0, "backtracking drove capacity negative"
    return decisions


class BacktrackStepper(StepperInterface):
    """
    Replays the reconstruction of the optimal 0/1 subset one row at a time.

    The decision sequence is computed once, when backtracking starts, from the
    final table; stepping only moves the cursor and updates the chosen set.
    """
    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.name = "Backtrack"
        self.clear()

    def clear(self) -> None:
        """Drops any active sequence (the DP it came from is no longer valid)."""
        self._decisions: List[BacktrackDecision] = []
        self._items: Tuple[Item, ...] = ()
        self._index = 0
        self._chosen: Set[int] = set()
        self._optimal_value = 0
        self._active = False

    def start(self, dp: DPStepper) -> bool:
        """
        Builds the decision sequence from a completed DP table.

        Returns:
            bool: False (and nothing changes) if the DP is not complete yet.
        """
        if not dp.complete:
            logger.debug(f"Backtrack refused: DP incomplete ({dp.fill_step}/{dp.total_steps})")
            return False

        self._decisions = build_decisions(dp.table, dp.items)
        self._items = dp.items
        self._optimal_value = dp.optimal_value
        self._index = 0
        self._chosen = set()
        self._active = True
        logger.info(f"Backtrack started: {len(self._decisions)} decisions, target value {self._optimal_value}")
        return True

    def reset(self) -> None:
        self._index = 0
        self._chosen = set()

    # --- Stepping ---

    def step_forward(self) -> bool:
        if self._index == len(self._decisions):
            logger.debug("Backtrack step forward refused: sequence exhausted")
            return False
        decision = self._decisions[self._index]
        if decision.chosen:
            self._chosen.add(decision.item_index)
        self._index += 1
        logger.debug(f"Backtrack row {decision.i} at w={decision.w}: {'take' if decision.chosen else 'skip'}")
        if self._index == len(self._decisions):
            assert self.chosen_value == self._optimal_value, "reconstructed set does not reach dp[n][W]"
        return True

    def step_backward(self) -> bool:
        if self._index == 0:
            logger.debug("Backtrack step backward refused: already at the start")
            return False
        decision = self._decisions[self._index - 1]
        if decision.chosen:
            self._chosen.discard(decision.item_index)
        self._index -= 1
        logger.debug(f"Backtrack undid row {decision.i}")
        return True

    # --- Read state ---

    @property
    def active(self) -> bool:
        return self._active

    @property
    def position(self) -> int:
        return self._index

    @property
    def backtrack_index(self) -> int:
        return self._index

    @property
    def total_steps(self) -> int:
        return len(self._decisions)

    @property
    def is_complete(self) -> bool:
        return self._active and self._index == len(self._decisions)

    @property
    def decisions(self) -> Tuple[BacktrackDecision, ...]:
        return tuple(self._decisions)

    @property
    def current_decision(self) -> Optional[BacktrackDecision]:
        """The decision the next forward step will apply."""
        if self._index < len(self._decisions):
            return self._decisions[self._index]
        return None

    @property
    def chosen(self) -> FrozenSet[int]:
        return frozenset(self._chosen)

    @property
    def chosen_items(self) -> List[Item]:
        return [self._items[idx] for idx in sorted(self._chosen)]

    @property
    def chosen_weight(self) -> int:
        return sum(int(it.weight) for it in self.chosen_items)

    @property
    def chosen_value(self) -> int:
        return sum(int(it.value) for it in self.chosen_items)
