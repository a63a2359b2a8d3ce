# knapsack_stepper/engine/dp_stepper.py
import logging
from dataclasses import dataclass
from typing import Dict, Any, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from knapsack_stepper.engine.interface import StepperInterface
from knapsack_stepper.model.items import Item

logger = logging.getLogger(__name__)


class CellState(NamedTuple):
    """Rendering flags for one DP cell."""
    filled: bool
    is_current: bool
    is_dependency: bool


@dataclass(frozen=True)
class CellStep:
    """
    Record of how one cell dp[i][w] was computed.

    reason is 'heavy' when the item does not fit (the value is copied from the
    cell above) and 'choose' when both skipping and taking were compared.
    """
    i: int
    w: int
    value: int
    reason: str
    item: Item
    from_up: int
    from_diag: Optional[int]
    take: bool


class DPStepper(StepperInterface):
    """
    Fills the 0/1 knapsack DP table one cell at a time, in row-major order.

    dp[i][w] is the best value using the first i items with capacity w. Row 0
    is the all-zero base case and costs no steps, so a table for n items and
    capacity W takes n * (W + 1) steps. Every step pushes a read-only snapshot
    of the whole table, which makes stepping backward an exact restore.
    """
    def __init__(self, items: Sequence[Item] = (), capacity: int = 0, config: Dict[str, Any] = None):
        super().__init__(config)
        self.name = "0/1 DP"
        self.initialize(items, capacity)

    # --- Lifecycle ---

    def initialize(self, items: Sequence[Item], capacity: int) -> None:
        """
        Resets to a fresh zero table. Must be called whenever the item list or
        the capacity changes.

        Args:
            items (Sequence[Item]): Items with integral values and weights.
            capacity (int): Non-negative integer capacity.
        """
        self._items: Tuple[Item, ...] = tuple(items)
        self._weights = [int(it.weight) for it in self._items]
        self._values = [int(it.value) for it in self._items]
        self._capacity = max(0, int(capacity))
        self._n = len(self._items)

        self._table = np.zeros((self._n + 1, self._capacity + 1), dtype=np.int64)
        self._history: List[np.ndarray] = [self._snapshot()]
        self._steps: List[CellStep] = []
        self._fill_step = 0
        self._complete = self._total_steps() == 0
        logger.info(f"DP initialized: n={self._n}, W={self._capacity}, total_steps={self._total_steps()}")
        self._check_invariants()

    def reset(self) -> None:
        self.initialize(self._items, self._capacity)

    # --- Stepping ---

    def step_forward(self) -> bool:
        if self._fill_step == self._total_steps():
            logger.debug("DP step forward refused: already complete")
            return False

        i, w = self.coordinate(self._fill_step)
        weight, value = self._weights[i - 1], self._values[i - 1]
        up = int(self._table[i - 1, w])

        if weight > w:
            cell = CellStep(i, w, up, "heavy", self._items[i - 1], up, None, False)
        else:
            diag = int(self._table[i - 1, w - weight])
            take = diag + value
            cell = CellStep(i, w, max(up, take), "choose", self._items[i - 1], up, diag, take >= up)
        self._table[i, w] = cell.value

        # A new forward step makes any snapshots past the cursor stale
        del self._history[self._fill_step + 1:]
        del self._steps[self._fill_step:]
        self._history.append(self._snapshot())
        self._steps.append(cell)
        self._fill_step += 1
        self._complete = self._fill_step == self._total_steps()

        logger.debug(f"dp[{i}][{w}] = {cell.value} ({cell.reason}, take={cell.take})")
        if self._complete:
            logger.info(f"DP complete: dp[{self._n}][{self._capacity}] = {self.optimal_value}")
        self._check_invariants()
        return True

    def step_backward(self) -> bool:
        if self._fill_step == 0:
            logger.debug("DP step backward refused: already at the start")
            return False

        restored = self._history[self._fill_step - 1]
        del self._history[self._fill_step:]
        del self._steps[self._fill_step - 1:]
        self._table = restored.copy()
        self._fill_step -= 1
        self._complete = False
        logger.debug(f"DP stepped back to fill_step={self._fill_step}")
        self._check_invariants()
        return True

    # --- Geometry ---

    def coordinate(self, fill_step: int) -> Tuple[int, int]:
        """Maps a fill step to the (row, col) of the cell it computes."""
        width = self._capacity + 1
        return fill_step // width + 1, fill_step % width

    def _linear_index(self, i: int, w: int) -> int:
        return (i - 1) * (self._capacity + 1) + w

    # --- Read state ---

    @property
    def position(self) -> int:
        return self._fill_step

    @property
    def fill_step(self) -> int:
        return self._fill_step

    @property
    def total_steps(self) -> int:
        return self._total_steps()

    def _total_steps(self) -> int:
        return self._n * (self._capacity + 1)

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def items(self) -> Tuple[Item, ...]:
        return self._items

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def n(self) -> int:
        return self._n

    @property
    def table(self) -> np.ndarray:
        """Read-only view of the live table."""
        view = self._table.view()
        view.flags.writeable = False
        return view

    @property
    def history_length(self) -> int:
        return len(self._history)

    def snapshot_at(self, fill_step: int) -> np.ndarray:
        """The stored table as it was after `fill_step` steps (read-only)."""
        return self._history[fill_step]

    @property
    def next_cell(self) -> Optional[Tuple[int, int]]:
        """Coordinate of the next cell to compute, None once complete."""
        if self._complete:
            return None
        return self.coordinate(self._fill_step)

    @property
    def cell_steps(self) -> Tuple[CellStep, ...]:
        """Derivation records of every computed cell, in fill order."""
        return tuple(self._steps)

    @property
    def last_step(self) -> Optional[CellStep]:
        """How the most recently computed cell was derived."""
        return self._steps[-1] if self._steps else None

    @property
    def optimal_value(self) -> int:
        return int(self._table[self._n, self._capacity])

    def dependencies(self, i: int, w: int) -> List[Tuple[int, int]]:
        """Cells of row i-1 that dp[i][w] is computed from."""
        if i == 0:
            return []
        deps = [(i - 1, w)]
        weight = self._weights[i - 1]
        if weight <= w:
            deps.append((i - 1, w - weight))
        return deps

    def is_filled(self, i: int, w: int) -> bool:
        return i == 0 or self._linear_index(i, w) < self._fill_step

    def cell_state(self, i: int, w: int) -> CellState:
        """Filled / current / dependency flags of one cell for highlighting."""
        current = self.next_cell
        is_current = current == (i, w)
        is_dependency = current is not None and (i, w) in self.dependencies(*current)
        return CellState(self.is_filled(i, w), is_current, is_dependency)

    # --- Internals ---

    def _snapshot(self) -> np.ndarray:
        snap = self._table.copy()
        snap.flags.writeable = False
        return snap

    def _check_invariants(self) -> None:
        assert len(self._history) == self._fill_step + 1, "history length out of sync with fill_step"
        assert len(self._steps) == self._fill_step, "cell records out of sync with fill_step"
        assert 0 <= self._fill_step <= self._total_steps(), "fill_step out of range"
        assert not self._table[0].any(), "row 0 must stay all zero"
