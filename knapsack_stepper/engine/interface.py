# knapsack_stepper/engine/interface.py
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple


class StepperInterface(ABC):
    """
    Common contract for every steppable algorithm view (DP filling,
    backtracking, greedy allocation).

    A stepper exposes a cursor `position` in [0, total_steps]. Moving the
    cursor past either end is a refusal: the call returns False and leaves
    the state untouched.
    """
    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        self.name = "Stepper"

    @property
    @abstractmethod
    def position(self) -> int:
        """Number of steps currently applied."""

    @property
    @abstractmethod
    def total_steps(self) -> int:
        """Number of steps in the full run."""

    @abstractmethod
    def step_forward(self) -> bool:
        """Applies the next step. Returns False if already at the end."""

    @abstractmethod
    def step_backward(self) -> bool:
        """Undoes the last applied step. Returns False if at the start."""

    @abstractmethod
    def reset(self) -> None:
        """Moves the cursor back to the start."""

    @property
    def is_complete(self) -> bool:
        return self.position == self.total_steps

    def can_step_forward(self) -> bool:
        return self.position < self.total_steps

    def can_step_backward(self) -> bool:
        return self.position > 0

    def progress(self) -> Tuple[int, int]:
        return self.position, self.total_steps

    def run_to_end(self) -> int:
        """Steps forward until complete. Returns the number of steps taken."""
        taken = 0
        while self.step_forward():
            taken += 1
        return taken
