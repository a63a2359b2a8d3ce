# knapsack_stepper/engine/session.py
import logging
import threading
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Dict, FrozenSet, Optional, Tuple

import numpy as np

from knapsack_stepper.engine.autoplay import AutoPlayer
from knapsack_stepper.engine.backtrack import BacktrackDecision, BacktrackStepper
from knapsack_stepper.engine.dp_stepper import CellStep, DPStepper
from knapsack_stepper.engine.greedy import FractionalStepper, GreedyPlan
from knapsack_stepper.engine.interface import StepperInterface
from knapsack_stepper.model.items import Item, KnapsackModel

logger = logging.getLogger(__name__)

TARGETS = ("dp", "backtrack", "greedy")


@dataclass(frozen=True)
class SessionView:
    """Read-only picture of a session for presentation layers."""
    items: Tuple[Item, ...]
    capacity: int
    table: np.ndarray
    fill_step: int
    total_steps: int
    dp_complete: bool
    next_cell: Optional[Tuple[int, int]]
    last_step: Optional[CellStep]
    backtrack_active: bool
    backtrack_index: int
    backtrack_length: int
    chosen: FrozenSet[int]
    current_decision: Optional[BacktrackDecision]
    plan: GreedyPlan
    greedy_step: int
    greedy_total_steps: int
    used_weight: float
    total_value: float
    remaining: float
    current_row: Optional[int]
    is_playing: bool


class KnapsackSession:
    """
    Exclusive owner of one editable model and the three steppers built on it.

    All mutation goes through this object. Any edit of the items or the
    capacity re-initializes the DP table, drops an active backtrack sequence
    and recomputes the greedy plan. Operations are serialized by one
    re-entrant lock, shared with the auto-play thread.
    """
    def __init__(self, model: Optional[KnapsackModel] = None, speed_ms: float = 500):
        self._lock = threading.RLock()
        self.model = model if model is not None else KnapsackModel()
        self.speed_ms = speed_ms
        self.dp = DPStepper()
        self.backtrack = BacktrackStepper()
        self.greedy = FractionalStepper()
        self._autoplayer: Optional[AutoPlayer] = None
        self.model.subscribe(self._on_model_changed)
        self._reload()

    @classmethod
    def from_config(cls, config: SimpleNamespace) -> "KnapsackSession":
        """Session preloaded with the configured default instance."""
        model = KnapsackModel(
            items=config.defaults.items,
            capacity=config.defaults.capacity,
            new_item_defaults=vars(config.defaults.new_item),
        )
        return cls(model, speed_ms=config.autoplay.speed_ms)

    # --- Model mutations ---

    def add_item(self, name=None, value=None, weight=None) -> int:
        with self._lock:
            return self.model.add_item(name, value, weight)

    def update_item(self, index: int, field: str, value) -> None:
        with self._lock:
            self.model.update_item(index, field, value)

    def delete_item(self, index: int) -> None:
        with self._lock:
            self.model.delete_item(index)

    def set_capacity(self, value) -> None:
        with self._lock:
            self.model.set_capacity(value)

    def _on_model_changed(self) -> None:
        with self._lock:
            # Called under the lock: signal only, the worker exits on its own
            self._stop_autoplay(join=False)
            self._reload()

    def _reload(self) -> None:
        self.dp.initialize(self.model.items(integral=True), self.model.capacity(integral=True))
        self.backtrack.clear()
        self.greedy.load(self.model.items(), self.model.capacity())

    # --- Commands ---

    def stepper(self, target: str) -> StepperInterface:
        steppers: Dict[str, StepperInterface] = {
            "dp": self.dp,
            "backtrack": self.backtrack,
            "greedy": self.greedy,
        }
        try:
            return steppers[target]
        except KeyError as e:
            raise ValueError(f"Unknown step target '{target}'. Expected one of {TARGETS}.") from e

    def step_forward(self, target: str = "dp") -> bool:
        with self._lock:
            return self.stepper(target).step_forward()

    def step_backward(self, target: str = "dp") -> bool:
        with self._lock:
            stepped = self.stepper(target).step_backward()
            if stepped and target == "dp" and self.backtrack.active:
                # The table the sequence was read from is no longer complete
                self.backtrack.clear()
            return stepped

    def start_backtrack(self) -> bool:
        with self._lock:
            return self.backtrack.start(self.dp)

    def reset(self, target: Optional[str] = None) -> None:
        """Rewinds one stepper, or all of them when target is None."""
        if target is not None:
            self.stepper(target)
        self.stop_autoplay()
        with self._lock:
            if target in (None, "dp"):
                self.dp.reset()
                self.backtrack.clear()
            if target == "backtrack":
                self.backtrack.reset()
            if target in (None, "greedy"):
                self.greedy.reset()

    # --- Auto-play ---

    def autoplay(self, target: str = "dp", speed_ms: Optional[float] = None) -> AutoPlayer:
        """Starts stepping `target` forward on a timer, replacing any running playback."""
        self.stepper(target)
        self.stop_autoplay()
        player = AutoPlayer(lambda: self.step_forward(target), speed_ms or self.speed_ms, lock=self._lock)
        with self._lock:
            self._autoplayer = player
        player.start()
        return player

    def stop_autoplay(self) -> None:
        self._stop_autoplay(join=True)

    def _stop_autoplay(self, join: bool) -> None:
        player = self._autoplayer
        if player is not None:
            player.stop(join=join)
            self._autoplayer = None

    @property
    def is_playing(self) -> bool:
        player = self._autoplayer
        return player is not None and player.is_playing

    # --- Read contract ---

    def snapshot(self) -> SessionView:
        with self._lock:
            return SessionView(
                items=self.dp.items,
                capacity=self.dp.capacity,
                table=self.dp.table.copy(),
                fill_step=self.dp.fill_step,
                total_steps=self.dp.total_steps,
                dp_complete=self.dp.complete,
                next_cell=self.dp.next_cell,
                last_step=self.dp.last_step,
                backtrack_active=self.backtrack.active,
                backtrack_index=self.backtrack.backtrack_index,
                backtrack_length=self.backtrack.total_steps,
                chosen=self.backtrack.chosen,
                current_decision=self.backtrack.current_decision,
                plan=self.greedy.plan,
                greedy_step=self.greedy.step_index,
                greedy_total_steps=self.greedy.total_steps,
                used_weight=self.greedy.used_weight,
                total_value=self.greedy.total_value,
                remaining=self.greedy.remaining,
                current_row=self.greedy.current_row,
                is_playing=self.is_playing,
            )
