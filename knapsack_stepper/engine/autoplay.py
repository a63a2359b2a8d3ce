# knapsack_stepper/engine/autoplay.py
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class AutoPlayer:
    """
    Calls a step function on a fixed interval from a background thread.

    Playback ends by itself the first time the step function returns False
    (nothing left to step). Each call runs while holding `lock`, and the stop
    flag is checked under the same lock, so once stop() returns no further
    step can start and a step is never observed half-applied.
    """
    def __init__(self, step: Callable[[], bool], speed_ms: float,
                 lock: Optional[threading.RLock] = None,
                 on_finish: Optional[Callable[[int], None]] = None):
        if speed_ms <= 0:
            raise ValueError(f"speed_ms must be positive, got {speed_ms}")
        self._step = step
        self.speed_ms = speed_ms
        self._lock = lock or threading.RLock()
        self._on_finish = on_finish
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.steps_taken = 0

    @property
    def is_playing(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("AutoPlayer instances are single-use; create a new one to play again.")
        self._thread = threading.Thread(target=self._run, name="knapsack-autoplay", daemon=True)
        logger.info(f"Auto-play started (every {self.speed_ms} ms)")
        self._thread.start()

    def stop(self, join: bool = True, timeout: Optional[float] = None) -> None:
        """Cancels playback. With join=True, waits for the worker thread to exit."""
        self._stop_event.set()
        if join and self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Blocks until playback ends. Returns True if it has ended."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        interval = self.speed_ms / 1000.0
        while not self._stop_event.wait(interval):
            with self._lock:
                if self._stop_event.is_set():
                    break
                if not self._step():
                    break
                self.steps_taken += 1
        self._stop_event.set()
        logger.info(f"Auto-play finished after {self.steps_taken} steps")
        if self._on_finish is not None:
            self._on_finish(self.steps_taken)
