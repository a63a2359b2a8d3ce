import threading
import time

import numpy as np
import pytest

from knapsack_stepper.engine.autoplay import AutoPlayer
from knapsack_stepper.engine.dp_stepper import DPStepper
from knapsack_stepper.engine.session import KnapsackSession
from knapsack_stepper.model.items import KnapsackModel


def _large_session():
    items = [(f"I{k}", k + 1, (k % 4) + 1) for k in range(6)]
    return KnapsackSession(KnapsackModel.from_tuples(items, 40))


def test_autoplay_runs_to_completion(abc_session):
    player = abc_session.autoplay("dp", speed_ms=1)
    assert player.wait(timeout=10)
    assert abc_session.dp.complete
    assert player.steps_taken == abc_session.dp.total_steps
    assert not abc_session.is_playing


def test_autoplay_greedy_stops_at_total_steps(abc_session):
    player = abc_session.autoplay("greedy", speed_ms=1)
    assert player.wait(timeout=10)
    assert abc_session.greedy.step_index == abc_session.greedy.total_steps == 3


def test_cancellation_leaves_a_fully_applied_step():
    session = _large_session()
    session.autoplay("dp", speed_ms=2)
    time.sleep(0.05)
    session.stop_autoplay()

    stopped_at = session.dp.fill_step
    time.sleep(0.02)
    assert session.dp.fill_step == stopped_at
    assert session.dp.history_length == stopped_at + 1
    assert stopped_at < session.dp.total_steps

    replay = DPStepper(session.dp.items, session.dp.capacity)
    for _ in range(stopped_at):
        replay.step_forward()
    assert np.array_equal(session.dp.table, replay.table)


def test_editing_the_model_stops_playback():
    session = _large_session()
    player = session.autoplay("dp", speed_ms=2)
    time.sleep(0.02)
    session.set_capacity(10)
    assert player.wait(timeout=5)
    assert session.dp.fill_step == 0


def test_restarting_replaces_running_playback():
    session = _large_session()
    first = session.autoplay("dp", speed_ms=2)
    second = session.autoplay("dp", speed_ms=1)
    assert first.wait(timeout=5)
    assert second.wait(timeout=30)
    assert session.dp.complete


def test_invalid_speed_rejected():
    with pytest.raises(ValueError):
        AutoPlayer(lambda: False, speed_ms=0)


def test_player_is_single_use():
    player = AutoPlayer(lambda: False, speed_ms=1)
    player.start()
    assert player.wait(timeout=5)
    with pytest.raises(RuntimeError):
        player.start()


def test_on_finish_reports_step_count():
    remaining = [3]
    finished = threading.Event()
    counts = []

    def step():
        if remaining[0] == 0:
            return False
        remaining[0] -= 1
        return True

    def on_finish(steps):
        counts.append(steps)
        finished.set()

    AutoPlayer(step, speed_ms=1, on_finish=on_finish).start()
    assert finished.wait(timeout=5)
    assert counts == [3]
