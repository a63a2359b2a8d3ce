# Scripts/step_through.py
import argparse
import logging
import sys
from typing import List, Optional, Tuple

from knapsack_stepper.engine.session import KnapsackSession
from knapsack_stepper.evaluation.trace import (
    explain_step,
    format_backtrack,
    format_dp_table,
    format_plan,
    save_trace_to_csv,
)
from knapsack_stepper.model.items import KnapsackModel
from knapsack_stepper.utils.config_loader import cfg
from knapsack_stepper.utils.generator import load_instance_from_file
from knapsack_stepper.utils.logger import setup_logger
from knapsack_stepper.utils.run_utils import create_run_name

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  n / p              step forward / backward (backtracking once it is started)
  dp-p               step the DP table back (drops an active backtracking)
  b                  start backtracking (DP must be complete)
  r                  reset
  play [ms]          auto-play to the end
  add NAME V W       add an item
  set IDX FIELD VAL  edit an item field (name, value, weight)
  del IDX            delete an item
  cap W              set the capacity
  q                  quit"""


def parse_item(text: str) -> Tuple[str, str, str]:
    """Parses NAME:VALUE:WEIGHT (the name may be empty)."""
    parts = text.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected NAME:VALUE:WEIGHT, got '{text}'")
    return parts[0], parts[1], parts[2]


def clamp_speed(speed_ms: int) -> int:
    return max(cfg.autoplay.min_speed_ms, min(cfg.autoplay.max_speed_ms, speed_ms))


def build_session(args: argparse.Namespace) -> KnapsackSession:
    if args.instance:
        items, capacity = load_instance_from_file(args.instance)
        session = KnapsackSession(KnapsackModel.from_tuples(items, capacity), speed_ms=cfg.autoplay.speed_ms)
    elif args.item:
        session = KnapsackSession(KnapsackModel.from_tuples(args.item, 0), speed_ms=cfg.autoplay.speed_ms)
        session.set_capacity(cfg.defaults.capacity)
    else:
        session = KnapsackSession.from_config(cfg)
    if args.capacity is not None:
        session.set_capacity(args.capacity)
    return session


def render(session: KnapsackSession, mode: str) -> str:
    if mode == "greedy":
        return format_plan(session.greedy)
    parts = [format_dp_table(session.dp), explain_step(session.dp.last_step)]
    if session.backtrack.active:
        parts.append(format_backtrack(session.backtrack))
    return "\n".join(parts)


def play_through(session: KnapsackSession, mode: str) -> None:
    """Prints every frame from the current position to the end."""
    target = "greedy" if mode == "greedy" else "dp"
    print(render(session, mode), end="\n\n")
    while session.step_forward(target):
        print(render(session, mode), end="\n\n")
    if mode == "dp" and session.start_backtrack():
        print(render(session, mode), end="\n\n")
        while session.step_forward("backtrack"):
            print(format_backtrack(session.backtrack), end="\n\n")


def autoplay(session: KnapsackSession, mode: str, speed_ms: int) -> None:
    """Lets the timer drive the steps and prints whenever the cursor moved."""
    target = "greedy" if mode == "greedy" else "dp"
    stepper = session.stepper(target)
    player = session.autoplay(target, speed_ms)
    last_seen = -1
    try:
        while True:
            finished = player.wait(timeout=speed_ms / 1000.0)
            if stepper.position != last_seen:
                last_seen = stepper.position
                print(render(session, mode), end="\n\n")
            if finished:
                break
    except KeyboardInterrupt:
        session.stop_autoplay()
        print(f"Auto-play stopped at step {stepper.position} / {stepper.total_steps}.")


def handle_command(session: KnapsackSession, mode: str, line: str, speed_ms: int) -> Optional[str]:
    """
    Applies one REPL command. Returns a message for the user, or None when the
    command went through and the frame should be redrawn.
    """
    cmd, *rest = line.split()
    target = "greedy" if mode == "greedy" else ("backtrack" if session.backtrack.active else "dp")
    stepper = session.stepper(target)
    if cmd == "n":
        if not stepper.can_step_forward():
            return "Already at the end."
        session.step_forward(target)
    elif cmd == "p":
        if not stepper.can_step_backward():
            return "Already at the start."
        session.step_backward(target)
    elif cmd == "dp-p":
        if not session.dp.can_step_backward():
            return "Already at the start."
        session.step_backward("dp")
    elif cmd == "b":
        if not session.start_backtrack():
            return "DP table is not complete yet."
    elif cmd == "r":
        session.reset()
    elif cmd == "play":
        autoplay(session, mode, clamp_speed(int(rest[0])) if rest else speed_ms)
    elif cmd == "add":
        session.add_item(*rest[:3])
    elif cmd == "set":
        session.update_item(int(rest[0]), rest[1], " ".join(rest[2:]))
    elif cmd == "del":
        session.delete_item(int(rest[0]))
    elif cmd == "cap":
        session.set_capacity(rest[0])
    else:
        return HELP_TEXT
    return None


def interactive(session: KnapsackSession, mode: str, speed_ms: int) -> None:
    print(HELP_TEXT)
    print(render(session, mode))
    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line == "q":
            break
        try:
            message = handle_command(session, mode, line, speed_ms)
        except (IndexError, ValueError) as e:
            print(f"Invalid command '{line}': {e}")
            continue
        print(message if message is not None else render(session, mode))


def main(argv: Optional[List[str]] = None):
    """
    Walks through the 0/1 DP table (then the backtracking) or the fractional
    greedy plan in the terminal.
    """
    parser = argparse.ArgumentParser(description="Step through knapsack algorithms.")
    parser.add_argument("--capacity", type=str, default=None, help="Knapsack capacity.")
    parser.add_argument("--item", type=parse_item, action="append",
                        help="Item as NAME:VALUE:WEIGHT; repeat for several items.")
    parser.add_argument("--instance", type=str, default=None, help="Instance CSV file to load.")
    parser.add_argument("--mode", choices=["dp", "greedy"], default="dp")
    parser.add_argument("--autoplay", action="store_true", help="Step automatically on a timer.")
    parser.add_argument("--speed-ms", type=int, default=cfg.autoplay.speed_ms,
                        help="Interval between automatic steps.")
    parser.add_argument("--interactive", action="store_true", help="Read commands from stdin.")
    parser.add_argument("--export-trace", type=str, default=None,
                        help="Write the computed DP cells to this CSV file at the end.")
    parser.add_argument("--verbose", action="store_true", help="Show engine logs on the console.")
    args = parser.parse_args(argv)

    setup_logger(run_name=create_run_name(cfg, prefix="step"), log_dir=cfg.paths.logs,
                 level=logging.INFO if args.verbose else logging.WARNING)

    try:
        session = build_session(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load the instance: {e}")
        sys.exit(1)

    speed_ms = clamp_speed(args.speed_ms)
    if speed_ms != args.speed_ms:
        logger.warning(f"Speed {args.speed_ms} ms clamped to {speed_ms} ms.")

    if args.interactive:
        interactive(session, args.mode, speed_ms)
    elif args.autoplay:
        autoplay(session, args.mode, speed_ms)
    else:
        play_through(session, args.mode)

    if args.export_trace:
        save_trace_to_csv(session.dp, args.export_trace)


if __name__ == "__main__":
    main()
