#!/usr/bin/env python
"""Live terminal monitor for a chain of STS3215 servos.

Up/Down select a servo, Left/Right jog it by 20 steps (Shift: 200 steps),
q or Esc quits.

Example:
    python monitor.py --port /dev/ttyUSB0
    python monitor.py --servo-ids 1,2,3 --log-file servo_monitor.log
"""

import argparse
import logging
import queue
import sys
import threading
import time
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from sts3215 import CommandOverflowError, Robot, SerialChannel, ServoError
from utils import keyboard_input_thread, load_bus_config, parse_servo_ids, resolve_port, setup_logging
from utils.display import build_servo_table

logger = logging.getLogger(__name__)

SMALL_STEP = 20
LARGE_STEP = 200

JOG_DELTAS = {
    "left": -SMALL_STEP,
    "right": SMALL_STEP,
    "shift-left": -LARGE_STEP,
    "shift-right": LARGE_STEP,
}


def handle_key(robot: Robot, key: str) -> bool:
    """
    Apply one key press to the robot state.

    Returns:
        False when the monitor should stop
    """
    state = robot.servo_state
    if key == "quit":
        return False
    if key == "up":
        state.select_previous()
    elif key == "down":
        state.select_next()
    elif key in JOG_DELTAS:
        try:
            state.move_position(JOG_DELTAS[key])
        except CommandOverflowError as e:
            logger.warning(str(e))
    return True


def render(robot: Robot, last_error: Optional[ServoError] = None) -> Panel:
    """Build the monitor panel from the cached servo state."""
    state = robot.servo_state
    table = build_servo_table(state.snapshot(), selected_index=state.selected_index, title="")
    subtitle = f"queued: {len(state.queued_commands)}"
    if last_error is not None:
        subtitle += f" | last error: {last_error}"
    return Panel(
        table,
        title="Servo Status Monitor (↑↓: Select, ←→: Move, Shift: x10, q: Quit)",
        subtitle=subtitle,
        border_style="cyan",
    )


def run_monitor(robot: Robot, interval: float = 0.1, console: Optional[Console] = None) -> None:
    """
    Run the monitor loop until 'q' or Esc is pressed.

    Each iteration flushes at most one queued move, refreshes telemetry and
    redraws the table. Keyboard input is read on a background thread; all bus
    traffic stays on the calling thread.
    """
    console = console or Console()
    stop_event = threading.Event()
    keys: "queue.Queue[str]" = queue.Queue()
    input_thread = threading.Thread(
        target=keyboard_input_thread, args=(stop_event, keys), daemon=True
    )
    input_thread.start()

    last_error: Optional[ServoError] = None
    try:
        with Live(render(robot), console=console, refresh_per_second=10, screen=True) as live:
            while not stop_event.is_set():
                while True:
                    try:
                        key = keys.get_nowait()
                    except queue.Empty:
                        break
                    if not handle_key(robot, key):
                        stop_event.set()
                        break

                error = robot.tick()
                if error is not None:
                    last_error = error
                live.update(render(robot, last_error))
                time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("Monitor interrupted")
    finally:
        stop_event.set()
        input_thread.join(timeout=1.0)


def main():
    parser = argparse.ArgumentParser(description="Live monitor for STS3215 servos")
    parser.add_argument(
        "--port",
        type=str,
        default=None,
        help="Serial port path (default: STS3215_PORT or the only port present)",
    )
    parser.add_argument(
        "--baudrate",
        type=int,
        default=None,
        help="Serial communication baudrate (default: 1000000)",
    )
    parser.add_argument(
        "--servo-ids",
        type=str,
        default=None,
        help="Comma-separated list of servo IDs (default: STS3215_SERVO_IDS or 1,2,3,4,5,6)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=0.1,
        help="Delay between ticks in seconds (default: 0.1)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="servo_monitor.log",
        help="Log file; the terminal is used by the monitor (default: servo_monitor.log)",
    )
    args = parser.parse_args()

    setup_logging(log_file=args.log_file)
    logger.info("Starting servo monitor")

    try:
        servo_ids = parse_servo_ids(args.servo_ids) if args.servo_ids else None
        config = load_bus_config(port=args.port, baudrate=args.baudrate, servo_ids=servo_ids)
        port = resolve_port(config.port)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        with SerialChannel(port, config.baudrate, config.timeout) as channel:
            robot = Robot(
                channel,
                config.servo_ids,
                queue_capacity=config.queue_capacity,
                buffer_size=config.buffer_size,
            )
            robot.update_servo_state()
            run_monitor(robot, interval=args.interval)
    except (ServoError, OSError) as e:
        logger.error(f"Monitor stopped: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
