#!/usr/bin/env python
"""Ping STS3215 servos and print one telemetry reading for each.

Example:
    python ping.py --port /dev/ttyUSB0 --servo-ids 1,2,3
"""

import argparse
import logging
import sys
from typing import Dict, List

from rich.console import Console

from sts3215 import Robot, SerialChannel, ServoError
from utils import load_bus_config, parse_servo_ids, resolve_port, setup_logging
from utils.display import build_servo_table

logger = logging.getLogger(__name__)


def ping_all(robot: Robot) -> Dict[int, str]:
    """
    Ping every servo of the robot.

    Returns:
        Mapping from servo ID to "ok" or the error message
    """
    results: Dict[int, str] = {}
    for servo_id in robot.servo_state.servo_ids:
        try:
            robot.ping_servo(servo_id)
            results[servo_id] = "ok"
        except ServoError as e:
            results[servo_id] = str(e)
            logger.debug(f"Ping of servo {servo_id} failed: {e}")
    return results


def main():
    parser = argparse.ArgumentParser(description="Ping STS3215 servos and read their status")
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
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else None)
    console = Console()

    try:
        servo_ids = parse_servo_ids(args.servo_ids) if args.servo_ids else None
        config = load_bus_config(port=args.port, baudrate=args.baudrate, servo_ids=servo_ids)
        port = resolve_port(config.port)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    try:
        with SerialChannel(port, config.baudrate, config.timeout) as channel:
            robot = Robot(channel, config.servo_ids, buffer_size=config.buffer_size)
            results = ping_all(robot)
            robot.update_servo_state()
    except (ServoError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    missing: List[int] = []
    for servo_id, result in results.items():
        if result == "ok":
            console.print(f"[green]✓[/green] servo {servo_id}")
        else:
            console.print(f"[red]✗[/red] servo {servo_id}: {result}")
            missing.append(servo_id)

    console.print(build_servo_table(robot.servo_state.snapshot(), title=f"Servos on {port}"))
    sys.exit(1 if missing else 0)


if __name__ == "__main__":
    main()
