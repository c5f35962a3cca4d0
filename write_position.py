#!/usr/bin/env python
"""Script to write a raw goal position to one STS3215 servo."""

import argparse
import logging
import sys
import time
from typing import Optional

from sts3215 import Robot, SerialChannel, ServoError
from sts3215.tables import MAX_POSITION
from utils import load_bus_config, resolve_port, setup_logging

logger = logging.getLogger(__name__)


def wait_until_stopped(robot: Robot, servo_id: int, timeout: float, interval: float = 0.05) -> bool:
    """
    Poll the moving flag until the servo stops.

    Returns:
        True if the servo stopped before the timeout
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not robot.is_moving(servo_id):
            return True
        time.sleep(interval)
    return False


def write_position(
    robot: Robot,
    servo_id: int,
    position: int,
    speed: Optional[int] = None,
    accel: Optional[int] = None,
    enable_torque: bool = False,
    wait_for_position: bool = False,
    timeout: float = 5.0,
) -> None:
    """
    Move one servo to a raw encoder position.

    Args:
        robot: Robot connected to the bus
        servo_id: Target servo ID
        position: Goal position (0-4095)
        speed: Optional goal speed
        accel: Optional acceleration (requires speed)
        enable_torque: Enable torque before moving
        wait_for_position: Block until the moving flag clears
        timeout: Maximum time to wait for the move (seconds)
    """
    if enable_torque:
        robot.enable_torque([servo_id])
        logger.info(f"Torque enabled on servo {servo_id}")

    robot.move_to_position(servo_id, position, speed, accel)
    logger.info(f"Servo {servo_id}: goal position {position} (speed={speed}, accel={accel})")

    if wait_for_position:
        # Give the servo a moment to raise its moving flag
        time.sleep(0.05)
        if wait_until_stopped(robot, servo_id, timeout):
            logger.info(f"Servo {servo_id} reached position {robot.read_position(servo_id)}")
        else:
            logger.warning(f"Servo {servo_id} still moving after {timeout:.1f}s")


def main():
    """Main entry point for write_position script."""
    parser = argparse.ArgumentParser(
        description="Write a raw goal position to an STS3215 servo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Move servo 1 to mid position
  sts3215-write-position --port /dev/ttyUSB0 --servo-id 1 --position 2048

  # Move servo 3 with speed 500 and acceleration 10, then wait for it
  sts3215-write-position --servo-id 3 --position 1200 --speed 500 --accel 10 --wait
        """,
    )
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
    parser.add_argument("--servo-id", type=int, required=True, help="Servo ID (0-253)")
    parser.add_argument(
        "--position",
        type=int,
        required=True,
        help=f"Goal position in encoder steps (0-{MAX_POSITION})",
    )
    parser.add_argument("--speed", type=int, default=None, help="Goal speed (steps/s)")
    parser.add_argument(
        "--accel",
        type=int,
        default=None,
        help="Acceleration; only sent together with --speed",
    )
    parser.add_argument(
        "--enable-torque",
        action="store_true",
        help="Enable torque before moving",
    )
    parser.add_argument(
        "--wait",
        action="store_true",
        help="Wait until the servo stops moving before exiting",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Maximum time to wait for the move (seconds, default: 5.0)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else None)

    if not 0 <= args.position <= MAX_POSITION:
        parser.error(f"--position must be within 0-{MAX_POSITION}")
    if args.accel is not None and args.speed is None:
        parser.error("--accel requires --speed")

    try:
        config = load_bus_config(port=args.port, baudrate=args.baudrate, servo_ids=(args.servo_id,))
        port = resolve_port(config.port)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        with SerialChannel(port, config.baudrate, config.timeout) as channel:
            robot = Robot(channel, config.servo_ids, buffer_size=config.buffer_size)
            write_position(
                robot,
                servo_id=args.servo_id,
                position=args.position,
                speed=args.speed,
                accel=args.accel,
                enable_torque=args.enable_torque,
                wait_for_position=args.wait,
                timeout=args.timeout,
            )
    except (ServoError, OSError) as e:
        logger.error(f"Failed to write position: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
