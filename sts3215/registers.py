"""Typed register reads and writes built on the command dispatcher."""

import logging
from typing import Optional

from .bus import Channel, send_command, send_ping
from .errors import ResponseParseError
from .models import GoalPosition
from .packet import Read, Reply, Write
from .tables import (
    ADDR_GOAL_POSITION,
    ADDR_MOVING,
    ADDR_PRESENT_CURRENT,
    ADDR_PRESENT_LOAD,
    ADDR_PRESENT_POSITION,
    ADDR_PRESENT_SPEED,
    ADDR_PRESENT_TEMPERATURE,
    ADDR_PRESENT_VOLTAGE,
    ADDR_STATUS,
    ADDR_TORQUE_ENABLE,
    TORQUE_DISABLE,
    TORQUE_ENABLE,
)

logger = logging.getLogger(__name__)


def _log_status(reply: Reply, address: int) -> None:
    if not reply.is_ok:
        logger.debug(
            f"Servo {reply.servo_id} reported status {reply.status:#04x} reading {address:#04x}"
        )


def read_u8_register(channel: Channel, buffer: bytearray, servo_id: int, address: int) -> int:
    """
    Read a 1-byte register.

    The value is returned even when the reply carries a nonzero status.

    Raises:
        ResponseParseError: If the reply carries no data
    """
    reply = send_command(Read(servo_id, address, 1), channel, buffer)
    _log_status(reply, address)
    value = reply.data_as_u8()
    if value is None:
        raise ResponseParseError(f"Empty reply reading {address:#04x} from servo {servo_id}")
    return value


def read_u16_register(channel: Channel, buffer: bytearray, servo_id: int, address: int) -> int:
    """
    Read a little-endian 2-byte register.

    Raises:
        ResponseParseError: If the reply carries fewer than two data bytes
    """
    reply = send_command(Read(servo_id, address, 2), channel, buffer)
    _log_status(reply, address)
    value = reply.data_as_u16()
    if value is None:
        raise ResponseParseError(f"Short reply reading {address:#04x} from servo {servo_id}")
    return value


def write_register(
    channel: Channel, buffer: bytearray, servo_id: int, address: int, data: bytes
) -> Reply:
    """Write raw bytes starting at ``address`` and return the servo's reply."""
    return send_command(Write(servo_id, address, bytes(data)), channel, buffer)


def write_position(
    channel: Channel,
    buffer: bytearray,
    servo_id: int,
    position: int,
    speed: Optional[int] = None,
    accel: Optional[int] = None,
) -> Reply:
    """
    Write the goal-position block.

    The payload is position, then speed if given, then accel if given, so it
    is 2, 4 or 6 bytes long. The reply is returned without checking its status.

    Raises:
        ValueError: If accel is given without speed
    """
    goal = GoalPosition(position, speed, accel)
    data = goal.to_bytes()
    logger.debug(f"Writing goal to servo {servo_id} ({goal.shape.name}): {data.hex(' ')}")
    return write_register(channel, buffer, servo_id, ADDR_GOAL_POSITION[0], data)


def read_position(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    return read_u16_register(channel, buffer, servo_id, ADDR_PRESENT_POSITION[0])


def read_goal_position(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    return read_u16_register(channel, buffer, servo_id, ADDR_GOAL_POSITION[0])


def read_speed(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    """Raw present speed (sign-magnitude, bit 15)."""
    return read_u16_register(channel, buffer, servo_id, ADDR_PRESENT_SPEED[0])


def read_load(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    """Raw present load (sign-magnitude, bit 10)."""
    return read_u16_register(channel, buffer, servo_id, ADDR_PRESENT_LOAD[0])


def read_voltage(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    return read_u8_register(channel, buffer, servo_id, ADDR_PRESENT_VOLTAGE[0])


def read_temperature(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    return read_u8_register(channel, buffer, servo_id, ADDR_PRESENT_TEMPERATURE[0])


def read_current(channel: Channel, buffer: bytearray, servo_id: int) -> int:
    return read_u16_register(channel, buffer, servo_id, ADDR_PRESENT_CURRENT[0])


def is_moving(channel: Channel, buffer: bytearray, servo_id: int) -> bool:
    return read_u8_register(channel, buffer, servo_id, ADDR_MOVING[0]) != 0


def has_error(channel: Channel, buffer: bytearray, servo_id: int) -> bool:
    return read_u8_register(channel, buffer, servo_id, ADDR_STATUS[0]) != 0


def enable_torque(channel: Channel, buffer: bytearray, servo_id: int) -> None:
    write_register(
        channel, buffer, servo_id, ADDR_TORQUE_ENABLE[0], bytes((TORQUE_ENABLE,))
    ).raise_for_status()


def disable_torque(channel: Channel, buffer: bytearray, servo_id: int) -> None:
    write_register(
        channel, buffer, servo_id, ADDR_TORQUE_ENABLE[0], bytes((TORQUE_DISABLE,))
    ).raise_for_status()


def move_to_position(
    channel: Channel,
    buffer: bytearray,
    servo_id: int,
    position: int,
    speed: Optional[int] = None,
    accel: Optional[int] = None,
) -> None:
    """Write a goal position immediately, raising StatusError on a fault."""
    write_position(channel, buffer, servo_id, position, speed, accel).raise_for_status()


def ping_servo(channel: Channel, buffer: bytearray, servo_id: int) -> None:
    """Ping a servo, raising StatusError on a fault."""
    send_ping(channel, buffer, servo_id).raise_for_status()
