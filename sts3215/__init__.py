"""Protocol driver for Feetech STS3215 serial bus servos."""

from .bus import Channel, send_command, send_ping
from .errors import (
    BufferTooSmallError,
    ChecksumMismatchError,
    CommandOverflowError,
    DeviceAlreadyConnectedError,
    DeviceNotConnectedError,
    InvalidHeaderError,
    ResponseParseError,
    ServoError,
    StatusError,
    TransportError,
    TransportReadError,
    TransportWriteError,
)
from .models import GoalPosition, PayloadShape, ServoInfo, ServoPositionCommand
from .packet import Ping, Read, Reply, Write, calculate_checksum, decode, encode
from .robot import Robot
from .serial_channel import SerialChannel
from .state import ServoState

__all__ = [
    "Channel",
    "SerialChannel",
    "Robot",
    "ServoState",
    "ServoInfo",
    "ServoPositionCommand",
    "GoalPosition",
    "PayloadShape",
    "Ping",
    "Read",
    "Write",
    "Reply",
    "encode",
    "decode",
    "calculate_checksum",
    "send_command",
    "send_ping",
    "ServoError",
    "TransportError",
    "TransportWriteError",
    "TransportReadError",
    "InvalidHeaderError",
    "ChecksumMismatchError",
    "ResponseParseError",
    "StatusError",
    "CommandOverflowError",
    "BufferTooSmallError",
    "DeviceNotConnectedError",
    "DeviceAlreadyConnectedError",
]

__version__ = "0.1.0"
