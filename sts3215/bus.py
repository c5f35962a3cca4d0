"""Byte channel interface and command dispatch."""

import logging
from abc import ABC, abstractmethod

from .errors import TransportReadError, TransportWriteError
from .packet import Instruction, Ping, Reply, decode, encode

logger = logging.getLogger(__name__)


class Channel(ABC):
    """Abstract duplex byte channel the driver talks through.

    The driver never opens, configures or closes a channel. Implementations
    block until the transport completes or its own timeout expires.
    """

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write bytes to the bus.

        Args:
            data: Encoded instruction packet

        Returns:
            Number of bytes written
        """
        pass

    @abstractmethod
    def readinto(self, buffer: bytearray) -> int:
        """
        Read one reply from the bus into ``buffer``.

        Args:
            buffer: Command buffer to fill from offset 0

        Returns:
            Number of bytes read (0 when nothing arrived before the timeout)
        """
        pass


def send_command(instruction: Instruction, channel: Channel, buffer: bytearray) -> Reply:
    """
    Send one instruction and wait for its reply.

    The reply overwrites the encoded request in ``buffer``.

    Args:
        instruction: Instruction to send
        channel: Byte channel connected to the bus
        buffer: Reusable command buffer

    Returns:
        The decoded reply

    Raises:
        TransportWriteError: If the packet could not be written in full
        TransportReadError: If no reply could be read
    """
    length = encode(instruction, buffer)
    packet = bytes(buffer[:length])

    try:
        written = channel.write(packet)
    except OSError as e:
        raise TransportWriteError(f"Failed to write to servo {instruction.servo_id}: {e}") from e
    if written is not None and written != length:
        raise TransportWriteError(
            f"Short write to servo {instruction.servo_id}: {written}/{length} bytes"
        )
    logger.debug(f"Command buffer: {packet.hex(' ')}")

    try:
        read_count = channel.readinto(buffer)
    except OSError as e:
        raise TransportReadError(f"Failed to read from servo {instruction.servo_id}: {e}") from e
    if not read_count:
        raise TransportReadError(f"No reply from servo {instruction.servo_id}")
    logger.debug(f"Response buffer: {bytes(buffer[:read_count]).hex(' ')}")

    return decode(buffer[:read_count])


def send_ping(channel: Channel, buffer: bytearray, servo_id: int) -> Reply:
    """Ping a servo and return its reply."""
    return send_command(Ping(servo_id), channel, buffer)
