"""Instruction packet encoding and reply packet decoding.

Every packet on the bus has the same frame::

    0xFF 0xFF | id | length | instruction-or-status | params... | checksum

``length`` counts the instruction (or status) byte, the parameters and the
checksum. The checksum is the bitwise NOT of the byte sum from ``id`` through
the last parameter, truncated to 8 bits.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence

from .errors import (
    BufferTooSmallError,
    ChecksumMismatchError,
    InvalidHeaderError,
    ResponseParseError,
    StatusError,
)
from .tables import INST_PING, INST_READ, INST_WRITE

HEADER = b"\xff\xff"

# header (2) + id + length + instruction + checksum
PACKET_OVERHEAD = 6

# Smallest reply: header (2) + id + length + status + checksum
MIN_REPLY_LENGTH = 6


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must fit in one byte, got {value}")


def calculate_checksum(data: Sequence[int]) -> int:
    """Return the bitwise NOT of the mod-256 sum of ``data``."""
    return ~sum(data) & 0xFF


@dataclass(frozen=True)
class Instruction:
    """Base class for instruction packets sent to a servo."""

    code: ClassVar[int]

    servo_id: int

    def parameters(self) -> bytes:
        """Bytes that follow the instruction code."""
        return b""


@dataclass(frozen=True)
class Ping(Instruction):
    """Ask a servo to answer with an empty status reply."""

    code: ClassVar[int] = INST_PING


@dataclass(frozen=True)
class Read(Instruction):
    """Read ``length`` bytes starting at register ``address``."""

    code: ClassVar[int] = INST_READ

    address: int
    length: int

    def parameters(self) -> bytes:
        _check_byte("address", self.address)
        _check_byte("length", self.length)
        return bytes((self.address, self.length))


@dataclass(frozen=True)
class Write(Instruction):
    """Write ``data`` verbatim starting at register ``address``."""

    code: ClassVar[int] = INST_WRITE

    address: int
    data: bytes

    def parameters(self) -> bytes:
        _check_byte("address", self.address)
        return bytes((self.address,)) + bytes(self.data)


def encode(instruction: Instruction, buffer: bytearray) -> int:
    """
    Encode an instruction packet at the start of ``buffer``.

    Args:
        instruction: Instruction to encode
        buffer: Reusable command buffer

    Returns:
        Number of bytes written

    Raises:
        BufferTooSmallError: If the packet does not fit in ``buffer``
    """
    _check_byte("servo_id", instruction.servo_id)
    params = instruction.parameters()
    total = PACKET_OVERHEAD + len(params)
    if total > len(buffer):
        raise BufferTooSmallError(
            f"Packet of {total} bytes does not fit in a {len(buffer)}-byte buffer"
        )
    length = len(params) + 2
    _check_byte("length", length)

    buffer[0:2] = HEADER
    buffer[2] = instruction.servo_id
    buffer[3] = length
    buffer[4] = instruction.code
    buffer[5 : 5 + len(params)] = params
    checksum_index = 5 + len(params)
    buffer[checksum_index] = calculate_checksum(buffer[2:checksum_index])
    return total


@dataclass(frozen=True)
class Reply:
    """Status reply returned by a servo.

    ``data`` is copied out of the command buffer, so a Reply stays valid after
    the buffer is reused for the next command.
    """

    servo_id: int
    status: int
    data: bytes = b""

    @property
    def is_ok(self) -> bool:
        return self.status == 0

    def raise_for_status(self) -> None:
        """Raise StatusError if the servo reported a fault."""
        if not self.is_ok:
            raise StatusError(self.status)

    def data_as_u8(self) -> Optional[int]:
        if not self.data:
            return None
        return self.data[0]

    def data_as_u16(self) -> Optional[int]:
        if len(self.data) < 2:
            return None
        return int.from_bytes(self.data[0:2], "little")


def decode(raw: Sequence[int]) -> Reply:
    """
    Validate and decode a reply packet.

    Args:
        raw: Bytes read from the bus, starting at the header

    Returns:
        The decoded reply

    Raises:
        InvalidHeaderError: If ``raw`` does not start with 0xFF 0xFF
        ResponseParseError: If the frame is truncated
        ChecksumMismatchError: If the checksum does not match
    """
    if len(raw) < 2 or raw[0] != 0xFF or raw[1] != 0xFF:
        first = raw[0] if len(raw) > 0 else 0
        second = raw[1] if len(raw) > 1 else 0
        raise InvalidHeaderError(first, second)

    if len(raw) < MIN_REPLY_LENGTH:
        raise ResponseParseError(f"Reply too short: {len(raw)} bytes")

    length = raw[3]
    if length < 2:
        raise ResponseParseError(f"Invalid reply length field: {length}")

    checksum_index = 3 + length
    if len(raw) <= checksum_index:
        raise ResponseParseError(
            f"Truncated reply: expected {checksum_index + 1} bytes, got {len(raw)}"
        )

    received = raw[checksum_index]
    calculated = calculate_checksum(raw[2:checksum_index])
    if calculated != received:
        raise ChecksumMismatchError(calculated, received)

    return Reply(servo_id=raw[2], status=raw[4], data=bytes(raw[5:checksum_index]))


def build_reply(servo_id: int, status: int = 0, data: bytes = b"") -> bytes:
    """Build a well-formed reply frame, as a servo would send it."""
    body = bytes((servo_id, len(data) + 2, status)) + bytes(data)
    return HEADER + body + bytes((calculate_checksum(body),))
