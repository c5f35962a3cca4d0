"""Byte-level encoding helpers for register values.

Multi-byte registers are little-endian. Some read-only registers carry a sign
in a single bit instead of two's complement:
- Present_Speed: bit 15 (0x8000)
- Present_Load: bit 10 (0x400)
- Position values: no sign encoding (absolute position)
"""

from typing import Sequence


def split_into_bytes(value: int, length: int) -> bytes:
    """
    Split an unsigned integer into little-endian bytes.

    Args:
        value: Unsigned integer to serialize
        length: Number of bytes (1, 2 or 4)

    Returns:
        The serialized value
    """
    if length not in (1, 2, 4):
        raise ValueError(f"Unsupported byte length: {length}")
    if not 0 <= value < (1 << (8 * length)):
        raise ValueError(f"Value {value} does not fit in {length} byte(s)")
    return value.to_bytes(length, "little")


def join_bytes(data: Sequence[int]) -> int:
    """Combine little-endian bytes into an unsigned integer."""
    return int.from_bytes(bytes(data), "little")


def decode_sign_magnitude(encoded: int, sign_bit: int = 15) -> int:
    """
    Decode a sign-magnitude encoded integer.

    Args:
        encoded: Encoded value in sign-magnitude format
        sign_bit: Which bit is used as sign bit (default: 15 for speed)

    Returns:
        Decoded signed integer
    """
    sign_mask = 1 << sign_bit
    magnitude_mask = sign_mask - 1

    if encoded & sign_mask:
        return -(encoded & magnitude_mask)
    return encoded & magnitude_mask
