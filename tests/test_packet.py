import pytest

from sts3215.errors import (
    BufferTooSmallError,
    ChecksumMismatchError,
    InvalidHeaderError,
    ResponseParseError,
    StatusError,
)
from sts3215.packet import Ping, Read, Reply, Write, build_reply, calculate_checksum, decode, encode
from sts3215.tables import ADDR_GOAL_POSITION, ADDR_PRESENT_POSITION


def test_checksum_is_inverted_byte_sum():
    assert calculate_checksum([0x01, 0x02, 0x01]) == 0xFB
    assert calculate_checksum([]) == 0xFF
    # Sum wraps at 256 before inversion
    assert calculate_checksum([0xFF, 0x02]) == 0xFE


def test_encode_ping(buffer):
    length = encode(Ping(1), buffer)

    assert bytes(buffer[:length]) == bytes([0xFF, 0xFF, 0x01, 0x02, 0x01, 0xFB])


def test_encode_read(buffer):
    length = encode(Read(1, ADDR_PRESENT_POSITION[0], 2), buffer)

    assert bytes(buffer[:length]) == bytes([0xFF, 0xFF, 0x01, 0x04, 0x02, 0x38, 0x02, 0xBE])


def test_encode_write_goal_position_with_speed_and_accel(buffer):
    # position=2048, speed=0, accel=1000, all little-endian
    data = bytes([0x00, 0x08, 0x00, 0x00, 0xE8, 0x03])

    length = encode(Write(1, ADDR_GOAL_POSITION[0], data), buffer)

    expected_checksum = ~(0x01 + 9 + 0x03 + 0x2A + sum(data)) & 0xFF
    assert expected_checksum == 0xD5
    assert length == 13
    assert bytes(buffer[:length]) == bytes(
        [0xFF, 0xFF, 0x01, 0x09, 0x03, 0x2A, 0x00, 0x08, 0x00, 0x00, 0xE8, 0x03, 0xD5]
    )


@pytest.mark.parametrize("payload_length", [2, 4, 6])
def test_write_packet_length(buffer, payload_length):
    length = encode(Write(7, 0x2A, bytes(range(payload_length))), buffer)

    assert length == 7 + payload_length
    assert buffer[3] == 3 + payload_length


def test_encode_reuses_buffer(buffer):
    encode(Write(1, 0x2A, b"\x01\x02\x03\x04\x05\x06"), buffer)
    length = encode(Ping(2), buffer)

    assert length == 6
    assert bytes(buffer[:length]) == bytes([0xFF, 0xFF, 0x02, 0x02, 0x01, 0xFA])


def test_encode_rejects_small_buffer():
    with pytest.raises(BufferTooSmallError):
        encode(Write(1, 0x2A, b"\x00\x08"), bytearray(8))


def test_encode_fits_exact_buffer():
    buffer = bytearray(9)

    assert encode(Write(1, 0x2A, b"\x00\x08"), buffer) == 9


@pytest.mark.parametrize(
    "instruction",
    [Ping(256), Read(1, 0x100, 2), Read(1, 0x38, -1), Write(-1, 0x2A, b"\x00")],
)
def test_encode_rejects_out_of_range_fields(buffer, instruction):
    with pytest.raises(ValueError):
        encode(instruction, buffer)


def test_decode_reply_with_data():
    reply = decode(build_reply(3, 0, b"\x00\x08"))

    assert reply == Reply(servo_id=3, status=0, data=b"\x00\x08")
    assert reply.is_ok
    assert reply.data_as_u16() == 2048
    assert reply.data_as_u8() == 0x00


def test_decode_empty_status_reply():
    reply = decode(bytes([0xFF, 0xFF, 0x01, 0x02, 0x00, 0xFC]))

    assert reply.servo_id == 1
    assert reply.data == b""
    assert reply.data_as_u8() is None
    assert reply.data_as_u16() is None


def test_decode_ignores_trailing_bytes():
    reply = decode(build_reply(1, 0, b"\x2a") + b"\x00\x00\x00")

    assert reply.data == b"\x2a"


def test_decode_copies_data_out_of_buffer(buffer):
    raw = build_reply(1, 0, b"\x10\x20")
    buffer[: len(raw)] = raw

    reply = decode(buffer[: len(raw)])
    encode(Ping(9), buffer)

    assert reply.data == b"\x10\x20"


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"\xff",
        b"\x00\xff\x01\x02\x00\xfc",
        b"\xff\x00\x01\x02\x00\xfc",
        b"\xfe\xff\x01\x02\x00\xfc",
        b"\x01\x02\x00\xfc",
    ],
)
def test_decode_rejects_bad_header(raw):
    with pytest.raises(InvalidHeaderError):
        decode(raw)


def test_invalid_header_reports_bytes():
    with pytest.raises(InvalidHeaderError) as excinfo:
        decode(b"\xfe\xef\x01\x02\x00\xfc")

    assert (excinfo.value.first, excinfo.value.second) == (0xFE, 0xEF)


def test_decode_detects_any_flipped_byte():
    raw = build_reply(5, 0, b"\x00\x08\xe8\x03")
    # id, status and every data byte
    indices = [2] + list(range(4, len(raw) - 1))

    for index in indices:
        corrupted = bytearray(raw)
        corrupted[index] ^= 0x01
        with pytest.raises(ChecksumMismatchError):
            decode(corrupted)


def test_checksum_mismatch_reports_values():
    raw = bytearray(build_reply(1, 0, b"\x01"))
    raw[-1] = 0x00

    with pytest.raises(ChecksumMismatchError) as excinfo:
        decode(raw)

    assert excinfo.value.received == 0x00
    assert excinfo.value.calculated == calculate_checksum(raw[2:-1])


@pytest.mark.parametrize(
    "raw",
    [
        b"\xff\xff\x01\x02\x00",  # shorter than the smallest reply
        b"\xff\xff\x01\x04\x00\x10\x20",  # checksum missing
        b"\xff\xff\x01\x01\x00\xfd",  # length field below 2
    ],
)
def test_decode_rejects_truncated_reply(raw):
    with pytest.raises(ResponseParseError):
        decode(raw)


def test_write_round_trip_with_servo_reply(buffer):
    length = encode(Write(4, 0x2A, b"\x00\x08\x00\x00"), buffer)
    request = decode(buffer[:length])

    assert request.servo_id == 4
    assert request.data == b"\x2a\x00\x08\x00\x00"

    reply = decode(build_reply(4, 0x20, b""))
    assert reply.status == 0x20
    assert reply.data == b""


def test_raise_for_status():
    Reply(servo_id=1, status=0).raise_for_status()

    with pytest.raises(StatusError) as excinfo:
        Reply(servo_id=1, status=0x20).raise_for_status()
    assert excinfo.value.status == 0x20
