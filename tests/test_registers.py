import pytest
from conftest import ScriptedChannel

from sts3215 import registers
from sts3215.errors import ResponseParseError, StatusError, TransportReadError
from sts3215.packet import build_reply
from sts3215.tables import (
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
)


def test_read_u16_is_little_endian(bus, buffer):
    bus.set_u16(1, ADDR_PRESENT_POSITION[0], 0x0ABC)

    assert registers.read_position(bus, buffer, 1) == 0x0ABC
    assert bus.requests[-1].data == bytes([ADDR_PRESENT_POSITION[0], 2])


def test_typed_reads(bus, buffer):
    bus.set_u16(2, ADDR_GOAL_POSITION[0], 1500)
    bus.set_u16(2, ADDR_PRESENT_SPEED[0], 0x8000 | 300)
    bus.set_u16(2, ADDR_PRESENT_LOAD[0], 120)
    bus.set_u8(2, ADDR_PRESENT_VOLTAGE[0], 121)
    bus.set_u8(2, ADDR_PRESENT_TEMPERATURE[0], 36)
    bus.set_u16(2, ADDR_PRESENT_CURRENT[0], 17)

    assert registers.read_goal_position(bus, buffer, 2) == 1500
    assert registers.read_speed(bus, buffer, 2) == 0x8000 | 300
    assert registers.read_load(bus, buffer, 2) == 120
    assert registers.read_voltage(bus, buffer, 2) == 121
    assert registers.read_temperature(bus, buffer, 2) == 36
    assert registers.read_current(bus, buffer, 2) == 17


def test_flags_are_nonzero_checks(bus, buffer):
    assert registers.is_moving(bus, buffer, 3) is False
    assert registers.has_error(bus, buffer, 3) is False

    bus.set_u8(3, ADDR_MOVING[0], 1)
    bus.set_u8(3, ADDR_STATUS[0], 0x20)

    assert registers.is_moving(bus, buffer, 3) is True
    assert registers.has_error(bus, buffer, 3) is True


@pytest.mark.parametrize(
    "speed, accel, payload",
    [
        (None, None, b"\x00\x08"),
        (500, None, b"\x00\x08\xf4\x01"),
        (500, 10, b"\x00\x08\xf4\x01\x0a\x00"),
    ],
)
def test_write_position_payload(bus, buffer, speed, accel, payload):
    reply = registers.write_position(bus, buffer, 1, 2048, speed, accel)

    assert reply.is_ok
    assert bus.requests[-1].data == bytes([ADDR_GOAL_POSITION[0]]) + payload
    assert bus.get_u16(1, ADDR_GOAL_POSITION[0]) == 2048


def test_write_position_rejects_accel_without_speed(bus, buffer):
    with pytest.raises(ValueError):
        registers.write_position(bus, buffer, 1, 2048, None, 10)

    assert bus.requests == []


def test_write_position_returns_fault_status(bus, buffer):
    bus.status[1] = 0x04

    reply = registers.write_position(bus, buffer, 1, 100)

    assert reply.status == 0x04


def test_move_to_position_raises_on_fault(bus, buffer):
    bus.status[1] = 0x04

    with pytest.raises(StatusError):
        registers.move_to_position(bus, buffer, 1, 100)


def test_torque_enable_and_disable(bus, buffer):
    registers.enable_torque(bus, buffer, 2)
    assert bus.registers[2][ADDR_TORQUE_ENABLE[0]] == 1
    assert bus.requests[-1].data == bytes([ADDR_TORQUE_ENABLE[0], 1])

    registers.disable_torque(bus, buffer, 2)
    assert bus.registers[2][ADDR_TORQUE_ENABLE[0]] == 0


def test_read_returns_data_despite_fault_status(bus, buffer):
    bus.status[1] = 0x01
    bus.set_u8(1, ADDR_PRESENT_TEMPERATURE[0], 82)
    bus.set_u16(1, ADDR_PRESENT_POSITION[0], 1500)

    assert registers.read_temperature(bus, buffer, 1) == 82
    assert registers.read_position(bus, buffer, 1) == 1500


def test_read_rejects_short_data(buffer):
    channel = ScriptedChannel([build_reply(1, 0, b"\x01"), build_reply(1, 0, b"")])

    with pytest.raises(ResponseParseError):
        registers.read_position(channel, buffer, 1)
    with pytest.raises(ResponseParseError):
        registers.read_voltage(channel, buffer, 1)


def test_ping_servo(bus, buffer):
    registers.ping_servo(bus, buffer, 3)

    with pytest.raises(TransportReadError):
        registers.ping_servo(bus, buffer, 42)
