"""Shared fixtures: fake byte channels standing in for the serial bus."""

from typing import Dict, List, Optional, Set, Union

import pytest

from sts3215.bus import Channel
from sts3215.packet import build_reply, decode
from sts3215.tables import INST_PING, INST_READ, INST_WRITE

ScriptedReply = Union[bytes, Exception]


class ScriptedChannel(Channel):
    """Channel that replays canned replies and records what was written."""

    def __init__(self, replies: Optional[List[ScriptedReply]] = None):
        self.replies: List[ScriptedReply] = list(replies or [])
        self.written: List[bytes] = []
        self.write_error: Optional[Exception] = None
        self.short_write = False

    def write(self, data: bytes) -> int:
        if self.write_error is not None:
            raise self.write_error
        self.written.append(bytes(data))
        return len(data) - 1 if self.short_write else len(data)

    def readinto(self, buffer: bytearray) -> int:
        if not self.replies:
            return 0
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        buffer[: len(reply)] = reply
        return len(reply)


class SimulatedBus(Channel):
    """Channel backed by in-memory register files, one per servo ID.

    Servos answer Ping, Read and Write instructions like the real firmware.
    Unknown IDs and IDs in ``silent`` never answer (the read times out).
    """

    def __init__(self, servo_ids=(1,)):
        self.registers: Dict[int, bytearray] = {servo_id: bytearray(128) for servo_id in servo_ids}
        self.status: Dict[int, int] = {}
        self.silent: Set[int] = set()
        self.failing_reads: Dict[int, Set[int]] = {}
        self.requests = []
        self._pending: Optional[bytes] = None

    def set_u8(self, servo_id: int, address: int, value: int) -> None:
        self.registers[servo_id][address] = value

    def set_u16(self, servo_id: int, address: int, value: int) -> None:
        self.registers[servo_id][address : address + 2] = value.to_bytes(2, "little")

    def get_u16(self, servo_id: int, address: int) -> int:
        return int.from_bytes(self.registers[servo_id][address : address + 2], "little")

    def write(self, data: bytes) -> int:
        request = decode(data)
        self.requests.append(request)
        servo_id, code, params = request.servo_id, request.status, request.data
        self._pending = None
        if servo_id not in self.registers or servo_id in self.silent:
            return len(data)

        memory = self.registers[servo_id]
        status = self.status.get(servo_id, 0)
        if code == INST_PING:
            self._pending = build_reply(servo_id, status)
        elif code == INST_READ:
            address, length = params[0], params[1]
            if address in self.failing_reads.get(servo_id, set()):
                return len(data)
            self._pending = build_reply(servo_id, status, bytes(memory[address : address + length]))
        elif code == INST_WRITE:
            address = params[0]
            memory[address : address + len(params) - 1] = params[1:]
            self._pending = build_reply(servo_id, status)
        return len(data)

    def readinto(self, buffer: bytearray) -> int:
        if self._pending is None:
            return 0
        reply, self._pending = self._pending, None
        buffer[: len(reply)] = reply
        return len(reply)


@pytest.fixture
def buffer() -> bytearray:
    return bytearray(256)


@pytest.fixture
def scripted() -> ScriptedChannel:
    return ScriptedChannel()


@pytest.fixture
def bus() -> SimulatedBus:
    return SimulatedBus(servo_ids=(1, 2, 3))
