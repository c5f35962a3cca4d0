"""Servo data models and enums."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .encoding import decode_sign_magnitude, split_into_bytes
from .tables import ENCODING_BIT_LOAD, ENCODING_BIT_SPEED, MAX_POSITION


class PayloadShape(Enum):
    """Layout of the goal-position write payload."""

    POSITION_ONLY = 2  # position
    POSITION_SPEED = 4  # position, speed
    POSITION_SPEED_ACCEL = 6  # position, speed, accel

    @property
    def size(self) -> int:
        return self.value


@dataclass(frozen=True)
class GoalPosition:
    """Goal-position payload with its optional trailing fields.

    Accel is only ever appended after speed, so an accel without a speed is
    rejected here instead of being silently shifted into the speed slot.
    """

    position: int
    speed: Optional[int] = None
    accel: Optional[int] = None

    def __post_init__(self):
        if self.speed is None and self.accel is not None:
            raise ValueError("accel requires speed to be set")
        for name in ("position", "speed", "accel"):
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 0xFFFF:
                raise ValueError(f"{name} must fit in 16 bits, got {value}")

    @property
    def shape(self) -> PayloadShape:
        if self.speed is None:
            return PayloadShape.POSITION_ONLY
        if self.accel is None:
            return PayloadShape.POSITION_SPEED
        return PayloadShape.POSITION_SPEED_ACCEL

    def to_bytes(self) -> bytes:
        """Serialize as little-endian 16-bit fields in wire order."""
        fields = [self.position, self.speed, self.accel][: self.shape.size // 2]
        return b"".join(split_into_bytes(value, 2) for value in fields)


@dataclass(frozen=True)
class ServoPositionCommand:
    """A queued move, consumed when it is flushed to the bus."""

    id: int
    position: int
    speed: Optional[int] = None
    accel: Optional[int] = None

    def __post_init__(self):
        if not 0 <= self.position <= MAX_POSITION:
            raise ValueError(f"position must be within 0-{MAX_POSITION}, got {self.position}")
        # Validates the speed/accel combination.
        self.goal()

    def goal(self) -> GoalPosition:
        return GoalPosition(self.position, self.speed, self.accel)


@dataclass
class ServoInfo:
    """Cached telemetry for one servo."""

    id: int = 0
    position: int = 0
    goal_position: int = 0
    speed: int = 0
    temperature: int = 0
    load: int = 0
    voltage: int = 0
    current: int = 0
    is_moving: bool = False
    has_error: bool = False

    @property
    def signed_speed(self) -> int:
        """Present speed in steps/s, negative when turning backwards."""
        return decode_sign_magnitude(self.speed, sign_bit=ENCODING_BIT_SPEED)

    @property
    def signed_load(self) -> int:
        """Present load in 0.1 % of max torque, negative for reverse direction."""
        return decode_sign_magnitude(self.load, sign_bit=ENCODING_BIT_LOAD)

    @property
    def voltage_volts(self) -> float:
        # Voltage is reported in 0.1 V units
        return self.voltage / 10.0
