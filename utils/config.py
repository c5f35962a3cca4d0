"""Bus configuration loaded from the environment."""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from sts3215.robot import DEFAULT_BUFFER_SIZE, DEFAULT_SERVO_IDS
from sts3215.serial_channel import DEFAULT_BAUDRATE, DEFAULT_TIMEOUT
from sts3215.state import DEFAULT_QUEUE_CAPACITY
from sts3215.tables import MAX_SERVO_ID


def parse_servo_ids(value: str) -> Tuple[int, ...]:
    """Parse a comma-separated list of servo IDs (e.g. "1,2,3")."""
    try:
        servo_ids = tuple(int(part.strip()) for part in value.split(",") if part.strip())
    except ValueError as err:
        raise ValueError(f"Invalid servo IDs: {value!r}") from err
    if not servo_ids:
        raise ValueError("At least one servo ID is required")
    return servo_ids


@dataclass
class BusConfig:
    """Configuration for one STS3215 servo bus."""

    port: Optional[str] = None  # None to auto-detect
    baudrate: int = DEFAULT_BAUDRATE
    timeout: float = DEFAULT_TIMEOUT  # Read timeout in seconds
    servo_ids: Tuple[int, ...] = DEFAULT_SERVO_IDS
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self):
        """Validate configuration values."""
        self.servo_ids = tuple(self.servo_ids)
        if not self.servo_ids:
            raise ValueError("At least one servo ID is required")
        for servo_id in self.servo_ids:
            if not 0 <= servo_id <= MAX_SERVO_ID:
                raise ValueError(f"Servo ID must be within 0-{MAX_SERVO_ID}, got {servo_id}")
        if self.baudrate <= 0:
            raise ValueError(f"baudrate must be positive, got {self.baudrate}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.queue_capacity < 1:
            raise ValueError(f"queue_capacity must be positive, got {self.queue_capacity}")


def load_bus_config(dotenv: bool = True, **overrides) -> BusConfig:
    """
    Build a BusConfig from STS3215_* environment variables.

    Args:
        dotenv: Whether to load a .env file first
        **overrides: Values that take precedence over the environment (None is ignored)

    Returns:
        The resolved configuration
    """
    if dotenv:
        load_dotenv()

    values = {}
    port = os.getenv("STS3215_PORT", "").strip()
    if port:
        values["port"] = port
    baudrate = os.getenv("STS3215_BAUDRATE")
    if baudrate:
        values["baudrate"] = int(baudrate)
    timeout = os.getenv("STS3215_TIMEOUT")
    if timeout:
        values["timeout"] = float(timeout)
    servo_ids = os.getenv("STS3215_SERVO_IDS")
    if servo_ids:
        values["servo_ids"] = parse_servo_ids(servo_ids)
    queue_capacity = os.getenv("STS3215_QUEUE_CAPACITY")
    if queue_capacity:
        values["queue_capacity"] = int(queue_capacity)

    values.update({key: value for key, value in overrides.items() if value is not None})
    return BusConfig(**values)
