"""Robot facade bundling a bus channel, its command buffer and servo state."""

import logging
from typing import Iterable, Optional, Sequence

from . import registers
from .bus import Channel
from .errors import ServoError
from .state import DEFAULT_QUEUE_CAPACITY, ServoState

logger = logging.getLogger(__name__)

DEFAULT_SERVO_IDS = (1, 2, 3, 4, 5, 6)
DEFAULT_BUFFER_SIZE = 256


class Robot:
    """A chain of STS3215 servos sharing one serial bus.

    Not thread-safe: every call uses the same command buffer, so a Robot must
    be driven from a single thread.
    """

    def __init__(
        self,
        channel: Channel,
        servo_ids: Sequence[int] = DEFAULT_SERVO_IDS,
        queue_capacity: int = DEFAULT_QUEUE_CAPACITY,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        """
        Initialize robot.

        Args:
            channel: Open byte channel to the servo bus
            servo_ids: IDs of the servos on the bus (default: 1-6)
            queue_capacity: Maximum number of pending move commands
            buffer_size: Size of the reusable command buffer in bytes
        """
        self.channel = channel
        self.buffer = bytearray(buffer_size)
        self._state = ServoState(servo_ids, queue_capacity=queue_capacity)

    def __str__(self) -> str:
        return f"Robot(servo_ids={list(self._state.servo_ids)})"

    @property
    def servo_state(self) -> ServoState:
        return self._state

    def ping_servo(self, servo_id: int) -> None:
        registers.ping_servo(self.channel, self.buffer, servo_id)

    def move_to_position(
        self,
        servo_id: int,
        position: int,
        speed: Optional[int] = None,
        accel: Optional[int] = None,
    ) -> None:
        """Write a goal position immediately, bypassing the queue."""
        registers.move_to_position(self.channel, self.buffer, servo_id, position, speed, accel)

    def read_position(self, servo_id: int) -> int:
        return registers.read_position(self.channel, self.buffer, servo_id)

    def read_goal_position(self, servo_id: int) -> int:
        return registers.read_goal_position(self.channel, self.buffer, servo_id)

    def read_speed(self, servo_id: int) -> int:
        return registers.read_speed(self.channel, self.buffer, servo_id)

    def read_load(self, servo_id: int) -> int:
        return registers.read_load(self.channel, self.buffer, servo_id)

    def read_voltage(self, servo_id: int) -> int:
        return registers.read_voltage(self.channel, self.buffer, servo_id)

    def read_temperature(self, servo_id: int) -> int:
        return registers.read_temperature(self.channel, self.buffer, servo_id)

    def read_current(self, servo_id: int) -> int:
        return registers.read_current(self.channel, self.buffer, servo_id)

    def is_moving(self, servo_id: int) -> bool:
        return registers.is_moving(self.channel, self.buffer, servo_id)

    def has_error(self, servo_id: int) -> bool:
        return registers.has_error(self.channel, self.buffer, servo_id)

    def enable_torque(self, servo_ids: Optional[Iterable[int]] = None) -> None:
        """
        Enable torque for specified servos.

        Args:
            servo_ids: Servo IDs. If None, enables every servo of this robot.
        """
        for servo_id in self._state.servo_ids if servo_ids is None else servo_ids:
            registers.enable_torque(self.channel, self.buffer, servo_id)

    def disable_torque(self, servo_ids: Optional[Iterable[int]] = None) -> None:
        """
        Disable torque for specified servos.

        Args:
            servo_ids: Servo IDs. If None, disables every servo of this robot.
        """
        for servo_id in self._state.servo_ids if servo_ids is None else servo_ids:
            registers.disable_torque(self.channel, self.buffer, servo_id)

    def send_absolute_move_command(
        self,
        index: int,
        position: int,
        speed: Optional[int] = None,
        accel: Optional[int] = None,
    ) -> None:
        self._state.send_absolute_move_command(index, position, speed, accel)

    def send_relative_move_command(
        self,
        index: int,
        delta: int,
        speed: Optional[int] = None,
        accel: Optional[int] = None,
    ) -> None:
        self._state.send_relative_move_command(index, delta, speed, accel)

    def process_queued_commands(self) -> None:
        self._state.process_queued_commands(self.channel, self.buffer)

    def update_servo_state(self) -> None:
        self._state.update(self.channel, self.buffer)

    def tick(self) -> Optional[ServoError]:
        """
        Flush at most one queued move, then refresh telemetry.

        Returns:
            The error raised while flushing, if any. The refresh runs either way.
        """
        error = None
        try:
            self.process_queued_commands()
        except ServoError as e:
            logger.warning(f"Error processing queued commands: {e}")
            error = e
        self.update_servo_state()
        return error
