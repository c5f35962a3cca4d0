"""Cached servo telemetry and the per-bus move command queue."""

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .bus import Channel
from .errors import CommandOverflowError, ServoError, TransportError
from .models import ServoInfo, ServoPositionCommand
from .registers import (
    has_error,
    is_moving,
    read_current,
    read_goal_position,
    read_load,
    read_position,
    read_speed,
    read_temperature,
    read_voltage,
    write_position,
)
from .tables import MAX_SERVO_ID, POSITION_RESOLUTION

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_CAPACITY = 16

T = TypeVar("T")


class ServoState:
    """Telemetry snapshot for a fixed set of servos plus a bounded move queue.

    Commands are popped most-recent-first and at most one is written per call
    to :meth:`process_queued_commands`, which caps bus writes to one per tick
    however many moves were queued.
    """

    def __init__(self, servo_ids: Sequence[int], queue_capacity: int = DEFAULT_QUEUE_CAPACITY):
        """
        Initialize servo state.

        Args:
            servo_ids: IDs of the servos on the bus, in display order
            queue_capacity: Maximum number of pending move commands
        """
        if not servo_ids:
            raise ValueError("At least one servo ID is required")
        for servo_id in servo_ids:
            if not 0 <= servo_id <= MAX_SERVO_ID:
                raise ValueError(f"Servo ID must be within 0-{MAX_SERVO_ID}, got {servo_id}")
        if queue_capacity < 1:
            raise ValueError(f"Queue capacity must be positive, got {queue_capacity}")

        self.servo_ids: Tuple[int, ...] = tuple(servo_ids)
        self.infos: List[ServoInfo] = [ServoInfo(id=servo_id) for servo_id in self.servo_ids]
        self.queue_capacity = queue_capacity
        self.selected_index = 0
        self._queue: List[ServoPositionCommand] = []

    @property
    def queued_commands(self) -> Tuple[ServoPositionCommand, ...]:
        return tuple(self._queue)

    def snapshot(self) -> Tuple[ServoInfo, ...]:
        """Copies of the cached telemetry, safe to hand to a renderer."""
        return tuple(replace(info) for info in self.infos)

    def select_next(self) -> None:
        if self.selected_index < len(self.servo_ids) - 1:
            self.selected_index += 1

    def select_previous(self) -> None:
        if self.selected_index > 0:
            self.selected_index -= 1

    def selected_servo_id(self) -> int:
        return self.servo_ids[self.selected_index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.servo_ids):
            raise IndexError(f"Servo index {index} out of range for {len(self.servo_ids)} servos")

    def _enqueue(self, index: int, command: ServoPositionCommand) -> None:
        if len(self._queue) >= self.queue_capacity:
            raise CommandOverflowError(
                f"Command queue is full ({self.queue_capacity} pending), "
                f"dropping move for servo {command.id}"
            )
        self._queue.append(command)
        self.infos[index].goal_position = command.position
        logger.info(
            f"Queued position command for servo {command.id}: new_position={command.position}"
        )

    def send_absolute_move_command(
        self,
        index: int,
        position: int,
        speed: Optional[int] = None,
        accel: Optional[int] = None,
    ) -> None:
        """
        Queue a move of servo ``index`` to an absolute position.

        Raises:
            IndexError: If index does not name a servo
            CommandOverflowError: If the queue is full
        """
        self._check_index(index)
        servo_id = self.servo_ids[index]
        self._enqueue(index, ServoPositionCommand(servo_id, position, speed, accel))

    def send_relative_move_command(
        self,
        index: int,
        delta: int,
        speed: Optional[int] = None,
        accel: Optional[int] = None,
    ) -> None:
        """
        Queue a move of servo ``index`` by ``delta`` steps from its goal position.

        The result wraps around the 12-bit encoder range.

        Raises:
            IndexError: If index does not name a servo
            CommandOverflowError: If the queue is full
        """
        self._check_index(index)
        servo_id = self.servo_ids[index]
        position = (self.infos[index].goal_position + delta) % POSITION_RESOLUTION
        self._enqueue(index, ServoPositionCommand(servo_id, position, speed, accel))

    def move_position(self, delta: int) -> None:
        """Queue a relative move of the selected servo."""
        self.send_relative_move_command(self.selected_index, delta)

    def process_queued_commands(self, channel: Channel, buffer: bytearray) -> None:
        """
        Write the most recently queued command to the bus.

        The command is discarded whether or not the write succeeds.

        Raises:
            StatusError: If the servo rejects the command
        """
        if not self._queue:
            return

        command = self._queue.pop()
        reply = write_position(
            channel, buffer, command.id, command.position, command.speed, command.accel
        )
        logger.info(
            f"Sent position command to servo {command.id}: position={command.position}, "
            f"speed={command.speed}, accel={command.accel}"
        )
        reply.raise_for_status()

    def _has_pending(self, servo_id: int) -> bool:
        return any(command.id == servo_id for command in self._queue)

    def update(self, channel: Channel, buffer: bytearray) -> None:
        """Refresh the cached telemetry of every servo.

        A transport failure on the first read skips that servo for this call.
        Any other failed field keeps its cached value; an unreadable status
        register is reported as an error.
        """
        for index, servo_id in enumerate(self.servo_ids):
            cached = self.infos[index]

            def field(read: Callable[[Channel, bytearray, int], T], fallback: T) -> T:
                try:
                    return read(channel, buffer, servo_id)
                except ServoError as e:
                    logger.debug(f"{read.__name__} failed for servo {servo_id}: {e}")
                    return fallback

            try:
                position = read_position(channel, buffer, servo_id)
            except TransportError as e:
                logger.warning(f"Skipping refresh of servo {servo_id}: {e}")
                continue
            except ServoError as e:
                logger.debug(f"read_position failed for servo {servo_id}: {e}")
                position = cached.position

            info = ServoInfo(
                id=servo_id,
                position=position,
                goal_position=cached.goal_position,
                speed=field(read_speed, cached.speed),
                temperature=field(read_temperature, cached.temperature),
                load=field(read_load, cached.load),
                voltage=field(read_voltage, cached.voltage),
                current=field(read_current, cached.current),
                is_moving=field(is_moving, cached.is_moving),
                has_error=field(has_error, True),
            )
            # Keep the locally commanded goal until its command has been flushed.
            if not self._has_pending(servo_id):
                info.goal_position = field(read_goal_position, cached.goal_position)
            self.infos[index] = info
