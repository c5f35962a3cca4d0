"""Serial port channel for host machines, using pyserial."""

import logging
from typing import Optional

import serial

from .bus import Channel
from .errors import DeviceAlreadyConnectedError, DeviceNotConnectedError

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 1_000_000
DEFAULT_TIMEOUT = 1.0

# header (2) + id + length
_REPLY_PREFIX_LENGTH = 4


class SerialChannel(Channel):
    """Channel over a USB/UART serial adapter wired to the servo bus."""

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUDRATE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize serial channel.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0")
            baudrate: Serial communication baudrate (default: 1000000)
            timeout: Read timeout in seconds (default: 1.0)
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self._serial: Optional[serial.Serial] = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def connect(self) -> None:
        """Open the serial port (8N1, no flow control)."""
        if self.connected:
            raise DeviceAlreadyConnectedError(f"Serial port {self.port} is already connected")

        self._serial = serial.Serial(
            port=self.port,
            baudrate=self.baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=self.timeout,
            xonxoff=False,
            rtscts=False,
            dsrdtr=False,
        )
        logger.info(f"Port opened successfully: {self.port}")

    def disconnect(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return
        self._serial.close()
        self._serial = None
        logger.info(f"Port closed: {self.port}")

    def __enter__(self) -> "SerialChannel":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def _ensure_connected(self) -> serial.Serial:
        if not self.connected:
            raise DeviceNotConnectedError(f"Serial port {self.port} is not connected")
        return self._serial

    def write(self, data: bytes) -> int:
        port = self._ensure_connected()
        # Drop stale bytes left over from a previous timed-out exchange.
        port.reset_input_buffer()
        written = port.write(data)
        port.flush()
        return written

    def readinto(self, buffer: bytearray) -> int:
        """Read exactly one reply frame, or whatever arrived before the timeout."""
        port = self._ensure_connected()
        prefix = port.read(_REPLY_PREFIX_LENGTH)
        buffer[: len(prefix)] = prefix
        if len(prefix) < _REPLY_PREFIX_LENGTH:
            return len(prefix)

        remaining = min(prefix[3], len(buffer) - _REPLY_PREFIX_LENGTH)
        body = port.read(remaining)
        buffer[_REPLY_PREFIX_LENGTH : _REPLY_PREFIX_LENGTH + len(body)] = body
        return _REPLY_PREFIX_LENGTH + len(body)
