"""Exceptions raised by the STS3215 protocol driver."""


class ServoError(Exception):
    """Base class for every error reported by the servo driver."""

    pass


class TransportError(ServoError):
    """Raised when the underlying byte channel fails."""

    pass


class TransportWriteError(TransportError):
    """Raised when an instruction packet could not be written to the channel."""

    pass


class TransportReadError(TransportError):
    """Raised when no reply could be read from the channel."""

    pass


class InvalidHeaderError(ServoError):
    """Raised when a reply does not start with the 0xFF 0xFF header."""

    def __init__(self, first: int, second: int):
        super().__init__(f"Invalid header bytes: {first:#X}, {second:#X}")
        self.first = first
        self.second = second


class ChecksumMismatchError(ServoError):
    """Raised when the checksum carried by a reply does not match its contents."""

    def __init__(self, calculated: int, received: int):
        super().__init__(f"Checksum mismatch: calculated {calculated:#X}, received {received:#X}")
        self.calculated = calculated
        self.received = received


class ResponseParseError(ServoError):
    """Raised when a reply is truncated or carries too little data."""

    pass


class StatusError(ServoError):
    """Raised when the servo answers with a nonzero status byte."""

    def __init__(self, status: int):
        super().__init__(f"Servo returned error status: {status}")
        self.status = status


class CommandOverflowError(ServoError):
    """Raised when a move command is queued while the queue is full."""

    pass


class BufferTooSmallError(ServoError):
    """Raised when an instruction packet does not fit in the command buffer."""

    pass


class DeviceNotConnectedError(TransportError):
    """Raised when attempting to use a device that is not connected."""

    pass


class DeviceAlreadyConnectedError(ServoError):
    """Raised when attempting to connect a device that is already connected."""

    pass
