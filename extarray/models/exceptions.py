"""
Custom exceptions for the container library.
"""

from typing import Any


class ContainerError(Exception):
    """Base class for every error raised by the container library."""


class InvalidInputError(ContainerError, TypeError):
    """
    Raised when a value that is not array-like is given where a collection
    is required, or when a key has an unsupported type.
    """

    DEFAULT_MESSAGE = "Only array types are accepted as parameter!"

    def __init__(self, value: Any = None, message: str | None = None):
        """
        Initialize invalid input error.

        Args:
            value: The offending value.
            message: Optional override for the default message.
        """
        self.value = value
        super().__init__(message or self.DEFAULT_MESSAGE)


class KeyNotFoundError(ContainerError, KeyError):
    """Raised when a key lookup or seek targets a key that is not present."""

    def __init__(self, key: Any):
        self.key = key
        self.message = f"Key '{key}' doesn't exist!"
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return self.message


class IndexOutOfRangeError(ContainerError, IndexError):
    """Raised when the cursor is asked to seek outside of [0, count)."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Seek position {position} is out of range")


class SerializationError(ContainerError, ValueError):
    """Raised when a binary frame cannot be decoded."""


class ChecksumMismatchError(SerializationError):
    """
    Raised when a serialized frame fails its CRC32 check.

    This is a fail-fast error indicating the payload was altered.
    """

    def __init__(self, expected: int, actual: int):
        """
        Initialize checksum error.

        Args:
            expected: CRC32 checksum stored in the frame header.
            actual: CRC32 checksum computed over the payload.
        """
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Serialized container is corrupt: "
            f"expected CRC32 0x{expected:08x}, got 0x{actual:08x}"
        )
