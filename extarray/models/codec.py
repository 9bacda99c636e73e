"""
Binary codec for containers.

Frame: [magic:4][version:1][crc32:4][payload_len:4][payload]
Body:  [flags:1][shape:1][count:4] followed by count entries of [key][value]

The shape byte is 1 when an empty container exports as a dict, 0 for a list.

Keys are tagged b"i" (signed int) or b"s" (UTF-8 text). Values carry a
one-byte tag, and variable-size values a 4-byte length prefix.
"""

import logging
import pickle
import struct
import zlib
from collections.abc import Callable, Iterable
from typing import Any

from extarray.engine.capability import entries_of, is_array, is_dict_shaped
from extarray.models.exceptions import ChecksumMismatchError, SerializationError

logger = logging.getLogger(__name__)

MAGIC = b"XARR"
FORMAT_VERSION = 1
HEADER_SIZE = len(MAGIC) + 1 + 4 + 4

_KEY_INT = b"i"
_KEY_STR = b"s"

_NONE = b"N"
_TRUE = b"T"
_FALSE = b"F"
_INT = b"I"
_FLOAT = b"D"
_STR = b"S"
_BYTES = b"B"
_CONTAINER = b"C"
_PICKLED = b"P"

Entry = tuple[int | str, Any]
# Builds a container from decoded (key, value) pairs, its flags and shape.
ContainerFactory = Callable[[list[Entry], int, bool], Any]


def encode(entries: Iterable[Entry], flags: int, dict_shaped: bool = False) -> bytes:
    """
    Serialize container entries into a checksummed frame.

    Args:
        entries: (key, value) pairs in enumeration order.
        flags: Behaviour flags of the container (0-255).
        dict_shaped: Whether the container exports as a dict when empty.

    Returns:
        The framed bytes.
    """
    payload = _encode_body(entries, flags, dict_shaped)
    checksum = zlib.crc32(payload) & 0xFFFFFFFF
    return (
        MAGIC
        + FORMAT_VERSION.to_bytes(1, "big")
        + checksum.to_bytes(4, "big")
        + len(payload).to_bytes(4, "big")
        + payload
    )


def decode(data: bytes, factory: ContainerFactory) -> Any:
    """
    Deserialize a frame produced by encode().

    Args:
        data: The framed bytes.
        factory: Called with (entries, flags, dict_shaped) for the root and
                 every nested container, innermost first.

    Raises:
        SerializationError: If the frame is malformed or truncated.
        ChecksumMismatchError: If the payload fails its CRC32 check.
    """
    if len(data) < HEADER_SIZE or data[: len(MAGIC)] != MAGIC:
        raise SerializationError("Not a serialized container")

    offset = len(MAGIC)
    version = data[offset]
    offset += 1
    if version != FORMAT_VERSION:
        raise SerializationError(f"Unsupported format version {version}")

    expected = int.from_bytes(data[offset : offset + 4], "big")
    offset += 4
    payload_len = int.from_bytes(data[offset : offset + 4], "big")
    offset += 4

    payload = data[offset : offset + payload_len]
    if len(payload) != payload_len:
        raise SerializationError(
            f"Truncated frame: expected {payload_len} payload bytes, got {len(payload)}"
        )

    actual = zlib.crc32(payload) & 0xFFFFFFFF
    if actual != expected:
        logger.warning(
            f"Rejecting serialized container: CRC32 0x{actual:08x} != 0x{expected:08x}"
        )
        raise ChecksumMismatchError(expected, actual)

    reader = _Reader(payload)
    result = _decode_body(reader, factory)
    if reader.remaining():
        raise SerializationError(f"{reader.remaining()} trailing bytes after payload")
    return result


def _encode_body(entries: Iterable[Entry], flags: int, dict_shaped: bool) -> bytes:
    parts = []
    count = 0
    for key, value in entries:
        parts.append(_encode_key(key))
        parts.append(_encode_value(value))
        count += 1
    return (
        flags.to_bytes(1, "big")
        + int(dict_shaped).to_bytes(1, "big")
        + count.to_bytes(4, "big")
        + b"".join(parts)
    )


def _encode_key(key: int | str) -> bytes:
    if isinstance(key, int):
        return _KEY_INT + _sized(_int_bytes(key))
    return _KEY_STR + _sized(key.encode("utf-8"))


def _encode_value(value: Any) -> bytes:
    if value is None:
        return _NONE
    if value is True:
        return _TRUE
    if value is False:
        return _FALSE
    if type(value) is int:
        return _INT + _sized(_int_bytes(value))
    if type(value) is float:
        return _FLOAT + struct.pack(">d", value)
    if type(value) is str:
        return _STR + _sized(value.encode("utf-8"))
    if type(value) is bytes:
        return _BYTES + _sized(value)
    if is_array(value):
        get_flags = getattr(value, "get_flags", None)
        flags = get_flags() if callable(get_flags) else 0
        return _CONTAINER + _sized(
            _encode_body(entries_of(value), flags, is_dict_shaped(value))
        )
    return _PICKLED + _sized(pickle.dumps(value))


def _int_bytes(value: int) -> bytes:
    length = (value.bit_length() + 8) // 8
    return value.to_bytes(length, "big", signed=True)


def _sized(raw: bytes) -> bytes:
    return len(raw).to_bytes(4, "big") + raw


class _Reader:
    """Sequential reader over a payload with bounds checking."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def take(self, size: int) -> bytes:
        chunk = self._data[self._offset : self._offset + size]
        if len(chunk) != size:
            raise SerializationError(f"Unexpected end of payload at offset {self._offset}")
        self._offset += size
        return chunk

    def take_int(self, size: int) -> int:
        return int.from_bytes(self.take(size), "big")

    def take_sized(self) -> bytes:
        return self.take(self.take_int(4))

    def remaining(self) -> int:
        return len(self._data) - self._offset


def _decode_body(reader: _Reader, factory: ContainerFactory) -> Any:
    flags = reader.take_int(1)
    dict_shaped = reader.take_int(1) == 1
    count = reader.take_int(4)
    entries = []
    for _ in range(count):
        key = _decode_key(reader)
        value = _decode_value(reader, factory)
        entries.append((key, value))
    return factory(entries, flags, dict_shaped)


def _decode_key(reader: _Reader) -> int | str:
    tag = reader.take(1)
    raw = reader.take_sized()
    if tag == _KEY_INT:
        return int.from_bytes(raw, "big", signed=True)
    if tag == _KEY_STR:
        return raw.decode("utf-8")
    raise SerializationError(f"Unknown key tag {tag!r}")


def _decode_value(reader: _Reader, factory: ContainerFactory) -> Any:
    tag = reader.take(1)
    if tag == _NONE:
        return None
    if tag == _TRUE:
        return True
    if tag == _FALSE:
        return False
    if tag == _INT:
        return int.from_bytes(reader.take_sized(), "big", signed=True)
    if tag == _FLOAT:
        return struct.unpack(">d", reader.take(8))[0]
    if tag == _STR:
        return reader.take_sized().decode("utf-8")
    if tag == _BYTES:
        return reader.take_sized()
    if tag == _CONTAINER:
        nested = _Reader(reader.take_sized())
        result = _decode_body(nested, factory)
        if nested.remaining():
            raise SerializationError("Trailing bytes in nested container")
        return result
    if tag == _PICKLED:
        return pickle.loads(reader.take_sized())
    raise SerializationError(f"Unknown value tag {tag!r}")
