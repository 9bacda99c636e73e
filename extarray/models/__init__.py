"""
Data models for the container library.
"""

from extarray.models.exceptions import (
    ChecksumMismatchError,
    ContainerError,
    IndexOutOfRangeError,
    InvalidInputError,
    KeyNotFoundError,
    SerializationError,
)
from extarray.models.position_map import PositionMap
from extarray.models.cursor import Cursor
from extarray.models.merge_map import MergeMap
from extarray.models.container_base import ARRAY_AS_PROPS, ContainerBase
from extarray.models.container import (
    FILTER_USE_BOTH,
    FILTER_USE_KEY,
    FILTER_USE_VALUE,
    Container,
)

__all__ = [
    "ARRAY_AS_PROPS",
    "FILTER_USE_BOTH",
    "FILTER_USE_KEY",
    "FILTER_USE_VALUE",
    "ChecksumMismatchError",
    "Container",
    "ContainerBase",
    "ContainerError",
    "Cursor",
    "IndexOutOfRangeError",
    "InvalidInputError",
    "KeyNotFoundError",
    "MergeMap",
    "PositionMap",
    "SerializationError",
]
