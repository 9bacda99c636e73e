"""
Ordered list/map container with an independent traversal cursor.

This package provides a container keyed by int or str with:
- set(key, value) - insertion order kept, updates do not move a key
- remove(key) - deletion with a full rebuild of the position index
- first()/next()/prev()/seek()/seek_key() - chainable cursor navigation
- sort_by_value()/sort_by_key()/natural_sort()/shuffle() - reordering
- filter()/map()/contains() - scans that leave the cursor untouched
- to_json()/serialize() - JSON and checksummed binary round-trips
"""

# models must be imported before engine: engine.capability depends on
# models.exceptions, and the models package imports engine helpers.
from extarray.models import (
    ARRAY_AS_PROPS,
    FILTER_USE_BOTH,
    FILTER_USE_KEY,
    FILTER_USE_VALUE,
    ChecksumMismatchError,
    Container,
    ContainerBase,
    ContainerError,
    Cursor,
    IndexOutOfRangeError,
    InvalidInputError,
    KeyNotFoundError,
    MergeMap,
    PositionMap,
    SerializationError,
)
from extarray.engine.sort_engine import SortEngine
from extarray.interfaces import ArrayLike, PositionIterable

__all__ = [
    "ARRAY_AS_PROPS",
    "FILTER_USE_BOTH",
    "FILTER_USE_KEY",
    "FILTER_USE_VALUE",
    "ArrayLike",
    "ChecksumMismatchError",
    "Container",
    "ContainerBase",
    "ContainerError",
    "Cursor",
    "IndexOutOfRangeError",
    "InvalidInputError",
    "KeyNotFoundError",
    "MergeMap",
    "PositionIterable",
    "PositionMap",
    "SerializationError",
    "SortEngine",
]
