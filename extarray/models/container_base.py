"""
ContainerBase - ordered key/value storage with an independent cursor.

Keeps a PositionMap in lock-step with every structural mutation so that
enumeration order is always recoverable, and a Cursor that survives
mutation through save/restore by key.
"""

import logging
import random
from collections.abc import AsyncIterator, Callable, Iterator
from contextlib import contextmanager
from typing import Any

from extarray.engine.capability import (
    entries_of,
    is_array,
    is_dict_shaped,
    plain_from_entries,
    to_plain_value,
    validate_key,
)
from extarray.engine.sort_engine import SortEngine
from extarray.interfaces.array_like import ArrayLike
from extarray.interfaces.position_iterable import PositionIterable
from extarray.models import codec
from extarray.models.cursor import Cursor
from extarray.models.exceptions import InvalidInputError, KeyNotFoundError
from extarray.models.position_map import PositionMap

logger = logging.getLogger(__name__)

ARRAY_AS_PROPS = 2


class ContainerBase(ArrayLike, PositionIterable):
    """
    Ordered container keyed by int or str with a traversal cursor.

    Properties maintained:
    1. The PositionMap is a permutation of exactly the stored keys
    2. A key keeps the position of its first insertion until a sort or a
       removal rebuilds the map
    3. Nested array-like values are stored as child containers of the same
       class, and handed out as copies
    4. No public method returns while the map or cursor is inconsistent
    """

    # Entries can be read and written as attributes
    ARRAY_AS_PROPS = ARRAY_AS_PROPS

    DEFAULT_FLAGS = ARRAY_AS_PROPS

    def __init__(self, data: Any = None, flags: int = DEFAULT_FLAGS) -> None:
        """
        Initialize a container.

        Args:
            data: None, a mapping, a non-string sequence or any ArrayLike
                  (including another container, which is deep-copied).
                  Falsy scalars such as 0 or "" give an empty container.
            flags: 0 or ARRAY_AS_PROPS.

        Raises:
            InvalidInputError: If data is neither empty nor array-like, or
                               holds keys that are not int or str.
            ValueError: If flags holds unknown bits.
        """
        self._validate_flags(flags)
        self._flags = flags
        self._storage: dict[int | str, Any] = {}
        self._position_map = PositionMap()
        self._cursor = Cursor(self._position_map)
        self._sort_engine = SortEngine()
        self._max_int_key: int | None = None
        self._dict_shaped = is_dict_shaped(data)

        for key, value in self._coerce(data):
            key = validate_key(key)
            self._storage[key] = self._wrap(value)
            self._track_int_key(key)

        self._rebuild()

    @classmethod
    def from_plain(cls, data: Any = None) -> "ContainerBase":
        """Factory used for every nested wrap, so subclasses produce themselves."""
        return cls(data)

    @staticmethod
    def _validate_flags(flags: int) -> None:
        if isinstance(flags, bool) or not isinstance(flags, int):
            raise ValueError(f"flags must be an int, got {type(flags).__name__}")
        if flags & ~ARRAY_AS_PROPS:
            raise ValueError(f"Unknown flags: {flags}")

    @staticmethod
    def _coerce(data: Any) -> Iterator[tuple[Any, Any]]:
        if data is None:
            return iter(())
        if is_array(data):
            return entries_of(data)
        if not data:
            return iter(())
        raise InvalidInputError(data)

    def _empty_like(self) -> "ContainerBase":
        """New empty container with the same export shape as this one."""
        return self.from_plain({} if self._dict_shaped else None)

    def _wrap(self, value: Any) -> Any:
        if is_array(value):
            return self.from_plain(value)
        return value

    @staticmethod
    def _read(value: Any) -> Any:
        if isinstance(value, ContainerBase):
            return value.copy()
        return value

    # Flags

    def get_flags(self) -> int:
        return self._flags

    def set_flags(self, flags: int) -> None:
        self._validate_flags(flags)
        self._flags = flags

    # Position map maintenance

    def _rebuild(self) -> None:
        """Rebuild the PositionMap from storage order and rewind the cursor."""
        self._position_map.rebuild(self._storage)
        self._cursor.rewind()

    def _track_int_key(self, key: int | str) -> None:
        if type(key) is int and (self._max_int_key is None or key > self._max_int_key):
            self._max_int_key = key

    def _next_index(self) -> int:
        return 0 if self._max_int_key is None else self._max_int_key + 1

    # Reads

    def get(self, key: int | str) -> Any:
        """
        Retrieve the value stored under key.

        Raises:
            KeyNotFoundError: If key is absent.
        """
        if key not in self._storage:
            raise KeyNotFoundError(key)
        return self._read(self._storage[key])

    def offset_get(self, key: int | str) -> Any:
        return self.get(key)

    def has(self, key: Any) -> bool:
        return key in self._storage

    def offset_exists(self, key: Any) -> bool:
        return self.has(key)

    def count(self) -> int:
        return len(self._storage)

    def size(self) -> int:
        return len(self._storage)

    def current(self) -> Any:
        """Return the value under the cursor, or None when past-end."""
        key = self._cursor.key()
        if key is None:
            return None
        return self._read(self._storage[key])

    def element(self) -> Any:
        return self.current()

    def key(self) -> int | str | None:
        return self._cursor.key()

    def valid(self) -> bool:
        return self._cursor.valid()

    def pos(self) -> int | None:
        return self._cursor.pos()

    # Writes

    def set(self, key: int | str | None, value: Any) -> None:
        """
        Insert or update a key-value pair.

        A new key is appended to the enumeration order; an existing key is
        updated in place and keeps its position. A None key appends.

        Args:
            key: The key to insert/update.
            value: The value to store. Array-like values are wrapped.
        """
        if key is None:
            self.append(value)
            return

        key = validate_key(key)
        is_new = key not in self._storage
        self._storage[key] = self._wrap(value)

        if is_new:
            self._position_map.append_key(key)
            self._track_int_key(key)

    def offset_set(self, key: int | str | None, value: Any) -> None:
        self.set(key, value)

    def append(self, value: Any) -> None:
        """Store value under the next free integer key."""
        self.set(self._next_index(), value)

    def remove(self, key: int | str) -> None:
        """
        Remove a key-value pair and rebuild the PositionMap.

        The cursor stays on its key when that key survives. When the current
        entry is the one removed, the cursor moves to the entry that followed.
        The cursor is not rewound; call first() after remove() to restart.

        Raises:
            KeyNotFoundError: If key is absent.
        """
        if key not in self._storage:
            raise KeyNotFoundError(key)

        current = self._cursor.key()
        position = self._cursor.position

        del self._storage[key]
        if key == self._max_int_key and type(key) is int:
            int_keys = [k for k in self._storage if type(k) is int]
            self._max_int_key = max(int_keys) if int_keys else None

        self._rebuild()
        logger.debug(f"Removed key {key!r}, {len(self._position_map)} keys remain")

        if current is None:
            self._cursor.move_past_end()
        elif current == key and type(current) is type(key):
            if position < len(self._position_map):
                self._cursor.seek(position)
            else:
                self._cursor.move_past_end()
        else:
            self._cursor.seek_key(current)

    def offset_unset(self, key: int | str) -> None:
        self.remove(key)

    # Navigation

    def first(self) -> "ContainerBase":
        self._cursor.rewind()
        return self

    def rewind(self) -> "ContainerBase":
        return self.first()

    def last(self) -> "ContainerBase":
        self._cursor.end()
        return self

    def end(self) -> "ContainerBase":
        return self.last()

    def next(self) -> "ContainerBase":
        self._cursor.next()
        return self

    def prev(self) -> "ContainerBase":
        self._cursor.prev()
        return self

    def seek(self, position: int) -> "ContainerBase":
        self._cursor.seek(position)
        return self

    def seek_key(self, key: int | str) -> "ContainerBase":
        self._cursor.seek_key(key)
        return self

    def save_cursor(self) -> None:
        self._cursor.save()

    def restore_cursor(self) -> None:
        self._cursor.restore()

    @contextmanager
    def preserved_cursor(self) -> Iterator["ContainerBase"]:
        """Run a block that may move the cursor, then seek back to the saved key."""
        self.save_cursor()
        try:
            yield self
        finally:
            self.restore_cursor()

    # Sorting

    def _reorder(self, ordered: list[tuple[int | str, Any]]) -> "ContainerBase":
        self._storage = dict(ordered)
        self._rebuild()
        logger.debug(f"Reordered {len(self._storage)} entries")
        return self

    def sort_by_value(self) -> "ContainerBase":
        return self._reorder(self._sort_engine.by_value(self._storage.items()))

    def sort_by_value_descending(self) -> "ContainerBase":
        return self._reorder(
            self._sort_engine.by_value(self._storage.items(), descending=True)
        )

    def sort_by_key(self) -> "ContainerBase":
        return self._reorder(self._sort_engine.by_key(self._storage.items()))

    def sort_by_key_descending(self) -> "ContainerBase":
        return self._reorder(
            self._sort_engine.by_key(self._storage.items(), descending=True)
        )

    def natural_sort(self) -> "ContainerBase":
        return self._reorder(self._sort_engine.natural(self._storage.items()))

    def natural_case_sort(self) -> "ContainerBase":
        return self._reorder(
            self._sort_engine.natural(self._storage.items(), case_sensitive=False)
        )

    def sort_by_value_with(self, cmp: Callable[[Any, Any], int]) -> "ContainerBase":
        return self._reorder(self._sort_engine.by_value_with(self._storage.items(), cmp))

    def sort_by_key_with(self, cmp: Callable[[Any, Any], int]) -> "ContainerBase":
        return self._reorder(self._sort_engine.by_key_with(self._storage.items(), cmp))

    def shuffle(self, rng: random.Random | None = None) -> "ContainerBase":
        """Scramble the order. No distribution is promised."""
        engine = SortEngine(rng) if rng is not None else self._sort_engine
        return self._reorder(engine.shuffle(self._storage.items()))

    # Capability interface

    def entries(self) -> Iterator[tuple[int | str, Any]]:
        """Yield stored (key, value) pairs in PositionMap order without copying."""
        for key in self._position_map.to_list():
            if key in self._storage:
                yield key, self._storage[key]

    def to_plain(self) -> dict | list:
        return plain_from_entries(self.entries(), self._dict_shaped)

    def is_dict_shaped(self) -> bool:
        """Return True when an empty export of this container is a dict."""
        return self._dict_shaped

    def copy(self) -> "ContainerBase":
        return type(self)(self, self._flags)

    # Iteration

    def __iter__(self) -> Iterator[tuple[int | str, Any]]:
        self._cursor.rewind()
        return self

    def __next__(self) -> tuple[int | str, Any]:
        """Return the current (key, value) pair and advance the cursor."""
        if not self._cursor.valid():
            raise StopIteration
        key = self._cursor.key()
        value = self._read(self._storage[key])
        self._cursor.next()
        return key, value

    def iterator(
        self, start: int | None = None, end: int | None = None
    ) -> Iterator[tuple[int | str, Any]]:
        return _PositionRangeIterator(self, start, end)

    def __aiter__(self) -> AsyncIterator[tuple[int | str, Any]]:
        self._cursor.rewind()
        return self

    async def __anext__(self) -> tuple[int | str, Any]:
        """Return the current (key, value) pair asynchronously and advance."""
        if not self._cursor.valid():
            raise StopAsyncIteration
        key = self._cursor.key()
        value = self._read(self._storage[key])
        self._cursor.next()
        return key, value

    def async_iterator(
        self, start: int | None = None, end: int | None = None
    ) -> AsyncIterator[tuple[int | str, Any]]:
        return _AsyncPositionRangeIterator(self, start, end)

    # Binary serialization

    def serialize(self) -> bytes:
        """Serialize to a checksummed binary frame."""
        return codec.encode(self.entries(), self._flags, self._dict_shaped)

    def __bytes__(self) -> bytes:
        return self.serialize()

    @classmethod
    def deserialize(cls, data: bytes) -> "ContainerBase":
        """
        Rebuild a container from serialize() output.

        The result enumerates in the serialized order with the cursor on the
        first entry.

        Raises:
            SerializationError: If the frame is malformed.
            ChecksumMismatchError: If the payload was altered.
        """
        return codec.decode(data, cls._from_entries)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ContainerBase":
        return cls.deserialize(data)

    @classmethod
    def _from_entries(
        cls, entries: list[tuple[int | str, Any]], flags: int, dict_shaped: bool
    ) -> "ContainerBase":
        container = cls(None, flags)
        container._dict_shaped = dict_shaped
        for key, value in entries:
            container._storage[validate_key(key)] = value
            container._track_int_key(key)
        container._rebuild()
        return container

    def __reduce__(self) -> tuple[Callable[[bytes], "ContainerBase"], tuple[bytes]]:
        return type(self).deserialize, (self.serialize(),)

    # Python protocols

    def __len__(self) -> int:
        return len(self._storage)

    def __contains__(self, key: object) -> bool:
        return key in self._storage

    def __getitem__(self, key: int | str) -> Any:
        return self.get(key)

    def __setitem__(self, key: int | str | None, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: int | str) -> None:
        self.remove(key)

    def __eq__(self, other: object) -> bool:
        if not is_array(other):
            return NotImplemented
        return self.to_plain() == to_plain_value(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_plain()!r})"

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if not name.startswith("_"):
            flags = self.__dict__.get("_flags", 0)
            storage = self.__dict__.get("_storage", {})
            if flags & ARRAY_AS_PROPS and name in storage:
                return self.get(name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def _is_entry_attribute(self, name: str) -> bool:
        # Methods and class attributes are never entries.
        return (
            not name.startswith("_")
            and not hasattr(type(self), name)
            and bool(self._flags & ARRAY_AS_PROPS)
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if self._is_entry_attribute(name):
            self.set(name, value)
            return
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if self._is_entry_attribute(name):
            if name not in self._storage:
                raise AttributeError(name)
            self.remove(name)
            return
        object.__delattr__(self, name)


class _PositionRangeIterator(Iterator[tuple[int | str, Any]]):
    """Detached iterator over positions [start, end); never moves the cursor."""

    def __init__(self, container: ContainerBase, start: int | None, end: int | None) -> None:
        self._container = container
        self._keys = container._position_map.to_list()[slice(start, end)]
        self._index = 0

    def __iter__(self) -> Iterator[tuple[int | str, Any]]:
        return self

    def __next__(self) -> tuple[int | str, Any]:
        while self._index < len(self._keys):
            key = self._keys[self._index]
            self._index += 1
            # Keys removed since the snapshot are skipped
            if key in self._container:
                return key, self._container.get(key)
        raise StopIteration


class _AsyncPositionRangeIterator(AsyncIterator[tuple[int | str, Any]]):
    """Async iterator over positions [start, end) (in-memory, no I/O)."""

    def __init__(self, container: ContainerBase, start: int | None, end: int | None) -> None:
        self._container = container
        self._keys = container._position_map.to_list()[slice(start, end)]
        self._index = 0

    def __aiter__(self) -> "_AsyncPositionRangeIterator":
        return self

    async def __anext__(self) -> tuple[int | str, Any]:
        while self._index < len(self._keys):
            key = self._keys[self._index]
            self._index += 1
            if key in self._container:
                return key, self._container.get(key)
        raise StopAsyncIteration
