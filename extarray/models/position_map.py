"""
PositionMap - ordered index of keys defining enumeration order.
"""

from collections.abc import Iterable, Iterator


class PositionMap:
    """
    Ordered sequence of keys, independent of the storage's native order.

    Keeps a key -> position lookup alongside the list so that position
    queries are O(1). Only the owning container mutates it, through
    rebuild() after reordering or deletion and append_key() after a single
    insertion.
    """

    def __init__(self, keys: Iterable[int | str] = ()) -> None:
        self._keys: list[int | str] = []
        self._index: dict[int | str, int] = {}
        self.rebuild(keys)

    def rebuild(self, keys: Iterable[int | str]) -> None:
        """
        Replace the whole order with the given key sequence.

        Args:
            keys: Keys in their new enumeration order. Must not repeat.
        """
        self._keys = list(keys)
        self._index = {key: position for position, key in enumerate(self._keys)}
        if len(self._index) != len(self._keys):
            raise ValueError("PositionMap keys must be unique")

    def append_key(self, key: int | str) -> None:
        """Add a key at the end of the order. O(1)"""
        if key in self._index:
            raise ValueError(f"Key '{key}' is already mapped")
        self._index[key] = len(self._keys)
        self._keys.append(key)

    def index_of(self, key: int | str) -> int | None:
        """Return the position of key, or None if it is not mapped."""
        return self._index.get(key)

    def key_at(self, position: int) -> int | str:
        """Return the key stored at position. Raises IndexError when out of range."""
        if position < 0:
            raise IndexError(position)
        return self._keys[position]

    def last_key(self) -> int | str | None:
        return self._keys[-1] if self._keys else None

    def to_list(self) -> list[int | str]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[int | str]:
        return iter(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __repr__(self) -> str:
        return f"PositionMap({self._keys!r})"
