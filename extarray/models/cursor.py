"""
Cursor - current-position pointer over a PositionMap.
"""

from extarray.models.exceptions import IndexOutOfRangeError, KeyNotFoundError
from extarray.models.position_map import PositionMap

# Saved in place of a key when the cursor was past the end.
_PAST_END = object()


class Cursor:
    """
    Single mutable position into a PositionMap.

    The cursor is valid for 0 <= position < len(map) and past-end otherwise.
    Saved cursors remember the key, not the position, because positions can
    be renumbered by a rebuild between save and restore. Saves nest.
    """

    def __init__(self, position_map: PositionMap) -> None:
        self._map = position_map
        self._position: int = 0
        self._saved: list[object] = []

    @property
    def position(self) -> int:
        return self._position

    def valid(self) -> bool:
        return 0 <= self._position < len(self._map)

    def key(self) -> int | str | None:
        """Return the key under the cursor, or None when past-end."""
        if not self.valid():
            return None
        return self._map.key_at(self._position)

    def pos(self) -> int | None:
        """
        Return the position of the current key within the PositionMap.

        Computed from the key rather than the stored counter so it stays
        correct after the map is rebuilt.
        """
        key = self.key()
        if key is None:
            return None
        return self._map.index_of(key)

    def rewind(self) -> None:
        self._position = 0

    def end(self) -> None:
        if len(self._map):
            self._position = len(self._map) - 1

    def next(self) -> None:
        if self._position < len(self._map):
            self._position += 1

    def prev(self) -> None:
        """
        Step back one element.

        From the first element or from past-end this moves to the last
        element and steps forward once, leaving the cursor past-end.
        """
        position = self.pos()
        if not position:
            self.end()
            self.next()
            return
        self.seek(position - 1)

    def seek(self, position: int) -> None:
        """
        Jump to an absolute position.

        Args:
            position: Target position.

        Raises:
            IndexOutOfRangeError: If position is outside [0, len(map)).
        """
        if not 0 <= position < len(self._map):
            raise IndexOutOfRangeError(position)
        self._position = position

    def seek_key(self, key: int | str) -> None:
        """
        Jump to the position of key.

        Raises:
            KeyNotFoundError: If key is not mapped.
        """
        position = self._map.index_of(key)
        if position is None:
            raise KeyNotFoundError(key)
        self.seek(position)

    def move_past_end(self) -> None:
        self._position = len(self._map)

    def save(self) -> None:
        """Push the current key so a later restore() can seek back to it."""
        key = self.key()
        self._saved.append(_PAST_END if key is None else key)

    def restore(self) -> None:
        """
        Pop the last saved key and seek back to it.

        Raises:
            KeyNotFoundError: If the saved key was removed in the meantime.
        """
        if not self._saved:
            return
        key = self._saved.pop()
        if key is _PAST_END:
            self.move_past_end()
            return
        self.seek_key(key)

    def __repr__(self) -> str:
        return f"Cursor(position={self._position}, key={self.key()!r})"
