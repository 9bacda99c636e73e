"""
PositionIterable protocol for containers with a traversal cursor.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator
from typing import Any


class PositionIterable(ABC):
    """
    Protocol for data structures iterated either through their own cursor
    or through detached snapshots of a position range.

    Implementations must support:
    - Cursor-driven iteration via __iter__/__next__ (rewinds, then advances
      the container's own cursor)
    - Snapshot iteration over positions [start, end) via iterator(start, end)
    - Async counterparts via __aiter__/__anext__ and async_iterator(start, end)
    """

    @abstractmethod
    def __iter__(self) -> Iterator[tuple[int | str, Any]]:
        """Rewind the cursor and return an iterator driven by it."""
        pass

    @abstractmethod
    def __next__(self) -> tuple[int | str, Any]:
        """Return the (key, value) pair under the cursor and advance."""
        pass

    @abstractmethod
    def iterator(
        self, start: int | None = None, end: int | None = None
    ) -> Iterator[tuple[int | str, Any]]:
        """
        Return an iterator over key-value pairs in the given position range.

        Args:
            start: Start position (inclusive). If None, starts from the beginning.
            end: End position (exclusive). If None, iterates to the end.

        Returns:
            Iterator yielding (key, value) tuples in enumeration order.
        """
        pass

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[tuple[int | str, Any]]:
        """Rewind the cursor and return an async iterator driven by it."""
        pass

    @abstractmethod
    async def __anext__(self) -> tuple[int | str, Any]:
        """Return the (key, value) pair under the cursor asynchronously."""
        pass

    @abstractmethod
    def async_iterator(
        self, start: int | None = None, end: int | None = None
    ) -> AsyncIterator[tuple[int | str, Any]]:
        """
        Return an async iterator over key-value pairs in the position range.

        Args:
            start: Start position (inclusive). If None, starts from the beginning.
            end: End position (exclusive). If None, iterates to the end.

        Returns:
            AsyncIterator yielding (key, value) tuples in enumeration order.
        """
        pass
