"""
ArrayLike capability interface for keyed, ordered collections.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any


class ArrayLike(ABC):
    """
    Capability interface for values that behave like an ordered collection.

    Implementations must support:
    - Enumeration of (key, value) pairs in their own order via entries()
    - Export to plain nested dicts/lists via to_plain()

    Any class exposing both methods satisfies the interface without
    inheriting from it, so adapters for foreign collection types only need
    to provide the two methods.
    """

    @abstractmethod
    def entries(self) -> Iterator[tuple[int | str, Any]]:
        """
        Return an iterator over (key, value) pairs in enumeration order.

        Enumerating must not move any traversal cursor the collection owns.
        """
        pass

    @abstractmethod
    def to_plain(self) -> dict | list:
        """
        Return a plain nested structure equivalent to this collection.

        Returns:
            A list when keys are exactly 0..n-1 in order, otherwise a dict.
        """
        pass

    @classmethod
    def __subclasshook__(cls, subclass: type) -> bool:
        if cls is ArrayLike:
            if all(
                callable(getattr(subclass, name, None))
                for name in ("entries", "to_plain")
            ):
                return True
        return NotImplemented
