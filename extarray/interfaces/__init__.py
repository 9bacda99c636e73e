"""
Abstract base classes and protocols for the container library.
"""

from extarray.interfaces.array_like import ArrayLike
from extarray.interfaces.position_iterable import PositionIterable

__all__ = ["ArrayLike", "PositionIterable"]
