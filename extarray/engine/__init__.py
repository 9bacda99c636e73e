"""
Ordering, comparison and capability helpers shared by the containers.
"""

from extarray.engine.capability import is_array, is_array_object
from extarray.engine.comparison import loose_equals, strict_equals
from extarray.engine.sort_engine import SortEngine

__all__ = [
    "SortEngine",
    "is_array",
    "is_array_object",
    "loose_equals",
    "strict_equals",
]
