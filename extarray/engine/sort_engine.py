"""
SortEngine - orderings applied to container entries.

Every ordering takes (key, value) pairs and returns them as a new list in
sorted order. The container writes the result back into its storage and
rebuilds its PositionMap.
"""

import random
import re
from collections.abc import Callable, Iterable
from functools import cmp_to_key
from typing import Any

from extarray.engine.capability import (
    is_array,
    is_raw_collection,
    stringify,
    to_plain_value,
)

Entry = tuple[int | str, Any]
Comparator = Callable[[Any, Any], int]

_DIGIT_RUNS = re.compile(r"(\d+)")


def _sign(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _type_rank(value: Any) -> int:
    """Rank of a plain value's type: None < bool < number < str < collection < other."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return 2
    if isinstance(value, str):
        return 3
    if is_raw_collection(value):
        return 4
    return 5


def compare_values(a: Any, b: Any) -> int:
    """
    Default value ordering.

    Nested containers are unwrapped to their plain form first, so two
    sub-containers with equal content compare equal.
    """
    if is_array(a):
        a = to_plain_value(a)
    if is_array(b):
        b = to_plain_value(b)

    rank_a = _type_rank(a)
    rank_b = _type_rank(b)
    if rank_a != rank_b:
        return _sign(rank_a, rank_b)

    if rank_a == 4:
        return _compare_collections(a, b)
    if rank_a == 5:
        try:
            return _sign(a, b)
        except TypeError:
            return _sign(type(a).__name__, type(b).__name__)
    return _sign(a, b)


def _compare_collections(a: Any, b: Any) -> int:
    """Shorter collections first, then element by element."""
    values_a = list(a.values()) if isinstance(a, dict) else list(a)
    values_b = list(b.values()) if isinstance(b, dict) else list(b)
    if len(values_a) != len(values_b):
        return _sign(len(values_a), len(values_b))
    for item_a, item_b in zip(values_a, values_b):
        result = compare_values(item_a, item_b)
        if result:
            return result
    return 0


def compare_keys(a: int | str, b: int | str) -> int:
    """Natural key ordering: integer keys before string keys."""
    if type(a) is not type(b):
        return -1 if isinstance(a, int) else 1
    return _sign(a, b)


def compare_keys_descending(a: int | str, b: int | str) -> int:
    """Reverse key ordering; integer keys keep priority when the types differ."""
    if type(a) is not type(b):
        return -1 if isinstance(a, int) else 1
    return _sign(b, a)


def natural_compare(a: Any, b: Any, case_sensitive: bool = True) -> int:
    """
    Compare two values as text in "natural" order, so "img2" < "img10".

    Digit runs compare by numeric value, everything else compares as text.
    """
    text_a = stringify(a)
    text_b = stringify(b)
    if not case_sensitive:
        text_a = text_a.lower()
        text_b = text_b.lower()

    chunks_a = _DIGIT_RUNS.split(text_a)
    chunks_b = _DIGIT_RUNS.split(text_b)
    # split() with a capturing group puts the digit runs at odd indices
    for index, (chunk_a, chunk_b) in enumerate(zip(chunks_a, chunks_b)):
        if index % 2:
            result = _sign(int(chunk_a), int(chunk_b))
        else:
            result = _sign(chunk_a, chunk_b)
        if result:
            return result
    return _sign(len(chunks_a), len(chunks_b))


class SortEngine:
    """
    Sorting disciplines for container entries.

    All methods use Python's stable sort through functools.cmp_to_key, so
    entries that compare equal keep their relative order.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """
        Initialize the engine.

        Args:
            rng: Source of randomness for shuffle(). Defaults to an
                 unseeded random.Random().
        """
        self._rng = rng or random.Random()

    def by_value(self, entries: Iterable[Entry], descending: bool = False) -> list[Entry]:
        if descending:
            return self._sort_values(entries, lambda a, b: compare_values(b, a))
        return self._sort_values(entries, compare_values)

    def by_key(self, entries: Iterable[Entry], descending: bool = False) -> list[Entry]:
        if descending:
            return self._sort_keys(entries, compare_keys_descending)
        return self._sort_keys(entries, compare_keys)

    def natural(self, entries: Iterable[Entry], case_sensitive: bool = True) -> list[Entry]:
        return self._sort_values(
            entries, lambda a, b: natural_compare(a, b, case_sensitive)
        )

    def by_value_with(self, entries: Iterable[Entry], cmp: Comparator) -> list[Entry]:
        """Sort by value with a caller comparator; its exceptions propagate."""
        return self._sort_values(entries, cmp)

    def by_key_with(self, entries: Iterable[Entry], cmp: Comparator) -> list[Entry]:
        """Sort by key with a caller comparator; its exceptions propagate."""
        return self._sort_keys(entries, cmp)

    def shuffle(self, entries: Iterable[Entry]) -> list[Entry]:
        """
        Scramble the order with a comparator answering at random.

        The resulting permutation is not uniformly distributed.
        """
        return self._sort_values(entries, lambda a, b: self._rng.randint(-1, 1))

    @staticmethod
    def _sort_values(entries: Iterable[Entry], cmp: Comparator) -> list[Entry]:
        value_key = cmp_to_key(cmp)
        return sorted(entries, key=lambda entry: value_key(entry[1]))

    @staticmethod
    def _sort_keys(entries: Iterable[Entry], cmp: Comparator) -> list[Entry]:
        key_key = cmp_to_key(cmp)
        return sorted(entries, key=lambda entry: key_key(entry[0]))
