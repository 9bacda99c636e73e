"""
Container - ordered list/map hybrid with cursor-preserving operations.
"""

import json
import sys
from collections.abc import Callable
from typing import Any

from extarray.engine.capability import is_array, is_array_object, normalize_key, stringify
from extarray.engine.comparison import loose_equals, strict_equals
from extarray.models.container_base import ContainerBase
from extarray.models.exceptions import InvalidInputError
from extarray.models.merge_map import MergeMap

FILTER_USE_VALUE = 0
FILTER_USE_BOTH = 1
FILTER_USE_KEY = 2


class Container(ContainerBase):
    """
    Ordered container keyed by int or str.

    Provides:
    - keys()/values(): list-shaped containers in enumeration order
    - filter(fn)/map(fn): new containers keeping the original keys
    - contains(needle, strict): linear value search
    - to_json()/from_json(): JSON export and import

    Every scan saves the cursor before walking the entries and restores it
    afterwards, so a caller's position is never disturbed.
    """

    FILTER_USE_VALUE = FILTER_USE_VALUE
    FILTER_USE_BOTH = FILTER_USE_BOTH
    FILTER_USE_KEY = FILTER_USE_KEY

    DEFAULT_JSON_DEPTH = 512

    # Capability predicates

    @staticmethod
    def is_array(value: Any) -> bool:
        return is_array(value)

    @staticmethod
    def is_array_object(value: Any) -> bool:
        return is_array_object(value)

    # Construction helpers

    @classmethod
    def explode(cls, delimiter: Any, string: str, limit: int = sys.maxsize) -> "Container":
        """
        Split string by delimiter into a list-shaped container.

        Args:
            delimiter: Separator; non-str values are converted with str().
            string: Text to split.
            limit: Positive caps the number of pieces (the last one holds the
                   rest), negative drops that many pieces from the end, zero
                   counts as one.

        Raises:
            ValueError: If delimiter is empty.
        """
        delimiter = str(delimiter)
        if not delimiter:
            raise ValueError("Delimiter cannot be empty")

        if limit == 0:
            limit = 1
        if limit > 0:
            pieces = string.split(delimiter, limit - 1)
        else:
            pieces = string.split(delimiter)[:limit]
        return cls(pieces)

    @classmethod
    def fill(cls, start: int, count: int, value: Any) -> "Container":
        """Create count entries holding value, keyed from start upwards."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if not count:
            return cls()
        return cls({start + offset: value for offset in range(count)})

    # Views

    def keys(self) -> "Container":
        """Return the keys, in enumeration order, as a list-shaped container."""
        return self.from_plain(self._position_map.to_list())

    def values(self) -> "Container":
        """Return the values, in enumeration order, renumbered from 0."""
        values = self.from_plain()
        with self.preserved_cursor():
            self.first()
            while self.valid():
                values.append(self.element())
                self.next()
        return values

    def first_value(self) -> Any:
        """Value of the first entry, or None when empty. The cursor does not move."""
        with self.preserved_cursor():
            return self.first().element()

    def last_value(self) -> Any:
        """Value of the last entry, or None when empty. The cursor does not move."""
        with self.preserved_cursor():
            return self.last().element()

    def value_at(self, position: int) -> Any:
        """
        Value at an absolute position. The cursor does not move.

        Raises:
            IndexOutOfRangeError: If position is outside [0, count).
        """
        with self.preserved_cursor():
            return self.seek(position).element()

    # Higher-order operations

    def filter(
        self, fn: Callable[..., Any] | None = None, mode: int = FILTER_USE_VALUE
    ) -> "Container":
        """
        Keep the entries for which fn returns a truthy value.

        Args:
            fn: Predicate. Without one, entries with falsy values are dropped.
            mode: FILTER_USE_VALUE calls fn(value), FILTER_USE_KEY calls
                  fn(key), FILTER_USE_BOTH calls fn(value, key).

        Returns:
            A new container holding the surviving entries under their
            original keys.
        """
        if mode not in (FILTER_USE_VALUE, FILTER_USE_BOTH, FILTER_USE_KEY):
            raise ValueError(f"Unknown filter mode: {mode}")
        if fn is None:
            fn = bool
            mode = FILTER_USE_VALUE

        filtered = self._empty_like()
        with self.preserved_cursor():
            self.first()
            while self.valid():
                key = self.key()
                value = self.element()
                if mode == FILTER_USE_KEY:
                    keep = fn(key)
                elif mode == FILTER_USE_BOTH:
                    keep = fn(value, key)
                else:
                    keep = fn(value)
                if keep:
                    filtered.set(key, value)
                self.next()
        return filtered

    def map(self, fn: Callable[..., Any], *params: Any) -> "Container":
        """
        Apply fn to every value, keeping the keys.

        Args:
            fn: Called with the value, followed by the value found at the same
                position in each of params (None when that collection is
                shorter).
            *params: Extra array-like collections.

        Raises:
            InvalidInputError: If any of params is not array-like.
        """
        mapped = self._empty_like()
        with self.preserved_cursor():
            if not params:
                self.first()
                while self.valid():
                    mapped.set(self.key(), fn(self.element()))
                    self.next()
                return mapped

            prepared = MergeMap.prepare_map_params(self, params)
            self.first()
            prepared.first()
            while self.valid():
                mapped.set(self.key(), fn(*prepared.element().to_list()))
                self.next()
                prepared.next()
        return mapped

    def contains(self, needle: Any, strict: bool = False) -> bool:
        """
        Check whether any value equals needle.

        Args:
            needle: Value to look for.
            strict: If True, the type must match as well (1 != "1").
                    Otherwise loose equality applies.
        """
        compare = strict_equals if strict else loose_equals
        with self.preserved_cursor():
            self.first()
            while self.valid():
                if compare(self.element(), needle):
                    return True
                self.next()
        return False

    def diff(self, other: Any, *others: Any) -> "Container":
        """
        Return the entries whose value is found in none of the arguments.

        Raises:
            InvalidInputError: If an argument is not array-like.
        """
        compared = []
        for candidate in (other, *others):
            if not is_array(candidate):
                raise InvalidInputError(candidate)
            compared.append(self.from_plain(candidate))

        return self.filter(
            lambda value: not any(array.contains(value) for array in compared)
        )

    def implode(self, glue: Any = "") -> str:
        """Join the values as text, containers rendered as JSON."""
        pieces = []
        with self.preserved_cursor():
            self.first()
            while self.valid():
                pieces.append(stringify(self.element()))
                self.next()
        return str(glue).join(pieces)

    # JSON

    def to_json(self, **options: Any) -> str:
        """
        Encode as JSON with the shape of to_plain().

        Args:
            **options: Passed through to json.dumps (indent, ensure_ascii...).
        """
        return json.dumps(self.to_plain(), **options)

    @classmethod
    def from_json(cls, text: str | bytes, depth: int = DEFAULT_JSON_DEPTH) -> "Container":
        """
        Decode JSON into a container.

        Object keys holding canonical integers ("7", "-3") become int keys.

        Args:
            text: JSON document.
            depth: Maximum nesting depth, scalars counting as one level.

        Raises:
            ValueError: If depth is lower than 1.
            json.JSONDecodeError: If text is not valid JSON.
            InvalidInputError: If the nesting exceeds depth, or the document
                               is a non-empty scalar.
        """
        if depth < 1:
            raise ValueError(f"depth must be >= 1, got {depth}")

        decoded = json.loads(
            text,
            object_pairs_hook=lambda pairs: {normalize_key(key): value for key, value in pairs},
        )
        if _nesting_depth(decoded) > depth:
            raise InvalidInputError(decoded, "Maximum stack depth exceeded")
        return cls(decoded)

    def __str__(self) -> str:
        return self.to_json()


def _nesting_depth(value: Any) -> int:
    if isinstance(value, dict):
        return 1 + max((_nesting_depth(item) for item in value.values()), default=0)
    if isinstance(value, list):
        return 1 + max((_nesting_depth(item) for item in value), default=0)
    return 1
