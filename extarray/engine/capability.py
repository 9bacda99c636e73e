"""
Capability detection and plain-structure conversion.

A value is array-like when it is a raw mapping or sequence, or when it
satisfies the ArrayLike interface. Strings and bytes are never array-like.
"""

import json
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from extarray.interfaces.array_like import ArrayLike
from extarray.models.exceptions import InvalidInputError

_TEXT_TYPES = (str, bytes, bytearray)

# Canonical decimal integers only: "7", "-3", "0"; not "07", "+1" or "1.0".
_INT_KEY_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)")


def is_raw_collection(value: Any) -> bool:
    """Return True for builtin-style mappings and non-string sequences."""
    if isinstance(value, _TEXT_TYPES):
        return False
    return isinstance(value, (Mapping, Sequence))


def is_array(value: Any) -> bool:
    """Return True if value can be wrapped into a container."""
    if isinstance(value, _TEXT_TYPES):
        return False
    return is_raw_collection(value) or isinstance(value, ArrayLike)


def is_array_object(value: Any) -> bool:
    """Return True for array-like objects that are not raw collections."""
    return isinstance(value, ArrayLike) and not is_raw_collection(value)


def validate_key(key: Any) -> int | str:
    """
    Check that key is usable in a container.

    Raises:
        InvalidInputError: If key is not an int (bools excluded) or a str.
    """
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise InvalidInputError(
            key, f"Only integer or string keys are accepted, got {type(key).__name__}!"
        )
    return key


def normalize_key(key: str) -> int | str:
    """Turn canonical integer strings (as found in JSON object keys) into ints."""
    if _INT_KEY_PATTERN.fullmatch(key):
        return int(key)
    return key


def entries_of(value: Any) -> Iterator[tuple[int | str, Any]]:
    """
    Enumerate (key, value) pairs of an array-like value.

    Raises:
        InvalidInputError: If value is not array-like.
    """
    if isinstance(value, ArrayLike) and not is_raw_collection(value):
        return iter(value.entries())
    if isinstance(value, Mapping):
        return iter(value.items())
    if is_raw_collection(value):
        return enumerate(value)
    raise InvalidInputError(value)


def is_list_shaped(keys: Sequence[int | str]) -> bool:
    """Return True when keys are exactly 0..n-1 in order."""
    return all(
        type(key) is int and key == position for position, key in enumerate(keys)
    )


def is_dict_shaped(value: Any) -> bool:
    """
    Return True when value should export as a dict even with no entries.

    Mappings and containers built from one are dict-shaped. Sequences, and
    containers built from nothing or from a sequence, export as lists.
    """
    if isinstance(value, Mapping):
        return True
    is_dict_shaped_method = getattr(value, "is_dict_shaped", None)
    if callable(is_dict_shaped_method):
        return is_dict_shaped_method()
    if isinstance(value, ArrayLike) and not is_raw_collection(value):
        return isinstance(value.to_plain(), dict)
    return False


def to_plain_value(value: Any) -> Any:
    """Recursively unwrap array-like values into plain dicts and lists."""
    if isinstance(value, ArrayLike) and not is_raw_collection(value):
        return value.to_plain()
    if is_raw_collection(value):
        return plain_from_entries(entries_of(value), isinstance(value, Mapping))
    return value


def plain_from_entries(
    pairs: Iterator[tuple[int | str, Any]], dict_shaped: bool = False
) -> dict | list:
    """
    Build a plain structure from (key, value) pairs using the list-shape rule.

    Args:
        pairs: (key, value) pairs in enumeration order.
        dict_shaped: Export an empty result as {} instead of [].
    """
    plain = {key: to_plain_value(item) for key, item in pairs}
    if not plain and dict_shaped:
        return plain
    if is_list_shaped(list(plain)):
        return list(plain.values())
    return plain


def stringify(value: Any) -> str:
    """
    Convert a value to text for joining and natural ordering.

    None is empty, booleans are "1" or "", collections are JSON.
    """
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if is_array(value):
        return json.dumps(to_plain_value(value))
    return str(value)
