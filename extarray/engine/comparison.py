"""
Equality helpers used by contains() and diff().
"""

from typing import Any

from extarray.engine.capability import is_array, to_plain_value


def strict_equals(a: Any, b: Any) -> bool:
    """
    Identical type and value.

    Array-like values are compared through their plain form, so two
    containers with the same content are strictly equal.
    """
    if is_array(a) and is_array(b):
        return _plain_strict_equals(to_plain_value(a), to_plain_value(b))
    return type(a) is type(b) and a == b


def _plain_strict_equals(a: Any, b: Any) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return list(a) == list(b) and all(
            _plain_strict_equals(a[key], b[key]) for key in a
        )
    if isinstance(a, list):
        return len(a) == len(b) and all(
            _plain_strict_equals(x, y) for x, y in zip(a, b)
        )
    return a == b


def loose_equals(a: Any, b: Any) -> bool:
    """
    Loose equality in the manner of PHP's ==.

    - None and bool operands compare by truthiness
    - numbers compare with numeric strings by value ("1" == 1)
    - array-like values compare structurally, entry by entry
    """
    if a is None or b is None or isinstance(a, bool) or isinstance(b, bool):
        if a is None and isinstance(b, str):
            return b == ""
        if b is None and isinstance(a, str):
            return a == ""
        return _truthy(a) == _truthy(b)

    if is_array(a) or is_array(b):
        if not (is_array(a) and is_array(b)):
            return False
        return _plain_loose_equals(to_plain_value(a), to_plain_value(b))

    number_a = _as_number(a)
    number_b = _as_number(b)
    if number_a is not None and number_b is not None:
        if isinstance(a, str) and isinstance(b, str):
            return a == b or number_a == number_b
        return number_a == number_b

    return a == b


def _plain_loose_equals(a: Any, b: Any) -> bool:
    items_a = _plain_items(a)
    items_b = _plain_items(b)
    if items_a is None or items_b is None:
        return loose_equals(a, b)
    if len(items_a) != len(items_b):
        return False
    lookup_b = dict(items_b)
    for key, value in items_a:
        if key not in lookup_b:
            return False
        if not _plain_loose_equals(value, lookup_b[key]):
            return False
    return True


def _plain_items(value: Any) -> list[tuple[Any, Any]] | None:
    if isinstance(value, dict):
        return list(value.items())
    if isinstance(value, list):
        return list(enumerate(value))
    return None


def _truthy(value: Any) -> bool:
    if is_array(value):
        return bool(to_plain_value(value))
    return bool(value)


def _as_number(value: Any) -> int | float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not any(char.isdigit() for char in text):
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    return None
