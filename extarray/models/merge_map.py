"""
MergeMap - append-only accumulator used to line up map() parameters.
"""

from collections.abc import Iterator, Sequence
from typing import Any

from extarray.engine.capability import is_array
from extarray.models.exceptions import InvalidInputError


class MergeMap:
    """
    Ordered bag of heterogeneous elements.

    Not array-like: containers store a MergeMap as an opaque value instead
    of wrapping it into a child container.
    """

    def __init__(self, *elements: Any) -> None:
        self._elements: list[Any] = []
        for element in elements:
            self.merge(element)

    def merge(self, element: Any) -> "MergeMap":
        """Append an element and return self for chaining."""
        self._elements.append(element)
        return self

    def to_list(self) -> list[Any]:
        return list(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MergeMap):
            return NotImplemented
        return self._elements == other._elements

    __hash__ = None

    def __repr__(self) -> str:
        return f"MergeMap({', '.join(repr(element) for element in self._elements)})"

    @classmethod
    def merge_push(cls, target: Any, source: Any) -> None:
        """
        Add the values of source, position by position, into target.

        Each entry of target becomes (or keeps growing) a MergeMap holding
        its previous value followed by the source value at the same
        position. Missing source positions contribute None. The target's
        cursor is left where it was.

        Args:
            target: Container whose entries receive the values.
            source: Any array-like value.
        """
        extended_source = target.from_plain(source)

        with target.preserved_cursor():
            target.first()
            extended_source.first()
            while target.valid():
                element = target.element()
                if isinstance(element, cls):
                    target.set(target.key(), element.merge(extended_source.element()))
                else:
                    target.set(target.key(), cls(element, extended_source.element()))
                target.next()
                extended_source.next()

    @classmethod
    def prepare_map_params(cls, main: Any, params: Sequence[Any] = ()) -> Any:
        """
        Line up the values of main with extra parameter collections.

        Args:
            main: Container whose values come first in every group.
            params: Extra array-like collections, aligned by position.

        Returns:
            A list-shaped container holding one MergeMap per entry of main.

        Raises:
            InvalidInputError: If any of params is not array-like.
        """
        prepared = main.values()

        for sub_params in params:
            if not is_array(sub_params):
                raise InvalidInputError(
                    sub_params, "Second parameter has to be an array of arrays!"
                )
            cls.merge_push(prepared, sub_params)

        for key, element in list(prepared.entries()):
            if not isinstance(element, cls):
                prepared.set(key, cls(element))

        return prepared
