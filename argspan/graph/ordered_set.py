"""
ordered_set.py

Insertion-ordered, duplicate-free sequence with an O(1) reverse map from each
value back to its position. A value's position is its id and never changes
once assigned.
"""
import logging
from collections.abc import Sequence
from types import MappingProxyType
from typing import Dict, Generic, Hashable, Iterable, Iterator, List, Mapping, TypeVar

from argspan.graph.errors import DuplicateValueError, IndexOutOfRangeError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

NOT_FOUND = -1


class ReverseLookupOrderedSet(Sequence, Generic[T]):
    """
    Ordered set assigning each distinct value a stable, zero-based id.

    The ordered list and the value-to-id map are updated together, so
    ``ids[values[i]] == i`` holds for every position. Values must stay
    hashable and must not be mutated while held here.
    """

    def __init__(self, values: Iterable[T] = ()):
        self._values: List[T] = []
        self._ids: Dict[T, int] = {}
        for value in values:
            first_id = self._ids.get(value)
            if first_id is not None:
                raise DuplicateValueError(value, first_id, len(self._values))
            self._append(value)
        logger.debug(f"Built reverse lookup set with {len(self._values)} values")

    def _append(self, value: T) -> int:
        value_id = len(self._values)
        self._values.append(value)
        self._ids[value] = value_id
        return value_id

    def add(self, value: T) -> int:
        """Append ``value`` unless an equal value is present; return its id either way."""
        value_id = self._ids.get(value)
        if value_id is None:
            value_id = self._append(value)
        return value_id

    def get(self, value_id: int) -> T:
        if not isinstance(value_id, int) or isinstance(value_id, bool):
            raise TypeError(f"Ids are integers, got {type(value_id).__name__}")
        if value_id < 0 or value_id >= len(self._values):
            raise IndexOutOfRangeError(value_id, len(self._values))
        return self._values[value_id]

    def id_of(self, value: T) -> int:
        """Return the id of ``value``, or -1 when it was never added (or cannot be)."""
        try:
            return self._ids.get(value, NOT_FOUND)
        except TypeError:
            return NOT_FOUND

    def index(self, value, start: int = 0, stop=None) -> int:
        value_id = self._ids.get(value, NOT_FOUND)
        if stop is None:
            stop = len(self._values)
        if value_id < 0 or not start <= value_id < stop:
            raise ValueError(f"{value!r} is not in the set")
        return value_id

    def count(self, value) -> int:
        return 1 if value in self._ids else 0

    def reverse_lookup(self) -> Mapping[T, int]:
        """Read-only view of the value-to-id map."""
        return MappingProxyType(self._ids)

    def copy(self) -> "ReverseLookupOrderedSet[T]":
        clone = type(self)()
        clone._values = list(self._values)
        clone._ids = dict(self._ids)
        return clone

    def __getitem__(self, item):
        if isinstance(item, slice):
            return self._values[item]
        return self.get(item)

    def __contains__(self, value) -> bool:
        try:
            return value in self._ids
        except TypeError:
            return False

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReverseLookupOrderedSet):
            return self._values == other._values
        if isinstance(other, (list, tuple)):
            return self._values == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"
