"""
span_index.py

Two-level sparse index from text coordinates to labelled nodes:
``begin -> end -> label -> node``. Several labels may share one exact span
(e.g. a 'claim' and a 'stance' over the same text), which is why the
innermost level is keyed by label.
"""
import logging
from types import MappingProxyType
from typing import Dict, Generic, Iterable, Iterator, Mapping, Optional, Tuple, TypeVar

from argspan.graph.errors import (
    SpanBeginNotIndexedError,
    SpanEndNotIndexedError,
    SpanIndexMismatchError,
)
from argspan.schema.label import BaseSpanTextLabel
from argspan.schema.span import Span

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseSpanTextLabel)

COLLISION_POLICIES = ("first", "error")


class SpanIndex(Generic[T]):
    """
    Derived, read-only index over a finalised node sequence.

    When two distinct nodes share both span and label, only one of them can
    be reached through the index: with ``on_collision="first"`` the node
    registered first is kept and a warning is logged, with ``"error"`` a
    ``SpanIndexMismatchError`` is raised.
    """

    def __init__(self, nodes: Iterable[T] = (), on_collision: str = "first"):
        if on_collision not in COLLISION_POLICIES:
            raise ValueError(f"on_collision must be one of {COLLISION_POLICIES}, got {on_collision!r}")
        self._begins: Dict[int, Dict[int, Dict[str, T]]] = {}
        self._size = 0
        for node in nodes:
            self._insert(node, on_collision)
        logger.debug(f"Indexed {self._size} spans over {len(self._begins)} begin offsets")

    def _insert(self, node: T, on_collision: str) -> None:
        span = node.span
        ends = self._begins.setdefault(span.begin, {})
        labels = ends.get(span.end)
        if labels is None:
            labels = ends[span.end] = {}
            self._size += 1
        existing = labels.get(node.label)
        if existing is None:
            labels[node.label] = node
            return
        if on_collision == "error":
            raise SpanIndexMismatchError(
                f"Label {node.label!r} at {span!r} is already taken by {existing!r}; cannot index {node!r}"
            )
        logger.warning(
            f"Label {node.label!r} at {span!r} already indexed; {node!r} is reachable by id only"
        )

    def lookup(self, span: Span) -> Mapping[str, T]:
        """
        Return the nodes covering exactly ``span``, keyed by label.

        Raises SpanBeginNotIndexedError when no node starts at ``span.begin``
        and SpanEndNotIndexedError when none of those nodes ends at
        ``span.end``; both are SpanNotIndexedError.
        """
        ends = self._begins.get(span.begin)
        if ends is None:
            raise SpanBeginNotIndexedError(span.begin, span.end)
        labels = ends.get(span.end)
        if labels is None:
            raise SpanEndNotIndexedError(span.begin, span.end)
        return MappingProxyType(labels)

    def get(self, span: Span, default: Optional[Mapping[str, T]] = None) -> Optional[Mapping[str, T]]:
        labels = self._begins.get(span.begin, {}).get(span.end)
        if labels is None:
            return default
        return MappingProxyType(labels)

    def ends_at(self, begin: int) -> Tuple[int, ...]:
        """End offsets of every indexed span starting at ``begin``, ascending."""
        return tuple(sorted(self._begins.get(begin, ())))

    def spans(self) -> Iterator[Span]:
        """Indexed spans in (begin, end) order."""
        for begin in sorted(self._begins):
            for end in sorted(self._begins[begin]):
                yield Span(begin=begin, end=end)

    def nodes(self) -> Iterator[T]:
        for ends in self._begins.values():
            for labels in ends.values():
                yield from labels.values()

    def to_dict(self) -> Dict[int, Dict[int, Dict[str, T]]]:
        """Plain copy of the nested mapping."""
        return {
            begin: {end: dict(labels) for end, labels in ends.items()}
            for begin, ends in self._begins.items()
        }

    def __contains__(self, span: object) -> bool:
        begin = getattr(span, "begin", None)
        end = getattr(span, "end", None)
        return end in self._begins.get(begin, {})

    def __iter__(self) -> Iterator[Span]:
        return self.spans()

    def __len__(self) -> int:
        return self._size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpanIndex):
            return NotImplemented
        return self._begins == other._begins

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(spans={self._size}, begins={len(self._begins)})"
