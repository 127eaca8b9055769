"""
errors.py

Exceptions raised by the span annotation graph. Each one also derives from
the builtin exception a caller would naturally catch (IndexError, KeyError,
ValueError), so existing ``except`` clauses keep working.

``SpanNotIndexedError`` and a missing relation are ordinary outcomes for
callers probing speculative spans; the rest signal a defect in the caller's
input.
"""
from typing import Any, List, Optional


class GraphError(Exception):
    """Base class for all span annotation graph errors."""


class IndexOutOfRangeError(GraphError, IndexError):
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Id {index} is out of range for {size} registered values")


class NodeNotInGraphError(GraphError, KeyError):
    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"Not found in relation table: {node!r}")

    def __str__(self) -> str:
        return self.args[0]


class SpanNotIndexedError(GraphError, KeyError):
    """No node covers the requested span; raised for either missing coordinate."""

    def __init__(self, begin: int, end: int, message: Optional[str] = None):
        self.begin = begin
        self.end = end
        super().__init__(message or f"No annotation indexed at span [{begin}, {end})")

    def __str__(self) -> str:
        return self.args[0]


class SpanBeginNotIndexedError(SpanNotIndexedError):
    def __init__(self, begin: int, end: int):
        super().__init__(begin, end, f"Span begin index {begin} not found in span index.")


class SpanEndNotIndexedError(SpanNotIndexedError):
    def __init__(self, begin: int, end: int):
        super().__init__(begin, end, f"Span end index {end} not found in span index for begin {begin}.")


class DuplicateValueError(GraphError, ValueError):
    def __init__(self, value: Any, first_id: int, duplicate_id: int):
        self.value = value
        self.first_id = first_id
        self.duplicate_id = duplicate_id
        super().__init__(
            f"Value at position {duplicate_id} duplicates the value at position {first_id}: {value!r}"
        )


class RelationTableSizeMismatchError(GraphError, ValueError):
    def __init__(self, relation_count: int, node_count: int):
        self.relation_count = relation_count
        self.node_count = node_count
        super().__init__(
            f"Relation table has {relation_count} entries but the graph has {node_count} nodes"
        )


class InvalidRelationTargetError(GraphError, ValueError):
    def __init__(self, source_id: int, target_id: int, node_count: int):
        self.source_id = source_id
        self.target_id = target_id
        self.node_count = node_count
        super().__init__(
            f"Relation from node {source_id} points at {target_id}, "
            f"which is neither a node id in [0, {node_count}) nor the no-relation sentinel"
        )


class SpanIndexMismatchError(GraphError, ValueError):
    """A supplied span index disagrees with the one derived from the node sequence."""


class RelationCycleError(GraphError, ValueError):
    def __init__(self, cycle: List[int]):
        self.cycle = cycle
        path = " -> ".join(str(i) for i in cycle + cycle[:1])
        super().__init__(f"Relation table contains a cycle: {path}")
