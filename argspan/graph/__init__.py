"""
Argspan Graph Package

Span annotation graphs: labelled text spans with at most one outgoing
relation each, addressable by id, by span coordinates and by relation.

Key modules:
- ordered_set: ReverseLookupOrderedSet, the id registry
- span_index: SpanIndex, the begin/end/label coordinate index
- core: SpanAnnotationGraph
- validation: relation table shape and acyclicity checks
- errors: exception hierarchy
"""

from .errors import (
    GraphError,
    IndexOutOfRangeError,
    NodeNotInGraphError,
    SpanNotIndexedError,
    SpanBeginNotIndexedError,
    SpanEndNotIndexedError,
    DuplicateValueError,
    RelationTableSizeMismatchError,
    InvalidRelationTargetError,
    SpanIndexMismatchError,
    RelationCycleError
)

from .ordered_set import ReverseLookupOrderedSet, NOT_FOUND
from .span_index import SpanIndex
from .validation import NO_RELATION, validate_relation_table, find_cycle, validate_acyclic
from .core import SpanAnnotationGraph

__all__ = [
    # Errors
    "GraphError",
    "IndexOutOfRangeError",
    "NodeNotInGraphError",
    "SpanNotIndexedError",
    "SpanBeginNotIndexedError",
    "SpanEndNotIndexedError",
    "DuplicateValueError",
    "RelationTableSizeMismatchError",
    "InvalidRelationTargetError",
    "SpanIndexMismatchError",
    "RelationCycleError",

    # Structures
    "ReverseLookupOrderedSet",
    "NOT_FOUND",
    "SpanIndex",
    "SpanAnnotationGraph",

    # Validation
    "NO_RELATION",
    "validate_relation_table",
    "find_cycle",
    "validate_acyclic"
]
