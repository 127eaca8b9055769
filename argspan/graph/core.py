"""
core.py

SpanAnnotationGraph: labelled text spans linked by directed relations in
which every node points at no more than one other node.

Three access paths are supported, each in (near) constant time:
- by id, through a ReverseLookupOrderedSet of nodes
- by coordinates, through a SpanIndex derived from the nodes
- by relation, through a flat table of target ids indexed by source id

The graph is logically immutable once built. It is documented as a DAG but
does not verify it; see ``argspan.graph.validation.validate_acyclic``.
"""
import json
import logging
from typing import Any, Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from argspan.graph.errors import NodeNotInGraphError, RelationCycleError, SpanIndexMismatchError
from argspan.graph.ordered_set import NOT_FOUND, ReverseLookupOrderedSet
from argspan.graph.span_index import SpanIndex
from argspan.graph.validation import NO_RELATION, validate_relation_table
from argspan.schema.document import GraphDocument
from argspan.schema.label import BaseSpanTextLabel, SpanTextLabel
from argspan.schema.span import Span

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseSpanTextLabel)


class SpanAnnotationGraph(Generic[T]):
    """
    Args:
        nodes: Span labels in id order; duplicates (by equality) are rejected
        relations: Target id per node, NO_RELATION (-1) for none
        on_collision: Span index policy for nodes sharing span and label

    Raises:
        DuplicateValueError: If two nodes are equal
        RelationTableSizeMismatchError: If len(relations) != len(nodes)
        InvalidRelationTargetError: If an entry is not a node id or -1

    The graph copies both containers. The label objects themselves are not
    copied: a mutable label changed after construction breaks id and span
    lookups, so freeze labels before sharing a graph between threads.
    """

    def __init__(self, nodes: Iterable[T], relations: Sequence[int], on_collision: str = "first"):
        if isinstance(nodes, ReverseLookupOrderedSet):
            registry = nodes.copy()
        else:
            registry = ReverseLookupOrderedSet(nodes)
        relation_table = tuple(relations)
        validate_relation_table(relation_table, len(registry))

        self._nodes: ReverseLookupOrderedSet[T] = registry
        self._relations: Tuple[int, ...] = relation_table
        self._span_index: SpanIndex[T] = SpanIndex(registry, on_collision=on_collision)
        logger.debug(
            f"Built span annotation graph: {len(registry)} nodes, "
            f"{self.relation_count} relations, {len(self._span_index)} distinct spans"
        )

    # ------------------------------------------------------------------
    # Alternate constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_parts(
        cls,
        nodes: Iterable[T],
        span_index: SpanIndex[T],
        relations: Sequence[int],
        on_collision: str = "first",
    ) -> "SpanAnnotationGraph[T]":
        """Build from nodes and a pre-built span index, which must match the nodes."""
        graph = cls(nodes, relations, on_collision=on_collision)
        if graph._span_index != span_index:
            raise SpanIndexMismatchError(
                f"Supplied span index ({len(span_index)} spans) does not match "
                f"the index derived from {len(graph)} nodes ({len(graph._span_index)} spans)"
            )
        return graph

    @classmethod
    def from_document(
        cls,
        document: GraphDocument,
        label_type: Optional[Type[T]] = None,
        on_collision: str = "first",
    ) -> "SpanAnnotationGraph[T]":
        nodes = document.span_annotations
        if label_type is not None:
            nodes = [
                node if type(node) is label_type else label_type.model_validate(node.model_dump())
                for node in nodes
            ]
        return cls(nodes, document.relations, on_collision=on_collision)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        label_type: Type[T] = SpanTextLabel,
        on_collision: str = "first",
    ) -> "SpanAnnotationGraph[T]":
        """
        Rebuild a graph from its interchange form.

        Raises:
            pydantic.ValidationError: If the data does not match GraphDocument
            RelationTableSizeMismatchError: If the two arrays differ in length
        """
        document = GraphDocument[label_type].model_validate(data)
        return cls.from_document(document, on_collision=on_collision)

    @classmethod
    def from_json(
        cls,
        text: Union[str, bytes],
        label_type: Type[T] = SpanTextLabel,
        on_collision: str = "first",
    ) -> "SpanAnnotationGraph[T]":
        document = GraphDocument[label_type].model_validate_json(text)
        return cls.from_document(document, on_collision=on_collision)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, node_id: int) -> T:
        """Raises IndexOutOfRangeError for ids outside [0, len(graph))."""
        return self._nodes.get(node_id)

    def id_of(self, node: T) -> int:
        """Id of ``node``, or -1 when it is not in the graph."""
        return self._nodes.id_of(node)

    def labels_at(self, span: Span) -> Mapping[str, T]:
        """Nodes whose span equals ``span``, keyed by label; raises SpanNotIndexedError otherwise."""
        return self._span_index.lookup(span)

    def relation_target_id(self, node_id: int) -> int:
        self._nodes.get(node_id)
        return self._relations[node_id]

    def relation_target_of(self, node: T) -> Optional[T]:
        """
        Follow the outgoing relation of ``node``.

        Returns None when the node has no relation. Raises NodeNotInGraphError
        when the node was never registered, which is a caller error rather than
        an absent relation.
        """
        source_id = self._nodes.id_of(node)
        if source_id == NOT_FOUND:
            raise NodeNotInGraphError(node)
        target_id = self._relations[source_id]
        return None if target_id == NO_RELATION else self._nodes.get(target_id)

    def relation_chain(self, node: T) -> Iterator[T]:
        """
        Yield the nodes reached by repeatedly following relations from ``node``
        (excluding ``node`` itself). Raises RelationCycleError if the walk
        revisits a node.
        """
        node_id = self._nodes.id_of(node)
        if node_id == NOT_FOUND:
            raise NodeNotInGraphError(node)
        seen = [node_id]
        target_id = self._relations[node_id]
        while target_id != NO_RELATION:
            if target_id in seen:
                raise RelationCycleError(seen[seen.index(target_id):])
            seen.append(target_id)
            yield self._nodes.get(target_id)
            target_id = self._relations[target_id]

    def sources_of(self, node: T) -> List[T]:
        """Nodes whose relation points at ``node``, in id order."""
        target_id = self._nodes.id_of(node)
        if target_id == NOT_FOUND:
            raise NodeNotInGraphError(node)
        return [self._nodes.get(i) for i, t in enumerate(self._relations) if t == target_id]

    def roots(self) -> List[T]:
        """Nodes without an outgoing relation."""
        return [self._nodes.get(i) for i, t in enumerate(self._relations) if t == NO_RELATION]

    def edges(self) -> Iterator[Tuple[T, T]]:
        for source_id, target_id in enumerate(self._relations):
            if target_id != NO_RELATION:
                yield self._nodes.get(source_id), self._nodes.get(target_id)

    @property
    def nodes(self) -> Tuple[T, ...]:
        return tuple(self._nodes)

    @property
    def relations(self) -> Tuple[int, ...]:
        return self._relations

    @property
    def span_index(self) -> SpanIndex[T]:
        return self._span_index

    @property
    def relation_count(self) -> int:
        return sum(1 for t in self._relations if t != NO_RELATION)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[T]:
        return iter(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_document(self, doc_id: Optional[str] = None) -> GraphDocument:
        return GraphDocument(span_annotations=list(self._nodes), relations=list(self._relations), doc_id=doc_id)

    def to_dict(self, doc_id: Optional[str] = None) -> Dict[str, Any]:
        # attrs stays as null on each label; only an absent doc_id is dropped
        exclude = {"doc_id"} if doc_id is None else None
        return self.to_document(doc_id).model_dump(by_alias=True, exclude=exclude)

    def to_json(self, indent: Optional[int] = None, ensure_ascii: bool = False, doc_id: Optional[str] = None) -> str:
        return json.dumps(self.to_dict(doc_id=doc_id), indent=indent, ensure_ascii=ensure_ascii)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, SpanAnnotationGraph):
            return NotImplemented
        return self._relations == other._relations and self._nodes == other._nodes

    def __hash__(self) -> int:
        return hash((self._relations, tuple(self._nodes)))

    def __repr__(self) -> str:
        return f"SpanAnnotationGraph(nodes={list(self._nodes)!r}, relations={list(self._relations)!r})"
