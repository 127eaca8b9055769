#!/usr/bin/env python3
"""
validation.py

Relation table checks for span annotation graphs.

A relation table is a functional graph: entry ``i`` holds the id of the node
that node ``i`` points at, or NO_RELATION. Shape checks always run when a
graph is built; the acyclicity check is opt-in because graphs are allowed to
carry whatever table the caller supplies.
"""
from typing import List, Optional, Sequence

from argspan.graph.errors import (
    InvalidRelationTargetError,
    RelationCycleError,
    RelationTableSizeMismatchError,
)

NO_RELATION = -1


def validate_relation_table(relations: Sequence[int], node_count: int) -> None:
    """
    Validate the shape of a relation table.

    Args:
        relations: Relation target id per node
        node_count: Number of nodes in the graph

    Raises:
        RelationTableSizeMismatchError: If the table length differs from node_count
        InvalidRelationTargetError: If an entry is neither a node id nor NO_RELATION
    """
    if len(relations) != node_count:
        raise RelationTableSizeMismatchError(len(relations), node_count)

    for source_id, target_id in enumerate(relations):
        if target_id == NO_RELATION:
            continue
        if not isinstance(target_id, int) or isinstance(target_id, bool):
            raise InvalidRelationTargetError(source_id, target_id, node_count)
        if target_id < 0 or target_id >= node_count:
            raise InvalidRelationTargetError(source_id, target_id, node_count)


def find_cycle(relations: Sequence[int]) -> Optional[List[int]]:
    """
    Return the node ids of one cycle in the relation table, or None.

    Every node has at most one outgoing edge, so each walk either reaches
    NO_RELATION, reaches a node already known to be acyclic, or closes a
    cycle on the current path. Runs in O(N).
    """
    unvisited, on_path, done = 0, 1, 2
    state = [unvisited] * len(relations)

    for start in range(len(relations)):
        if state[start] != unvisited:
            continue
        path = []
        node = start
        while node != NO_RELATION and state[node] == unvisited:
            state[node] = on_path
            path.append(node)
            node = relations[node]
        if node != NO_RELATION and state[node] == on_path:
            return path[path.index(node):]
        for visited in path:
            state[visited] = done
    return None


def validate_acyclic(relations: Sequence[int]) -> None:
    """
    Raises:
        RelationCycleError: If following relations from some node returns to it
    """
    cycle = find_cycle(relations)
    if cycle is not None:
        raise RelationCycleError(cycle)
