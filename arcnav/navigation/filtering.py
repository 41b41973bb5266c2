"""Derived per-column views: filtering and selection resolution."""

from __future__ import annotations

from ..node_cache import Node, NodeCache
from .state import ColumnState


def node_matches_filter(node: Node, query_folded: str) -> bool:
    """Case-insensitive substring match against name or kind tag."""
    return query_folded in node.name.casefold() or query_folded in node.kind.value.casefold()


def filtered_nodes(column: ColumnState, cache: NodeCache) -> list[Node]:
    """Return the nodes a column currently shows, in original order.

    Ids that no longer resolve in ``cache`` are dropped. The result is never
    written back into ``column.nodes``.
    """
    resolved: list[Node] = []
    for node_id in column.nodes:
        node = cache.get_node(node_id)
        if node is not None:
            resolved.append(node)
    if not column.filter:
        return resolved
    query_folded = column.filter.casefold()
    return [node for node in resolved if node_matches_filter(node, query_folded)]


def clamp_index(index: int, count: int) -> int:
    """Clamp into ``[0, count - 1]``; empty views pin to 0."""
    if count <= 0:
        return 0
    return max(0, min(count - 1, index))


def selected_node(column: ColumnState, cache: NodeCache) -> Node | None:
    """Resolve the column's selection against its filtered view."""
    visible = filtered_nodes(column, cache)
    if not visible:
        return None
    return visible[clamp_index(column.selected_index, len(visible))]


__all__ = [
    "clamp_index",
    "filtered_nodes",
    "node_matches_filter",
    "selected_node",
]
