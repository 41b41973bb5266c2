"""Flat keyed node arena with parent links.

Nodes live in one dict keyed by id; structure is kept as two adjacency
records (children ids on each node, ``_parent_of`` index map) that the upsert
routine keeps consistent. Nothing here knows about columns or adapters.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from .types import Node, NodeError

logger = logging.getLogger(__name__)

_UNSET: object = object()


class NodeCache:
    """In-memory store of fetched nodes for one process lifetime."""

    def __init__(self) -> None:
        self._by_id: dict[str, Node] = {}
        self._parent_of: dict[str, str | None] = {}

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def upsert_nodes(self, nodes: Iterable[Node], parent_id: str | None | object = _UNSET) -> None:
        """Merge ``nodes`` by id, last write wins.

        Descriptor fields always come from the incoming node. A bare
        descriptor (no children, not loaded) keeps the children bookkeeping
        already cached for that id, so re-listing a level does not drop
        deeper levels. When ``parent_id`` is given (``None`` included,
        meaning root) it is recorded as the parent of every merged node.
        """
        count = 0
        for node in nodes:
            existing = self._by_id.get(node.id)
            if existing is not None and node.children is None and not node.children_loaded:
                node = replace(
                    node,
                    children=existing.children,
                    children_loaded=existing.children_loaded,
                    children_count=existing.children_count,
                    error=node.error if node.error is not None else existing.error,
                )
            self._by_id[node.id] = node
            if parent_id is not _UNSET:
                self._parent_of[node.id] = parent_id  # type: ignore[assignment]
            count += 1
        logger.debug("upserted %d node(s) under %r", count, None if parent_id is _UNSET else parent_id)

    def get_node(self, node_id: str) -> Node | None:
        return self._by_id.get(node_id)

    def get_parent(self, node_id: str) -> str | None:
        """Return recorded parent id, or ``None`` for roots and unknown ids."""
        return self._parent_of.get(node_id)

    def has_parent_record(self, node_id: str) -> bool:
        return node_id in self._parent_of

    def set_parent(self, child_id: str, parent_id: str | None) -> None:
        self._parent_of[child_id] = parent_id

    def invalidate(self, node_id: str) -> None:
        """Clear children-related fields on one node; descendants are untouched."""
        node = self._by_id.get(node_id)
        if node is None:
            return
        self._by_id[node_id] = replace(
            node,
            children_loaded=False,
            children=None,
            children_count=None,
            error=None,
        )

    def mark_children_loaded(self, node_id: str, child_ids: Iterable[str]) -> Node | None:
        """Record a successful children load on ``node_id`` and return the new node."""
        node = self._by_id.get(node_id)
        if node is None:
            return None
        children = tuple(child_ids)
        updated = replace(
            node,
            children=children,
            children_count=len(children),
            children_loaded=True,
            error=None,
        )
        self._by_id[node_id] = updated
        return updated

    def record_error(self, node_id: str, message: str, code: int | None = None) -> None:
        """Attach a load failure to a node without touching its loaded flag."""
        node = self._by_id.get(node_id)
        if node is None:
            return
        self._by_id[node_id] = replace(node, error=NodeError(message=message, code=code))

    def children_of(self, node_id: str) -> list[Node] | None:
        """Return cached children in order, or ``None`` when not loaded.

        Ids that no longer resolve are dropped.
        """
        node = self._by_id.get(node_id)
        if node is None or node.children is None:
            return None
        out: list[Node] = []
        for child_id in node.children:
            child = self._by_id.get(child_id)
            if child is not None:
                out.append(child)
        return out

    def ancestry(self, node_id: str) -> list[str] | None:
        """Return ids from root to ``node_id`` using cached parent links.

        Returns ``None`` when any id on the way is not cached, has no parent
        record, or the links form a cycle.
        """
        chain: list[str] = []
        seen: set[str] = set()
        current: str | None = node_id
        while current is not None:
            if current in seen or current not in self._by_id or current not in self._parent_of:
                return None
            seen.add(current)
            chain.append(current)
            current = self._parent_of[current]
        chain.reverse()
        return chain

    def clear(self) -> None:
        self._by_id.clear()
        self._parent_of.clear()


__all__ = ["NodeCache"]
