"""Node datatypes shared by the cache, adapters, and navigation modules."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class Scope(str, Enum):
    """Top-level namespace selecting the root adapter and kind taxonomy."""

    SERVER = "server"
    PORTAL = "portal"


class NodeKind(str, Enum):
    """Closed set of resource kinds the browser knows how to list."""

    FOLDER = "folder"
    SERVICE = "service"
    LAYER = "layer"
    TABLE = "table"
    OPERATION = "operation"
    USERS = "users"
    USER = "user"
    GROUPS = "groups"
    GROUP = "group"
    ITEMS = "items"
    ITEM = "item"
    ITEM_OPERATION = "item-operation"

    @property
    def scope(self) -> Scope:
        return Scope.SERVER if self in _SERVER_KINDS else Scope.PORTAL


_SERVER_KINDS = frozenset(
    {NodeKind.FOLDER, NodeKind.SERVICE, NodeKind.LAYER, NodeKind.TABLE, NodeKind.OPERATION}
)


@dataclass(frozen=True)
class NodeError:
    """Failure recorded on a node by its last children load."""

    message: str
    code: int | None = None


@dataclass(frozen=True)
class Node:
    """Cached descriptor of one remote resource.

    ``id`` is the canonical REST URL. ``children`` stays ``None`` until a
    children load succeeds.
    """

    id: str
    kind: NodeKind
    name: str
    url: str
    meta: Mapping[str, object] = field(default_factory=dict)
    children_kind: NodeKind | None = None
    children: tuple[str, ...] | None = None
    children_loaded: bool = False
    children_count: int | None = None
    error: NodeError | None = None


__all__ = [
    "Scope",
    "NodeKind",
    "NodeError",
    "Node",
]
