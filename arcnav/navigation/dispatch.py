"""Kind-to-loader dispatch for children and scope-to-loader dispatch for roots.

Both tables are closed: every ``NodeKind`` and ``Scope`` member must have an
entry, checked at import time. Leaf kinds map to ``None`` explicitly.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from ..adapters.protocol import DataAdapters
from ..node_cache import Node, NodeKind, Scope

ChildLoader = Callable[[DataAdapters, Node], Awaitable[list[Node]]]
RootLoader = Callable[[DataAdapters], Awaitable[list[Node]]]

CHILD_LOADERS: dict[NodeKind, ChildLoader | None] = {
    NodeKind.FOLDER: lambda adapters, node: adapters.list_server_folder(node.url),
    NodeKind.SERVICE: lambda adapters, node: adapters.list_service_children(node.url),
    NodeKind.LAYER: lambda adapters, node: adapters.list_layer_operations(node.url),
    NodeKind.TABLE: lambda adapters, node: adapters.list_layer_operations(node.url),
    NodeKind.OPERATION: None,
    NodeKind.USERS: lambda adapters, node: adapters.list_portal_users(),
    NodeKind.USER: lambda adapters, node: adapters.list_portal_user_items(node.url),
    NodeKind.GROUPS: lambda adapters, node: adapters.list_portal_groups(),
    NodeKind.GROUP: lambda adapters, node: adapters.list_portal_group_items(node.url),
    NodeKind.ITEMS: lambda adapters, node: adapters.list_portal_items(),
    NodeKind.ITEM: lambda adapters, node: adapters.list_item_operations(node.url),
    NodeKind.ITEM_OPERATION: None,
}

ROOT_LOADERS: dict[Scope, RootLoader] = {
    Scope.SERVER: lambda adapters: adapters.list_server_root(),
    Scope.PORTAL: lambda adapters: adapters.list_portal_root(),
}


def _check_exhaustive() -> None:
    missing_kinds = set(NodeKind) - set(CHILD_LOADERS)
    if missing_kinds:
        names = ", ".join(sorted(kind.value for kind in missing_kinds))
        raise RuntimeError(f"no child loader entry for kind(s): {names}")
    missing_scopes = set(Scope) - set(ROOT_LOADERS)
    if missing_scopes:
        names = ", ".join(sorted(scope.value for scope in missing_scopes))
        raise RuntimeError(f"no root loader entry for scope(s): {names}")


_check_exhaustive()


def is_leaf_kind(kind: NodeKind) -> bool:
    return CHILD_LOADERS[kind] is None


async def load_children(adapters: DataAdapters, node: Node) -> list[Node]:
    """Fetch one level under ``node``; leaf kinds resolve to an empty list."""
    loader = CHILD_LOADERS[node.kind]
    if loader is None:
        return []
    return await loader(adapters, node)


async def load_root(adapters: DataAdapters, scope: Scope) -> list[Node]:
    return await ROOT_LOADERS[scope](adapters)


__all__ = [
    "CHILD_LOADERS",
    "ROOT_LOADERS",
    "ChildLoader",
    "RootLoader",
    "is_leaf_kind",
    "load_children",
    "load_root",
]
