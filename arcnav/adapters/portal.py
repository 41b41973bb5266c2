"""ArcGIS Portal listings: users, groups, items, and item operations."""

from __future__ import annotations

from typing import Any

from ..errors import AdapterConfigError
from ..node_cache import Node, NodeKind

ITEM_OPERATIONS: tuple[tuple[str, str], ...] = (
    ("data", "Get item data"),
    ("resources", "Get item resources"),
    ("relatedItems", "Get related items"),
    ("info", "Get item info"),
)


def portal_rest_root(host: str) -> str:
    """Normalize a portal host to its ``.../sharing/rest`` URL."""
    root = host.rstrip("/")
    if root.endswith("/sharing/rest"):
        return root
    return f"{root}/sharing/rest"


def item_node(rest_root: str, item: dict[str, Any]) -> Node:
    item_id = str(item.get("id") or "")
    url = f"{rest_root}/content/items/{item_id}"
    return Node(
        id=url,
        kind=NodeKind.ITEM,
        name=str(item.get("title") or item_id),
        url=url,
        meta={
            "id": item_id,
            "type": item.get("type"),
            "owner": item.get("owner"),
            "modified": item.get("modified"),
            "access": item.get("access"),
        },
        children_kind=NodeKind.ITEM_OPERATION,
    )


class PortalAdaptersMixin:
    """Portal-scope adapter coroutines; needs ``portal_host``, ``page_size`` and ``fetch_json``."""

    portal_host: str | None
    page_size: int

    def _portal_rest_root(self) -> str:
        if not self.portal_host:
            raise AdapterConfigError("Portal host is not set; pass --portal-url or save one in the config")
        return portal_rest_root(self.portal_host)

    def _search_params(self) -> dict[str, Any]:
        return {"q": "*", "num": self.page_size}

    async def list_portal_root(self) -> list[Node]:
        """Static collection headers; no request is made."""
        rest_root = self._portal_rest_root()
        collections = (
            (NodeKind.USERS, "Users", f"{rest_root}/community/users", NodeKind.USER),
            (NodeKind.GROUPS, "Groups", f"{rest_root}/community/groups", NodeKind.GROUP),
            (NodeKind.ITEMS, "Items", f"{rest_root}/content/items", NodeKind.ITEM),
        )
        return [
            Node(id=url, kind=kind, name=name, url=url, children_kind=children_kind)
            for kind, name, url, children_kind in collections
        ]

    async def list_portal_users(self) -> list[Node]:
        rest_root = self._portal_rest_root()
        data = await self.fetch_json(f"{rest_root}/community/users", self._search_params())
        nodes: list[Node] = []
        for user in data.get("results") or []:
            if not isinstance(user, dict) or not user.get("username"):
                continue
            username = str(user["username"])
            url = f"{rest_root}/content/users/{username}"
            nodes.append(
                Node(
                    id=url,
                    kind=NodeKind.USER,
                    name=username,
                    url=url,
                    meta={
                        "fullName": user.get("fullName"),
                        "email": user.get("email"),
                        "role": user.get("role"),
                    },
                    children_kind=NodeKind.ITEM,
                )
            )
        return nodes

    async def list_portal_user_items(self, url: str) -> list[Node]:
        rest_root = self._portal_rest_root()
        data = await self.fetch_json(url)
        return [item_node(rest_root, item) for item in data.get("items") or [] if isinstance(item, dict)]

    async def list_portal_groups(self) -> list[Node]:
        rest_root = self._portal_rest_root()
        data = await self.fetch_json(f"{rest_root}/community/groups", self._search_params())
        nodes: list[Node] = []
        for group in data.get("results") or []:
            if not isinstance(group, dict) or not group.get("id"):
                continue
            group_id = str(group["id"])
            url = f"{rest_root}/community/groups/{group_id}"
            nodes.append(
                Node(
                    id=url,
                    kind=NodeKind.GROUP,
                    name=str(group.get("title") or group_id),
                    url=url,
                    meta={
                        "id": group_id,
                        "owner": group.get("owner"),
                        "access": group.get("access"),
                        "description": group.get("description"),
                    },
                    children_kind=NodeKind.ITEM,
                )
            )
        return nodes

    async def list_portal_group_items(self, url: str) -> list[Node]:
        rest_root = self._portal_rest_root()
        group_id = url.rstrip("/").rsplit("/", 1)[-1]
        data = await self.fetch_json(f"{rest_root}/content/groups/{group_id}")
        return [item_node(rest_root, item) for item in data.get("items") or [] if isinstance(item, dict)]

    async def list_portal_items(self) -> list[Node]:
        rest_root = self._portal_rest_root()
        data = await self.fetch_json(f"{rest_root}/search", self._search_params())
        return [item_node(rest_root, item) for item in data.get("results") or [] if isinstance(item, dict)]

    async def list_item_operations(self, url: str) -> list[Node]:
        return [
            Node(
                id=f"{url}/{name}",
                kind=NodeKind.ITEM_OPERATION,
                name=name,
                url=f"{url}/{name}",
                meta={"description": description},
            )
            for name, description in ITEM_OPERATIONS
        ]
