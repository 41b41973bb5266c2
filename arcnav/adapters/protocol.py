"""Contract the navigation controller consumes from data adapters."""

from __future__ import annotations

from typing import Protocol

from ..node_cache import Node


class DataAdapters(Protocol):
    """One coroutine per tree level; each raises with a readable message on failure."""

    async def list_server_root(self) -> list[Node]: ...

    async def list_server_folder(self, url: str) -> list[Node]: ...

    async def list_service_children(self, url: str) -> list[Node]: ...

    async def list_layer_operations(self, url: str) -> list[Node]: ...

    async def list_portal_root(self) -> list[Node]: ...

    async def list_portal_users(self) -> list[Node]: ...

    async def list_portal_user_items(self, url: str) -> list[Node]: ...

    async def list_portal_groups(self) -> list[Node]: ...

    async def list_portal_group_items(self, url: str) -> list[Node]: ...

    async def list_portal_items(self) -> list[Node]: ...

    async def list_item_operations(self, url: str) -> list[Node]: ...


__all__ = ["DataAdapters"]
