"""ArcGIS Server listings: folders, services, layers/tables, layer operations."""

from __future__ import annotations

from typing import Any

from ..errors import AdapterConfigError
from ..node_cache import Node, NodeKind

LAYER_OPERATIONS: tuple[tuple[str, str], ...] = (
    ("query", "Query features"),
    ("queryRelatedRecords", "Query related records"),
    ("statistics", "Calculate statistics"),
    ("metadata", "Get metadata"),
)

_LAYERED_SERVICE_TYPES = frozenset({"MapServer", "FeatureServer"})


def server_rest_root(host: str) -> str:
    """Normalize a server host to its ``.../rest/services`` directory URL."""
    root = host.rstrip("/")
    if root.endswith("/rest/services"):
        return root
    return f"{root}/rest/services"


def service_node(rest_root: str, service: dict[str, Any]) -> Node:
    """Build a service node from one ``services`` entry of a directory listing.

    Folder listings report names as ``Folder/Service``; the label keeps only
    the last segment.
    """
    full_name = str(service.get("name") or "Unknown")
    service_type = str(service.get("type") or "MapServer")
    url = f"{rest_root}/{full_name}/{service_type}"
    return Node(
        id=url,
        kind=NodeKind.SERVICE,
        name=full_name.rsplit("/", 1)[-1],
        url=url,
        meta={"type": service_type, "folder": full_name.rpartition("/")[0] or None},
        children_kind=NodeKind.LAYER if service_type in _LAYERED_SERVICE_TYPES else NodeKind.TABLE,
    )


class ServerAdaptersMixin:
    """Server-scope adapter coroutines; needs ``server_host`` and ``fetch_json``."""

    server_host: str | None

    def _server_rest_root(self) -> str:
        if not self.server_host:
            raise AdapterConfigError("Server host is not set; pass --server-url or save one in the config")
        return server_rest_root(self.server_host)

    async def list_server_root(self) -> list[Node]:
        rest_root = self._server_rest_root()
        data = await self.fetch_json(rest_root)
        nodes: list[Node] = []
        for folder in data.get("folders") or []:
            url = f"{rest_root}/{folder}"
            nodes.append(
                Node(
                    id=url,
                    kind=NodeKind.FOLDER,
                    name=str(folder),
                    url=url,
                    children_kind=NodeKind.SERVICE,
                )
            )
        for service in data.get("services") or []:
            if isinstance(service, dict):
                nodes.append(service_node(rest_root, service))
        return nodes

    async def list_server_folder(self, url: str) -> list[Node]:
        rest_root = self._server_rest_root()
        data = await self.fetch_json(url)
        return [service_node(rest_root, service) for service in data.get("services") or [] if isinstance(service, dict)]

    async def list_service_children(self, url: str) -> list[Node]:
        """List layers first, then tables, each addressed as ``{service}/{id}``."""
        data = await self.fetch_json(url)
        nodes: list[Node] = []
        for key, kind, label in (("layers", NodeKind.LAYER, "Layer"), ("tables", NodeKind.TABLE, "Table")):
            for entry in data.get(key) or []:
                if not isinstance(entry, dict):
                    continue
                entry_id = entry.get("id")
                child_url = f"{url}/{entry_id}"
                nodes.append(
                    Node(
                        id=child_url,
                        kind=kind,
                        name=str(entry.get("name") or f"{label} {entry_id}"),
                        url=child_url,
                        meta={
                            "id": entry_id,
                            "type": entry.get("type"),
                            "geometryType": entry.get("geometryType"),
                        },
                        children_kind=NodeKind.OPERATION,
                    )
                )
        return nodes

    async def list_layer_operations(self, url: str) -> list[Node]:
        return [
            Node(
                id=f"{url}/{name}",
                kind=NodeKind.OPERATION,
                name=name,
                url=f"{url}/{name}",
                meta={"description": description},
            )
            for name, description in LAYER_OPERATIONS
        ]
