"""Data adapters: one coroutine per tree level, server and portal scopes.

``DataAdapters`` is the contract the navigation controller consumes;
``ArcgisAdapters`` implements it against ArcGIS REST endpoints with httpx.
"""

from __future__ import annotations

from .client import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT_SECONDS, ArcgisAdapters
from .portal import ITEM_OPERATIONS, portal_rest_root
from .protocol import DataAdapters
from .server import LAYER_OPERATIONS, server_rest_root

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ITEM_OPERATIONS",
    "LAYER_OPERATIONS",
    "ArcgisAdapters",
    "DataAdapters",
    "portal_rest_root",
    "server_rest_root",
]
