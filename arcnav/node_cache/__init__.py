"""Node descriptors and the flat in-memory node cache.

This package contains non-UI primitives:
- resource kind and scope enumerations
- the frozen ``Node`` descriptor
- ``NodeCache``, a keyed arena plus parent-link index
"""

from __future__ import annotations

from .cache import NodeCache
from .types import Node, NodeError, NodeKind, Scope

__all__ = [
    "Node",
    "NodeCache",
    "NodeError",
    "NodeKind",
    "Scope",
]
