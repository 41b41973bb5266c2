"""Miller-column navigation: state, filtering, kind dispatch, and controller.

``NavigationService`` is the only stateful piece; the rest are pure helpers
the controller and renderers share.
"""

from __future__ import annotations

from .dispatch import CHILD_LOADERS, ROOT_LOADERS, is_leaf_kind, load_children, load_root
from .filtering import clamp_index, filtered_nodes, node_matches_filter, selected_node
from .service import NavigationService
from .state import MIN_COLUMNS, ColumnState, NavigationState

__all__ = [
    "CHILD_LOADERS",
    "ROOT_LOADERS",
    "MIN_COLUMNS",
    "ColumnState",
    "NavigationService",
    "NavigationState",
    "clamp_index",
    "filtered_nodes",
    "is_leaf_kind",
    "load_children",
    "load_root",
    "node_matches_filter",
    "selected_node",
]
