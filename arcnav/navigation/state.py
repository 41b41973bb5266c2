"""Column and aggregate navigation state."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..node_cache.types import Scope

MIN_COLUMNS = 2


@dataclass
class ColumnState:
    """One Miller column: the children of ``parent_id`` plus local view state."""

    parent_id: str | None = None
    nodes: list[str] = field(default_factory=list)
    selected_index: int = 0
    filter: str = ""
    loading: bool = False
    error: str | None = None
    generation: int = 0


def initial_columns() -> list[ColumnState]:
    return [ColumnState() for _ in range(MIN_COLUMNS)]


@dataclass
class NavigationState:
    scope: Scope = Scope.SERVER
    active_column: int = 0
    columns: list[ColumnState] = field(default_factory=initial_columns)
    path: list[str] = field(default_factory=list)
    inspector_visible: bool = False


__all__ = [
    "MIN_COLUMNS",
    "ColumnState",
    "NavigationState",
    "initial_columns",
]
