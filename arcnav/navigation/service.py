"""Miller-column navigation controller.

``NavigationService`` owns the column/path state machine and orchestrates
loads through the data adapters and the node cache. Local operations are
synchronous. Operations that may fetch are coroutines that finish every state
change before their first ``await``, so an event loop can schedule them as
tasks without blocking input handling.

Every load into a column stamps that column with a fresh generation number.
A response is applied only if the same column object is still in place and
still carries that stamp; anything else is discarded as stale.
"""

from __future__ import annotations

import itertools
import logging

from ..adapters.protocol import DataAdapters
from ..errors import AdapterConfigError
from ..node_cache import Node, NodeCache, Scope
from ..notices import NoticeBoard, NoticeLevel
from . import dispatch
from .filtering import clamp_index, filtered_nodes, selected_node
from .state import MIN_COLUMNS, ColumnState, NavigationState, initial_columns

logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    text = str(exc).strip()
    return text if text else exc.__class__.__name__


class NavigationService:
    """State machine over ``NavigationState`` for one browser session."""

    def __init__(
        self,
        cache: NodeCache,
        adapters: DataAdapters,
        notices: NoticeBoard,
        scope: Scope = Scope.SERVER,
    ) -> None:
        self.cache = cache
        self.adapters = adapters
        self.notices = notices
        self._state = NavigationState(scope=scope)
        self._generations = itertools.count(1)

    # -- read side -------------------------------------------------------

    @property
    def state(self) -> NavigationState:
        """Aggregate state for renderers; treat as read-only."""
        return self._state

    @property
    def loading(self) -> bool:
        return any(column.loading for column in self._state.columns)

    def active(self) -> ColumnState:
        return self._state.columns[self._state.active_column]

    def _column_at(self, index: int | None) -> ColumnState | None:
        if index is None:
            index = self._state.active_column
        if 0 <= index < len(self._state.columns):
            return self._state.columns[index]
        return None

    def filtered_nodes(self, index: int | None = None) -> list[Node]:
        column = self._column_at(index)
        if column is None:
            return []
        return filtered_nodes(column, self.cache)

    def selected_node(self, index: int | None = None) -> Node | None:
        column = self._column_at(index)
        if column is None:
            return None
        return selected_node(column, self.cache)

    def breadcrumb(self) -> list[str]:
        """Names along ``path``; unresolvable ids show as their raw id."""
        out: list[str] = []
        for node_id in self._state.path:
            node = self.cache.get_node(node_id)
            out.append(node.name if node is not None else node_id)
        return out

    # -- local operations ------------------------------------------------

    def _reset(self, scope: Scope) -> None:
        self._state.scope = scope
        self._state.columns = initial_columns()
        self._state.path = []
        self._state.active_column = 0

    def focus_column(self, index: int) -> None:
        if 0 <= index < len(self._state.columns):
            self._state.active_column = index

    def focus_next_column(self) -> None:
        count = len(self._state.columns)
        self.focus_column((self._state.active_column + 1) % count)

    def focus_previous_column(self) -> None:
        count = len(self._state.columns)
        self.focus_column((self._state.active_column - 1 + count) % count)

    def up(self) -> None:
        """Step one column left; drop the rightmost column beyond the minimum."""
        state = self._state
        if state.active_column == 0:
            return
        state.active_column -= 1
        state.path = state.path[:-1]
        if len(state.columns) > MIN_COLUMNS:
            state.columns.pop()
        else:
            state.columns[-1] = ColumnState()

    def set_filter(self, value: str) -> None:
        column = self.active()
        column.filter = value
        column.selected_index = 0

    def clear_filter(self) -> None:
        self.set_filter("")

    def toggle_inspector(self) -> None:
        self._state.inspector_visible = not self._state.inspector_visible

    def select_node(self, node_id: str) -> bool:
        """Select ``node_id`` in the active column's filtered view if present."""
        column = self.active()
        for idx, node in enumerate(filtered_nodes(column, self.cache)):
            if node.id == node_id:
                column.selected_index = idx
                return True
        return False

    # -- fetching operations ---------------------------------------------

    async def set_scope(self, scope: Scope | str) -> None:
        self._reset(Scope(scope))
        await self.load_root()

    async def move_selection(self, delta: int) -> None:
        column = self.active()
        visible = filtered_nodes(column, self.cache)
        if not visible:
            return
        column.selected_index = clamp_index(column.selected_index + delta, len(visible))
        await self.load_children_for_selection()

    async def jump_to_first(self) -> None:
        column = self.active()
        await self.move_selection(-column.selected_index)

    async def jump_to_last(self) -> None:
        column = self.active()
        count = len(filtered_nodes(column, self.cache))
        await self.move_selection(count - 1 - column.selected_index)

    async def enter(self) -> None:
        """Descend into the current selection, appending a column when needed."""
        state = self._state
        origin = state.active_column
        node = selected_node(state.columns[origin], self.cache)
        if node is None:
            return
        if origin == len(state.columns) - 1:
            state.columns.append(ColumnState())
        state.active_column = origin + 1
        state.path = state.path[: origin + 1] + [node.id]
        await self.load_children_for_selection(origin)

    async def refresh(self) -> None:
        """Invalidate the selected node and fetch its children again."""
        node = self.selected_node()
        if node is None:
            return
        self.cache.invalidate(node.id)
        await self.load_children_for_selection()

    async def navigate_to_node(self, node_id: str) -> bool:
        """Rebuild columns so ``node_id`` is selected, using cached parent links.

        Returns whether the full path was reproduced. On a partial walk the
        state stays at the deepest segment that could be selected.
        """
        chain = self.cache.ancestry(node_id)
        if not chain:
            self.notices.push_notice(
                NoticeLevel.WARN,
                f"Cannot resolve a cached path to {node_id}",
            )
            return False

        root = self.cache.get_node(chain[0])
        scope = root.kind.scope if root is not None else self._state.scope
        self._reset(scope)
        await self.load_root()

        last = len(chain) - 1
        for position, segment in enumerate(chain):
            if not self.select_node(segment):
                self.notices.push_notice(
                    NoticeLevel.WARN,
                    f"Stopped at depth {position}: {segment} is not in the cached column",
                )
                return False
            if position < last:
                await self.enter()
        return True

    # -- loading ---------------------------------------------------------

    def _stamp(self, column: ColumnState) -> int:
        column.generation = next(self._generations)
        return column.generation

    def _is_current(self, index: int, column: ColumnState, stamp: int) -> bool:
        columns = self._state.columns
        return index < len(columns) and columns[index] is column and column.generation == stamp

    def _populate(self, index: int, parent_id: str, child_ids: list[str]) -> None:
        columns = self._state.columns
        column = columns[index]
        if column.parent_id != parent_id:
            column.selected_index = 0
            column.filter = ""
            for deeper in range(index + 1, len(columns)):
                columns[deeper] = ColumnState()
        column.parent_id = parent_id
        column.nodes = child_ids
        column.loading = False
        column.error = None
        column.selected_index = clamp_index(
            column.selected_index,
            len(filtered_nodes(column, self.cache)),
        )

    async def load_root(self) -> None:
        """Fetch the scope's root level into column 0."""
        scope = self._state.scope
        column = self._state.columns[0]
        stamp = self._stamp(column)
        column.loading = True
        column.error = None
        try:
            nodes = await dispatch.load_root(self.adapters, scope)
        except Exception as exc:
            if not self._is_current(0, column, stamp):
                logger.debug("discarding stale %s root failure", scope.value)
                return
            message = _describe(exc)
            column.loading = False
            column.error = message
            if isinstance(exc, AdapterConfigError):
                self.notices.push_notice(NoticeLevel.WARN, f"Please set the {scope.value} host: {message}")
            else:
                self.notices.push_notice(NoticeLevel.ERROR, f"Failed to load {scope.value} root: {message}")
            return

        if not self._is_current(0, column, stamp):
            logger.debug("discarding stale %s root response", scope.value)
            return
        self.cache.upsert_nodes(nodes, parent_id=None)
        column.parent_id = None
        column.nodes = [node.id for node in nodes]
        column.loading = False
        column.selected_index = clamp_index(column.selected_index, len(filtered_nodes(column, self.cache)))
        logger.info("loaded %d %s root node(s)", len(nodes), scope.value)

    async def load_children_for_selection(self, column_index: int | None = None) -> None:
        """Load children of the selection in ``column_index`` into the next column.

        Defaults to the active column. A node whose children are cached fills
        the next column without an adapter call. When there is no next column
        the fetched children are only cached.
        """
        columns = self._state.columns
        index = self._state.active_column if column_index is None else column_index
        if not 0 <= index < len(columns):
            return
        node = selected_node(columns[index], self.cache)
        if node is None:
            return

        target_index = index + 1
        target = columns[target_index] if target_index < len(columns) else None

        if node.children_loaded:
            if target is not None:
                self._stamp(target)
                self._populate(target_index, node.id, list(node.children or ()))
            return

        stamp = 0
        if target is not None:
            stamp = self._stamp(target)
            target.loading = True
            target.error = None

        try:
            children = await dispatch.load_children(self.adapters, node)
        except Exception as exc:
            if target is not None and not self._is_current(target_index, target, stamp):
                logger.debug("discarding stale children failure for %s", node.id)
                return
            message = _describe(exc)
            self.cache.record_error(node.id, message)
            if target is not None:
                target.loading = False
                target.error = message
            self.notices.push_notice(NoticeLevel.ERROR, f"Failed to load children of {node.name}: {message}")
            return

        if target is not None and not self._is_current(target_index, target, stamp):
            logger.debug("discarding stale children response for %s", node.id)
            return
        child_ids = [child.id for child in children]
        self.cache.upsert_nodes(children, parent_id=node.id)
        self.cache.mark_children_loaded(node.id, child_ids)
        if target is not None:
            self._populate(target_index, node.id, child_ids)
        logger.debug("loaded %d child node(s) for %s", len(child_ids), node.id)


__all__ = ["NavigationService"]
