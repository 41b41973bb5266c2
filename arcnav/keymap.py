"""Miller-column key bindings and a small key-dispatch registry.

Handlers receive the ``NavigationService``. A handler may return an awaitable
for operations that fetch; ``KeyComboRegistry.dispatch`` awaits it, so an
input loop can schedule ``dispatch(key)`` as a task.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .navigation import NavigationService

KeyHandler = Callable[[NavigationService], Awaitable[None] | None]


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    description: str
    handler: KeyHandler
    when: Callable[[NavigationService], bool] | None = None


def _filter_active(service: NavigationService) -> bool:
    return bool(service.active().filter)


MILLER_BINDINGS: tuple[KeyComboBinding, ...] = (
    KeyComboBinding(("j", "down"), "Move selection down", lambda service: service.move_selection(1)),
    KeyComboBinding(("k", "up"), "Move selection up", lambda service: service.move_selection(-1)),
    KeyComboBinding(("l", "return", "right"), "Enter selected item", lambda service: service.enter()),
    KeyComboBinding(("h", "backspace", "left"), "Go to parent column", lambda service: service.up()),
    KeyComboBinding(("tab",), "Focus next column", lambda service: service.focus_next_column()),
    KeyComboBinding(("shift-tab",), "Focus previous column", lambda service: service.focus_previous_column()),
    KeyComboBinding(("escape",), "Clear filter", lambda service: service.clear_filter(), when=_filter_active),
    KeyComboBinding(("g", "home"), "Jump to first item", lambda service: service.jump_to_first()),
    KeyComboBinding(("G", "end"), "Jump to last item", lambda service: service.jump_to_last()),
    KeyComboBinding(("r",), "Refresh selected item", lambda service: service.refresh()),
    KeyComboBinding(("i",), "Toggle inspector", lambda service: service.toggle_inspector()),
)


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(
        self,
        service: NavigationService,
        normalize: Callable[[str], str] | None = None,
    ) -> None:
        self._service = service
        self._normalize = normalize if normalize is not None else self._identity
        self._bindings: dict[str, KeyComboBinding] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._bindings[self._normalize(combo)] = binding
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def help_rows(self) -> list[tuple[str, str]]:
        """Return ``(keys, description)`` rows in registration order, one per binding."""
        rows: list[tuple[str, str]] = []
        seen: set[int] = set()
        for binding in self._bindings.values():
            if id(binding) in seen:
                continue
            seen.add(id(binding))
            rows.append((", ".join(binding.combos), binding.description))
        return rows

    async def dispatch(self, key: str) -> bool:
        """Run the handler bound to ``key`` and return whether one ran."""
        binding = self._bindings.get(self._normalize(key))
        if binding is None:
            return False
        if binding.when is not None and not binding.when(self._service):
            return False
        result = binding.handler(self._service)
        if inspect.isawaitable(result):
            await result
        return True


def miller_registry(service: NavigationService) -> KeyComboRegistry:
    return KeyComboRegistry(service).register_bindings(*MILLER_BINDINGS)


__all__ = [
    "MILLER_BINDINGS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "miller_registry",
]
