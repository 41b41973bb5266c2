"""Inspector detail block for one node: JSON text, optionally highlighted.

Pygments is imported lazily on first highlight; any failure falls back to
plain text. Reads only from the node it is given.
"""

from __future__ import annotations

import json
import re

from .node_cache import Node

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_HIGHLIGHT = None
_PYGMENTS_JSON_LEXER = None
_PYGMENTS_TERMINAL_FORMATTER = None
_PYGMENTS_GET_STYLE_BY_NAME = None
_PYGMENTS_FORMATTERS: dict[str, object] = {}


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes that remote metadata could smuggle in."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", source)


def node_payload(node: Node) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": node.id,
        "kind": node.kind.value,
        "name": node.name,
        "url": node.url,
    }
    if node.children_kind is not None:
        payload["childrenKind"] = node.children_kind.value
    if node.children_loaded:
        payload["childrenCount"] = node.children_count
    if node.error is not None:
        payload["error"] = {"message": node.error.message, "code": node.error.code}
    payload["meta"] = {key: value for key, value in node.meta.items() if value is not None}
    return payload


def _ensure_pygments_loaded() -> bool:
    """Lazily import and cache Pygments callables."""
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_HIGHLIGHT
    global _PYGMENTS_JSON_LEXER
    global _PYGMENTS_TERMINAL_FORMATTER
    global _PYGMENTS_GET_STYLE_BY_NAME

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments import highlight as pygments_highlight
        from pygments.formatters import TerminalFormatter
        from pygments.lexers import JsonLexer
        from pygments.styles import get_style_by_name
    except ImportError:
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_HIGHLIGHT = pygments_highlight
    _PYGMENTS_JSON_LEXER = JsonLexer
    _PYGMENTS_TERMINAL_FORMATTER = TerminalFormatter
    _PYGMENTS_GET_STYLE_BY_NAME = get_style_by_name
    _PYGMENTS_AVAILABLE = True
    return True


def _formatter_for_style(style: str):
    formatter = _PYGMENTS_FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    assert _PYGMENTS_GET_STYLE_BY_NAME is not None
    assert _PYGMENTS_TERMINAL_FORMATTER is not None
    resolved = style
    try:
        _PYGMENTS_GET_STYLE_BY_NAME(style)
    except Exception:
        resolved = "monokai"
    formatter = _PYGMENTS_TERMINAL_FORMATTER(style=resolved)
    _PYGMENTS_FORMATTERS[style] = formatter
    return formatter


def highlight_json(source: str, style: str = "monokai") -> str | None:
    """Highlight JSON text with Pygments, returning ``None`` on any failure."""
    if not _ensure_pygments_loaded():
        return None
    try:
        assert _PYGMENTS_HIGHLIGHT is not None
        assert _PYGMENTS_JSON_LEXER is not None
        return _PYGMENTS_HIGHLIGHT(source, _PYGMENTS_JSON_LEXER(), _formatter_for_style(style))
    except Exception:
        return None


def inspector_text(node: Node, *, style: str = "monokai", no_color: bool = False) -> str:
    """Render the inspector block for ``node``, newline-terminated."""
    source = sanitize_terminal_text(json.dumps(node_payload(node), indent=2, default=str))
    if not no_color:
        rendered = highlight_json(source, style)
        if rendered and "\x1b[" in rendered:
            return rendered if rendered.endswith("\n") else rendered + "\n"
    return source + "\n"


__all__ = [
    "highlight_json",
    "inspector_text",
    "node_payload",
    "sanitize_terminal_text",
]
