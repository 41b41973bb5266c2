"""Persistent JSON config helpers.

Stores default server/portal hosts, the starting scope, request timeout, and
the inspector highlight style. All access is defensive: malformed or missing
config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .node_cache import Scope

logger = logging.getLogger(__name__)

APP_NAME = "arcnav"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_string(key: str, value: str | None) -> None:
    config = load_config()
    stripped = (value or "").strip()
    if stripped:
        config[key] = stripped
    else:
        config.pop(key, None)
    save_config(config)


def load_server_url() -> str | None:
    return _load_string("server_url")


def save_server_url(url: str | None) -> None:
    _save_string("server_url", url)


def load_portal_url() -> str | None:
    return _load_string("portal_url")


def save_portal_url(url: str | None) -> None:
    _save_string("portal_url", url)


def load_scope() -> Scope:
    """Return persisted starting scope, falling back to ``Scope.SERVER``."""
    value = _load_string("scope")
    try:
        return Scope(value) if value is not None else Scope.SERVER
    except ValueError:
        return Scope.SERVER


def save_scope(scope: Scope) -> None:
    _save_string("scope", Scope(scope).value)


def load_timeout_seconds() -> float | None:
    """Load request timeout; non-positive numbers and booleans are rejected."""
    value = load_config().get("timeout_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0:
        return None
    return float(value)


def load_style_name() -> str:
    return _load_string("style") or DEFAULT_STYLE
