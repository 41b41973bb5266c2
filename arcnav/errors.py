"""Exception types raised by adapters and surfaced by the CLI."""

from __future__ import annotations


class ArcnavError(Exception):
    """Base class for arcnav failures."""


class AdapterError(ArcnavError):
    """A data adapter could not produce one level of the tree."""


class AdapterConfigError(AdapterError):
    """Adapter is missing a host or other required setting."""


class ArcgisRequestError(AdapterError):
    """HTTP failure or ArcGIS ``{"error": ...}`` envelope."""

    def __init__(self, message: str, *, url: str | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.code = code


__all__ = [
    "ArcnavError",
    "AdapterError",
    "AdapterConfigError",
    "ArcgisRequestError",
]
