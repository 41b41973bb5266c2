"""Public package surface for arcnav.

Exports ``main`` for programmatic CLI invocation.
The navigation engine lives in ``arcnav.navigation`` and ``arcnav.node_cache``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
