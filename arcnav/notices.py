"""Leveled user notices pushed by the navigation controller.

Notices are kept in arrival order. ``info`` and ``success`` notices expire
after ``TRANSIENT_NOTICE_SECONDS``; ``warn`` and ``error`` stay until removed.
Every notice is mirrored to the ``logging`` tree.
"""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

TRANSIENT_NOTICE_SECONDS = 5.0


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARN = "warn"
    ERROR = "error"


_LOG_LEVELS = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.WARN: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}

_TRANSIENT_LEVELS = frozenset({NoticeLevel.INFO, NoticeLevel.SUCCESS})


@dataclass(frozen=True)
class Notice:
    id: int
    level: NoticeLevel
    text: str
    ts: float


class NoticeBoard:
    """Single ``push_notice`` entry point plus the list the renderer reads."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._ids = itertools.count(1)
        self._notices: list[Notice] = []

    def push_notice(self, level: NoticeLevel | str, text: str) -> Notice:
        """Record one notice and log it at the matching level."""
        level = NoticeLevel(level)
        notice = Notice(id=next(self._ids), level=level, text=text, ts=self._clock())
        self._notices.append(notice)
        logger.log(_LOG_LEVELS[level], "%s", text)
        return notice

    def notices(self) -> list[Notice]:
        """Return live notices after dropping expired transient ones."""
        self.prune()
        return list(self._notices)

    def prune(self) -> int:
        """Drop expired ``info``/``success`` notices and return how many went."""
        now = self._clock()
        kept = [
            notice
            for notice in self._notices
            if notice.level not in _TRANSIENT_LEVELS or now - notice.ts < TRANSIENT_NOTICE_SECONDS
        ]
        removed = len(self._notices) - len(kept)
        self._notices = kept
        return removed

    def remove_notice(self, notice_id: int) -> None:
        self._notices = [notice for notice in self._notices if notice.id != notice_id]

    def clear(self) -> None:
        self._notices.clear()


__all__ = [
    "TRANSIENT_NOTICE_SECONDS",
    "Notice",
    "NoticeBoard",
    "NoticeLevel",
]
