"""Notice board ordering, expiry, and log mirroring tests."""

from __future__ import annotations

import unittest

from arcnav.notices import TRANSIENT_NOTICE_SECONDS, NoticeBoard, NoticeLevel


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class NoticeBoardTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _Clock()
        self.board = NoticeBoard(clock=self.clock)

    def test_notices_keep_arrival_order_and_unique_ids(self) -> None:
        first = self.board.push_notice(NoticeLevel.INFO, "one")
        second = self.board.push_notice("error", "two")

        self.assertNotEqual(first.id, second.id)
        self.assertEqual([notice.text for notice in self.board.notices()], ["one", "two"])
        self.assertEqual(second.level, NoticeLevel.ERROR)
        self.assertEqual(first.ts, 100.0)

    def test_transient_levels_expire(self) -> None:
        self.board.push_notice(NoticeLevel.INFO, "loaded")
        self.board.push_notice(NoticeLevel.SUCCESS, "saved")
        self.board.push_notice(NoticeLevel.WARN, "careful")
        self.board.push_notice(NoticeLevel.ERROR, "failed")

        self.clock.now += TRANSIENT_NOTICE_SECONDS
        self.assertEqual([notice.text for notice in self.board.notices()], ["careful", "failed"])

    def test_transient_notice_survives_before_deadline(self) -> None:
        self.board.push_notice(NoticeLevel.INFO, "loaded")
        self.clock.now += TRANSIENT_NOTICE_SECONDS - 0.5
        self.assertEqual(len(self.board.notices()), 1)

    def test_remove_and_clear(self) -> None:
        keep = self.board.push_notice(NoticeLevel.WARN, "keep")
        drop = self.board.push_notice(NoticeLevel.WARN, "drop")

        self.board.remove_notice(drop.id)
        self.assertEqual(self.board.notices(), [keep])

        self.board.clear()
        self.assertEqual(self.board.notices(), [])

    def test_push_notice_logs_at_matching_level(self) -> None:
        with self.assertLogs("arcnav.notices", level="WARNING") as captured:
            self.board.push_notice(NoticeLevel.WARN, "careful")
            self.board.push_notice(NoticeLevel.ERROR, "failed")

        self.assertEqual(captured.output, ["WARNING:arcnav.notices:careful", "ERROR:arcnav.notices:failed"])

    def test_unknown_level_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.board.push_notice("fatal", "nope")


if __name__ == "__main__":
    unittest.main()
