"""
Script: tests/test_git_info.py
What: Tests commit hash and build timestamp helpers.
Doing: Checks git command usage, empty-output handling, and UTC formatting.
Why: Tags and labels embed these values.
Goal: Keep revision data accurate.
"""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

from publish_tools.common import PublishToolError
from publish_tools.git_info import build_date, read_git_info


class GitInfoTests(unittest.TestCase):
    def test_build_date_is_utc(self) -> None:
        moment = datetime(2026, 10, 19, 7, 50, 1, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(build_date(moment), "2026-10-19T05:50:01Z")

    def test_reads_full_and_short_hash(self) -> None:
        outputs = ["0123456789abcdef\n", "0123456\n"]
        with mock.patch("publish_tools.git_info.run_cmd", side_effect=outputs) as run_cmd:
            self.assertEqual(read_git_info(), ("0123456789abcdef", "0123456"))
        self.assertEqual(
            [call.args[0] for call in run_cmd.call_args_list],
            [["git", "rev-parse", "HEAD"], ["git", "rev-parse", "--short", "HEAD"]],
        )

    def test_empty_hash_is_an_error(self) -> None:
        with mock.patch("publish_tools.git_info.run_cmd", return_value=""):
            with self.assertRaises(PublishToolError):
                read_git_info()


if __name__ == "__main__":
    unittest.main()
