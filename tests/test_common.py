"""
Script: tests/test_common.py
What: Tests shared helpers in `publish_tools.common`.
Doing: Checks env reads, GitHub output formatting, and `KEY=VALUE` list parsing.
Why: Every helper module relies on these for inputs and outputs.
Goal: Catch regressions in shared plumbing early.
"""

from __future__ import annotations

import os
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from publish_tools.common import (
    PublishToolError,
    format_github_output,
    normalize_owner,
    optional_env,
    parse_key_value_list,
    require_env,
    run_cmd,
    split_lines,
    write_github_outputs,
)


class EnvTests(unittest.TestCase):
    def test_require_env_rejects_missing_and_empty(self) -> None:
        with mock.patch.dict(os.environ, {"EMPTY": ""}, clear=True):
            with self.assertRaises(PublishToolError):
                require_env("MISSING")
            with self.assertRaises(PublishToolError):
                require_env("EMPTY")

    def test_optional_env_default(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(optional_env("DEPLOY_ENV", "dev"), "dev")


class GithubOutputTests(unittest.TestCase):
    def test_single_line_value(self) -> None:
        self.assertEqual(format_github_output("IMAGE_TAG", "v1.2.3"), "IMAGE_TAG=v1.2.3\n")

    def test_multi_line_value_uses_delimiter(self) -> None:
        rendered = format_github_output("tags", "a:1\na:latest")
        lines = rendered.splitlines()
        self.assertTrue(lines[0].startswith("tags<<"))
        delimiter = lines[0].split("<<", 1)[1]
        self.assertEqual(lines[1:], ["a:1", "a:latest", delimiter])

    def test_write_appends_to_output_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            output_path = Path(temp_dir) / "output"
            output_path.write_text("existing=1\n", encoding="utf-8")
            with mock.patch.dict(os.environ, {"GITHUB_OUTPUT": str(output_path)}):
                write_github_outputs({"version": "1.0.0"})
            self.assertEqual(
                output_path.read_text(encoding="utf-8"),
                "existing=1\nversion=1.0.0\n",
            )


class ParseKeyValueListTests(unittest.TestCase):
    def test_comma_separated(self) -> None:
        self.assertEqual(
            parse_key_value_list("NODE_ENV=production,PORT=8080"),
            [("NODE_ENV", "production"), ("PORT", "8080")],
        )

    def test_newline_separated_and_blank_entries(self) -> None:
        self.assertEqual(
            parse_key_value_list("A=1\n\n B=2 \n"),
            [("A", "1"), ("B", "2")],
        )

    def test_multi_line_values_may_contain_commas(self) -> None:
        self.assertEqual(
            parse_key_value_list("ALLOWED_HOSTS=a.com,b.com\nDEBUG=0"),
            [("ALLOWED_HOSTS", "a.com,b.com"), ("DEBUG", "0")],
        )

    def test_single_line_still_splits_on_commas(self) -> None:
        # In the one-line form a comma always starts a new entry.
        with self.assertRaises(PublishToolError):
            parse_key_value_list("ALLOWED_HOSTS=a.com,b.com")

    def test_value_may_contain_equals(self) -> None:
        self.assertEqual(parse_key_value_list("TOKEN=abc=="), [("TOKEN", "abc==")])

    def test_empty_input(self) -> None:
        self.assertEqual(parse_key_value_list(""), [])

    def test_rejects_entry_without_equals(self) -> None:
        with self.assertRaises(PublishToolError):
            parse_key_value_list("A=1,B")

    def test_rejects_empty_key(self) -> None:
        with self.assertRaises(PublishToolError):
            parse_key_value_list("=value")


class MiscTests(unittest.TestCase):
    def test_normalize_owner(self) -> None:
        self.assertEqual(normalize_owner("XnGen-AI"), "xngen-ai")

    def test_split_lines(self) -> None:
        self.assertEqual(split_lines(" a \n\nb\n"), ["a", "b"])

    def test_run_cmd_wraps_failure(self) -> None:
        error = subprocess.CalledProcessError(1, ["git"], output="", stderr="fatal: bad\n")
        with mock.patch("publish_tools.common.subprocess.run", side_effect=error):
            with self.assertRaises(PublishToolError) as ctx:
                run_cmd(["git", "rev-parse", "HEAD"])
        self.assertIn("fatal: bad", str(ctx.exception))

    def test_run_cmd_passes_stdin(self) -> None:
        completed = subprocess.CompletedProcess(["docker"], 0, stdout="ok\n", stderr="")
        with mock.patch("publish_tools.common.subprocess.run", return_value=completed) as run:
            self.assertEqual(run_cmd(["docker", "login"], input_text="secret"), "ok\n")
        self.assertEqual(run.call_args.kwargs["input"], "secret")


if __name__ == "__main__":
    unittest.main()
