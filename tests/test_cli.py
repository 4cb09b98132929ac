"""
Script: tests/test_cli.py
What: Tests for the shared `publish_tools` command dispatcher.
Doing: Checks command-map entries, parser behavior, and error-to-exit-code handling.
Why: Makes sure workflow command names still point to the right modules.
Goal: Protect the command surface used by workflow steps.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import mock

from publish_tools import cli
from publish_tools.cli import build_parser, command_map, run_command
from publish_tools.common import PublishToolError


class CliTests(unittest.TestCase):
    def test_command_map_lists_every_step(self) -> None:
        self.assertEqual(
            list(command_map().keys()),
            [
                "next-version",
                "git-info",
                "resolve-image-tags",
                "registry-login",
                "image-metadata",
                "build-and-push",
                "railway-deploy",
                "publish",
            ],
        )

    def test_parser_rejects_unknown_command(self) -> None:
        parser = build_parser({"demo": lambda: None})
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parser.parse_args(["other"])

    def test_run_command_calls_target_function(self) -> None:
        target = mock.Mock()
        run_command("demo", {"demo": target})
        target.assert_called_once_with()

    def test_known_error_exits_with_code_one(self) -> None:
        def _fail() -> None:
            raise PublishToolError("Missing required environment variable: IMAGE_NAME")

        stderr = io.StringIO()
        with mock.patch.object(cli, "command_map", return_value={"demo": _fail}):
            with contextlib.redirect_stderr(stderr):
                with self.assertRaises(SystemExit) as ctx:
                    cli.main(["demo"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("IMAGE_NAME", stderr.getvalue())

    def test_list_prints_commands(self) -> None:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            cli.main(["--list"])
        self.assertEqual(stdout.getvalue().splitlines()[0], "next-version")


if __name__ == "__main__":
    unittest.main()
