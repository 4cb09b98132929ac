"""
Script: publish_tools/cli.py
What: Single entry point for every publish helper (`python3 -m publish_tools.cli <command>`).
Doing: Maps command names to helper `main()` functions and turns known errors into exit code 1.
Why: Workflow steps call one stable command surface instead of module paths.
Goal: Keep step wiring in YAML short and the failure output readable.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping

from publish_tools.common import PublishToolError


def command_map() -> dict[str, Callable[[], None]]:
    """
    Map CLI command names to Python entry functions.

    Listed in the order the publish job runs them.
    """
    from publish_tools.build_and_push import main as build_and_push
    from publish_tools.git_info import main as git_info
    from publish_tools.image_metadata import main as image_metadata
    from publish_tools.publish import main as publish
    from publish_tools.railway_deploy import main as railway_deploy
    from publish_tools.registry_login import main as registry_login
    from publish_tools.tag_resolver import main as resolve_image_tags
    from publish_tools.version_increment import main as next_version

    return {
        "next-version": next_version,
        "git-info": git_info,
        "resolve-image-tags": resolve_image_tags,
        "registry-login": registry_login,
        "image-metadata": image_metadata,
        "build-and-push": build_and_push,
        "railway-deploy": railway_deploy,
        "publish": publish,
    }


def build_parser(commands: Mapping[str, Callable[[], None]]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="publish-tools",
        description="Run one container publish helper command.",
    )
    parser.add_argument("command", nargs="?", choices=sorted(commands.keys()))
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print available commands in run order and exit.",
    )
    return parser


def run_command(command: str, commands: Mapping[str, Callable[[], None]]) -> None:
    """Run one registered command; `commands` is injectable for tests."""
    commands[command]()


def main(argv: list[str] | None = None) -> None:
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    if args.list:
        for name in commands:
            print(name)
        return
    if not args.command:
        parser.error("a command is required (use --list to see them)")

    try:
        run_command(args.command, commands)
    except PublishToolError as exc:
        # One line on stderr is enough for workflow logs.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
