"""
Script: publish_tools/common.py
What: Shared helper functions used by all `publish_tools` modules.
Doing: Wraps env reads, command execution, `KEY=VALUE` list parsing, and output writes.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import os
import subprocess
import uuid
from typing import Mapping, Sequence


class PublishToolError(RuntimeError):
    """Raised when a workflow helper script hits a known error condition."""


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise PublishToolError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def run_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
    input_text: str | None = None,
) -> str:
    """
    Run a command and return stdout, raising a readable error on failure.

    `input_text` is written to stdin. Use it for secrets so they never show
    up in the process argument list.
    """
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=capture_output,
            cwd=cwd,
            input=input_text,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or str(exc)
        raise PublishToolError(f"Command failed: {' '.join(args)}\n{details}") from exc
    except FileNotFoundError as exc:
        raise PublishToolError(f"Command not found: {args[0]}") from exc

    if not capture_output:
        return ""
    return result.stdout


def format_github_output(key: str, value: str) -> str:
    """
    Render one output entry in GitHub's `GITHUB_OUTPUT` file syntax.

    Single-line values use `name=value`. Multi-line values (tag and label
    lists) need the heredoc form:

        name<<DELIMITER
        line one
        line two
        DELIMITER
    """
    if "\n" not in value:
        return f"{key}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    body = value if value.endswith("\n") else value + "\n"
    return f"{key}<<{delimiter}\n{body}{delimiter}\n"


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job.
    """
    output_file = require_env("GITHUB_OUTPUT")
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(format_github_output(key, value))


def normalize_owner(owner: str) -> str:
    """
    Normalize a GitHub owner/org for container image paths.

    Here, "normalize" means converting to lowercase.
    Example: `XnGen-AI` becomes `xngen-ai`, so image refs are consistent:
    `ghcr.io/xngen-ai/...`.
    """
    return owner.lower()


def split_lines(text: str) -> list[str]:
    """Return non-empty, stripped lines from a multi-line step output."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_key_value_list(text: str) -> list[tuple[str, str]]:
    """
    Parse `KEY=VALUE,KEY2=VALUE2` (or one pair per line) into pairs.

    Multi-line text is split on newlines only, so values in that form may
    contain commas (`ALLOWED_HOSTS=a.com,b.com`). Single-line text is split
    on commas. Only the first `=` splits key from value, so values may
    contain `=`. Blank entries are skipped.
    """
    text = text or ""
    raw_entries = text.splitlines() if "\n" in text else text.split(",")
    pairs: list[tuple[str, str]] = []
    for raw_entry in raw_entries:
        entry = raw_entry.strip()
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise PublishToolError(f"Expected KEY=VALUE entry, got: {entry}")
        pairs.append((key, value))
    return pairs
