"""
Script: publish_tools/version_increment.py
What: Computes the next semantic version for this image from existing git tags.
Doing: Finds the highest `X.Y.Z` / `vX.Y.Z` tag, bumps it by the requested increment, and writes outputs.
Why: Every published image needs a fresh, monotonically increasing version.
Goal: Provide `version` for tag resolution and image labels.
"""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple

from publish_tools.common import (
    PublishToolError,
    optional_env,
    run_cmd,
    write_github_outputs,
)


SEMVER_TAG_RE = re.compile(r"^v?([0-9]+)\.([0-9]+)\.([0-9]+)$")
INCREMENT_KINDS = ("patch", "minor", "major")


class Version(NamedTuple):
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse `1.2.3` or `v1.2.3`. Pre-release and build suffixes are rejected."""
        match = SEMVER_TAG_RE.match(text.strip())
        if not match:
            raise PublishToolError(f"Not a plain semantic version: {text}")
        return cls(*(int(part) for part in match.groups()))


def bump(version: Version, increment: str) -> Version:
    """
    Return the next version for one increment kind.

    - patch: `1.2.3` -> `1.2.4`
    - minor: `1.2.3` -> `1.3.0`
    - major: `1.2.3` -> `2.0.0`
    """
    if increment == "patch":
        return Version(version.major, version.minor, version.patch + 1)
    if increment == "minor":
        return Version(version.major, version.minor + 1, 0)
    if increment == "major":
        return Version(version.major + 1, 0, 0)
    raise PublishToolError(
        f"Unsupported version increment: {increment} (expected one of {', '.join(INCREMENT_KINDS)})"
    )


def latest_release_version(tags: Iterable[str]) -> Version:
    """
    Return the highest release version found in `tags`.

    Tags that are not plain `X.Y.Z` (with optional `v`) are ignored, so
    pre-release tags never become the base. No release tags means `0.0.0`.
    """
    versions = [Version.parse(tag) for tag in tags if SEMVER_TAG_RE.match(tag.strip())]
    return max(versions, default=Version(0, 0, 0))


def next_version(tags: Iterable[str], increment: str) -> tuple[Version, Version]:
    """Return `(current, next)` versions for the given tag list."""
    current = latest_release_version(tags)
    return current, bump(current, increment)


def list_git_tags() -> list[str]:
    # Needs full history (fetch-depth: 0) so all release tags are present.
    output = run_cmd(["git", "tag", "--list"])
    return [line.strip() for line in output.splitlines() if line.strip()]


def main() -> None:
    increment = optional_env("VERSION_INCREMENT", "patch")
    # The current branch is always treated as the release branch, so the
    # result is a plain version without a pre-release suffix.
    release_branch = optional_env("GITHUB_REF_NAME")

    current, version = next_version(list_git_tags(), increment)

    write_github_outputs(
        {
            "version": str(version),
            "current_version": str(current),
            "major_version": str(version.major),
            "minor_version": str(version.minor),
            "patch_version": str(version.patch),
        }
    )
    if release_branch:
        print(f"Release branch: {release_branch}")
    print(f"Current version: {current}")
    print(f"Next version ({increment}): {version}")


if __name__ == "__main__":
    main()
