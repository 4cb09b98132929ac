"""
Script: publish_tools/git_info.py
What: Reads the current commit and records the build timestamp.
Doing: Runs `git rev-parse` for full and short hashes and formats the UTC time, then writes outputs.
Why: Tags and OCI labels need traceable revision and creation data.
Goal: Provide `GIT_COMMIT`, `GIT_COMMIT_SHORT`, and `BUILD_DATE` for later steps.
"""

from __future__ import annotations

from datetime import datetime, timezone

from publish_tools.common import PublishToolError, run_cmd, write_github_outputs


BUILD_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def build_date(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp like `2026-10-19T05:50:00Z`."""
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime(BUILD_DATE_FORMAT)


def read_git_info() -> tuple[str, str]:
    """Return `(full_commit, short_commit)` for `HEAD`."""
    full_commit = run_cmd(["git", "rev-parse", "HEAD"]).strip()
    short_commit = run_cmd(["git", "rev-parse", "--short", "HEAD"]).strip()
    if not full_commit or not short_commit:
        raise PublishToolError("Failed to resolve commit hash for HEAD")
    return full_commit, short_commit


def main() -> None:
    full_commit, short_commit = read_git_info()
    date = build_date()

    write_github_outputs(
        {
            "GIT_COMMIT": full_commit,
            "GIT_COMMIT_SHORT": short_commit,
            "BUILD_DATE": date,
        }
    )
    print(f"Commit: {full_commit} ({short_commit})")
    print(f"Build date: {date}")


if __name__ == "__main__":
    main()
