"""
Script: publish_tools/registry_login.py
What: Logs Docker in to the container registry.
Doing: Runs `docker login` with the workflow actor and passes the token on stdin.
Why: The push in the build step fails without registry credentials.
Goal: Leave the runner authenticated to the target registry.
"""

from __future__ import annotations

from publish_tools.common import optional_env, require_env, run_cmd


DEFAULT_REGISTRY = "ghcr.io"


def docker_login_command(registry: str, username: str) -> list[str]:
    # Token goes through stdin so it never shows up in the process list.
    return ["docker", "login", registry, "--username", username, "--password-stdin"]


def registry_login(registry: str, username: str, token: str) -> None:
    run_cmd(docker_login_command(registry, username), input_text=token)


def main() -> None:
    registry = optional_env("REGISTRY", DEFAULT_REGISTRY)
    # GitHub provides actor/token in workflow env.
    username = require_env("REGISTRY_ACTOR")
    token = require_env("REGISTRY_TOKEN")

    registry_login(registry, username, token)
    print(f"Logged in to {registry} as {username}")


if __name__ == "__main__":
    main()
