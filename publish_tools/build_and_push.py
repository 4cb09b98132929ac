"""
Script: publish_tools/build_and_push.py
What: Builds the container image with buildx and pushes every resolved tag.
Doing: Turns tags, labels, build args, and build secrets into one `docker buildx build --push` call.
Why: Keeps argument wiring in one tested place instead of hand-written workflow flags.
Goal: Publish the image under its versioned tag and its floating alias.
"""

from __future__ import annotations

import re
import tempfile
from pathlib import Path
from typing import Sequence

from publish_tools.common import (
    PublishToolError,
    optional_env,
    parse_key_value_list,
    require_env,
    run_cmd,
    split_lines,
)


DEFAULT_CONTEXT_PATH = "."
DEFAULT_DOCKERFILE_PATH = "./Dockerfile"
SECRET_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")


def parse_build_secrets(text: str) -> list[tuple[str, str]]:
    """
    Parse build secrets and check each key is usable as a buildx secret id.

    Keys must look like `NPM_TOKEN`: no `/`, `,`, or `..`, since the id is
    embedded in the `--secret id=<KEY>,src=<file>` spec.
    """
    secrets = parse_key_value_list(text)
    for key, _ in secrets:
        if not SECRET_ID_RE.match(key) or ".." in key:
            raise PublishToolError(f"Invalid build secret name: {key}")
    return secrets


def write_secret_files(secrets: Sequence[tuple[str, str]], directory: Path) -> list[str]:
    """
    Write each secret value to its own file and return buildx `--secret` specs.

    Spec format is `id=<KEY>,src=<file>`. Inside the Dockerfile the secret is
    mounted with `RUN --mount=type=secret,id=<KEY>`. File names are generated
    (`secret-0`, `secret-1`, ...) so the key never becomes part of a path.
    """
    specs: list[str] = []
    for index, (key, value) in enumerate(secrets):
        secret_path = directory / f"secret-{index}"
        secret_path.write_text(value, encoding="utf-8")
        secret_path.chmod(0o600)
        specs.append(f"id={key},src={secret_path}")
    return specs


def build_command(
    *,
    context_path: str,
    dockerfile_path: str,
    tags: Sequence[str],
    labels: Sequence[str],
    build_args: Sequence[tuple[str, str]] = (),
    secret_specs: Sequence[str] = (),
) -> list[str]:
    """Return the `docker buildx build` argument list. Push is always on."""
    if not tags:
        raise PublishToolError("No image tags to push")

    command = ["docker", "buildx", "build", "--file", dockerfile_path, "--push"]
    for tag in tags:
        command.extend(["--tag", tag])
    for label in labels:
        command.extend(["--label", label])
    for key, value in build_args:
        command.extend(["--build-arg", f"{key}={value}"])
    for spec in secret_specs:
        command.extend(["--secret", spec])
    command.append(context_path)
    return command


def build_and_push(
    *,
    context_path: str,
    dockerfile_path: str,
    tags: Sequence[str],
    labels: Sequence[str],
    build_args: str = "",
    build_secrets: str = "",
) -> None:
    args = parse_key_value_list(build_args)
    secrets = parse_build_secrets(build_secrets)

    # Secret files only live for the duration of the build.
    with tempfile.TemporaryDirectory() as temp_dir:
        secret_specs = write_secret_files(secrets, Path(temp_dir))
        command = build_command(
            context_path=context_path,
            dockerfile_path=dockerfile_path,
            tags=tags,
            labels=labels,
            build_args=args,
            secret_specs=secret_specs,
        )
        run_cmd(command, capture_output=False)

    for tag in tags:
        print(f"Pushed {tag}")
    if secrets:
        print(f"Build secrets provided: {', '.join(key for key, _ in secrets)}")


def main() -> None:
    build_and_push(
        context_path=optional_env("CONTEXT_PATH", DEFAULT_CONTEXT_PATH),
        dockerfile_path=optional_env("DOCKERFILE_PATH", DEFAULT_DOCKERFILE_PATH),
        # Multi-line outputs from the image-metadata step.
        tags=split_lines(require_env("IMAGE_TAGS")),
        labels=split_lines(optional_env("IMAGE_LABELS")),
        build_args=optional_env("BUILD_ARGS"),
        build_secrets=optional_env("BUILD_SECRETS"),
    )


if __name__ == "__main__":
    main()
