"""
Script: publish_tools/publish.py
What: Runs the whole container build-and-push job in one command.
Doing: Computes version, commit info and tags, logs in, builds labels, builds/pushes, then deploys when configured.
Why: Lets a workflow (or a developer shell) publish an image with one step and one set of inputs.
Goal: Publish `registry/org/image:<tag>` plus its alias tag, and optionally roll it out on Railway.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from publish_tools.build_and_push import (
    DEFAULT_CONTEXT_PATH,
    DEFAULT_DOCKERFILE_PATH,
    build_and_push,
    parse_build_secrets,
)
from publish_tools.common import (
    optional_env,
    parse_key_value_list,
    require_env,
    write_github_outputs,
)
from publish_tools.git_info import build_date, read_git_info
from publish_tools.image_metadata import build_image_refs, build_oci_labels, format_labels
from publish_tools.railway_deploy import (
    RailwayClient,
    deploy_image,
    image_url,
    should_deploy,
)
from publish_tools.registry_login import registry_login
from publish_tools.tag_resolver import (
    DEFAULT_DEPLOY_ENV,
    DEFAULT_ORG_NAME,
    DEFAULT_REGISTRY,
    TagResult,
    image_full_name,
    resolve_tags,
)
from publish_tools.version_increment import list_git_tags, next_version


class PublishInputs(NamedTuple):
    image_name: str
    image_title: str
    image_description: str
    registry: str = DEFAULT_REGISTRY
    org_name: str = DEFAULT_ORG_NAME
    version_increment: str = "patch"
    dockerfile_path: str = DEFAULT_DOCKERFILE_PATH
    context_path: str = DEFAULT_CONTEXT_PATH
    build_args: str = ""
    build_secrets: str = ""
    railway_token: str = ""
    railway_service_id: str = ""
    railway_environment_id: str = ""
    deploy_env: str = DEFAULT_DEPLOY_ENV

    @classmethod
    def from_env(cls) -> "PublishInputs":
        """
        Read inputs from `INPUT_<NAME>` variables.

        That is how GitHub exposes action inputs (`image_name` becomes
        `INPUT_IMAGE_NAME`). Optional inputs fall back to the field default.
        """
        values: dict[str, str] = {}
        for field in cls._fields:
            env_name = f"INPUT_{field.upper()}"
            if field in cls._field_defaults:
                values[field] = optional_env(env_name, cls._field_defaults[field])
            else:
                values[field] = require_env(env_name)
        return cls(**values)


class RunContext(NamedTuple):
    """Workflow facts that are not action inputs."""

    repository: str
    actor: str
    token: str
    ref_name: str = ""


def _railway_deploy(token: str, image: str, service_id: str, environment_id: str) -> None:
    deploy_image(
        RailwayClient(token),
        image=image,
        service_id=service_id,
        environment_id=environment_id,
    )


class PublishSteps(NamedTuple):
    """External collaborators used by `run_publish`, swappable in tests."""

    list_tags: Callable[[], list[str]] = list_git_tags
    git_info: Callable[[], tuple[str, str]] = read_git_info
    build_timestamp: Callable[[], str] = build_date
    login: Callable[[str, str, str], None] = registry_login
    build: Callable[..., None] = build_and_push
    deploy: Callable[[str, str, str, str], None] = _railway_deploy


class PublishResult(NamedTuple):
    version: str
    image_full_name: str
    tags: TagResult
    deployed: bool


def run_publish(
    inputs: PublishInputs,
    context: RunContext,
    steps: PublishSteps = PublishSteps(),
) -> PublishResult:
    # Malformed build args or secrets fail here, before login or push.
    parse_key_value_list(inputs.build_args)
    parse_build_secrets(inputs.build_secrets)

    # 1. Next version from existing release tags.
    current, version = next_version(steps.list_tags(), inputs.version_increment)
    print(f"Version: {current} -> {version} ({inputs.version_increment})")

    # 2. Revision and timestamp for tags and labels.
    full_commit, short_commit = steps.git_info()
    created = steps.build_timestamp()
    print(f"Commit: {full_commit} ({short_commit}), build date {created}")

    # 3. Tag pair for this deploy environment.
    full_name = image_full_name(inputs.registry, inputs.org_name, inputs.image_name)
    tags = resolve_tags(version, short_commit, inputs.deploy_env)
    print(f"Image: {full_name} tags {tags.primary_tag}, {tags.alias_tag}")

    # 4. Registry auth must succeed before push.
    steps.login(inputs.registry, context.actor, context.token)

    # 5. Full refs and OCI labels.
    refs = build_image_refs(full_name, [tags.primary_tag, tags.alias_tag])
    labels = build_oci_labels(
        title=inputs.image_title,
        description=inputs.image_description,
        repository=context.repository,
        version=tags.primary_tag,
        created=created,
        revision=full_commit,
    )

    # 6. Build and push (always pushes).
    steps.build(
        context_path=inputs.context_path,
        dockerfile_path=inputs.dockerfile_path,
        tags=refs,
        labels=format_labels(labels).splitlines(),
        build_args=inputs.build_args,
        build_secrets=inputs.build_secrets,
    )

    # 7. Optional deploy of the exact versioned tag.
    deployed = should_deploy(
        inputs.railway_token,
        inputs.railway_service_id,
        inputs.railway_environment_id,
    )
    if deployed:
        steps.deploy(
            inputs.railway_token,
            image_url(full_name, tags.primary_tag),
            inputs.railway_service_id,
            inputs.railway_environment_id,
        )

    return PublishResult(str(version), full_name, tags, deployed)


def main() -> None:
    inputs = PublishInputs.from_env()
    context = RunContext(
        repository=require_env("GITHUB_REPOSITORY"),
        actor=optional_env("REGISTRY_ACTOR") or require_env("GITHUB_ACTOR"),
        token=optional_env("REGISTRY_TOKEN") or require_env("GITHUB_TOKEN"),
        ref_name=optional_env("GITHUB_REF_NAME"),
    )
    if context.ref_name:
        print(f"Release branch: {context.ref_name}")

    result = run_publish(inputs, context)

    # Outputs are optional here so the command also works outside Actions.
    if optional_env("GITHUB_OUTPUT"):
        write_github_outputs(
            {
                "version": result.version,
                "image_full_name": result.image_full_name,
                "image_tag": result.tags.primary_tag,
                "image_latest": result.tags.alias_tag,
                "deployed": "true" if result.deployed else "false",
            }
        )


if __name__ == "__main__":
    main()
