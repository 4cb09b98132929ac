"""
Script: publish_tools/tag_resolver.py
What: Derives the image tag and its floating alias from version, commit, and deploy environment.
Doing: Matches the deploy environment against known names, builds both tags, and writes outputs.
Why: Each environment has its own tag convention, and downstream steps must agree on it.
Goal: Provide `IMAGE_FULL_NAME`, `IMAGE_TAG`, and `IMAGE_LATEST` for metadata, build, and deploy steps.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Union

from publish_tools.common import optional_env, require_env, write_github_outputs
from publish_tools.version_increment import Version


DEFAULT_REGISTRY = "ghcr.io"
DEFAULT_ORG_NAME = "xngen-ai"
DEFAULT_DEPLOY_ENV = "dev"
ENV_TAG_LENGTH = 3


class DeployEnvironment(Enum):
    PROD = "prod"
    STAGING = "staging"
    DEVELOP = "develop"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str) -> "DeployEnvironment":
        """
        Classify a free-form environment label.

        Only exact, case-sensitive matches select a named environment.
        `"PROD"`, `"Staging"`, `""` and names like `"custom"` itself are all
        handled by the generic rule.
        """
        for member in (cls.PROD, cls.STAGING, cls.DEVELOP):
            if value == member.value:
                return member
        return cls.CUSTOM


class TagResult(NamedTuple):
    primary_tag: str
    alias_tag: str


def env_tag_for(deploy_env: str) -> str:
    """Lowercase and keep the first three characters (shorter names are kept whole)."""
    return deploy_env.lower()[:ENV_TAG_LENGTH]


def resolve_tags(version: Union[Version, str], commit: str, deploy_env: str) -> TagResult:
    """
    Build `(primary_tag, alias_tag)` for one run.

    - prod:    `v1.2.3`                 / `latest`
    - staging: `v1.2.3-pre.<commit>`    / `stag-latest`
    - develop: `v1.2.3-dev.<commit>`    / `dev-latest`
    - other:   `v1.2.3-<env>.<commit>`  / `<env>-latest`
      where `<env>` is `env_tag_for(deploy_env)`.

    `version` and `commit` are used verbatim; callers pass values already
    produced by the version and git-info steps.
    """
    environment = DeployEnvironment.parse(deploy_env)
    if environment is DeployEnvironment.PROD:
        return TagResult(f"v{version}", "latest")
    if environment is DeployEnvironment.STAGING:
        return TagResult(f"v{version}-pre.{commit}", "stag-latest")
    if environment is DeployEnvironment.DEVELOP:
        return TagResult(f"v{version}-dev.{commit}", "dev-latest")

    env_tag = env_tag_for(deploy_env)
    return TagResult(f"v{version}-{env_tag}.{commit}", f"{env_tag}-latest")


def image_full_name(registry: str, org_name: str, image_name: str) -> str:
    """Return `registry/org/image` without a tag."""
    return f"{registry}/{org_name}/{image_name}"


def main() -> None:
    version = require_env("VERSION")
    commit = require_env("GIT_COMMIT_SHORT")
    deploy_env = optional_env("DEPLOY_ENV", DEFAULT_DEPLOY_ENV)
    full_name = image_full_name(
        optional_env("REGISTRY", DEFAULT_REGISTRY),
        optional_env("ORG_NAME", DEFAULT_ORG_NAME),
        require_env("IMAGE_NAME"),
    )

    tags = resolve_tags(version, commit, deploy_env)

    write_github_outputs(
        {
            "IMAGE_FULL_NAME": full_name,
            "IMAGE_TAG": tags.primary_tag,
            "IMAGE_LATEST": tags.alias_tag,
        }
    )
    print(f"Deploy environment: {deploy_env!r}")
    print(f"Image tag: {full_name}:{tags.primary_tag}")
    print(f"Alias tag: {full_name}:{tags.alias_tag}")


if __name__ == "__main__":
    main()
