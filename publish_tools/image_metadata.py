"""
Script: publish_tools/image_metadata.py
What: Builds the full image references and OCI labels for the image build.
Doing: Joins the image name with each tag, fills the standard `org.opencontainers.image.*` labels, and writes outputs.
Why: Registry UIs and tooling read these labels to show what an image is and where it came from.
Goal: Provide `tags` and `labels` for the build-and-push step.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from publish_tools.common import optional_env, require_env, write_github_outputs


DEFAULT_AUTHORS = "XnGen AI"
DEFAULT_LICENSES = "Proprietary"
OCI_LABEL_PREFIX = "org.opencontainers.image."


def build_image_refs(image_full_name: str, raw_tags: Iterable[str]) -> list[str]:
    """Return `image:tag` for each non-empty tag, keeping order and dropping repeats."""
    refs: list[str] = []
    for tag in raw_tags:
        tag = tag.strip()
        if not tag:
            continue
        ref = f"{image_full_name}:{tag}"
        if ref not in refs:
            refs.append(ref)
    return refs


def build_oci_labels(
    *,
    title: str,
    description: str,
    repository: str,
    version: str,
    created: str,
    revision: str,
    authors: str = DEFAULT_AUTHORS,
    licenses: str = DEFAULT_LICENSES,
) -> dict[str, str]:
    """
    Return the OCI label set in a stable order.

    `version` is the primary image tag (for example `v1.2.3-pre.abcd123`),
    not the bare semantic version.
    """
    values = {
        "title": title,
        "description": description,
        "url": f"https://github.com/{repository}",
        "authors": authors,
        "version": version,
        "created": created,
        "revision": revision,
        "licenses": licenses,
    }
    return {f"{OCI_LABEL_PREFIX}{key}": value for key, value in values.items()}


def format_labels(labels: Mapping[str, str]) -> str:
    return "\n".join(f"{key}={value}" for key, value in labels.items())


def main() -> None:
    full_name = require_env("IMAGE_FULL_NAME")
    image_tag = require_env("IMAGE_TAG")
    image_latest = optional_env("IMAGE_LATEST")

    refs = build_image_refs(full_name, [image_tag, image_latest])
    labels = build_oci_labels(
        title=require_env("IMAGE_TITLE"),
        description=require_env("IMAGE_DESCRIPTION"),
        repository=require_env("GITHUB_REPOSITORY"),
        version=image_tag,
        created=require_env("BUILD_DATE"),
        revision=require_env("GIT_COMMIT"),
    )

    write_github_outputs({"tags": "\n".join(refs), "labels": format_labels(labels)})
    for ref in refs:
        print(f"Tag: {ref}")
    for key, value in labels.items():
        print(f"Label: {key}={value}")


if __name__ == "__main__":
    main()
