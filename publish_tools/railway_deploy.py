"""
Script: publish_tools/railway_deploy.py
What: Points a Railway service at the freshly pushed image and redeploys it.
Doing: Checks the token/service/environment gate, then calls the Railway GraphQL API.
Why: Lets one workflow publish and roll out an image without a separate deploy job.
Goal: Run the exact image tag just built in the chosen Railway environment.
"""

from __future__ import annotations

from typing import Any

import requests

from publish_tools.common import PublishToolError, optional_env, require_env


RAILWAY_API_URL = "https://backboard.railway.app/graphql/v2"
REQUEST_TIMEOUT = 30  # seconds

UPDATE_SERVICE_IMAGE_MUTATION = """
mutation serviceInstanceUpdate($serviceId: String!, $environmentId: String!, $image: String!) {
  serviceInstanceUpdate(
    serviceId: $serviceId
    environmentId: $environmentId
    input: { source: { image: $image } }
  )
}
"""

REDEPLOY_MUTATION = """
mutation serviceInstanceRedeploy($serviceId: String!, $environmentId: String!) {
  serviceInstanceRedeploy(serviceId: $serviceId, environmentId: $environmentId)
}
"""


class RailwayDeployError(PublishToolError):
    """Raised when the Railway API rejects or fails a deploy request."""


def should_deploy(token: str, service_id: str, environment_id: str) -> bool:
    """
    True only when all three Railway inputs are set.

    Any missing value skips deployment quietly; a partial configuration is
    not treated as an error.
    """
    return bool(token) and bool(service_id) and bool(environment_id)


def image_url(image_full_name: str, image_tag: str) -> str:
    """Return `registry/org/image:tag`."""
    return f"{image_full_name}:{image_tag}"


class RailwayClient:
    """Minimal Railway GraphQL client for image deploys."""

    def __init__(
        self,
        token: str,
        *,
        endpoint: str = RAILWAY_API_URL,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run one GraphQL operation and return its `data` object."""
        try:
            response = self.session.post(
                self.endpoint,
                json={"query": query, "variables": variables},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise RailwayDeployError(f"Railway API request failed: {exc}") from exc
        except ValueError as exc:
            raise RailwayDeployError("Railway API returned a non-JSON response") from exc

        errors = payload.get("errors") or []
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors)
            raise RailwayDeployError(f"Railway API error: {messages}")
        return payload.get("data") or {}

    def update_service_image(self, service_id: str, environment_id: str, image: str) -> None:
        data = self.execute(
            UPDATE_SERVICE_IMAGE_MUTATION,
            {"serviceId": service_id, "environmentId": environment_id, "image": image},
        )
        if data.get("serviceInstanceUpdate") is False:
            raise RailwayDeployError(f"Railway refused image update for service {service_id}")

    def redeploy(self, service_id: str, environment_id: str) -> None:
        data = self.execute(
            REDEPLOY_MUTATION,
            {"serviceId": service_id, "environmentId": environment_id},
        )
        if data.get("serviceInstanceRedeploy") is False:
            raise RailwayDeployError(f"Railway refused redeploy for service {service_id}")


def deploy_image(
    client: RailwayClient,
    *,
    image: str,
    service_id: str,
    environment_id: str,
) -> None:
    client.update_service_image(service_id, environment_id, image)
    client.redeploy(service_id, environment_id)
    print(f"Deployed {image} to Railway service {service_id} (environment {environment_id})")


def main() -> None:
    token = optional_env("RAILWAY_TOKEN")
    service_id = optional_env("RAILWAY_SERVICE_ID")
    environment_id = optional_env("RAILWAY_ENVIRONMENT_ID")

    # Partial Railway configuration skips the deploy with no output.
    if not should_deploy(token, service_id, environment_id):
        return

    image = image_url(require_env("IMAGE_FULL_NAME"), require_env("IMAGE_TAG"))
    deploy_image(
        RailwayClient(token),
        image=image,
        service_id=service_id,
        environment_id=environment_id,
    )


if __name__ == "__main__":
    main()
