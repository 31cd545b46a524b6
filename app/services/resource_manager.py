"""Client for the Google Cloud Resource Manager v1 API."""

from typing import Any
import httpx
import logging

from app.config import get_settings

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when a Cloud Resource Manager request fails."""


class ResourceManagerClient:
    """Client for the Cloud Resource Manager API.

    Authenticates every request with the signed-in user's access token.
    Transport and HTTP errors are raised as ``UpstreamError``.
    """

    def __init__(self, access_token: str, base_url: str | None = None):
        settings = get_settings()
        self.access_token = access_token
        self.base_url = base_url or settings.resource_manager_base_url
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=15.0,
                headers={"Authorization": f"Bearer {self.access_token}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ResourceManagerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        if not self.access_token:
            raise UpstreamError("No access token available")
        try:
            client = await self._get_client()
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
            if not response.content:
                return {}
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Resource Manager {method} {path} failed: {e}")
            raise UpstreamError(str(e)) from e
        except ValueError as e:
            logger.error(f"Resource Manager {method} {path} returned invalid JSON: {e}")
            raise UpstreamError(str(e)) from e

        if not isinstance(data, dict):
            logger.error(f"Resource Manager {method} {path} returned a non-object body")
            raise UpstreamError(f"Expected a JSON object from {method} {path}")
        return data

    async def list_projects(self) -> list[dict[str, Any]]:
        """List projects visible to the user."""
        data = await self._request("GET", "/projects")
        projects = data.get("projects", [])
        if not isinstance(projects, list) or not all(isinstance(p, dict) for p in projects):
            raise UpstreamError("Malformed projects list in upstream response")
        return projects

    async def create_project(
        self,
        project_id: str,
        name: str,
        organization_id: str,
    ) -> dict[str, Any]:
        """Request creation of a project under an organization.

        Returns the upstream response body as-is.
        """
        return await self._request(
            "POST",
            "/projects",
            json={
                "projectId": project_id,
                "name": name,
                "parent": {"type": "organization", "id": organization_id},
            },
        )

    async def delete_project(self, project_id: str) -> None:
        """Mark a project for deletion."""
        await self._request("DELETE", f"/projects/{project_id}")
