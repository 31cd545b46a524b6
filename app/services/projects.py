"""Project service forwarding requests to Cloud Resource Manager."""

import logging
from typing import Callable
from pydantic import ValidationError

from app.config import get_settings
from app.models.auth import Session
from app.models.project import (
    MessageResponse,
    Project,
    ProjectCreate,
    ProjectCreateResponse,
)
from app.services.demo import demo_projects, fabricate_project
from app.services.resource_manager import ResourceManagerClient, UpstreamError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], ResourceManagerClient]


class ProjectService:
    """Service for listing, creating and deleting a user's projects.

    Upstream failures fall back to fabricated demo responses unless
    ``strict_upstream`` is enabled, in which case ``UpstreamError`` is raised.
    """

    def __init__(
        self,
        session: Session,
        client_factory: ClientFactory = ResourceManagerClient,
    ):
        self.session = session
        self.client_factory = client_factory
        self.settings = get_settings()

    def _fallback(self, operation: str, error: UpstreamError) -> None:
        if self.settings.strict_upstream:
            raise error
        logger.warning(f"{operation} failed upstream, using demo data: {error}")

    async def list_projects(self) -> list[Project]:
        """List projects, or the fixed demo set if the upstream call fails."""
        async with self.client_factory(self.session.credentials.access_token) as client:
            try:
                return [Project.model_validate(p) for p in await client.list_projects()]
            except ValidationError as e:
                self._fallback("List projects", UpstreamError(f"Malformed project entry: {e}"))
            except UpstreamError as e:
                self._fallback("List projects", e)
        return demo_projects()

    async def create_project(self, data: ProjectCreate) -> ProjectCreateResponse:
        """Create a project.

        Raises ValueError when the project ID or name is missing.
        """
        project_id = (data.project_id or "").strip()
        name = (data.name or "").strip()
        if not project_id or not name:
            raise ValueError("Project ID and name are required")

        async with self.client_factory(self.session.credentials.access_token) as client:
            try:
                created = await client.create_project(
                    project_id,
                    name,
                    self.settings.gcp_organization_id,
                )
                logger.info(f"Created project {project_id} for user {self.session.user.id}")
                return ProjectCreateResponse(
                    project=created,
                    message="Project created successfully",
                )
            except UpstreamError as e:
                self._fallback(f"Create project {project_id}", e)

        return ProjectCreateResponse(
            project=fabricate_project(project_id, name),
            message="Project created successfully (Demo Mode)",
        )

    async def delete_project(self, project_id: str) -> MessageResponse:
        """Delete a project. Always reports success outside strict mode."""
        async with self.client_factory(self.session.credentials.access_token) as client:
            try:
                await client.delete_project(project_id)
                logger.info(f"Deleted project {project_id} for user {self.session.user.id}")
                return MessageResponse(message="Project deleted successfully")
            except UpstreamError as e:
                self._fallback(f"Delete project {project_id}", e)

        return MessageResponse(message="Project deleted successfully (Demo Mode)")
