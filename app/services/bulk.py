"""Simulated bulk project operations."""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from app.config import get_settings
from app.models.project import (
    MAX_BULK_PROJECTS,
    BulkCreateRequest,
    BulkCreateResponse,
    MessageResponse,
    ProgressUpdate,
    ServiceAccountKey,
)
from app.services.demo import fabricate_project, fabricate_service_account_key

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]
Sleep = Callable[[float], Awaitable[None]]


class BulkOperationService:
    """Service for bulk project creation and deletion.

    Operations run sequentially with an artificial delay per step to mimic
    provisioning latency. Nothing here calls the real Cloud API.
    """

    def __init__(
        self,
        on_progress: ProgressCallback | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.on_progress = on_progress
        self.sleep = sleep
        self.settings = get_settings()

    def _report(self, current: int, total: int, status: str, project_id: str | None = None) -> None:
        if self.on_progress:
            self.on_progress(ProgressUpdate(
                current=current,
                total=total,
                status=status,
                project_id=project_id,
            ))

    async def bulk_create(self, request: BulkCreateRequest) -> BulkCreateResponse:
        """Fabricate ``request.count`` projects and optional key bundles.

        Raises ValueError if count is outside 1..10 or the prefix is blank.
        """
        if not 1 <= request.count <= MAX_BULK_PROJECTS:
            raise ValueError(f"Count must be between 1 and {MAX_BULK_PROJECTS}")
        prefix = request.prefix.strip()
        if not prefix:
            raise ValueError("Project prefix is required")

        total = request.count
        timestamp = int(time.time() * 1000)
        projects = []
        keys: list[ServiceAccountKey] = []

        for i in range(1, total + 1):
            if i > 1:
                await self.sleep(self.settings.bulk_create_delay_seconds)

            project_id = f"{prefix}-{timestamp}-{i}"
            self._report(i - 1, total, f"Creating project {i} of {total}...", project_id)

            projects.append(fabricate_project(project_id, f"{prefix} Project {i}"))
            if request.create_service_accounts:
                keys.append(fabricate_service_account_key(project_id))

        self._report(total, total, f"Created {total} projects")

        message = f"Successfully created {total} projects"
        if request.enable_billing:
            message += " with billing enabled"
        if request.create_service_accounts:
            message += f" and {len(keys)} service account keys"

        return BulkCreateResponse(
            projects=projects,
            service_account_keys=keys if request.create_service_accounts else None,
            message=message,
        )

    async def bulk_delete(self, project_ids: list[str]) -> MessageResponse:
        """Simulate deleting each project in turn.

        Raises ValueError if no usable project IDs are given.
        """
        ids = [pid.strip() for pid in project_ids if pid and pid.strip()]
        if not ids or len(ids) != len(project_ids):
            raise ValueError("Project IDs are required")

        total = len(ids)
        for i, project_id in enumerate(ids):
            self._report(i, total, f"Deleting project {project_id}...", project_id)
            await self.sleep(self.settings.bulk_delete_delay_seconds)

        self._report(total, total, f"Deleted {total} projects")
        return MessageResponse(message=f"Successfully deleted {total} projects")

    def build_key_bundles(self, project_ids: list[str]) -> list[ServiceAccountKey]:
        """Fabricate one key bundle per project ID."""
        return [fabricate_service_account_key(pid) for pid in project_ids]
