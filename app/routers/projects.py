"""Project management API endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.models.auth import Session
from app.models.project import (
    BulkCreateRequest,
    BulkCreateResponse,
    MessageResponse,
    ProgressUpdate,
    ProjectCreate,
    ProjectCreateResponse,
    ProjectIdsRequest,
    ProjectListResponse,
)
from app.routers.auth import get_current_session, get_upstream_session
from app.services.bulk import BulkOperationService
from app.services.projects import ProjectService
from app.services.resource_manager import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])

KEYS_FILENAME = "service-account-keys.json"


def get_project_service(session: Session = Depends(get_upstream_session)) -> ProjectService:
    """Dependency for project service."""
    return ProjectService(session)


def log_progress(update: ProgressUpdate) -> None:
    logger.info(f"[{update.current}/{update.total}] {update.status}")


def get_bulk_service(session: Session = Depends(get_current_session)) -> BulkOperationService:
    """Dependency for bulk operation service."""
    return BulkOperationService(on_progress=log_progress)


def _upstream_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="Upstream Cloud Resource Manager request failed",
    )


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    """List the user's projects."""
    try:
        return ProjectListResponse(projects=await service.list_projects())
    except UpstreamError as e:
        raise _upstream_failed() from e


@router.post("", response_model=ProjectCreateResponse)
async def create_project(
    payload: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
) -> ProjectCreateResponse:
    """Create a single project."""
    try:
        return await service.create_project(payload)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except UpstreamError as e:
        raise _upstream_failed() from e


@router.post(
    "/bulk",
    response_model=BulkCreateResponse,
    response_model_exclude_none=True,
)
async def bulk_create_projects(
    payload: BulkCreateRequest,
    service: BulkOperationService = Depends(get_bulk_service),
) -> BulkCreateResponse:
    """Create a batch of demo projects, optionally with service account keys."""
    try:
        return await service.bulk_create(payload)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post("/bulk-delete", response_model=MessageResponse)
async def bulk_delete_projects(
    payload: ProjectIdsRequest,
    service: BulkOperationService = Depends(get_bulk_service),
) -> MessageResponse:
    """Delete a batch of projects."""
    try:
        return await service.bulk_delete(payload.project_ids)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post("/download-keys")
async def download_service_account_keys(
    payload: ProjectIdsRequest,
    service: BulkOperationService = Depends(get_bulk_service),
) -> JSONResponse:
    """Download service account keys for the given projects as one JSON file."""
    keys = service.build_key_bundles(payload.project_ids)
    return JSONResponse(
        content=[key.model_dump() for key in keys],
        headers={"Content-Disposition": f'attachment; filename="{KEYS_FILENAME}"'},
    )


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> MessageResponse:
    """Delete a single project."""
    try:
        return await service.delete_project(project_id)
    except UpstreamError as e:
        raise _upstream_failed() from e
