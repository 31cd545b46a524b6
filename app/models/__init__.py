"""Pydantic models for the GCP Project Manager API."""

from app.models.auth import (
    OAuthCredentials,
    UserProfile,
    Session,
    AuthUrlResponse,
    UserResponse,
    LogoutResponse,
)
from app.models.project import (
    ACTIVE,
    MAX_BULK_PROJECTS,
    Project,
    ProjectCreate,
    ProjectListResponse,
    ProjectCreateResponse,
    MessageResponse,
    ServiceAccountKey,
    BulkCreateRequest,
    BulkCreateResponse,
    ProjectIdsRequest,
    ProgressUpdate,
)

__all__ = [
    # Auth models
    "OAuthCredentials",
    "UserProfile",
    "Session",
    "AuthUrlResponse",
    "UserResponse",
    "LogoutResponse",
    # Project models
    "ACTIVE",
    "MAX_BULK_PROJECTS",
    "Project",
    "ProjectCreate",
    "ProjectListResponse",
    "ProjectCreateResponse",
    "MessageResponse",
    "ServiceAccountKey",
    "BulkCreateRequest",
    "BulkCreateResponse",
    "ProjectIdsRequest",
    "ProgressUpdate",
]
