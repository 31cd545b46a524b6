"""Cloud project models for the GCP Project Manager API."""

from typing import Any
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

ACTIVE = "ACTIVE"
MAX_BULK_PROJECTS = 10


class Project(BaseModel):
    """A Cloud Resource Manager project.

    Upstream fields that are not modelled here are passed through untouched.
    """
    project_id: str = Field(..., min_length=1)
    name: str = ""
    project_number: str | None = None
    lifecycle_state: str | None = None
    create_time: str | None = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "allow",
    }


class ProjectCreate(BaseModel):
    """Request payload for creating a single project."""
    project_id: str | None = None
    name: str | None = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ProjectListResponse(BaseModel):
    projects: list[Project] = Field(default_factory=list)


class ProjectCreateResponse(BaseModel):
    """Response payload for project creation.

    ``project`` is the upstream body as returned by Google on a real create,
    or a fabricated project in demo mode.
    """
    success: bool = True
    project: Project | dict[str, Any]
    message: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ServiceAccountKey(BaseModel):
    """Service account key bundle in Google's key-file layout."""
    type: str = "service_account"
    project_id: str
    private_key_id: str
    private_key: str
    client_email: str
    client_id: str
    auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    token_uri: str = "https://oauth2.googleapis.com/token"
    auth_provider_x509_cert_url: str = "https://www.googleapis.com/oauth2/v1/certs"
    client_x509_cert_url: str | None = None


class BulkCreateRequest(BaseModel):
    """Request payload for bulk project creation."""
    count: int = 1
    prefix: str = ""
    enable_billing: bool = False
    create_service_accounts: bool = False

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class BulkCreateResponse(BaseModel):
    success: bool = True
    projects: list[Project] = Field(default_factory=list)
    service_account_keys: list[ServiceAccountKey] | None = None
    message: str

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ProjectIdsRequest(BaseModel):
    """Request payload carrying a list of project IDs."""
    project_ids: list[str] = Field(default_factory=list)

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ProgressUpdate(BaseModel):
    """Progress of an in-flight bulk operation."""
    current: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    status: str
    project_id: str | None = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
