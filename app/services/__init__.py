"""Services for the GCP Project Manager API."""

from app.services.sessions import SessionStore, InMemorySessionStore
from app.services.auth import AuthService, OAuthStateCache
from app.services.resource_manager import ResourceManagerClient, UpstreamError
from app.services.projects import ProjectService
from app.services.bulk import BulkOperationService

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "AuthService",
    "OAuthStateCache",
    "ResourceManagerClient",
    "UpstreamError",
    "ProjectService",
    "BulkOperationService",
]
