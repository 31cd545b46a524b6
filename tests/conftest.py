"""Pytest configuration and fixtures for GCP Project Manager tests."""

import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
import pytest
import pytest_asyncio
import respx
from httpx import AsyncClient, ASGITransport, Response

# Set test environment before importing app modules
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ["STRICT_UPSTREAM"] = "false"
os.environ["OAUTH_VERIFY_STATE"] = "true"
os.environ["BULK_CREATE_DELAY_SECONDS"] = "0"
os.environ["BULK_DELETE_DELAY_SECONDS"] = "0"

from app.main import app
from app.models.auth import OAuthCredentials, Session, UserProfile
from app.services.sessions import InMemorySessionStore
from app.utils.rate_limit import limiter

RESOURCE_MANAGER_HOST = "cloudresourcemanager.googleapis.com"
SESSION_TOKEN = "test-session-token"


def make_session(
    token: str = SESSION_TOKEN,
    expires_at: datetime | None = None,
    refresh_token: str | None = "refresh-token-123",
) -> Session:
    """Build a session for a signed-in test user."""
    return Session(
        token=token,
        credentials=OAuthCredentials(
            access_token="access-token-123",
            refresh_token=refresh_token,
            expires_at=expires_at or datetime.now(timezone.utc) + timedelta(hours=1),
        ),
        user=UserProfile(
            id="108234567890",
            name="Test User",
            email="user@example.com",
            picture="https://example.com/avatar.png",
        ),
    )


@pytest.fixture
def session_factory():
    """Factory for building test sessions."""
    return make_session


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Start every test with an empty rate limit window."""
    limiter.reset()
    yield


@pytest_asyncio.fixture
async def session_store() -> AsyncGenerator[InMemorySessionStore, None]:
    """The application's session store, emptied after each test."""
    store = app.state.session_store
    yield store
    await store.clear()


@pytest_asyncio.fixture
async def client(session_store: InMemorySessionStore) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_session(session_store: InMemorySessionStore) -> Session:
    """A stored session for the test user."""
    session = make_session()
    await session_store.put(session)
    return session


@pytest.fixture
def auth_headers(auth_session: Session) -> dict[str, str]:
    """Authorization headers carrying the test session token."""
    return {"Authorization": f"Bearer {auth_session.token}"}


@pytest.fixture
def upstream_down():
    """Make every Cloud Resource Manager call fail with 403."""
    with respx.mock(assert_all_called=False) as mock:
        mock.route(host=RESOURCE_MANAGER_HOST).mock(
            return_value=Response(
                403,
                json={"error": {"code": 403, "message": "The caller does not have permission"}},
            )
        )
        yield mock


@pytest.fixture
def mock_google_tokens():
    """Mock Google token endpoint response."""
    return {
        "access_token": "ya29.fresh-access-token",
        "refresh_token": "1//refresh-token",
        "expires_in": 3599,
        "scope": "openid https://www.googleapis.com/auth/cloud-platform",
        "token_type": "Bearer",
        "id_token": "eyJhbGciOiJSUzI1NiJ9.payload.signature",
    }


@pytest.fixture
def mock_google_userinfo():
    """Mock Google userinfo response."""
    return {
        "id": "108234567890",
        "email": "user@example.com",
        "verified_email": True,
        "name": "Test User",
        "given_name": "Test",
        "family_name": "User",
        "picture": "https://example.com/avatar.png",
        "locale": "en",
    }


@pytest.fixture
def mock_upstream_projects():
    """Mock Cloud Resource Manager projects.list response."""
    return {
        "projects": [
            {
                "projectNumber": "415104041262",
                "projectId": "analytics-prod",
                "lifecycleState": "ACTIVE",
                "name": "Analytics Prod",
                "createTime": "2023-03-01T09:00:00.000Z",
                "parent": {"type": "organization", "id": "123456789"},
            },
            {
                "projectNumber": "515104041263",
                "projectId": "old-sandbox",
                "lifecycleState": "DELETE_REQUESTED",
                "name": "Old Sandbox",
                "createTime": "2022-07-12T12:00:00.000Z",
            },
        ]
    }
