"""Tests for project listing, creation and deletion."""

import json
from datetime import datetime, timedelta, timezone
import pytest
import respx
from httpx import AsyncClient, Response

from app.config import get_settings
from app.models.project import ProjectCreate
from app.services.projects import ProjectService
from app.services.resource_manager import UpstreamError

RESOURCE_MANAGER_URL = "https://cloudresourcemanager.googleapis.com/v1"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


@pytest.fixture
def strict_upstream(monkeypatch):
    """Surface upstream failures instead of demo data."""
    monkeypatch.setattr(get_settings(), "strict_upstream", True)


class TestListProjects:
    """Tests for GET /api/projects."""

    @respx.mock
    async def test_lists_upstream_projects(
        self,
        client: AsyncClient,
        auth_headers,
        mock_upstream_projects,
    ):
        """Upstream projects are passed through, including unmodelled fields."""
        route = respx.get(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json=mock_upstream_projects)
        )

        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 200
        projects = response.json()["projects"]
        assert [p["projectId"] for p in projects] == ["analytics-prod", "old-sandbox"]
        assert projects[1]["lifecycleState"] == "DELETE_REQUESTED"
        assert projects[0]["parent"] == {"type": "organization", "id": "123456789"}
        assert route.calls.last.request.headers["authorization"] == "Bearer access-token-123"

    @respx.mock
    async def test_empty_upstream_list(self, client: AsyncClient, auth_headers):
        respx.get(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json={})
        )

        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"projects": []}

    async def test_falls_back_to_demo_projects(
        self,
        client: AsyncClient,
        auth_headers,
        upstream_down,
    ):
        """An upstream failure still succeeds with the fixed demo projects."""
        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 200
        projects = response.json()["projects"]
        assert projects == [
            {
                "projectId": "demo-project-1",
                "name": "Demo Project 1",
                "projectNumber": "123456789",
                "lifecycleState": "ACTIVE",
                "createTime": "2024-01-15T10:30:00Z",
            },
            {
                "projectId": "demo-project-2",
                "name": "Demo Project 2",
                "projectNumber": "987654321",
                "lifecycleState": "ACTIVE",
                "createTime": "2024-01-20T14:45:00Z",
            },
        ]

    async def test_strict_mode_surfaces_upstream_failure(
        self,
        client: AsyncClient,
        auth_headers,
        upstream_down,
        strict_upstream,
    ):
        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 502
        assert "Upstream" in response.json()["detail"]

    @pytest.mark.parametrize("body", [
        {"projects": [{"name": "no-id"}]},
        {"projects": "not-a-list"},
        {"projects": ["analytics-prod"]},
        ["analytics-prod"],
    ])
    @respx.mock
    async def test_malformed_upstream_list_falls_back_to_demo(
        self,
        client: AsyncClient,
        auth_headers,
        body,
    ):
        respx.get(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json=body)
        )

        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 200
        ids = [p["projectId"] for p in response.json()["projects"]]
        assert ids == ["demo-project-1", "demo-project-2"]

    @respx.mock
    async def test_strict_mode_rejects_malformed_upstream_list(
        self,
        client: AsyncClient,
        auth_headers,
        strict_upstream,
    ):
        respx.get(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json={"projects": [{"name": "no-id"}]})
        )

        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 502

    @respx.mock
    async def test_expired_credentials_refreshed_before_listing(
        self,
        client: AsyncClient,
        session_store,
        session_factory,
    ):
        session = session_factory(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        await session_store.put(session)
        respx.post(GOOGLE_TOKEN_URL).mock(
            return_value=Response(200, json={"access_token": "ya29.new", "expires_in": 3599})
        )
        route = respx.get(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json={"projects": []})
        )

        response = await client.get(
            "/api/projects",
            headers={"Authorization": f"Bearer {session.token}"},
        )

        assert response.status_code == 200
        assert route.calls.last.request.headers["authorization"] == "Bearer ya29.new"


class TestCreateProject:
    """Tests for POST /api/projects."""

    async def test_demo_mode_create(
        self,
        client: AsyncClient,
        auth_headers,
        upstream_down,
    ):
        """A failed upstream create reports a fabricated ACTIVE project."""
        response = await client.post(
            "/api/projects",
            headers=auth_headers,
            json={"projectId": "demo-1", "name": "Demo"},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is True
        assert "Demo Mode" in payload["message"]
        project = payload["project"]
        assert project["projectId"] == "demo-1"
        assert project["name"] == "Demo"
        assert project["lifecycleState"] == "ACTIVE"
        assert project["projectNumber"].isdigit()
        assert project["createTime"].endswith("Z")

    @respx.mock
    async def test_real_create_passes_upstream_body_through(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        route = respx.post(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json={"name": "operations/cp.1234567890"})
        )

        response = await client.post(
            "/api/projects",
            headers=auth_headers,
            json={"projectId": "my-new-project", "name": "My New Project"},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload == {
            "success": True,
            "project": {"name": "operations/cp.1234567890"},
            "message": "Project created successfully",
        }
        sent = json.loads(route.calls.last.request.content)
        assert sent == {
            "projectId": "my-new-project",
            "name": "My New Project",
            "parent": {"type": "organization", "id": get_settings().gcp_organization_id},
        }

    @respx.mock
    async def test_non_object_create_response_falls_back_to_demo(
        self,
        client: AsyncClient,
        auth_headers,
    ):
        respx.post(f"{RESOURCE_MANAGER_URL}/projects").mock(
            return_value=Response(200, json=["operations/cp.1"])
        )

        response = await client.post(
            "/api/projects",
            headers=auth_headers,
            json={"projectId": "demo-1", "name": "Demo"},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["message"] == "Project created successfully (Demo Mode)"
        assert payload["project"]["projectId"] == "demo-1"

    @pytest.mark.parametrize("body", [
        {},
        {"projectId": "demo-1"},
        {"name": "Demo"},
        {"projectId": "   ", "name": "Demo"},
        {"projectId": "demo-1", "name": ""},
    ])
    async def test_missing_fields_rejected(
        self,
        client: AsyncClient,
        auth_headers,
        upstream_down,
        body,
    ):
        response = await client.post("/api/projects", headers=auth_headers, json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Project ID and name are required"
        assert not upstream_down.calls

    async def test_create_requires_session(self, client: AsyncClient, upstream_down):
        """Unauthorized requests never reach the upstream API."""
        response = await client.post(
            "/api/projects",
            json={"projectId": "demo-1", "name": "Demo"},
        )

        assert response.status_code == 401
        assert not upstream_down.calls

    async def test_strict_mode_create_failure(
        self,
        client: AsyncClient,
        auth_headers,
        upstream_down,
        strict_upstream,
    ):
        response = await client.post(
            "/api/projects",
            headers=auth_headers,
            json={"projectId": "demo-1", "name": "Demo"},
        )

        assert response.status_code == 502


class TestDeleteProject:
    """Tests for DELETE /api/projects/{project_id}."""

    @respx.mock
    async def test_real_delete(self, client: AsyncClient, auth_headers):
        route = respx.delete(f"{RESOURCE_MANAGER_URL}/projects/analytics-prod").mock(
            return_value=Response(200, json={})
        )

        response = await client.delete("/api/projects/analytics-prod", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Project deleted successfully"}
        assert route.called

    async def test_demo_mode_delete(self, client: AsyncClient, auth_headers, upstream_down):
        response = await client.delete("/api/projects/demo-project-1", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Project deleted successfully (Demo Mode)",
        }

    async def test_delete_requires_session(self, client: AsyncClient, upstream_down):
        response = await client.delete("/api/projects/demo-project-1")

        assert response.status_code == 401
        assert not upstream_down.calls


class TestProjectService:
    """Tests for ProjectService with a stubbed client."""

    class FailingClient:
        def __init__(self, access_token: str):
            self.access_token = access_token

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc_info):
            return None

        async def list_projects(self):
            raise UpstreamError("boom")

        async def create_project(self, project_id, name, organization_id):
            raise UpstreamError("boom")

        async def delete_project(self, project_id):
            raise UpstreamError("boom")

    async def test_create_scenario_in_demo_mode(self, session_factory):
        service = ProjectService(session_factory(), client_factory=self.FailingClient)

        result = await service.create_project(ProjectCreate(project_id="demo-1", name="Demo"))

        assert result.success is True
        assert result.project.lifecycle_state == "ACTIVE"
        assert "Demo Mode" in result.message

    async def test_strict_mode_raises(self, session_factory, strict_upstream):
        service = ProjectService(session_factory(), client_factory=self.FailingClient)

        with pytest.raises(UpstreamError):
            await service.delete_project("demo-1")

    async def test_validation_happens_before_upstream(self, session_factory):
        service = ProjectService(session_factory(), client_factory=self.FailingClient)

        with pytest.raises(ValueError, match="required"):
            await service.create_project(ProjectCreate(project_id="", name="Demo"))
