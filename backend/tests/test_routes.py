"""
TrayLoad Backend — HTTP Route Tests
=====================================

What:  Tests for the FastAPI layer: status codes, error bodies, headers.
How:   HTTPX AsyncClient over ASGITransport; service singletons are patched,
       so no query reaches the mock session.

What we test:
    ✅ Application exceptions mapped to 400 / 404 / 409 / 500 with a request_id
    ✅ Schema validation failures → 422
    ✅ DELETE endpoints → 204 with an empty body
    ✅ Tray type labels containing "/" travel in the override path
    ✅ Material catalogue endpoints and the override's support_id
    ✅ X-Request-ID echoed, X-Total-Count and Cache-Control set
    ✅ Health check reports database reachability
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from trayload.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from trayload.loading.types import TrayTypeRow
from trayload.schemas.cable import CableListResponse
from trayload.schemas.loading import LoadingReportResponse, TrayTypeListResponse
from trayload.schemas.material import MaterialTrayResponse
from trayload.schemas.project import (
    ProjectListResponse,
    ProjectResponse,
    SupportOverrideResponse,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def project_response(**overrides):
    values = {
        "id": uuid4(),
        "project_number": "P-1001",
        "name": "Substation North",
        "customer": "Grid Co",
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return ProjectResponse(**values)


class TestProjectRoutes:

    @pytest.mark.asyncio
    async def test_list_sets_total_count(self, test_client):
        listing = ProjectListResponse(projects=[project_response()], total_count=1)
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.list_projects = AsyncMock(return_value=listing)
            response = await test_client.get("/api/projects")

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"
        assert response.json()["projects"][0]["project_number"] == "P-1001"

    @pytest.mark.asyncio
    async def test_create_returns_201(self, test_client):
        created = project_response(project_number="P-2002")
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.create_project = AsyncMock(return_value=created)
            response = await test_client.post(
                "/api/projects",
                json={"project_number": "P-2002", "name": "Harbour", "customer": "Port"},
            )

        assert response.status_code == 201
        payload = mock_service.create_project.await_args.args[1]
        assert payload.project_number == "P-2002"

    @pytest.mark.asyncio
    async def test_blank_name_is_422(self, test_client):
        response = await test_client.post(
            "/api/projects",
            json={"project_number": "P-1", "name": "   ", "customer": "Grid Co"},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_not_found_body(self, test_client):
        project_id = uuid4()
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.get_project = AsyncMock(
                side_effect=NotFoundError(resource="project", resource_id=str(project_id))
            )
            response = await test_client.get(
                f"/api/projects/{project_id}", headers={"X-Request-ID": "req-404"}
            )

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["request_id"] == "req-404"
        assert body["details"]["resource_id"] == str(project_id)
        assert response.headers["X-Request-ID"] == "req-404"

    @pytest.mark.asyncio
    async def test_conflict_body(self, test_client):
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.create_project = AsyncMock(
                side_effect=ConflictError(resource="project", field="project_number", value="P-1001")
            )
            response = await test_client.post(
                "/api/projects",
                json={"project_number": "P-1001", "name": "Dup", "customer": "Grid Co"},
            )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert body["details"] == {"resource": "project", "field": "project_number", "value": "P-1001"}

    @pytest.mark.asyncio
    async def test_database_error_is_generic(self, test_client):
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.list_projects = AsyncMock(
                side_effect=DatabaseError(context={"error_type": "OperationalError"})
            )
            response = await test_client.get("/api/projects")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_delete_returns_204(self, test_client):
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.delete_project = AsyncMock(return_value=None)
            response = await test_client.delete(f"/api/projects/{uuid4()}")

        assert response.status_code == 204
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_invalid_uuid_is_422(self, test_client):
        response = await test_client.get("/api/projects/not-a-uuid")
        assert response.status_code == 422


class TestSupportOverrideRoutes:

    @pytest.mark.asyncio
    async def test_tray_type_with_slash(self, test_client):
        project_id = uuid4()
        saved = SupportOverrideResponse(tray_type="Ladder 300/60", support_distance=2.0, updated_at=NOW)
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.set_override = AsyncMock(return_value=saved)
            response = await test_client.put(
                f"/api/projects/{project_id}/support-overrides/Ladder 300/60",
                json={"support_distance": 2.0},
            )

        assert response.status_code == 200
        args = mock_service.set_override.await_args.args
        assert args[1:] == (project_id, "Ladder 300/60", 2.0, None)

    @pytest.mark.asyncio
    async def test_negative_distance_is_422(self, test_client):
        response = await test_client.put(
            f"/api/projects/{uuid4()}/support-overrides/Mesh",
            json={"support_distance": -1},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_tray_type_is_400(self, test_client):
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.set_override = AsyncMock(
                side_effect=ValidationError(message="Tray type must not be blank", field="tray_type")
            )
            response = await test_client.put(
                f"/api/projects/{uuid4()}/support-overrides/%20",
                json={"support_distance": 1.0},
            )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "tray_type"

    @pytest.mark.asyncio
    async def test_delete_override(self, test_client):
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.delete_override = AsyncMock(return_value=None)
            response = await test_client.delete(f"/api/projects/{uuid4()}/support-overrides/Mesh")

        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_support_id_forwarded(self, test_client):
        project_id, support_id = uuid4(), uuid4()
        saved = SupportOverrideResponse(
            tray_type="Ladder", support_distance=2.0, support_id=support_id, updated_at=NOW
        )
        with patch("trayload.routes.projects.project_service") as mock_service:
            mock_service.set_override = AsyncMock(return_value=saved)
            response = await test_client.put(
                f"/api/projects/{project_id}/support-overrides/Ladder",
                json={"support_distance": 2.0, "support_id": str(support_id)},
            )

        assert response.status_code == 200
        assert response.json()["support_id"] == str(support_id)
        assert mock_service.set_override.await_args.args[4] == support_id


class TestMaterialRoutes:

    @pytest.mark.asyncio
    async def test_create_tray_returns_201(self, test_client):
        created = MaterialTrayResponse(
            id=uuid4(), tray_type="Ladder 300", weight_kg_per_m=3.2, created_at=NOW, updated_at=NOW
        )
        with patch("trayload.routes.materials.material_service") as mock_service:
            mock_service.create_tray = AsyncMock(return_value=created)
            response = await test_client.post(
                "/api/materials/trays", json={"tray_type": "Ladder 300", "weight_kg_per_m": 3.2}
            )

        assert response.status_code == 201
        assert response.json()["tray_type"] == "Ladder 300"

    @pytest.mark.asyncio
    async def test_negative_support_weight_is_422(self, test_client):
        response = await test_client.post(
            "/api/materials/supports", json={"support_type": "Bracket", "weight_kg": -1}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_support_is_409(self, test_client):
        with patch("trayload.routes.materials.material_service") as mock_service:
            mock_service.create_support = AsyncMock(
                side_effect=ConflictError(
                    resource="material support",
                    field="support_type",
                    value="Bracket",
                    scope="the catalogue",
                )
            )
            response = await test_client.post("/api/materials/supports", json={"support_type": "Bracket"})

        assert response.status_code == 409
        assert response.json()["message"].endswith("already exists in the catalogue")

    @pytest.mark.asyncio
    async def test_delete_support_returns_204(self, test_client):
        with patch("trayload.routes.materials.material_service") as mock_service:
            mock_service.delete_support = AsyncMock(return_value=None)
            response = await test_client.delete(f"/api/materials/supports/{uuid4()}")

        assert response.status_code == 204
        assert response.content == b""


class TestCableRoutes:

    @pytest.mark.asyncio
    async def test_pagination_params(self, test_client):
        project_id = uuid4()
        listing = CableListResponse(cables=[], total_count=250, has_more=True)
        with patch("trayload.routes.cables.cable_service") as mock_service:
            mock_service.list_cables = AsyncMock(return_value=listing)
            response = await test_client.get(
                f"/api/projects/{project_id}/cables", params={"limit": 50, "offset": 100}
            )

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "250"
        assert response.json()["has_more"] is True
        mock_service.list_cables.assert_awaited_once()
        assert mock_service.list_cables.await_args.kwargs == {"limit": 50, "offset": 100}

    @pytest.mark.asyncio
    async def test_zero_limit_is_422(self, test_client):
        response = await test_client.get(f"/api/projects/{uuid4()}/cables", params={"limit": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_cable_type_is_422(self, test_client):
        response = await test_client.post(f"/api/projects/{uuid4()}/cables", json={"cable_id": "C-1"})
        assert response.status_code == 422


class TestLoadingRoutes:

    @pytest.mark.asyncio
    async def test_report_is_not_cached(self, test_client):
        project_id = uuid4()
        report = LoadingReportResponse(
            project_id=project_id,
            default_support_distance=1.5,
            types=[TrayTypeRow(type_name="Ladder", width_mm=300.0, effective_support_spacing=2.0)],
            trays=[],
            unresolved=[],
        )
        with patch("trayload.routes.loading.loading_service") as mock_service:
            mock_service.build_report = AsyncMock(return_value=report)
            response = await test_client.get(f"/api/projects/{project_id}/loading")

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "no-cache"
        body = response.json()
        assert body["types"][0]["effective_support_spacing"] == 2.0
        assert body["types"][0]["needs_manual_resolution"] is False

    @pytest.mark.asyncio
    async def test_tray_types(self, test_client):
        project_id = uuid4()
        listing = TrayTypeListResponse(
            project_id=project_id,
            types=[TrayTypeRow(type_name="Mesh", has_multiple_widths=True, needs_manual_resolution=True)],
            needs_manual_resolution=1,
        )
        with patch("trayload.routes.loading.loading_service") as mock_service:
            mock_service.list_tray_types = AsyncMock(return_value=listing)
            response = await test_client.get(f"/api/projects/{project_id}/tray-types")

        assert response.status_code == 200
        body = response.json()
        assert body["needs_manual_resolution"] == 1
        assert body["types"][0]["width_mm"] is None


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        connection = MagicMock()
        connection.__aenter__ = AsyncMock(return_value=AsyncMock())
        connection.__aexit__ = AsyncMock(return_value=False)
        with patch("trayload.routes.health.engine") as mock_engine:
            mock_engine.connect.return_value = connection
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_database_unreachable(self, test_client):
        with patch("trayload.routes.health.engine") as mock_engine:
            mock_engine.connect.side_effect = OSError("connection refused")
            response = await test_client.get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["database"] == "disconnected"
