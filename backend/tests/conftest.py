"""
TrayLoad Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── make_result: Builds the object `await session.execute(...)` returns
    ├── project_row / cable_type_row / tray_row / cable_row: ORM row factories
    ├── material_tray_row / material_support_row: catalogue row factories
    └── test_client: HTTPX AsyncClient with get_db_session overridden

Core engine tests need none of these; they build snapshots directly.
"""

import os

# Settings are read at import time, so the environment must be set before
# anything from trayload is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from trayload.database import get_db_session
from trayload.models import (
    Cable,
    CableType,
    MaterialSupport,
    MaterialTray,
    Project,
    SupportDistanceOverride,
    Tray,
)


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Database mocks
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_project(mock_db_session, make_result, project_row):
            mock_db_session.execute.return_value = make_result(one=project_row())
            result = await project_service.get_project(mock_db_session, project_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_result():
    """
    Factory for execute() results.

    one:    value of scalar_one_or_none()
    rows:   value of scalars().all()
    scalar: value of scalar() (counts)
    """
    def _make(one=None, rows=None, scalar=None):
        result = MagicMock()
        result.scalar_one_or_none.return_value = one
        result.scalars.return_value.all.return_value = list(rows or [])
        result.scalar.return_value = scalar
        return result
    return _make


# ══════════════════════════════════════════════════════════════════════════
# ORM row factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def project_row():
    def _make(**overrides):
        values = {
            "id": uuid4(),
            "project_number": "P-1001",
            "name": "Substation North",
            "customer": "Grid Co",
            "manager": None,
            "description": None,
            "support_distance": None,
            "support_weight": None,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return Project(**values)
    return _make


@pytest.fixture
def override_row():
    def _make(project_id, tray_type, support_distance=None, support_id=None):
        return SupportDistanceOverride(
            id=uuid4(),
            project_id=project_id,
            tray_type=tray_type,
            support_distance=support_distance,
            support_id=support_id,
            updated_at=NOW,
        )
    return _make


@pytest.fixture
def material_tray_row():
    def _make(**overrides):
        values = {
            "id": uuid4(),
            "tray_type": "Ladder 300",
            "manufacturer": None,
            "height_mm": 60.0,
            "width_mm": 300.0,
            "weight_kg_per_m": 3.0,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return MaterialTray(**values)
    return _make


@pytest.fixture
def material_support_row():
    def _make(**overrides):
        values = {
            "id": uuid4(),
            "support_type": "Bracket 300",
            "height_mm": None,
            "width_mm": None,
            "length_mm": 300.0,
            "weight_kg": 4.0,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return MaterialSupport(**values)
    return _make


@pytest.fixture
def cable_type_row():
    def _make(project_id, **overrides):
        values = {
            "id": uuid4(),
            "project_id": project_id,
            "name": "NYY 3x2.5",
            "purpose": None,
            "diameter_mm": 12.0,
            "weight_kg_per_m": 0.5,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return CableType(**values)
    return _make


@pytest.fixture
def tray_row():
    def _make(project_id, **overrides):
        values = {
            "id": uuid4(),
            "project_id": project_id,
            "name": "T-101",
            "tray_type": "Ladder 300",
            "purpose": None,
            "width_mm": 300.0,
            "height_mm": 60.0,
            "length_mm": 6000.0,
            "include_grounding_cable": False,
            "grounding_cable_type_id": None,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return Tray(**values)
    return _make


@pytest.fixture
def cable_row():
    def _make(project_id, cable_type_id, **overrides):
        values = {
            "id": uuid4(),
            "project_id": project_id,
            "cable_id": "C-0001",
            "tag": None,
            "cable_type_id": cable_type_id,
            "tray_id": None,
            "from_location": None,
            "to_location": None,
            "routing": None,
            "design_length": None,
            "install_length": None,
            "pull_date": None,
            "connected_from": None,
            "connected_to": None,
            "tested": None,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(overrides)
        return Cable(**values)
    return _make


@pytest.fixture
def added_rows(mock_db_session):
    """
    Collects objects passed to session.add and stamps them on flush.

    Returns the list so tests can inspect what was inserted.
    """
    rows = []

    def _add(row):
        rows.append(row)

    async def _flush():
        # Fill the defaults a real INSERT would
        for row in rows:
            if getattr(row, "id", None) is None:
                row.id = uuid4()
            for field in ("created_at", "updated_at"):
                if hasattr(type(row), field) and getattr(row, field, None) is None:
                    setattr(row, field, NOW)

    mock_db_session.add = MagicMock(side_effect=_add)
    mock_db_session.flush = AsyncMock(side_effect=_flush)
    return rows


# ══════════════════════════════════════════════════════════════════════════
# HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    get_db_session is overridden with mock_db_session; route tests patch the
    service singletons they call.
    """
    from trayload.main import app

    async def _session_override():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _session_override
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()

