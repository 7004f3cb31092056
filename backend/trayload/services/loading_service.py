"""
TrayLoad Backend — Loading Service (Report Orchestrator)
==========================================================

What:  Builds a project's loading report from the database.
How:   Reads one consistent snapshot of the project, hands it to the pure
       engine in trayload.loading and wraps the result for the API.
Who:   routes/loading.py.
When:  On every GET of the loading report; nothing is cached.

Orchestration Flow (GET /api/projects/{id}/loading):
    ┌──────────┐    ┌───────────────┐    ┌──────────────┐    ┌──────────┐
    │ Project  │───▶│  Rows → frozen│───▶│   Routing    │───▶│  Engine  │
    │ + rows   │    │   snapshots   │    │ → one tray   │    │ (report) │
    └──────────┘    └───────────────┘    └──────────────┘    └──────────┘

The engine is synchronous and CPU-only. It never sees ORM objects. The
material catalogue is read alongside the project rows so tray self-weight
and the chosen support weights come from the same snapshot.
"""

import logging
import time
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.exceptions import DatabaseError, TrayLoadError
from trayload.loading import (
    CableSnapshot,
    CableTypeSnapshot,
    LoadingReport,
    TraySnapshot,
    build_loading_report,
    resolve_tray_assignments,
)
from trayload.models.cable import Cable, CableType
from trayload.models.project import Project
from trayload.models.tray import Tray
from trayload.schemas.loading import LoadingReportResponse, TrayTypeListResponse
from trayload.services.material_service import material_service
from trayload.services.project_service import project_service
from trayload.services.scope import require_project

logger = logging.getLogger(__name__)


class LoadingService:
    """
    Read-only orchestration around the loading engine.

    Data problems in the project (a cable whose type was deleted, trays of
    one type with different widths) never fail the request; they come back
    inside the report. Only database failures raise.
    """

    async def build_report(self, db: AsyncSession, project_id: UUID) -> LoadingReportResponse:
        """
        Compute the full loading report.

        Returns:
            LoadingReportResponse with per-type rows, per-tray rows and the
            unresolved references

        Raises:
            NotFoundError: Project does not exist (→ 404)
            DatabaseError: Reading the snapshot failed (→ 500)
        """
        project, report = await self._compute(db, project_id)
        return LoadingReportResponse(
            project_id=project.id,
            default_support_distance=project.support_distance,
            support_weight=project.support_weight,
            types=list(report.types),
            trays=list(report.trays),
            unresolved=list(report.unresolved),
        )

    async def list_tray_types(self, db: AsyncSession, project_id: UUID) -> TrayTypeListResponse:
        """Per-type rows only, as shown in the support distance editor."""
        project, report = await self._compute(db, project_id)
        return TrayTypeListResponse(
            project_id=project.id,
            types=list(report.types),
            needs_manual_resolution=sum(1 for row in report.types if row.needs_manual_resolution),
        )

    async def _compute(self, db: AsyncSession, project_id: UUID) -> Tuple[Project, LoadingReport]:
        try:
            project = await require_project(db, project_id)
            cable_types, cables, trays = await self._load_snapshot(db, project_id)
            overrides, support_choices = await project_service.get_override_inputs(db, project_id)
            material_trays, material_supports = await material_service.load_snapshot(db)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error loading project %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load the project data. Please try again.",
                context={"project_id": str(project_id)},
            )

        start = time.perf_counter()
        routing = resolve_tray_assignments(cables, trays)
        report = build_loading_report(
            routing.assignments,
            cable_types,
            trays,
            overrides=overrides,
            default_support_distance=project.support_distance,
            support_weight_kg=project.support_weight,
            crossings=routing.crossings,
            support_choices=support_choices,
            material_trays=material_trays,
            material_supports=material_supports,
        )
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "Loading report for project %s: %d trays, %d types, %d cable assignments, "
            "%d crossings, %d unresolved (%.1fms)",
            project_id,
            len(report.trays),
            len(report.types),
            len(routing.assignments),
            len(routing.crossings),
            len(report.unresolved),
            elapsed_ms,
        )
        if report.unresolved:
            logger.warning(
                "Project %s has %d unresolved references; their weight is excluded",
                project_id,
                len(report.unresolved),
            )
        return project, report

    async def _load_snapshot(
        self, db: AsyncSession, project_id: UUID
    ) -> Tuple[List[CableTypeSnapshot], List[CableSnapshot], List[TraySnapshot]]:
        type_result = await db.execute(
            select(CableType).where(CableType.project_id == project_id).order_by(CableType.name)
        )
        cable_result = await db.execute(
            select(Cable).where(Cable.project_id == project_id).order_by(Cable.cable_id)
        )
        tray_result = await db.execute(
            select(Tray).where(Tray.project_id == project_id).order_by(Tray.name)
        )
        return (
            [CableTypeSnapshot.model_validate(row) for row in type_result.scalars().all()],
            [CableSnapshot.model_validate(row) for row in cable_result.scalars().all()],
            [TraySnapshot.model_validate(row) for row in tray_result.scalars().all()],
        )


loading_service = LoadingService()
