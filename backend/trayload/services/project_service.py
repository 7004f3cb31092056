"""
TrayLoad Backend — Project Service
====================================

What:  Project CRUD and the per-tray-type support distance overrides.
How:   Stateless service; every call receives the request's AsyncSession.
       Writes are flushed here and committed by get_db_session.
Who:   routes/projects.py; LoadingService reads the override map and the
       catalogue support picked per tray type.

Override keys:
    Stored with surrounding whitespace removed (TrayTypeName). Matching a
    tray's type against a key is exact and case-sensitive, so "Power" and
    "power" may carry different spacings.
"""

import logging
from typing import Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    TrayLoadError,
    ValidationError,
)
from trayload.loading.types import TrayTypeName
from trayload.models.material import MaterialSupport
from trayload.models.project import Project, SupportDistanceOverride
from trayload.schemas.project import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    SupportOverrideListResponse,
    SupportOverrideResponse,
)
from trayload.services.scope import (
    flush_or_conflict,
    require_catalogue_reference,
    require_project,
)

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Business logic for projects.

    Error Handling Strategy:
        Application exceptions (NotFoundError, ConflictError,
        ValidationError) propagate unchanged. Anything else raised while
        talking to the database is logged and wrapped in DatabaseError.
    """

    # ══════════════════════════════════════════════════════════════════════
    # Projects
    # ══════════════════════════════════════════════════════════════════════

    async def list_projects(self, db: AsyncSession) -> ProjectListResponse:
        """All projects ordered by project number."""
        try:
            result = await db.execute(select(Project).order_by(Project.project_number))
            projects = list(result.scalars().all())
            return ProjectListResponse(
                projects=[ProjectResponse.model_validate(p) for p in projects],
                total_count=len(projects),
            )
        except Exception as e:
            logger.error("Database error listing projects: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve projects. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_project(self, db: AsyncSession, project_id: UUID) -> ProjectResponse:
        """
        Retrieve a single project.

        Raises:
            NotFoundError: Project does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            project = await require_project(db, project_id)
            return ProjectResponse.model_validate(project)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error fetching project %s: %s", project_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the project. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def create_project(self, db: AsyncSession, payload: ProjectCreate) -> ProjectResponse:
        """
        Create a project.

        Raises:
            ConflictError: project_number already in use (→ 409)
            DatabaseError: Insert failed (→ 500)
        """
        try:
            await self._ensure_unique_number(db, payload.project_number)
            project = Project(**payload.model_dump())
            db.add(project)
            await flush_or_conflict(
                db, resource="project", field="project_number", value=payload.project_number
            )
            logger.info("Project created: %s (%s)", project.id, project.project_number)
            return ProjectResponse.model_validate(project)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error creating project: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the project. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_project(
        self,
        db: AsyncSession,
        project_id: UUID,
        payload: ProjectUpdate,
    ) -> ProjectResponse:
        """
        Apply a partial update. Only fields present in the request change.

        Raises:
            NotFoundError: Project does not exist (→ 404)
            ConflictError: New project_number already in use (→ 409)
        """
        try:
            project = await require_project(db, project_id)
            changes = payload.model_dump(exclude_unset=True)

            new_number = changes.get("project_number")
            if new_number is not None and new_number != project.project_number:
                await self._ensure_unique_number(db, new_number)

            for field, value in changes.items():
                setattr(project, field, value)
            await flush_or_conflict(
                db, resource="project", field="project_number", value=project.project_number
            )
            logger.info("Project %s updated: %s", project_id, sorted(changes))
            return ProjectResponse.model_validate(project)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error updating project %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the project. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def delete_project(self, db: AsyncSession, project_id: UUID) -> None:
        """Delete a project and, by cascade, everything it owns."""
        try:
            project = await require_project(db, project_id)
            await db.delete(project)
            await db.flush()
            logger.info("Project deleted: %s", project_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error deleting project %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the project. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def _ensure_unique_number(self, db: AsyncSession, project_number: str) -> None:
        result = await db.execute(
            select(func.count()).select_from(Project).where(
                Project.project_number == project_number
            )
        )
        if result.scalar():
            raise ConflictError(resource="project", field="project_number", value=project_number)

    # ══════════════════════════════════════════════════════════════════════
    # Support distance overrides
    # ══════════════════════════════════════════════════════════════════════

    async def list_overrides(
        self, db: AsyncSession, project_id: UUID
    ) -> SupportOverrideListResponse:
        """Overrides of one project, ordered by tray type."""
        try:
            await require_project(db, project_id)
            rows = await self._override_rows(db, project_id)
            return SupportOverrideListResponse(
                overrides=[SupportOverrideResponse.model_validate(row) for row in rows]
            )
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error listing overrides for %s: %s", project_id, str(e))
            raise DatabaseError(
                message="Could not retrieve support distances. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def get_override_map(
        self, db: AsyncSession, project_id: UUID
    ) -> Dict[str, Optional[float]]:
        """
        The project's override map as consumed by the loading engine.

        Keys are stored tray type labels, values are metres or None.
        The caller is responsible for checking that the project exists.
        """
        distances, _ = await self.get_override_inputs(db, project_id)
        return distances

    async def get_override_inputs(
        self, db: AsyncSession, project_id: UUID
    ) -> Tuple[Dict[str, Optional[float]], Dict[str, str]]:
        """Override map plus the support id picked per tray type, from one read."""
        rows = await self._override_rows(db, project_id)
        distances = {row.tray_type: row.support_distance for row in rows}
        choices = {
            row.tray_type: str(row.support_id) for row in rows if row.support_id is not None
        }
        return distances, choices

    async def set_override(
        self,
        db: AsyncSession,
        project_id: UUID,
        tray_type: str,
        support_distance: Optional[float],
        support_id: Optional[UUID] = None,
    ) -> SupportOverrideResponse:
        """
        Create or replace the support distance for one tray type.

        The tray type does not have to exist on any tray yet: an override
        pre-declares the type and it shows up in the report with no trays.
        support_id is replaced together with the distance; None clears it.

        Raises:
            ValidationError: Blank tray type label, or support_id not in
                the material catalogue (→ 400)
            NotFoundError: Project does not exist (→ 404)
        """
        type_name = TrayTypeName.parse(tray_type)
        if type_name is None:
            raise ValidationError(message="Tray type must not be blank", field="tray_type")

        try:
            await require_project(db, project_id)
            await require_catalogue_reference(db, MaterialSupport, support_id, "support_id")
            result = await db.execute(
                select(SupportDistanceOverride).where(
                    SupportDistanceOverride.project_id == project_id,
                    SupportDistanceOverride.tray_type == str(type_name),
                )
            )
            override = result.scalar_one_or_none()
            if override is None:
                override = SupportDistanceOverride(
                    project_id=project_id,
                    tray_type=str(type_name),
                    support_distance=support_distance,
                    support_id=support_id,
                )
                db.add(override)
            else:
                override.support_distance = support_distance
                override.support_id = support_id
            await flush_or_conflict(
                db, resource="support override", field="tray_type", value=str(type_name)
            )
            logger.info(
                "Support distance for %r in project %s set to %s (support %s)",
                str(type_name),
                project_id,
                support_distance,
                support_id,
            )
            return SupportOverrideResponse.model_validate(override)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error saving override for %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the support distance. Please try again.",
                context={"project_id": str(project_id), "tray_type": str(type_name)},
            )

    async def delete_override(self, db: AsyncSession, project_id: UUID, tray_type: str) -> None:
        """
        Remove one override. A type that had multiple widths becomes
        ambiguous again.

        Raises:
            NotFoundError: Project or override does not exist (→ 404)
        """
        type_name = TrayTypeName.parse(tray_type)
        try:
            await require_project(db, project_id)
            override = None
            if type_name is not None:
                result = await db.execute(
                    select(SupportDistanceOverride).where(
                        SupportDistanceOverride.project_id == project_id,
                        SupportDistanceOverride.tray_type == str(type_name),
                    )
                )
                override = result.scalar_one_or_none()
            if override is None:
                raise NotFoundError(resource="support override", resource_id=tray_type)
            await db.delete(override)
            await db.flush()
            logger.info("Support distance for %r in project %s removed", str(type_name), project_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error deleting override for %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the support distance. Please try again.",
                context={"project_id": str(project_id), "tray_type": tray_type},
            )

    async def _override_rows(self, db: AsyncSession, project_id: UUID):
        result = await db.execute(
            select(SupportDistanceOverride)
            .where(SupportDistanceOverride.project_id == project_id)
            .order_by(SupportDistanceOverride.tray_type)
        )
        return list(result.scalars().all())


# ── Singleton Instance ────────────────────────────────────────────────────
project_service = ProjectService()
