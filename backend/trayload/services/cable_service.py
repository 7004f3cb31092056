"""
TrayLoad Backend — Cable Service
==================================

What:  CRUD for a project's cable schedule.
How:   Offset pagination ordered by cable_id; a cable schedule can hold
       thousands of rows, so the list is never returned unbounded.
Who:   routes/cables.py.

Referential checks:
    cable_type_id and tray_id must point into the same project, otherwise
    the write is rejected with ValidationError (400). Data that goes stale
    later (a deleted cable type) is tolerated and surfaces in the loading
    report instead.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.config import settings
from trayload.exceptions import DatabaseError, TrayLoadError
from trayload.models.cable import Cable, CableType
from trayload.models.tray import Tray
from trayload.schemas.cable import (
    CableCreate,
    CableListResponse,
    CableResponse,
    CableUpdate,
)
from trayload.services.scope import (
    ensure_unique_name,
    flush_or_conflict,
    require_project,
    require_reference,
    require_row,
)

logger = logging.getLogger(__name__)


class CableService:
    """Stateless; see ProjectService for the error handling strategy."""

    async def list_cables(
        self,
        db: AsyncSession,
        project_id: UUID,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> CableListResponse:
        """
        One page of the cable schedule.

        Args:
            limit: Page size; defaults to settings.default_page_size and is
                capped at settings.max_page_size
            offset: Rows to skip

        Query plan:
            SELECT ... WHERE project_id = :id ORDER BY cable_id LIMIT :limit + 1
            → limit + 1 detects has_more without a second page query
        """
        page_size = min(limit or settings.default_page_size, settings.max_page_size)
        try:
            await require_project(db, project_id)
            result = await db.execute(
                select(Cable)
                .where(Cable.project_id == project_id)
                .order_by(Cable.cable_id)
                .offset(offset)
                .limit(page_size + 1)
            )
            cables = list(result.scalars().all())

            count_result = await db.execute(
                select(func.count()).select_from(Cable).where(Cable.project_id == project_id)
            )
            total_count = count_result.scalar() or 0

            has_more = len(cables) > page_size
            if has_more:
                cables = cables[:page_size]

            return CableListResponse(
                cables=[CableResponse.model_validate(cable) for cable in cables],
                total_count=total_count,
                has_more=has_more,
            )
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error listing cables for %s: %s", project_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve cables. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def create_cable(
        self,
        db: AsyncSession,
        project_id: UUID,
        payload: CableCreate,
    ) -> CableResponse:
        """
        Add a cable to the schedule.

        Raises:
            NotFoundError: Project does not exist (→ 404)
            ValidationError: cable_type_id or tray_id outside the project (→ 400)
            ConflictError: cable_id already used in this project, any case (→ 409)
        """
        try:
            await require_project(db, project_id)
            await require_reference(db, CableType, project_id, payload.cable_type_id, "cable_type_id")
            await require_reference(db, Tray, project_id, payload.tray_id, "tray_id")
            await ensure_unique_name(
                db, Cable.cable_id, project_id, payload.cable_id, resource="cable", field="cable_id"
            )
            cable = Cable(project_id=project_id, **payload.model_dump())
            db.add(cable)
            await flush_or_conflict(db, resource="cable", field="cable_id", value=payload.cable_id)
            logger.info("Cable created: %s (%s)", cable.id, cable.cable_id)
            return CableResponse.model_validate(cable)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error creating cable: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the cable. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def update_cable(
        self,
        db: AsyncSession,
        project_id: UUID,
        cable_row_id: UUID,
        payload: CableUpdate,
    ) -> CableResponse:
        try:
            cable = await require_row(db, Cable, project_id, cable_row_id, "cable")
            changes = payload.model_dump(exclude_unset=True)
            if "cable_type_id" in changes:
                await require_reference(
                    db, CableType, project_id, changes["cable_type_id"], "cable_type_id"
                )
            if "tray_id" in changes:
                await require_reference(db, Tray, project_id, changes["tray_id"], "tray_id")
            if "cable_id" in changes:
                await ensure_unique_name(
                    db,
                    Cable.cable_id,
                    project_id,
                    changes["cable_id"],
                    resource="cable",
                    field="cable_id",
                    exclude_id=cable_row_id,
                )
            for field, value in changes.items():
                setattr(cable, field, value)
            await flush_or_conflict(db, resource="cable", field="cable_id", value=cable.cable_id)
            logger.info("Cable %s updated: %s", cable_row_id, sorted(changes))
            return CableResponse.model_validate(cable)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error updating cable %s: %s", cable_row_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the cable. Please try again.",
                context={"cable_id": str(cable_row_id)},
            )

    async def delete_cable(self, db: AsyncSession, project_id: UUID, cable_row_id: UUID) -> None:
        try:
            cable = await require_row(db, Cable, project_id, cable_row_id, "cable")
            await db.delete(cable)
            await db.flush()
            logger.info("Cable deleted: %s", cable_row_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error deleting cable %s: %s", cable_row_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the cable. Please try again.",
                context={"cable_id": str(cable_row_id)},
            )


cable_service = CableService()
