"""
TrayLoad Backend — Tray Service
=================================

What:  CRUD for a project's trays.
Who:   routes/trays.py.

Renaming a tray does not rewrite cable routings; cables routed by the old
name simply stop matching it.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.exceptions import DatabaseError, TrayLoadError
from trayload.models.cable import CableType
from trayload.models.tray import Tray
from trayload.schemas.tray import (
    TrayCreate,
    TrayListResponse,
    TrayResponse,
    TrayUpdate,
)
from trayload.services.scope import (
    ensure_unique_name,
    flush_or_conflict,
    require_project,
    require_reference,
    require_row,
)

logger = logging.getLogger(__name__)


class TrayService:
    """Stateless; see ProjectService for the error handling strategy."""

    async def list_trays(self, db: AsyncSession, project_id: UUID) -> TrayListResponse:
        try:
            await require_project(db, project_id)
            result = await db.execute(
                select(Tray).where(Tray.project_id == project_id).order_by(Tray.name)
            )
            return TrayListResponse(
                trays=[TrayResponse.model_validate(tray) for tray in result.scalars().all()]
            )
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error listing trays for %s: %s", project_id, str(e))
            raise DatabaseError(
                message="Could not retrieve trays. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def get_tray(self, db: AsyncSession, project_id: UUID, tray_id: UUID) -> TrayResponse:
        try:
            tray = await require_row(db, Tray, project_id, tray_id, "tray")
            return TrayResponse.model_validate(tray)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error fetching tray %s: %s", tray_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the tray. Please try again.",
                context={"tray_id": str(tray_id)},
            )

    async def create_tray(
        self,
        db: AsyncSession,
        project_id: UUID,
        payload: TrayCreate,
    ) -> TrayResponse:
        """
        Add a tray to the project.

        Raises:
            NotFoundError: Project does not exist (→ 404)
            ValidationError: grounding_cable_type_id outside the project (→ 400)
            ConflictError: Tray name already used in this project, any case (→ 409)
        """
        try:
            await require_project(db, project_id)
            await require_reference(
                db, CableType, project_id, payload.grounding_cable_type_id, "grounding_cable_type_id"
            )
            await ensure_unique_name(
                db, Tray.name, project_id, payload.name, resource="tray", field="name"
            )
            tray = Tray(project_id=project_id, **payload.model_dump())
            db.add(tray)
            await flush_or_conflict(db, resource="tray", field="name", value=payload.name)
            logger.info("Tray created: %s (%s, type=%r)", tray.id, tray.name, tray.tray_type)
            return TrayResponse.model_validate(tray)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error creating tray: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the tray. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def update_tray(
        self,
        db: AsyncSession,
        project_id: UUID,
        tray_id: UUID,
        payload: TrayUpdate,
    ) -> TrayResponse:
        try:
            tray = await require_row(db, Tray, project_id, tray_id, "tray")
            changes = payload.model_dump(exclude_unset=True)
            if "grounding_cable_type_id" in changes:
                await require_reference(
                    db,
                    CableType,
                    project_id,
                    changes["grounding_cable_type_id"],
                    "grounding_cable_type_id",
                )
            if "name" in changes:
                await ensure_unique_name(
                    db,
                    Tray.name,
                    project_id,
                    changes["name"],
                    resource="tray",
                    field="name",
                    exclude_id=tray_id,
                )
            for field, value in changes.items():
                setattr(tray, field, value)
            await flush_or_conflict(db, resource="tray", field="name", value=tray.name)
            logger.info("Tray %s updated: %s", tray_id, sorted(changes))
            return TrayResponse.model_validate(tray)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error updating tray %s: %s", tray_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the tray. Please try again.",
                context={"tray_id": str(tray_id)},
            )

    async def delete_tray(self, db: AsyncSession, project_id: UUID, tray_id: UUID) -> None:
        try:
            tray = await require_row(db, Tray, project_id, tray_id, "tray")
            await db.delete(tray)
            await db.flush()
            logger.info("Tray deleted: %s", tray_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error deleting tray %s: %s", tray_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the tray. Please try again.",
                context={"tray_id": str(tray_id)},
            )


tray_service = TrayService()
