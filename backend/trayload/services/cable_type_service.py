"""
TrayLoad Backend — Cable Type Service
=======================================

What:  CRUD for a project's cable catalogue.
Who:   routes/cable_types.py.

Deleting a cable type leaves its cables in the schedule with no type
(ON DELETE SET NULL); the loading report lists them as unresolved.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.exceptions import DatabaseError, TrayLoadError
from trayload.models.cable import CableType
from trayload.schemas.cable import (
    CableTypeCreate,
    CableTypeListResponse,
    CableTypeResponse,
    CableTypeUpdate,
)
from trayload.services.scope import (
    ensure_unique_name,
    flush_or_conflict,
    require_project,
    require_row,
)

logger = logging.getLogger(__name__)


class CableTypeService:
    """Stateless; see ProjectService for the error handling strategy."""

    async def list_cable_types(self, db: AsyncSession, project_id: UUID) -> CableTypeListResponse:
        try:
            await require_project(db, project_id)
            result = await db.execute(
                select(CableType)
                .where(CableType.project_id == project_id)
                .order_by(CableType.name)
            )
            return CableTypeListResponse(
                cable_types=[CableTypeResponse.model_validate(row) for row in result.scalars().all()]
            )
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error listing cable types for %s: %s", project_id, str(e))
            raise DatabaseError(
                message="Could not retrieve cable types. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def create_cable_type(
        self,
        db: AsyncSession,
        project_id: UUID,
        payload: CableTypeCreate,
    ) -> CableTypeResponse:
        """
        Add a cable type to the project catalogue.

        Raises:
            NotFoundError: Project does not exist (→ 404)
            ConflictError: Name already used in this project, any case (→ 409)
        """
        try:
            await require_project(db, project_id)
            await ensure_unique_name(
                db, CableType.name, project_id, payload.name, resource="cable type", field="name"
            )
            cable_type = CableType(project_id=project_id, **payload.model_dump())
            db.add(cable_type)
            await flush_or_conflict(db, resource="cable type", field="name", value=payload.name)
            logger.info("Cable type created: %s (%s)", cable_type.id, cable_type.name)
            return CableTypeResponse.model_validate(cable_type)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error creating cable type: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the cable type. Please try again.",
                context={"project_id": str(project_id)},
            )

    async def update_cable_type(
        self,
        db: AsyncSession,
        project_id: UUID,
        cable_type_id: UUID,
        payload: CableTypeUpdate,
    ) -> CableTypeResponse:
        try:
            cable_type = await require_row(db, CableType, project_id, cable_type_id, "cable type")
            changes = payload.model_dump(exclude_unset=True)
            if "name" in changes:
                await ensure_unique_name(
                    db,
                    CableType.name,
                    project_id,
                    changes["name"],
                    resource="cable type",
                    field="name",
                    exclude_id=cable_type_id,
                )
            for field, value in changes.items():
                setattr(cable_type, field, value)
            await flush_or_conflict(db, resource="cable type", field="name", value=cable_type.name)
            logger.info("Cable type %s updated: %s", cable_type_id, sorted(changes))
            return CableTypeResponse.model_validate(cable_type)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error updating cable type %s: %s", cable_type_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the cable type. Please try again.",
                context={"cable_type_id": str(cable_type_id)},
            )

    async def delete_cable_type(self, db: AsyncSession, project_id: UUID, cable_type_id: UUID) -> None:
        try:
            cable_type = await require_row(db, CableType, project_id, cable_type_id, "cable type")
            await db.delete(cable_type)
            await db.flush()
            logger.info("Cable type deleted: %s", cable_type_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error deleting cable type %s: %s", cable_type_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the cable type. Please try again.",
                context={"cable_type_id": str(cable_type_id)},
            )


cable_type_service = CableTypeService()
