"""
TrayLoad Backend — Material Catalogue Service
===============================================

What:  CRUD for the shared tray and support catalogue, plus the snapshot
       read used by the loading report.
Who:   routes/materials.py and LoadingService.

The catalogue is global: every project's trays are matched against the
same material trays by type label, and any project may pick any support.
Deleting a support clears it from the overrides that picked it
(ON DELETE SET NULL); those tray types fall back to the project's
support weight.
"""

import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.exceptions import DatabaseError, TrayLoadError
from trayload.loading.types import MaterialSupportSnapshot, MaterialTraySnapshot
from trayload.models.material import MaterialSupport, MaterialTray
from trayload.schemas.material import (
    MaterialSupportCreate,
    MaterialSupportListResponse,
    MaterialSupportResponse,
    MaterialSupportUpdate,
    MaterialTrayCreate,
    MaterialTrayListResponse,
    MaterialTrayResponse,
    MaterialTrayUpdate,
)
from trayload.services.scope import (
    CATALOGUE_SCOPE,
    ensure_unique_name,
    flush_or_conflict,
    require_catalogue_row,
)

logger = logging.getLogger(__name__)


class MaterialService:
    """Stateless; see ProjectService for the error handling strategy."""

    # ══════════════════════════════════════════════════════════════════════
    # Material trays
    # ══════════════════════════════════════════════════════════════════════

    async def list_trays(self, db: AsyncSession) -> MaterialTrayListResponse:
        try:
            result = await db.execute(select(MaterialTray).order_by(MaterialTray.tray_type))
            return MaterialTrayListResponse(
                trays=[MaterialTrayResponse.model_validate(row) for row in result.scalars().all()]
            )
        except Exception as e:
            logger.error("Database error listing material trays: %s", str(e))
            raise DatabaseError(message="Could not retrieve material trays. Please try again.")

    async def create_tray(self, db: AsyncSession, payload: MaterialTrayCreate) -> MaterialTrayResponse:
        """
        Add a tray product to the catalogue.

        Raises:
            ConflictError: tray_type already in the catalogue, any case (→ 409)
        """
        try:
            await ensure_unique_name(
                db, MaterialTray.tray_type, None, payload.tray_type,
                resource="material tray", field="tray_type",
            )
            tray = MaterialTray(**payload.model_dump())
            db.add(tray)
            await flush_or_conflict(
                db, resource="material tray", field="tray_type",
                value=payload.tray_type, scope=CATALOGUE_SCOPE,
            )
            logger.info("Material tray created: %s (%s)", tray.id, tray.tray_type)
            return MaterialTrayResponse.model_validate(tray)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error creating material tray: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not create the material tray. Please try again.")

    async def update_tray(
        self,
        db: AsyncSession,
        tray_id: UUID,
        payload: MaterialTrayUpdate,
    ) -> MaterialTrayResponse:
        try:
            tray = await require_catalogue_row(db, MaterialTray, tray_id, "material tray")
            changes = payload.model_dump(exclude_unset=True)
            if "tray_type" in changes:
                await ensure_unique_name(
                    db, MaterialTray.tray_type, None, changes["tray_type"],
                    resource="material tray", field="tray_type", exclude_id=tray_id,
                )
            for field, value in changes.items():
                setattr(tray, field, value)
            await flush_or_conflict(
                db, resource="material tray", field="tray_type",
                value=tray.tray_type, scope=CATALOGUE_SCOPE,
            )
            logger.info("Material tray %s updated: %s", tray_id, sorted(changes))
            return MaterialTrayResponse.model_validate(tray)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error updating material tray %s: %s", tray_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the material tray. Please try again.",
                context={"material_tray_id": str(tray_id)},
            )

    async def delete_tray(self, db: AsyncSession, tray_id: UUID) -> None:
        try:
            tray = await require_catalogue_row(db, MaterialTray, tray_id, "material tray")
            await db.delete(tray)
            await db.flush()
            logger.info("Material tray deleted: %s", tray_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error deleting material tray %s: %s", tray_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the material tray. Please try again.",
                context={"material_tray_id": str(tray_id)},
            )

    # ══════════════════════════════════════════════════════════════════════
    # Material supports
    # ══════════════════════════════════════════════════════════════════════

    async def list_supports(self, db: AsyncSession) -> MaterialSupportListResponse:
        try:
            result = await db.execute(
                select(MaterialSupport).order_by(MaterialSupport.support_type)
            )
            return MaterialSupportListResponse(
                supports=[
                    MaterialSupportResponse.model_validate(row) for row in result.scalars().all()
                ]
            )
        except Exception as e:
            logger.error("Database error listing material supports: %s", str(e))
            raise DatabaseError(message="Could not retrieve material supports. Please try again.")

    async def create_support(
        self, db: AsyncSession, payload: MaterialSupportCreate
    ) -> MaterialSupportResponse:
        """
        Add a support product to the catalogue.

        Raises:
            ConflictError: support_type already in the catalogue, any case (→ 409)
        """
        try:
            await ensure_unique_name(
                db, MaterialSupport.support_type, None, payload.support_type,
                resource="material support", field="support_type",
            )
            support = MaterialSupport(**payload.model_dump())
            db.add(support)
            await flush_or_conflict(
                db, resource="material support", field="support_type",
                value=payload.support_type, scope=CATALOGUE_SCOPE,
            )
            logger.info("Material support created: %s (%s)", support.id, support.support_type)
            return MaterialSupportResponse.model_validate(support)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error("Database error creating material support: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not create the material support. Please try again.")

    async def update_support(
        self,
        db: AsyncSession,
        support_id: UUID,
        payload: MaterialSupportUpdate,
    ) -> MaterialSupportResponse:
        try:
            support = await require_catalogue_row(db, MaterialSupport, support_id, "material support")
            changes = payload.model_dump(exclude_unset=True)
            if "support_type" in changes:
                await ensure_unique_name(
                    db, MaterialSupport.support_type, None, changes["support_type"],
                    resource="material support", field="support_type", exclude_id=support_id,
                )
            for field, value in changes.items():
                setattr(support, field, value)
            await flush_or_conflict(
                db, resource="material support", field="support_type",
                value=support.support_type, scope=CATALOGUE_SCOPE,
            )
            logger.info("Material support %s updated: %s", support_id, sorted(changes))
            return MaterialSupportResponse.model_validate(support)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error(
                "Database error updating material support %s: %s", support_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message="Could not update the material support. Please try again.",
                context={"material_support_id": str(support_id)},
            )

    async def delete_support(self, db: AsyncSession, support_id: UUID) -> None:
        try:
            support = await require_catalogue_row(db, MaterialSupport, support_id, "material support")
            await db.delete(support)
            await db.flush()
            logger.info("Material support deleted: %s", support_id)
        except TrayLoadError:
            raise
        except Exception as e:
            logger.error(
                "Database error deleting material support %s: %s", support_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message="Could not delete the material support. Please try again.",
                context={"material_support_id": str(support_id)},
            )

    # ══════════════════════════════════════════════════════════════════════
    # Report inputs
    # ══════════════════════════════════════════════════════════════════════

    async def load_snapshot(
        self, db: AsyncSession
    ) -> Tuple[List[MaterialTraySnapshot], List[MaterialSupportSnapshot]]:
        """
        The whole catalogue as engine snapshots.

        Errors propagate; LoadingService wraps them with the rest of the
        project read.
        """
        tray_result = await db.execute(select(MaterialTray).order_by(MaterialTray.tray_type))
        support_result = await db.execute(
            select(MaterialSupport).order_by(MaterialSupport.support_type)
        )
        return (
            [MaterialTraySnapshot.model_validate(row) for row in tray_result.scalars().all()],
            [MaterialSupportSnapshot.model_validate(row) for row in support_result.scalars().all()],
        )


material_service = MaterialService()
