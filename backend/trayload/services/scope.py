"""
TrayLoad Backend — Project Scoping Helpers
============================================

What:  Lookups and checks shared by every project-owned resource service.
How:   Every cable type, cable, tray and override row belongs to exactly one
       project. A row that exists but belongs to another project is reported
       as not found, never as forbidden. Material catalogue rows are global
       and are looked up by id alone.
Who:   ProjectService, CableTypeService, CableService, TrayService,
       MaterialService, LoadingService.
"""

import logging
from typing import Any, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.exceptions import ConflictError, NotFoundError, ValidationError
from trayload.models.project import Project

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

CATALOGUE_SCOPE = "the catalogue"


async def require_project(db: AsyncSession, project_id: UUID) -> Project:
    """
    Load a project or raise.

    Raises:
        NotFoundError: No project with this id (→ 404)
    """
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError(resource="project", resource_id=str(project_id))
    return project


async def require_row(
    db: AsyncSession,
    model: Type[ModelT],
    project_id: UUID,
    row_id: UUID,
    resource: str,
) -> ModelT:
    """Load a project-owned row by id, or raise NotFoundError."""
    result = await db.execute(
        select(model).where(model.id == row_id, model.project_id == project_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(resource=resource, resource_id=str(row_id))
    return row


async def require_reference(
    db: AsyncSession,
    model: Type[Any],
    project_id: UUID,
    row_id: Optional[UUID],
    field: str,
) -> None:
    """
    Check that an incoming foreign key points into the same project.

    Raises:
        ValidationError: The referenced row is missing or belongs to
            another project (→ 400, the client can pick another id)
    """
    if row_id is None:
        return
    result = await db.execute(
        select(func.count()).select_from(model).where(
            model.id == row_id, model.project_id == project_id
        )
    )
    if not result.scalar():
        raise ValidationError(
            message=f"{field} '{row_id}' does not belong to this project",
            field=field,
        )


async def require_catalogue_row(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: UUID,
    resource: str,
) -> ModelT:
    """Load a material catalogue row by id, or raise NotFoundError."""
    result = await db.execute(select(model).where(model.id == row_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(resource=resource, resource_id=str(row_id))
    return row


async def require_catalogue_reference(
    db: AsyncSession,
    model: Type[Any],
    row_id: Optional[UUID],
    field: str,
) -> None:
    """
    Check that an incoming foreign key names an existing catalogue row.

    Raises:
        ValidationError: No such row (→ 400)
    """
    if row_id is None:
        return
    result = await db.execute(select(func.count()).select_from(model).where(model.id == row_id))
    if not result.scalar():
        raise ValidationError(
            message=f"{field} '{row_id}' is not in the material catalogue",
            field=field,
        )

async def ensure_unique_name(
    db: AsyncSession,
    column: Any,
    project_id: Optional[UUID],
    value: str,
    resource: str,
    field: str,
    exclude_id: Optional[UUID] = None,
) -> None:
    """
    Case-insensitive uniqueness check within a project, or across the
    material catalogue when project_id is None.

    Mirrors the lower(...) unique indexes so the client gets a 409 with a
    readable message instead of a raw integrity error.
    """
    model = column.class_
    query = select(func.count()).select_from(model).where(func.lower(column) == value.lower())
    if project_id is not None:
        query = query.where(model.project_id == project_id)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    result = await db.execute(query)
    if result.scalar():
        raise ConflictError(
            resource=resource,
            field=field,
            value=value,
            scope="this project" if project_id is not None else CATALOGUE_SCOPE,
        )


async def flush_or_conflict(
    db: AsyncSession,
    resource: str,
    field: Optional[str] = None,
    value: Optional[str] = None,
    scope: str = "this project",
) -> None:
    """
    Flush pending writes; a unique index violation becomes ConflictError.

    Covers the race between ensure_unique_name and the insert.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        logger.info("Integrity error writing %s: %s", resource, e.orig)
        raise ConflictError(resource=resource, field=field, value=value, scope=scope)
