"""
TrayLoad Backend — Project Route Handlers
===========================================

What:  Project CRUD and per-tray-type support distance overrides.
How:   Thin handlers delegating to ProjectService.

Override keys travel in the path. The tray_type segment is a path
parameter, so labels containing "/" need no encoding.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.database import get_db_session
from trayload.schemas.common import ErrorResponse
from trayload.schemas.project import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    SupportOverrideListResponse,
    SupportOverrideResponse,
    SupportOverrideUpdate,
)
from trayload.services.project_service import project_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Projects"])


@router.get(
    "/projects",
    response_model=ProjectListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List projects",
)
async def list_projects(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectListResponse:
    result = await project_service.list_projects(db)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Project number already in use", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a project",
)
async def create_project(
    payload: ProjectCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.create_project(db, payload)


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a project",
)
async def get_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.get_project(db, project_id)


@router.patch(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        409: {"description": "Project number already in use", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a project",
    description=(
        "Partial update. Changing support_distance changes the spacing used for "
        "support counts of every tray type without an override."
    ),
)
async def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.update_project(db, project_id, payload)


@router.delete(
    "/projects/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a project and everything it owns",
)
async def delete_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await project_service.delete_project(db, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ══════════════════════════════════════════════════════════════════════════
# Support distance overrides
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "/projects/{project_id}/support-overrides",
    response_model=SupportOverrideListResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List support distance overrides",
)
async def list_overrides(
    project_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> SupportOverrideListResponse:
    return await project_service.list_overrides(db, project_id)


@router.put(
    "/projects/{project_id}/support-overrides/{tray_type:path}",
    response_model=SupportOverrideResponse,
    responses={
        400: {"description": "Blank tray type or unknown support_id", "model": ErrorResponse},
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Set the support distance for a tray type",
    description=(
        "Creates or replaces the manual support spacing (m) for one tray type. "
        "This is how a type with conflicting widths gets resolved. The type "
        "does not need to exist on any tray yet. support_id picks the catalogue "
        "support whose piece weight is used for trays of this type."
    ),
)
async def set_override(
    project_id: UUID,
    tray_type: str,
    payload: SupportOverrideUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> SupportOverrideResponse:
    return await project_service.set_override(
        db, project_id, tray_type, payload.support_distance, payload.support_id
    )


@router.delete(
    "/projects/{project_id}/support-overrides/{tray_type:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Project or override not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Remove the support distance for a tray type",
)
async def delete_override(
    project_id: UUID,
    tray_type: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await project_service.delete_override(db, project_id, tray_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
