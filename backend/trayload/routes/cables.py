"""
TrayLoad Backend — Cable Route Handlers
=========================================

What:  CRUD for a project's cable schedule.
How:   Thin handlers over CableService. The list endpoint is offset
       paginated and reports the total in X-Total-Count.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.database import get_db_session
from trayload.schemas.cable import (
    CableCreate,
    CableListResponse,
    CableResponse,
    CableUpdate,
)
from trayload.schemas.common import ErrorResponse
from trayload.services.cable_service import cable_service

router = APIRouter(prefix="/api", tags=["Cables"])


@router.get(
    "/projects/{project_id}/cables",
    response_model=CableListResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List cables (paginated)",
)
async def list_cables(
    project_id: UUID,
    response: Response,
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        description="Items per page. Server default when omitted; capped server-side.",
    ),
    offset: int = Query(default=0, ge=0, description="Items to skip"),
    db: AsyncSession = Depends(get_db_session),
) -> CableListResponse:
    result = await cable_service.list_cables(db, project_id, limit=limit, offset=offset)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post(
    "/projects/{project_id}/cables",
    response_model=CableResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Cable type or tray outside the project", "model": ErrorResponse},
        404: {"description": "Project not found", "model": ErrorResponse},
        409: {"description": "Cable id already used in this project", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a cable",
)
async def create_cable(
    project_id: UUID,
    payload: CableCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CableResponse:
    return await cable_service.create_cable(db, project_id, payload)


@router.patch(
    "/projects/{project_id}/cables/{cable_id}",
    response_model=CableResponse,
    responses={
        400: {"description": "Cable type or tray outside the project", "model": ErrorResponse},
        404: {"description": "Project or cable not found", "model": ErrorResponse},
        409: {"description": "Cable id already used in this project", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a cable",
)
async def update_cable(
    project_id: UUID,
    cable_id: UUID,
    payload: CableUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CableResponse:
    return await cable_service.update_cable(db, project_id, cable_id, payload)


@router.delete(
    "/projects/{project_id}/cables/{cable_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Project or cable not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a cable",
)
async def delete_cable(
    project_id: UUID,
    cable_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await cable_service.delete_cable(db, project_id, cable_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
