"""
TrayLoad Backend — Tray Route Handlers
========================================

CRUD for a project's trays. Thin handlers over TrayService.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.database import get_db_session
from trayload.schemas.common import ErrorResponse
from trayload.schemas.tray import TrayCreate, TrayListResponse, TrayResponse, TrayUpdate
from trayload.services.tray_service import tray_service

router = APIRouter(prefix="/api", tags=["Trays"])


@router.get(
    "/projects/{project_id}/trays",
    response_model=TrayListResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List trays",
)
async def list_trays(
    project_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> TrayListResponse:
    return await tray_service.list_trays(db, project_id)


@router.post(
    "/projects/{project_id}/trays",
    response_model=TrayResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Grounding cable type outside the project", "model": ErrorResponse},
        404: {"description": "Project not found", "model": ErrorResponse},
        409: {"description": "Tray name already used in this project", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a tray",
)
async def create_tray(
    project_id: UUID,
    payload: TrayCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TrayResponse:
    return await tray_service.create_tray(db, project_id, payload)


@router.get(
    "/projects/{project_id}/trays/{tray_id}",
    response_model=TrayResponse,
    responses={
        404: {"description": "Project or tray not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a tray",
)
async def get_tray(
    project_id: UUID,
    tray_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> TrayResponse:
    return await tray_service.get_tray(db, project_id, tray_id)


@router.patch(
    "/projects/{project_id}/trays/{tray_id}",
    response_model=TrayResponse,
    responses={
        400: {"description": "Grounding cable type outside the project", "model": ErrorResponse},
        404: {"description": "Project or tray not found", "model": ErrorResponse},
        409: {"description": "Tray name already used in this project", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a tray",
)
async def update_tray(
    project_id: UUID,
    tray_id: UUID,
    payload: TrayUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> TrayResponse:
    return await tray_service.update_tray(db, project_id, tray_id, payload)


@router.delete(
    "/projects/{project_id}/trays/{tray_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Project or tray not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a tray",
)
async def delete_tray(
    project_id: UUID,
    tray_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await tray_service.delete_tray(db, project_id, tray_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
