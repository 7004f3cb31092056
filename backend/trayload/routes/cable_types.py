"""
TrayLoad Backend — Cable Type Route Handlers
==============================================

CRUD for a project's cable catalogue. Thin handlers over CableTypeService.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.database import get_db_session
from trayload.schemas.cable import (
    CableTypeCreate,
    CableTypeListResponse,
    CableTypeResponse,
    CableTypeUpdate,
)
from trayload.schemas.common import ErrorResponse
from trayload.services.cable_type_service import cable_type_service

router = APIRouter(prefix="/api", tags=["Cable Types"])


@router.get(
    "/projects/{project_id}/cable-types",
    response_model=CableTypeListResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List cable types",
)
async def list_cable_types(
    project_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> CableTypeListResponse:
    return await cable_type_service.list_cable_types(db, project_id)


@router.post(
    "/projects/{project_id}/cable-types",
    response_model=CableTypeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        409: {"description": "Name already used in this project", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a cable type",
)
async def create_cable_type(
    project_id: UUID,
    payload: CableTypeCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CableTypeResponse:
    return await cable_type_service.create_cable_type(db, project_id, payload)


@router.patch(
    "/projects/{project_id}/cable-types/{cable_type_id}",
    response_model=CableTypeResponse,
    responses={
        404: {"description": "Project or cable type not found", "model": ErrorResponse},
        409: {"description": "Name already used in this project", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a cable type",
)
async def update_cable_type(
    project_id: UUID,
    cable_type_id: UUID,
    payload: CableTypeUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CableTypeResponse:
    return await cable_type_service.update_cable_type(db, project_id, cable_type_id, payload)


@router.delete(
    "/projects/{project_id}/cable-types/{cable_type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Project or cable type not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a cable type",
    description="Cables of this type stay in the schedule without a type.",
)
async def delete_cable_type(
    project_id: UUID,
    cable_type_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await cable_type_service.delete_cable_type(db, project_id, cable_type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
