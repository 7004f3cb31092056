"""
TrayLoad Backend — Material Catalogue Route Handlers
======================================================

CRUD for the shared tray and support catalogue. Thin handlers over
MaterialService.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.database import get_db_session
from trayload.schemas.common import ErrorResponse
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
from trayload.services.material_service import material_service

router = APIRouter(prefix="/api/materials", tags=["Materials"])


@router.get(
    "/trays",
    response_model=MaterialTrayListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List material trays",
)
async def list_material_trays(
    db: AsyncSession = Depends(get_db_session),
) -> MaterialTrayListResponse:
    return await material_service.list_trays(db)


@router.post(
    "/trays",
    response_model=MaterialTrayResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Tray type already in the catalogue", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a material tray",
)
async def create_material_tray(
    payload: MaterialTrayCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MaterialTrayResponse:
    return await material_service.create_tray(db, payload)


@router.patch(
    "/trays/{tray_id}",
    response_model=MaterialTrayResponse,
    responses={
        404: {"description": "Material tray not found", "model": ErrorResponse},
        409: {"description": "Tray type already in the catalogue", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a material tray",
)
async def update_material_tray(
    tray_id: UUID,
    payload: MaterialTrayUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MaterialTrayResponse:
    return await material_service.update_tray(db, tray_id, payload)


@router.delete(
    "/trays/{tray_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Material tray not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a material tray",
)
async def delete_material_tray(
    tray_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await material_service.delete_tray(db, tray_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/supports",
    response_model=MaterialSupportListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List material supports",
)
async def list_material_supports(
    db: AsyncSession = Depends(get_db_session),
) -> MaterialSupportListResponse:
    return await material_service.list_supports(db)


@router.post(
    "/supports",
    response_model=MaterialSupportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Support type already in the catalogue", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a material support",
)
async def create_material_support(
    payload: MaterialSupportCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MaterialSupportResponse:
    return await material_service.create_support(db, payload)


@router.patch(
    "/supports/{support_id}",
    response_model=MaterialSupportResponse,
    responses={
        404: {"description": "Material support not found", "model": ErrorResponse},
        409: {"description": "Support type already in the catalogue", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a material support",
)
async def update_material_support(
    support_id: UUID,
    payload: MaterialSupportUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MaterialSupportResponse:
    return await material_service.update_support(db, support_id, payload)


@router.delete(
    "/supports/{support_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Material support not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a material support",
    description="Overrides that picked this support fall back to the project support weight.",
)
async def delete_material_support(
    support_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await material_service.delete_support(db, support_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
