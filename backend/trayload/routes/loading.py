"""
TrayLoad Backend — Loading Report Route Handlers
==================================================

What:  Serves the computed loading report of a project.
How:   Delegates to LoadingService; the report is recomputed on every
       request, so responses are marked no-cache.
Who:   The tray loading and support distance pages of the frontend.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from trayload.database import get_db_session
from trayload.schemas.common import ErrorResponse
from trayload.schemas.loading import LoadingReportResponse, TrayTypeListResponse
from trayload.services.loading_service import loading_service

router = APIRouter(prefix="/api", tags=["Loading"])


@router.get(
    "/projects/{project_id}/loading",
    response_model=LoadingReportResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Tray loading report",
    description=(
        "Per tray type: width, effective support spacing and whether it needs a "
        "manual spacing. Per tray: cable count, cable weight, load per metre and "
        "support figures. Dangling references are listed, not raised."
    ),
)
async def get_loading_report(
    project_id: UUID,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> LoadingReportResponse:
    report = await loading_service.build_report(db, project_id)
    response.headers["Cache-Control"] = "no-cache"
    return report


@router.get(
    "/projects/{project_id}/tray-types",
    response_model=TrayTypeListResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Tray types with resolved support spacing",
)
async def list_tray_types(
    project_id: UUID,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> TrayTypeListResponse:
    result = await loading_service.list_tray_types(db, project_id)
    response.headers["Cache-Control"] = "no-cache"
    return result
