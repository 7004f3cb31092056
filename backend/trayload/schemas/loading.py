"""
TrayLoad Backend — Loading Report Schemas
===========================================

What:  Response wrappers around the engine's own result models.
How:   The engine's frozen pydantic models (trayload.loading.types) are
       serialized as-is; these wrappers add project context.
Who:   routes/loading.py.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from trayload.loading.types import TrayLoadRow, TrayTypeRow, UnresolvedReference


class LoadingReportResponse(BaseModel):
    """
    Full loading report for one project.

    Example:
        {
            "project_id": "…",
            "default_support_distance": 1.5,
            "types": [{"type_name": "Ladder 300", "width_mm": 300.0,
                       "effective_support_spacing": 2.0, ...}],
            "trays": [{"name": "T-101", "cable_count": 12,
                       "total_weight_kg": 84.2, "supports": {...},
                       "load": {"total_load_per_meter_kn": 0.31, ...}}],
            "unresolved": []
        }
    """
    project_id: uuid.UUID
    default_support_distance: Optional[float] = Field(
        default=None,
        description="Project spacing used for support counts where a type has none",
    )
    support_weight: Optional[float] = Field(default=None, description="kg per support piece")
    types: List[TrayTypeRow] = Field(description="One row per tray type, sorted by name")
    trays: List[TrayLoadRow] = Field(description="One row per tray, sorted by name")
    unresolved: List[UnresolvedReference] = Field(
        description="References that did not resolve; their weight is excluded"
    )


class TrayTypeListResponse(BaseModel):
    project_id: uuid.UUID
    types: List[TrayTypeRow]
    needs_manual_resolution: int = Field(
        description="Number of types with conflicting widths and no override"
    )
