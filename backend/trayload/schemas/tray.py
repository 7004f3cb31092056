"""
TrayLoad Backend — Tray Schemas
=================================

Request/response models for trays. Geometry in millimetres.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from trayload.schemas.common import strip_optional, strip_required


class TrayCreate(BaseModel):
    name: str = Field(max_length=255, description="Unique per project, case-insensitive")
    tray_type: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Free-text type label; trays sharing it form one tray type",
    )
    purpose: Optional[str] = Field(default=None, max_length=100)
    width_mm: Optional[float] = Field(default=None, ge=0)
    height_mm: Optional[float] = Field(default=None, ge=0)
    length_mm: Optional[float] = Field(default=None, ge=0)
    include_grounding_cable: bool = False
    grounding_cable_type_id: Optional[uuid.UUID] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v)

    @field_validator("tray_type", "purpose", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class TrayUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    tray_type: Optional[str] = Field(default=None, max_length=255)
    purpose: Optional[str] = Field(default=None, max_length=100)
    width_mm: Optional[float] = Field(default=None, ge=0)
    height_mm: Optional[float] = Field(default=None, ge=0)
    length_mm: Optional[float] = Field(default=None, ge=0)
    include_grounding_cable: Optional[bool] = None
    grounding_cable_type_id: Optional[uuid.UUID] = None

    @field_validator("name", "include_grounding_cable", mode="before")
    @classmethod
    def validate_required(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return strip_required(v)

    @field_validator("tray_type", "purpose", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class TrayResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    name: str
    tray_type: Optional[str] = None
    purpose: Optional[str] = None
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    length_mm: Optional[float] = None
    include_grounding_cable: bool = False
    grounding_cable_type_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TrayListResponse(BaseModel):
    trays: List[TrayResponse]
