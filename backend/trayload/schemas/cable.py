"""
TrayLoad Backend — Cable Type and Cable Schemas
=================================================

What:  Request/response models for a project's cable catalogue and cable
       schedule.
Who:   routes/cable_types.py and routes/cables.py.

Units: diameter_mm in mm, weight_kg_per_m in kg/m, lengths in metres.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from trayload.schemas.common import strip_optional, strip_required


# ══════════════════════════════════════════════════════════════════════════
# Cable types
# ══════════════════════════════════════════════════════════════════════════


class CableTypeCreate(BaseModel):
    name: str = Field(max_length=255, description="Unique per project, case-insensitive")
    purpose: Optional[str] = Field(
        default=None,
        max_length=100,
        description='"grounding" marks types usable as a tray grounding conductor',
    )
    diameter_mm: Optional[float] = Field(default=None, ge=0)
    weight_kg_per_m: Optional[float] = Field(default=None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v)

    @field_validator("purpose", mode="before")
    @classmethod
    def validate_purpose(cls, v):
        return strip_optional(v)


class CableTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    purpose: Optional[str] = Field(default=None, max_length=100)
    diameter_mm: Optional[float] = Field(default=None, ge=0)
    weight_kg_per_m: Optional[float] = Field(default=None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return strip_required(v)

    @field_validator("purpose", mode="before")
    @classmethod
    def validate_purpose(cls, v):
        return strip_optional(v)


class CableTypeResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    name: str
    purpose: Optional[str] = None
    diameter_mm: Optional[float] = None
    weight_kg_per_m: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CableTypeListResponse(BaseModel):
    cable_types: List[CableTypeResponse]


# ══════════════════════════════════════════════════════════════════════════
# Cables
# ══════════════════════════════════════════════════════════════════════════


class _CableFields(BaseModel):
    tag: Optional[str] = Field(default=None, max_length=255)
    tray_id: Optional[uuid.UUID] = Field(
        default=None,
        description="Direct tray assignment; takes precedence over routing",
    )
    from_location: Optional[str] = Field(default=None, max_length=255)
    to_location: Optional[str] = Field(default=None, max_length=255)
    routing: Optional[str] = Field(
        default=None,
        description='Tray names separated by "/", e.g. "T-101/T-102"',
    )
    design_length: Optional[float] = Field(default=None, ge=0, description="Metres")
    install_length: Optional[float] = Field(default=None, ge=0, description="Metres")
    pull_date: Optional[date] = None
    connected_from: Optional[date] = None
    connected_to: Optional[date] = None
    tested: Optional[date] = None

    @field_validator("tag", "from_location", "to_location", "routing", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class CableCreate(_CableFields):
    cable_id: str = Field(max_length=255, description="Unique per project, case-insensitive")
    cable_type_id: uuid.UUID

    @field_validator("cable_id", mode="before")
    @classmethod
    def validate_cable_id(cls, v):
        return strip_required(v)


class CableUpdate(_CableFields):
    cable_id: Optional[str] = Field(default=None, max_length=255)
    cable_type_id: Optional[uuid.UUID] = None

    @field_validator("cable_id", "cable_type_id", mode="before")
    @classmethod
    def validate_required(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return strip_required(v)


class CableResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    cable_id: str
    tag: Optional[str] = None
    cable_type_id: Optional[uuid.UUID] = None
    tray_id: Optional[uuid.UUID] = None
    from_location: Optional[str] = None
    to_location: Optional[str] = None
    routing: Optional[str] = None
    design_length: Optional[float] = None
    install_length: Optional[float] = None
    pull_date: Optional[date] = None
    connected_from: Optional[date] = None
    connected_to: Optional[date] = None
    tested: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CableListResponse(BaseModel):
    """Offset-paginated cable schedule, ordered by cable_id."""
    cables: List[CableResponse]
    total_count: int = Field(description="Total number of cables in the project")
    has_more: bool = Field(description="Whether more pages are available")

