"""
TrayLoad Backend — Material Catalogue Schemas
===============================================

Request/response models for the shared tray and support catalogue.
Dimensions in millimetres, tray weight in kg/m, support weight in kg per piece.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from trayload.schemas.common import strip_optional, strip_required


# ══════════════════════════════════════════════════════════════════════════
# Material trays
# ══════════════════════════════════════════════════════════════════════════


class MaterialTrayCreate(BaseModel):
    tray_type: str = Field(
        max_length=255,
        description="Matched to project tray types ignoring case; unique",
    )
    manufacturer: Optional[str] = Field(default=None, max_length=255)
    height_mm: Optional[float] = Field(default=None, ge=0)
    width_mm: Optional[float] = Field(default=None, ge=0)
    weight_kg_per_m: Optional[float] = Field(default=None, ge=0)

    @field_validator("tray_type", mode="before")
    @classmethod
    def validate_type(cls, v):
        return strip_required(v)

    @field_validator("manufacturer", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class MaterialTrayUpdate(BaseModel):
    tray_type: Optional[str] = Field(default=None, max_length=255)
    manufacturer: Optional[str] = Field(default=None, max_length=255)
    height_mm: Optional[float] = Field(default=None, ge=0)
    width_mm: Optional[float] = Field(default=None, ge=0)
    weight_kg_per_m: Optional[float] = Field(default=None, ge=0)

    @field_validator("tray_type", mode="before")
    @classmethod
    def validate_type(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return strip_required(v)

    @field_validator("manufacturer", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class MaterialTrayResponse(BaseModel):
    id: uuid.UUID
    tray_type: str
    manufacturer: Optional[str] = None
    height_mm: Optional[float] = None
    width_mm: Optional[float] = None
    weight_kg_per_m: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MaterialTrayListResponse(BaseModel):
    trays: List[MaterialTrayResponse]


# ══════════════════════════════════════════════════════════════════════════
# Material supports
# ══════════════════════════════════════════════════════════════════════════


class MaterialSupportCreate(BaseModel):
    support_type: str = Field(max_length=255, description="Unique, case-insensitive")
    height_mm: Optional[float] = Field(default=None, ge=0)
    width_mm: Optional[float] = Field(default=None, ge=0)
    length_mm: Optional[float] = Field(default=None, ge=0)
    weight_kg: Optional[float] = Field(default=None, ge=0, description="kg per piece")

    @field_validator("support_type", mode="before")
    @classmethod
    def validate_type(cls, v):
        return strip_required(v)


class MaterialSupportUpdate(BaseModel):
    support_type: Optional[str] = Field(default=None, max_length=255)
    height_mm: Optional[float] = Field(default=None, ge=0)
    width_mm: Optional[float] = Field(default=None, ge=0)
    length_mm: Optional[float] = Field(default=None, ge=0)
    weight_kg: Optional[float] = Field(default=None, ge=0)

    @field_validator("support_type", mode="before")
    @classmethod
    def validate_type(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return strip_required(v)


class MaterialSupportResponse(BaseModel):
    id: uuid.UUID
    support_type: str
    height_mm: Optional[float] = None
    width_mm: Optional[float] = None
    length_mm: Optional[float] = None
    weight_kg: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MaterialSupportListResponse(BaseModel):
    supports: List[MaterialSupportResponse]
