"""
TrayLoad Backend — Project Schemas
====================================

What:  Request/response models for projects and their per-tray-type
       support distance overrides.
Who:   routes/projects.py.

Units: support_distance in metres, support_weight in kg per support piece.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from trayload.schemas.common import strip_optional, strip_required


class ProjectCreate(BaseModel):
    project_number: str = Field(max_length=100, description="Unique project number")
    name: str = Field(max_length=255)
    customer: str = Field(max_length=255)
    manager: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    support_distance: Optional[float] = Field(
        default=None,
        gt=0,
        description="Default support spacing (m) for tray types without an override",
    )
    support_weight: Optional[float] = Field(
        default=None,
        ge=0,
        description="Weight of one support piece (kg)",
    )

    @field_validator("project_number", "name", "customer", mode="before")
    @classmethod
    def validate_required_text(cls, v):
        return strip_required(v)

    @field_validator("manager", "description", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class ProjectUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied;
    an explicit null clears an optional field.
    """
    project_number: Optional[str] = Field(default=None, max_length=100)
    name: Optional[str] = Field(default=None, max_length=255)
    customer: Optional[str] = Field(default=None, max_length=255)
    manager: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    support_distance: Optional[float] = Field(default=None, gt=0)
    support_weight: Optional[float] = Field(default=None, ge=0)

    @field_validator("project_number", "name", "customer", mode="before")
    @classmethod
    def validate_required_text(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return strip_required(v)

    @field_validator("manager", "description", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return strip_optional(v)


class ProjectResponse(BaseModel):
    id: uuid.UUID
    project_number: str
    name: str
    customer: str
    manager: Optional[str] = None
    description: Optional[str] = None
    support_distance: Optional[float] = None
    support_weight: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    total_count: int = Field(description="Total number of projects")


# ══════════════════════════════════════════════════════════════════════════
# Support distance overrides
# ══════════════════════════════════════════════════════════════════════════


class SupportOverrideUpdate(BaseModel):
    """
    Body of PUT /projects/{id}/support-overrides/{tray_type}.

    A null distance keeps the tray type declared for the project without
    fixing its spacing. Zero is stored but treated as absent by the report.
    support_id picks a catalogue support whose piece weight replaces the
    project's support_weight for trays of this type.
    """
    support_distance: Optional[float] = Field(
        default=None,
        ge=0,
        description="Support spacing in metres",
    )
    support_id: Optional[uuid.UUID] = Field(
        default=None,
        description="Material support used for this tray type",
    )


class SupportOverrideResponse(BaseModel):
    tray_type: str = Field(description="Tray type label, surrounding whitespace removed")
    support_distance: Optional[float] = Field(default=None, description="Spacing in metres")
    support_id: Optional[uuid.UUID] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SupportOverrideListResponse(BaseModel):
    overrides: List[SupportOverrideResponse]
