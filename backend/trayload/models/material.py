"""
TrayLoad Backend — Material Catalogue SQLAlchemy Models
=========================================================

What:  ORM models for the `material_trays` and `material_supports` tables.
How:   Global catalogue shared by all projects; Alembic migration 002
       creates both tables and the override → support foreign key.
Who:   MaterialService (CRUD) and LoadingService (report inputs).

Matching:
    material_trays.tray_type is matched to a project tray's type label
    ignoring case and surrounding whitespace, so lower(tray_type) is unique.
    A material support is picked explicitly per tray type override.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Float, Index, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from trayload.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MaterialTray(Base):
    """A tray product: dimensions and own weight per metre."""

    __tablename__ = "material_trays"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    tray_type: Mapped[str] = mapped_column(String(255), nullable=False)
    manufacturer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    height_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    width_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    weight_kg_per_m: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Own weight of the tray in kg per metre",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("material_trays_type_idx", text("lower(tray_type)"), unique=True),
    )

    def __repr__(self) -> str:
        return f"<MaterialTray(id={self.id}, tray_type='{self.tray_type}')>"


class MaterialSupport(Base):
    """A support bracket product; weight_kg is per piece."""

    __tablename__ = "material_supports"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    support_type: Mapped[str] = mapped_column(String(255), nullable=False)
    height_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    width_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    length_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    weight_kg: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("material_supports_type_idx", text("lower(support_type)"), unique=True),
    )

    def __repr__(self) -> str:
        return f"<MaterialSupport(id={self.id}, support_type='{self.support_type}')>"
