"""
TrayLoad Backend — Cable Type and Cable SQLAlchemy Models
===========================================================

What:  ORM models for the `cable_types` and `cables` tables.
Who:   CableTypeService, CableService and LoadingService.

Unit conventions:
    diameter_mm        millimetres
    weight_kg_per_m    kilograms per metre of cable
    design_length      metres
    install_length     metres (measured after pulling; preferred when set)

Uniqueness is case-insensitive per project: lower(name) for cable types,
lower(cable_id) for cables.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, Float, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from trayload.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CableType(Base):
    """A catalogue entry for one cable construction within a project."""

    __tablename__ = "cable_types"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # "grounding" marks types eligible as a tray's grounding conductor
    purpose: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    diameter_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    weight_kg_per_m: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

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
        Index("cable_types_project_name_idx", "project_id", text("lower(name)"), unique=True),
    )

    def __repr__(self) -> str:
        return f"<CableType(id={self.id}, name='{self.name}')>"


class Cable(Base):
    """
    One cable in the project's cable schedule.

    A cable reaches trays either through tray_id (direct assignment) or
    through its routing string ("T-101/T-102"); tray_id wins when set.
    """

    __tablename__ = "cables"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    cable_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Schedule identifier, unique per project (case-insensitive)",
    )
    tag: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # SET NULL keeps the cable in the schedule; the report flags it as unresolved
    cable_type_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("cable_types.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    tray_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("trays.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    from_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    to_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    routing: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    design_length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    install_length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # ── Installation progress ─────────────────────────────────────────────
    pull_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    connected_from: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    connected_to: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    tested: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

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
        Index("cables_project_cable_id_idx", "project_id", text("lower(cable_id)"), unique=True),
    )

    def __repr__(self) -> str:
        return f"<Cable(id={self.id}, cable_id='{self.cable_id}')>"
