"""
TrayLoad Backend — Tray SQLAlchemy Model
==========================================

What:  ORM model for the `trays` table.
Who:   TrayService (CRUD) and LoadingService (report inputs).

tray_type is a free-text label ("KL 100.603 F", "Ladder 300"). Trays sharing
a label form one tray type in the loading report; their widths should agree
but are not forced to.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from trayload.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tray(Base):
    """One physical tray run in a project."""

    __tablename__ = "trays"

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
    tray_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    purpose: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # ── Geometry (millimetres) ────────────────────────────────────────────
    width_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    height_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    length_mm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # ── Grounding conductor ───────────────────────────────────────────────
    include_grounding_cable: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    grounding_cable_type_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("cable_types.id", ondelete="SET NULL"),
        nullable=True,
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
        Index("trays_project_name_idx", "project_id", text("lower(name)"), unique=True),
    )

    def __repr__(self) -> str:
        return f"<Tray(id={self.id}, name='{self.name}', tray_type='{self.tray_type}')>"
