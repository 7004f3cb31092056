"""
TrayLoad Backend — Project SQLAlchemy Models
==============================================

What:  ORM models for the `projects` and `project_support_distances` tables.
How:   Inherit from Base; Alembic migration 001 creates both tables, 002
       adds the override's catalogue support.
Who:   ProjectService (CRUD, overrides) and LoadingService (report inputs).

Table Design:
    - project_number: unique across the installation (shop order number)
    - support_distance: project-wide default support spacing in metres,
      used only where a tray type has no override
    - support_weight: weight of one support piece in kg
    - project_support_distances: one manual spacing per tray type label.
      A NULL support_distance still declares the type for the project.
      support_id optionally picks the catalogue support whose weight
      replaces support_weight for trays of that type.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Float, ForeignKey, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from trayload.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """
    A cable installation project. Owns its cable types, cables, trays and
    support distance overrides (deleted with it via ON DELETE CASCADE).
    """

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    project_number: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Customer-facing project number, unique",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer: Mapped[str] = mapped_column(String(255), nullable=False)
    manager: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Support policy ────────────────────────────────────────────────────
    support_distance: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Default support spacing in metres where no override exists",
    )
    support_weight: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Weight of one support piece in kg",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
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

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, project_number='{self.project_number}')>"


class SupportDistanceOverride(Base):
    """Manual support spacing for one tray type label within a project."""

    __tablename__ = "project_support_distances"

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
    # Stored stripped; matching against tray types is case-sensitive
    tray_type: Mapped[str] = mapped_column(String(255), nullable=False)
    support_distance: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Support spacing in metres; NULL declares the type only",
    )
    support_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("material_supports.id", ondelete="SET NULL"),
        nullable=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("project_id", "tray_type", name="project_support_distances_type_key"),
    )

    def __repr__(self) -> str:
        return (
            f"<SupportDistanceOverride(project_id={self.project_id}, "
            f"tray_type='{self.tray_type}', support_distance={self.support_distance}, "
            f"support_id={self.support_id})>"
        )
