"""Create project, cable and tray tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates projects, cable_types, trays, cables and
       project_support_distances, with the case-insensitive unique indexes
       on names and cable ids.
How:   PostgreSQL features: UUID primary keys, TIMESTAMP WITH TIME ZONE,
       expression indexes on lower(...).

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _project_fk() -> sa.Column:
    return sa.Column(
        "project_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables in foreign key order."""
    op.create_table(
        "projects",
        _id_column(),
        sa.Column("project_number", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("customer", sa.String(255), nullable=False),
        sa.Column("manager", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "support_distance",
            sa.Float(),
            nullable=True,
            comment="Default support spacing in metres where no override exists",
        ),
        sa.Column(
            "support_weight",
            sa.Float(),
            nullable=True,
            comment="Weight of one support piece in kg",
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_number"),
    )

    op.create_table(
        "cable_types",
        _id_column(),
        _project_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("purpose", sa.String(100), nullable=True),
        sa.Column("diameter_mm", sa.Float(), nullable=True),
        sa.Column("weight_kg_per_m", sa.Float(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cable_types_project_id", "cable_types", ["project_id"])
    op.create_index(
        "cable_types_project_name_idx",
        "cable_types",
        ["project_id", sa.text("lower(name)")],
        unique=True,
    )

    op.create_table(
        "trays",
        _id_column(),
        _project_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("tray_type", sa.String(255), nullable=True),
        sa.Column("purpose", sa.String(100), nullable=True),
        sa.Column("width_mm", sa.Float(), nullable=True),
        sa.Column("height_mm", sa.Float(), nullable=True),
        sa.Column("length_mm", sa.Float(), nullable=True),
        sa.Column(
            "include_grounding_cable",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "grounding_cable_type_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("cable_types.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_trays_project_id", "trays", ["project_id"])
    op.create_index(
        "trays_project_name_idx",
        "trays",
        ["project_id", sa.text("lower(name)")],
        unique=True,
    )

    op.create_table(
        "cables",
        _id_column(),
        _project_fk(),
        sa.Column("cable_id", sa.String(255), nullable=False),
        sa.Column("tag", sa.String(255), nullable=True),
        sa.Column(
            "cable_type_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("cable_types.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "tray_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("trays.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("from_location", sa.String(255), nullable=True),
        sa.Column("to_location", sa.String(255), nullable=True),
        sa.Column("routing", sa.Text(), nullable=True),
        sa.Column("design_length", sa.Float(), nullable=True),
        sa.Column("install_length", sa.Float(), nullable=True),
        sa.Column("pull_date", sa.Date(), nullable=True),
        sa.Column("connected_from", sa.Date(), nullable=True),
        sa.Column("connected_to", sa.Date(), nullable=True),
        sa.Column("tested", sa.Date(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cables_project_id", "cables", ["project_id"])
    op.create_index("ix_cables_cable_type_id", "cables", ["cable_type_id"])
    op.create_index("ix_cables_tray_id", "cables", ["tray_id"])
    op.create_index(
        "cables_project_cable_id_idx",
        "cables",
        ["project_id", sa.text("lower(cable_id)")],
        unique=True,
    )

    op.create_table(
        "project_support_distances",
        _id_column(),
        _project_fk(),
        sa.Column("tray_type", sa.String(255), nullable=False),
        sa.Column(
            "support_distance",
            sa.Float(),
            nullable=True,
            comment="Support spacing in metres; NULL declares the type only",
        ),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "project_id", "tray_type", name="project_support_distances_type_key"
        ),
    )
    op.create_index(
        "ix_project_support_distances_project_id",
        "project_support_distances",
        ["project_id"],
    )


def downgrade() -> None:
    """Drop every table. All project data is lost."""
    op.drop_table("project_support_distances")
    op.drop_table("cables")
    op.drop_table("trays")
    op.drop_table("cable_types")
    op.drop_table("projects")
