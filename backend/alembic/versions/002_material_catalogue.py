"""Add material tray and support catalogue

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates material_trays and material_supports, and lets a support
       distance override pick a catalogue support.
How:   lower(...) expression indexes keep catalogue types unique ignoring
       case. Deleting a support clears the overrides that picked it.

Rollback: downgrade() drops the column and both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
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
    op.create_table(
        "material_trays",
        _id_column(),
        sa.Column("tray_type", sa.String(255), nullable=False),
        sa.Column("manufacturer", sa.String(255), nullable=True),
        sa.Column("height_mm", sa.Float(), nullable=True),
        sa.Column("width_mm", sa.Float(), nullable=True),
        sa.Column(
            "weight_kg_per_m",
            sa.Float(),
            nullable=True,
            comment="Own weight of the tray in kg per metre",
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "material_trays_type_idx",
        "material_trays",
        [sa.text("lower(tray_type)")],
        unique=True,
    )

    op.create_table(
        "material_supports",
        _id_column(),
        sa.Column("support_type", sa.String(255), nullable=False),
        sa.Column("height_mm", sa.Float(), nullable=True),
        sa.Column("width_mm", sa.Float(), nullable=True),
        sa.Column("length_mm", sa.Float(), nullable=True),
        sa.Column("weight_kg", sa.Float(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "material_supports_type_idx",
        "material_supports",
        [sa.text("lower(support_type)")],
        unique=True,
    )

    op.add_column(
        "project_support_distances",
        sa.Column(
            "support_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("material_supports.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )


def downgrade() -> None:
    """Drop the catalogue. Support choices on overrides are lost."""
    op.drop_column("project_support_distances", "support_id")
    op.drop_index("material_supports_type_idx", table_name="material_supports")
    op.drop_table("material_supports")
    op.drop_index("material_trays_type_idx", table_name="material_trays")
    op.drop_table("material_trays")
