"""create beds (tenant schema)

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-12 09:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "beds",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("bed_number", sa.String(50), nullable=False),
        sa.Column("unit", sa.String(100), nullable=False),
        sa.Column("bed_type", sa.String(50), nullable=False, server_default="general"),
        sa.Column("status", sa.String(20), nullable=False, server_default="available"),
        sa.Column("patient_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("bed_number", name="uq_beds_bed_number"),
        sa.UniqueConstraint("patient_id", name="uq_beds_patient_id"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('available', 'occupied', 'maintenance', 'reserved')",
            name="ck_beds_status",
        ),
    )
    op.create_index("ix_beds_status", "beds", ["status"])
    op.create_index("ix_beds_unit", "beds", ["unit"])


def downgrade() -> None:
    op.drop_index("ix_beds_unit", table_name="beds")
    op.drop_index("ix_beds_status", table_name="beds")
    op.drop_table("beds")
