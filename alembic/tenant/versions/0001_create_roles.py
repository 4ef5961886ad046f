"""create roles (tenant schema)

Revision ID: 0001
Revises:
Create Date: 2026-10-12 09:10:00.000000

"""

import json
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Tables are created unqualified; env.py pins search_path to the tenant schema.
DEFAULT_ROLES = [
    {
        "name": "hospital_admin",
        "description": "Manages the hospital's users, roles and settings",
        "permissions": ["*"],
    },
    {
        "name": "doctor",
        "description": "Reads and updates patient records",
        "permissions": ["patients:read", "patients:write", "beds:read"],
    },
    {
        "name": "nurse",
        "description": "Manages bed occupancy",
        "permissions": ["patients:read", "beds:read", "beds:write"],
    },
    {
        "name": "receptionist",
        "description": "Registers patients",
        "permissions": ["patients:read", "patients:write"],
    },
]


def upgrade() -> None:
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("permissions", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    # JSONB values are cast from text so the seed also renders with --sql
    for role in DEFAULT_ROLES:
        op.execute(
            roles.insert().values(
                name=role["name"],
                description=role["description"],
                permissions=sa.cast(
                    sa.literal(json.dumps(role["permissions"])),
                    postgresql.JSONB,
                ),
            )
        )


def downgrade() -> None:
    op.drop_table("roles")
