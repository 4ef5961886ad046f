"""create tenant registry

Revision ID: 0001
Revises:
Create Date: 2026-10-12 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

tenant_status = postgresql.ENUM(
    "pending", "active", "inactive", "suspended",
    name="tenant_status",
    schema="public",
    create_type=False,
)
subscription_plan = postgresql.ENUM(
    "basic", "advanced", "premium",
    name="subscription_plan",
    schema="public",
    create_type=False,
)


def upgrade() -> None:
    tenant_status.create(op.get_bind(), checkfirst=True)
    subscription_plan.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "tenants",
        sa.Column("id", sa.String(63), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("plan", subscription_plan, nullable=False, server_default="basic"),
        sa.Column("status", tenant_status, nullable=False, server_default="pending"),
        sa.Column("subdomain", sa.String(63), nullable=True),
        sa.Column("schema_provisioned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("joindate", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        schema="public",
    )
    op.create_index("ix_tenants_name", "tenants", ["name"], schema="public")
    op.create_index("ix_tenants_status", "tenants", ["status"], schema="public")
    op.create_index("ix_tenants_subdomain", "tenants", ["subdomain"], unique=True, schema="public")

    op.create_table(
        "user_verification",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("type IN ('verification', 'reset')", name="ck_user_verification_type"),
        schema="public",
    )
    op.create_index(
        "ix_user_verification_lookup",
        "user_verification",
        ["email", "code", "type"],
        schema="public",
    )
    op.create_index(
        "ix_user_verification_expires_at",
        "user_verification",
        ["expires_at"],
        schema="public",
    )


def downgrade() -> None:
    op.drop_index("ix_user_verification_expires_at", table_name="user_verification", schema="public")
    op.drop_index("ix_user_verification_lookup", table_name="user_verification", schema="public")
    op.drop_table("user_verification", schema="public")

    op.drop_index("ix_tenants_subdomain", table_name="tenants", schema="public")
    op.drop_index("ix_tenants_status", table_name="tenants", schema="public")
    op.drop_index("ix_tenants_name", table_name="tenants", schema="public")
    op.drop_table("tenants", schema="public")

    subscription_plan.drop(op.get_bind(), checkfirst=True)
    tenant_status.drop(op.get_bind(), checkfirst=True)
