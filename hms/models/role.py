"""
Role model for tenant-scoped RBAC
"""

from typing import List

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from hms.models.base import TenantBase, IntegerIDMixin, TimestampMixin


class Role(TenantBase, IntegerIDMixin, TimestampMixin):
    """
    Role model for role-based access control.

    Each role is mirrored by an identity-provider group named
    ``<tenant_id>:<role name>``; membership lives in the identity provider.
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    permissions: Mapped[List[str]] = mapped_column(
        JSONB,
        default=list,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name}')>"


# Roles seeded into every tenant schema by the tenant migrations
ROLE_HOSPITAL_ADMIN = "hospital_admin"
ROLE_DOCTOR = "doctor"
ROLE_NURSE = "nurse"
ROLE_RECEPTIONIST = "receptionist"
