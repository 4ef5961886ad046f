"""
Tenant model for the platform registry
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import String, DateTime, Enum as SQLEnum, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from hms.models.base import Base


class TenantStatus(str, Enum):
    """Tenant status enumeration."""
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class SubscriptionPlan(str, Enum):
    """Subscription plan enumeration."""
    BASIC = "basic"
    ADVANCED = "advanced"
    PREMIUM = "premium"


class Tenant(Base):
    """
    Tenant model representing a hospital.

    The identifier doubles as the name of the Postgres schema holding
    the tenant's business data.
    """

    __tablename__ = "tenants"
    __table_args__ = (
        Index("ix_tenants_status", "status"),
        Index("ix_tenants_subdomain", "subdomain", unique=True),
        {"schema": "public"},
    )

    id: Mapped[str] = mapped_column(
        String(63),
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    plan: Mapped[SubscriptionPlan] = mapped_column(
        SQLEnum(
            SubscriptionPlan,
            name="subscription_plan",
            create_type=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=SubscriptionPlan.BASIC,
        nullable=False,
    )

    status: Mapped[TenantStatus] = mapped_column(
        SQLEnum(
            TenantStatus,
            name="tenant_status",
            create_type=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=TenantStatus.PENDING,
        nullable=False,
    )

    subdomain: Mapped[str | None] = mapped_column(
        String(63),
        nullable=True,
    )

    schema_provisioned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    joindate: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def is_provisioned(self) -> bool:
        """Whether the tenant schema has been created and migrated."""
        return self.schema_provisioned_at is not None

    @property
    def is_accessible(self) -> bool:
        """Whether tenant users may reach the tenant's data."""
        return self.status in (TenantStatus.ACTIVE, TenantStatus.PENDING)

    def __repr__(self) -> str:
        return f"<Tenant(id='{self.id}', name='{self.name}', status={self.status})>"
