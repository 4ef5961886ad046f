"""
Base model classes and mixins
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Schema name used by tenant models; replaced per session by the real
# tenant schema through ``schema_translate_map``.
TENANT_SCHEMA_PLACEHOLDER = "tenant"


class Base(DeclarativeBase):
    """Base class for platform models living in the public schema."""
    pass


class TenantBase(DeclarativeBase):
    """Base class for models replicated inside every tenant schema."""

    metadata = MetaData(schema=TENANT_SCHEMA_PLACEHOLDER)


class IntegerIDMixin:
    """Mixin providing a serial integer primary key."""

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
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
