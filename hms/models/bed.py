"""
Bed model
"""

from enum import Enum

from sqlalchemy import String, Integer, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from hms.models.base import (
    TENANT_SCHEMA_PLACEHOLDER,
    TenantBase,
    IntegerIDMixin,
    TimestampMixin,
)


class BedStatus(str, Enum):
    """Bed status enumeration."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"


class Bed(TenantBase, IntegerIDMixin, TimestampMixin):
    """A hospital bed, optionally occupied by a patient."""

    __tablename__ = "beds"
    __table_args__ = (
        Index("ix_beds_status", "status"),
        Index("ix_beds_unit", "unit"),
    )

    bed_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    unit: Mapped[str] = mapped_column(String(100), nullable=False)
    bed_type: Mapped[str] = mapped_column(String(50), default="general", nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=BedStatus.AVAILABLE.value,
        nullable=False,
    )

    patient_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey(f"{TENANT_SCHEMA_PLACEHOLDER}.patients.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<Bed(id={self.id}, bed_number='{self.bed_number}', status='{self.status}')>"
