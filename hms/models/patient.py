"""
Patient model
"""

from datetime import date
from enum import Enum

from sqlalchemy import String, Date, Index
from sqlalchemy.orm import Mapped, mapped_column

from hms.models.base import TenantBase, IntegerIDMixin, TimestampMixin


class PatientStatus(str, Enum):
    """Patient status enumeration."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    DECEASED = "deceased"


class Patient(TenantBase, IntegerIDMixin, TimestampMixin):
    """A patient registered with one hospital."""

    __tablename__ = "patients"
    __table_args__ = (
        Index("ix_patients_name", "last_name", "first_name"),
    )

    patient_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=PatientStatus.ACTIVE.value,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, patient_number='{self.patient_number}')>"
