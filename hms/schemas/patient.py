"""
Patient-related Pydantic schemas
"""

from datetime import date

from pydantic import EmailStr, Field

from hms.schemas.base import BaseSchema, IDTimestampSchema
from hms.models.patient import PatientStatus


class PatientBase(BaseSchema):
    """Base patient schema with common fields."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    date_of_birth: date | None = Field(default=None)
    gender: str | None = Field(default=None, max_length=20)
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = Field(default=None)


class PatientCreate(PatientBase):
    """Schema for registering a patient."""

    patient_number: str = Field(
        min_length=1,
        max_length=50,
        description="Hospital-assigned patient number",
    )


class PatientUpdate(BaseSchema):
    """Schema for updating a patient."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    date_of_birth: date | None = Field(default=None)
    gender: str | None = Field(default=None, max_length=20)
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = Field(default=None)
    status: PatientStatus | None = Field(default=None)


class PatientResponse(IDTimestampSchema, PatientBase):
    """Full patient response schema."""

    patient_number: str = Field(description="Hospital-assigned patient number")
    status: str = Field(description="Patient status")
