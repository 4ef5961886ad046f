"""
Bed-related Pydantic schemas
"""

from pydantic import Field

from hms.schemas.base import BaseSchema, IDTimestampSchema
from hms.models.bed import BedStatus


class BedCreate(BaseSchema):
    """Schema for adding a bed."""

    bed_number: str = Field(min_length=1, max_length=50)
    unit: str = Field(min_length=1, max_length=100, description="Ward or unit")
    bed_type: str = Field(default="general", max_length=50)


class BedUpdate(BaseSchema):
    """Schema for updating a bed."""

    unit: str | None = Field(default=None, min_length=1, max_length=100)
    bed_type: str | None = Field(default=None, max_length=50)
    status: BedStatus | None = Field(
        default=None,
        description="Only non-occupancy statuses may be set directly",
    )


class BedAssignRequest(BaseSchema):
    """Assign a patient to a bed."""

    patient_id: int = Field(ge=1)


class BedResponse(IDTimestampSchema):
    """Full bed response schema."""

    bed_number: str
    unit: str
    bed_type: str
    status: str
    patient_id: int | None = None
