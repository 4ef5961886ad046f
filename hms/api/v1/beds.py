"""
Bed API endpoints.

Bed inventory plus patient assignment and release.
"""

from typing import Annotated, List

from fastapi import APIRouter, Query, status

from hms.services.bed_service import BedService
from hms.models.bed import BedStatus
from hms.schemas.bed import BedCreate, BedUpdate, BedAssignRequest, BedResponse
from hms.schemas.base import MessageResponse
from hms.core.dependencies import BedManager, TenantDBSession

router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════════
# BED CRUD ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get(
    "",
    response_model=List[BedResponse],
    summary="List Beds",
    description="Get beds, optionally filtered by status and unit.",
)
async def list_beds(
    session: TenantDBSession,
    status_filter: Annotated[BedStatus | None, Query(alias="status")] = None,
    unit: Annotated[str | None, Query(description="Ward or unit")] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> List[BedResponse]:
    beds = await BedService(session).list_beds(
        status=status_filter,
        unit=unit,
        skip=skip,
        limit=limit,
    )
    return [BedResponse.model_validate(b) for b in beds]


@router.post(
    "",
    response_model=BedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Bed",
)
async def create_bed(
    data: BedCreate,
    manager: BedManager,
    session: TenantDBSession,
) -> BedResponse:
    bed = await BedService(session).create_bed(data)
    return BedResponse.model_validate(bed)


@router.get(
    "/{bed_id}",
    response_model=BedResponse,
    summary="Get Bed",
)
async def get_bed(bed_id: int, session: TenantDBSession) -> BedResponse:
    bed = await BedService(session).get_bed(bed_id)
    return BedResponse.model_validate(bed)


@router.patch(
    "/{bed_id}",
    response_model=BedResponse,
    summary="Update Bed",
)
async def update_bed(
    bed_id: int,
    data: BedUpdate,
    manager: BedManager,
    session: TenantDBSession,
) -> BedResponse:
    bed = await BedService(session).update_bed(bed_id, data)
    return BedResponse.model_validate(bed)


@router.delete(
    "/{bed_id}",
    response_model=MessageResponse,
    summary="Delete Bed",
)
async def delete_bed(
    bed_id: int,
    manager: BedManager,
    session: TenantDBSession,
) -> MessageResponse:
    await BedService(session).delete_bed(bed_id)
    return MessageResponse(message="Bed deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# OCCUPANCY ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/{bed_id}/assign",
    response_model=BedResponse,
    summary="Assign Patient",
    description="Put a patient into an available bed.",
)
async def assign_bed(
    bed_id: int,
    data: BedAssignRequest,
    manager: BedManager,
    session: TenantDBSession,
) -> BedResponse:
    bed = await BedService(session).assign(bed_id, data.patient_id)
    return BedResponse.model_validate(bed)


@router.post(
    "/{bed_id}/release",
    response_model=BedResponse,
    summary="Release Bed",
)
async def release_bed(
    bed_id: int,
    manager: BedManager,
    session: TenantDBSession,
) -> BedResponse:
    bed = await BedService(session).release(bed_id)
    return BedResponse.model_validate(bed)
