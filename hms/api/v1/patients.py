"""
Patient API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from hms.services.patient_service import PatientService
from hms.schemas.patient import PatientCreate, PatientUpdate, PatientResponse
from hms.schemas.base import PaginatedResponse, MessageResponse
from hms.core.dependencies import PatientEditor, TenantDBSession

router = APIRouter()


@router.get(
    "",
    response_model=PaginatedResponse[PatientResponse],
    summary="List Patients",
    description="Search patients by name or patient number.",
)
async def list_patients(
    session: TenantDBSession,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, alias="pageSize")] = 20,
    search: Annotated[str | None, Query(description="Search term")] = None,
) -> PaginatedResponse[PatientResponse]:
    service = PatientService(session)
    patients, total = await service.list_patients(
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse[PatientResponse].build(
        items=[PatientResponse.model_validate(p) for p in patients],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Patient",
)
async def create_patient(
    data: PatientCreate,
    editor: PatientEditor,
    session: TenantDBSession,
) -> PatientResponse:
    patient = await PatientService(session).create_patient(data)
    return PatientResponse.model_validate(patient)


@router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Get Patient",
)
async def get_patient(patient_id: int, session: TenantDBSession) -> PatientResponse:
    patient = await PatientService(session).get_patient(patient_id)
    return PatientResponse.model_validate(patient)


@router.patch(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Update Patient",
)
async def update_patient(
    patient_id: int,
    data: PatientUpdate,
    editor: PatientEditor,
    session: TenantDBSession,
) -> PatientResponse:
    patient = await PatientService(session).update_patient(patient_id, data)
    return PatientResponse.model_validate(patient)


@router.delete(
    "/{patient_id}",
    response_model=MessageResponse,
    summary="Delete Patient",
)
async def delete_patient(
    patient_id: int,
    editor: PatientEditor,
    session: TenantDBSession,
) -> MessageResponse:
    await PatientService(session).delete_patient(patient_id)
    return MessageResponse(message="Patient deleted")
