"""
Patient service for tenant patient records.
"""

from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.patient import Patient
from hms.repositories.patient_repository import PatientRepository
from hms.repositories.bed_repository import BedRepository
from hms.schemas.patient import PatientCreate, PatientUpdate
from hms.core.exceptions import ConflictException, DuplicateException, NotFoundException


class PatientService:
    """Service for patient business operations within one tenant schema."""

    def __init__(self, session: AsyncSession):
        self.repository = PatientRepository(session)
        self.beds = BedRepository(session)

    async def list_patients(
        self,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Patient], int]:
        return await self.repository.search(search_term=search, skip=skip, limit=limit)

    async def get_patient(self, patient_id: int) -> Patient:
        """
        Get patient by ID.

        Raises:
            NotFoundException: If patient not found
        """
        patient = await self.repository.get_by_id(patient_id)
        if not patient:
            raise NotFoundException(resource="Patient", identifier=patient_id)
        return patient

    async def create_patient(self, data: PatientCreate) -> Patient:
        """
        Register a patient.

        Raises:
            DuplicateException: If the patient number is taken
        """
        if await self.repository.exists_by_field("patient_number", data.patient_number):
            raise DuplicateException(resource="Patient", field="patient_number")

        return await self.repository.create(data.model_dump())

    async def update_patient(self, patient_id: int, data: PatientUpdate) -> Patient:
        await self.get_patient(patient_id)
        return await self.repository.update(patient_id, data.model_dump(exclude_unset=True))

    async def delete_patient(self, patient_id: int) -> None:
        """
        Delete a patient record.

        Raises:
            ConflictException: If the patient still occupies a bed
        """
        await self.get_patient(patient_id)
        bed = await self.beds.get_by_patient(patient_id)
        if bed:
            raise ConflictException(detail=f"Release bed '{bed.bed_number}' before deleting the patient")
        await self.repository.delete(patient_id)
