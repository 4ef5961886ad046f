"""
Bed service for tenant bed inventory and occupancy.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.bed import Bed, BedStatus
from hms.repositories.bed_repository import BedRepository
from hms.repositories.patient_repository import PatientRepository
from hms.schemas.bed import BedCreate, BedUpdate
from hms.core.exceptions import (
    ConflictException,
    DuplicateException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class BedService:
    """
    Service for bed business operations within one tenant schema.

    Occupancy only changes through ``assign`` and ``release``; a patient
    holds at most one bed.
    """

    def __init__(self, session: AsyncSession):
        self.repository = BedRepository(session)
        self.patients = PatientRepository(session)

    async def list_beds(
        self,
        status: BedStatus | None = None,
        unit: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Bed]:
        return await self.repository.list_beds(
            status=status.value if status else None,
            unit=unit,
            skip=skip,
            limit=limit,
        )

    async def get_bed(self, bed_id: int) -> Bed:
        """
        Get bed by ID.

        Raises:
            NotFoundException: If bed not found
        """
        bed = await self.repository.get_by_id(bed_id)
        if not bed:
            raise NotFoundException(resource="Bed", identifier=bed_id)
        return bed

    async def create_bed(self, data: BedCreate) -> Bed:
        """
        Add a bed.

        Raises:
            DuplicateException: If the bed number is taken
        """
        if await self.repository.exists_by_field("bed_number", data.bed_number):
            raise DuplicateException(resource="Bed", field="bed_number")

        return await self.repository.create(data.model_dump())

    async def update_bed(self, bed_id: int, data: BedUpdate) -> Bed:
        """
        Update bed details or non-occupancy status.

        Raises:
            ValidationException: If the update sets ``occupied`` directly
            ConflictException: If the status of an occupied bed is changed
        """
        bed = await self.get_bed(bed_id)
        update_data = data.model_dump(exclude_unset=True)

        new_status = update_data.get("status")
        if new_status == BedStatus.OCCUPIED.value:
            raise ValidationException(detail="Use the assign operation to occupy a bed")
        if new_status and bed.status == BedStatus.OCCUPIED.value:
            raise ConflictException(detail="Release the bed before changing its status")

        return await self.repository.update(bed_id, update_data)

    async def delete_bed(self, bed_id: int) -> None:
        bed = await self.get_bed(bed_id)
        if bed.patient_id is not None:
            raise ConflictException(detail="Release the bed before deleting it")
        await self.repository.delete(bed_id)

    async def assign(self, bed_id: int, patient_id: int) -> Bed:
        """
        Put a patient into an available bed.

        Args:
            bed_id: Bed to occupy
            patient_id: Patient to assign

        Returns:
            Updated bed

        Raises:
            NotFoundException: If the bed or patient does not exist
            ConflictException: If the bed is not available or the patient
                already holds a bed
        """
        bed = await self.repository.get_for_update(bed_id)
        if not bed:
            raise NotFoundException(resource="Bed", identifier=bed_id)

        if bed.status != BedStatus.AVAILABLE.value:
            raise ConflictException(detail=f"Bed '{bed.bed_number}' is {bed.status}")

        if not await self.patients.get_by_id(patient_id):
            raise NotFoundException(resource="Patient", identifier=patient_id)

        current = await self.repository.get_by_patient(patient_id)
        if current:
            raise ConflictException(
                detail=f"Patient already assigned to bed '{current.bed_number}'"
            )

        logger.info("Assigning patient %s to bed %s", patient_id, bed.bed_number)
        return await self.repository.update(
            bed_id,
            {"status": BedStatus.OCCUPIED.value, "patient_id": patient_id},
        )

    async def release(self, bed_id: int) -> Bed:
        """
        Free an occupied bed.

        Raises:
            ConflictException: If the bed is not occupied
        """
        bed = await self.repository.get_for_update(bed_id)
        if not bed:
            raise NotFoundException(resource="Bed", identifier=bed_id)

        if bed.status != BedStatus.OCCUPIED.value:
            raise ConflictException(detail=f"Bed '{bed.bed_number}' is not occupied")

        logger.info("Releasing bed %s", bed.bed_number)
        return await self.repository.update(
            bed_id,
            {"status": BedStatus.AVAILABLE.value, "patient_id": None},
            exclude_none=False,
        )
