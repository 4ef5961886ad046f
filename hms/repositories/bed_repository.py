"""
Bed repository for tenant-scoped bed inventory.
"""

from typing import List

from sqlalchemy import select, and_, true
from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.bed import Bed
from hms.repositories.base import BaseRepository


class BedRepository(BaseRepository[Bed]):
    """Repository for Bed model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with Bed model."""
        super().__init__(Bed, session)

    async def list_beds(
        self,
        status: str | None = None,
        unit: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Bed]:
        """
        List beds with optional status and unit filters.

        Args:
            status: Optional status filter
            unit: Optional unit filter
            skip: Number of records to skip
            limit: Maximum records to return

        Returns:
            Beds ordered by unit then bed number
        """
        conditions = []
        if status:
            conditions.append(Bed.status == status)
        if unit:
            conditions.append(Bed.unit == unit)

        query = (
            select(Bed)
            .where(and_(*conditions) if conditions else true())
            .order_by(Bed.unit, Bed.bed_number)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_for_update(self, bed_id: int) -> Bed | None:
        """
        Get a bed and lock its row until the transaction ends.

        Args:
            bed_id: Bed ID

        Returns:
            Bed or None
        """
        query = select(Bed).where(Bed.id == bed_id).with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_patient(self, patient_id: int) -> Bed | None:
        """Get the bed currently held by a patient."""
        return await self.get_by_field("patient_id", patient_id)
