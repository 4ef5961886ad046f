"""
Patient repository for tenant-scoped patient records.
"""

from typing import List, Tuple

from sqlalchemy import select, func, or_, true
from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.patient import Patient
from hms.repositories.base import BaseRepository


class PatientRepository(BaseRepository[Patient]):
    """Repository for Patient model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with Patient model."""
        super().__init__(Patient, session)

    async def search(
        self,
        search_term: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Patient], int]:
        """
        Search patients by name or patient number.

        Args:
            search_term: Optional case-insensitive substring
            skip: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (page of patients, total matching count)
        """
        where_clause = true()
        if search_term:
            pattern = f"%{search_term.lower()}%"
            where_clause = or_(
                func.lower(Patient.first_name).like(pattern),
                func.lower(Patient.last_name).like(pattern),
                func.lower(Patient.patient_number).like(pattern),
            )

        total = (
            await self.session.execute(
                select(func.count()).select_from(Patient).where(where_clause)
            )
        ).scalar() or 0

        query = (
            select(Patient)
            .where(where_clause)
            .order_by(Patient.last_name, Patient.first_name)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total
