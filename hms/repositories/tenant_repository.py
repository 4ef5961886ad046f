"""
Tenant repository for platform registry operations.
"""

from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy import select, func, or_, and_, true
from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.tenant import Tenant, TenantStatus
from hms.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """
    Repository for Tenant model operations.

    Provides specialized queries for tenant management.
    """

    def __init__(self, session: AsyncSession):
        """Initialize with Tenant model."""
        super().__init__(Tenant, session)

    async def search(
        self,
        search_term: str | None = None,
        status: TenantStatus | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Tenant], int]:
        """
        Search tenants by name, email or identifier.

        Args:
            search_term: Optional case-insensitive substring
            status: Optional status filter
            skip: Number of records to skip
            limit: Maximum records to return

        Returns:
            Tuple of (page of tenants, total matching count)
        """
        conditions = []

        if search_term:
            search_pattern = f"%{search_term.lower()}%"
            conditions.append(
                or_(
                    func.lower(Tenant.name).like(search_pattern),
                    func.lower(Tenant.email).like(search_pattern),
                    Tenant.id.like(search_pattern),
                )
            )

        if status:
            conditions.append(Tenant.status == status)

        where_clause = and_(*conditions) if conditions else true()

        count_query = select(func.count()).select_from(Tenant).where(where_clause)
        total = (await self.session.execute(count_query)).scalar() or 0

        query = (
            select(Tenant)
            .where(where_clause)
            .order_by(Tenant.joindate.desc())
            .offset(skip)
            .limit(limit)
        )

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def get_provisioned_ids(self) -> List[str]:
        """
        Get identifiers of every tenant whose schema has been provisioned.

        Returns:
            Tenant identifiers ordered by join date
        """
        query = (
            select(Tenant.id)
            .where(Tenant.schema_provisioned_at.is_not(None))
            .order_by(Tenant.joindate)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def subdomain_exists(
        self,
        subdomain: str,
        exclude_id: str | None = None,
    ) -> bool:
        """
        Check if a subdomain is already taken.

        Args:
            subdomain: Subdomain to check
            exclude_id: Optional tenant ID to exclude (for updates)

        Returns:
            True if subdomain exists, False otherwise
        """
        return await self.exists_by_field(
            "subdomain",
            subdomain.lower(),
            exclude_id=exclude_id,
        )

    async def update_status(
        self,
        tenant_id: str,
        status: TenantStatus,
    ) -> Tenant | None:
        """
        Update tenant status.

        Args:
            tenant_id: Tenant identifier
            status: New status

        Returns:
            Updated tenant or None
        """
        return await self.update(tenant_id, {"status": status})

    async def mark_provisioned(self, tenant_id: str) -> Tenant | None:
        """
        Record that the tenant schema has been provisioned.

        Args:
            tenant_id: Tenant identifier

        Returns:
            Updated tenant or None
        """
        return await self.update(
            tenant_id,
            {"schema_provisioned_at": datetime.now(timezone.utc)},
        )
