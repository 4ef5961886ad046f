"""
Role repository for tenant-scoped role definitions.
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.role import Role
from hms.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """
    Repository for Role model operations.

    Membership is held by the identity provider; this repository only
    stores the role definitions of one tenant.
    """

    def __init__(self, session: AsyncSession):
        """Initialize with Role model."""
        super().__init__(Role, session)

    async def get_by_name(self, name: str) -> Role | None:
        """
        Get role by name.

        Args:
            name: Role name

        Returns:
            Role instance or None
        """
        query = select(Role).where(Role.name == name)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_all_roles(self) -> List[Role]:
        """
        Get all roles ordered by name.

        Returns:
            List of all roles
        """
        query = select(Role).order_by(Role.name)
        result = await self.session.execute(query)
        return list(result.scalars().all())
