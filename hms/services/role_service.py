"""
Role service for tenant roles and their identity-provider groups.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.role import Role
from hms.repositories.role_repository import RoleRepository
from hms.schemas.role import RoleCreate
from hms.services.identity_service import (
    IdentityService,
    role_group_name,
    tenant_group_name,
)
from hms.core.exceptions import (
    BadRequestException,
    DuplicateException,
    NotFoundException,
)

logger = logging.getLogger(__name__)


class RoleService:
    """
    Manages the roles of one tenant.

    Role definitions are stored in the tenant schema; each role is backed by
    the group ``<tenant_id>:<role name>`` which holds its members.
    """

    def __init__(self, session: AsyncSession, identity: IdentityService, tenant_id: str):
        """
        Initialize service.

        Args:
            session: Session routed to the tenant schema
            identity: Identity provider wrapper
            tenant_id: Tenant the roles belong to
        """
        self.repository = RoleRepository(session)
        self.identity = identity
        self.tenant_id = tenant_id

    async def list_roles(self) -> List[Role]:
        return await self.repository.get_all_roles()

    async def get_role(self, role_id: int) -> Role:
        """
        Get role by ID.

        Raises:
            NotFoundException: If role not found
        """
        role = await self.repository.get_by_id(role_id)
        if not role:
            raise NotFoundException(resource="Role", identifier=role_id)
        return role

    async def create_role(self, data: RoleCreate) -> Role:
        """
        Create a role and its group.

        Raises:
            DuplicateException: If a role with the same name exists
        """
        if await self.repository.get_by_name(data.name):
            raise DuplicateException(resource="Role", field="name")

        role = await self.repository.create(data.model_dump())
        await self.identity.create_group(
            role_group_name(self.tenant_id, role.name),
            description=role.description,
        )
        logger.info("Created role %s", role.name)
        return role

    async def delete_role(self, role_id: int) -> None:
        """Delete a role and its group."""
        role = await self.get_role(role_id)
        await self.repository.delete(role_id)
        await self.identity.delete_group(role_group_name(self.tenant_id, role.name))
        logger.info("Deleted role %s", role.name)

    async def add_member(self, role_id: int, email: str) -> Role:
        """
        Grant a role to a tenant user.

        Raises:
            NotFoundException: If the role or the user does not exist
            BadRequestException: If the user is not a member of the tenant
        """
        role = await self.get_role(role_id)
        await self._ensure_tenant_member(email)

        group = role_group_name(self.tenant_id, role.name)
        await self.identity.create_group(group, description=role.description)
        await self.identity.add_user_to_group(email, group)
        logger.info("Granted role %s to %s", role.name, email)
        return role

    async def remove_member(self, role_id: int, email: str) -> Role:
        """Revoke a role from a user."""
        role = await self.get_role(role_id)
        await self.identity.remove_user_from_group(
            email,
            role_group_name(self.tenant_id, role.name),
        )
        logger.info("Revoked role %s from %s", role.name, email)
        return role

    async def _ensure_tenant_member(self, email: str) -> None:
        if not await self.identity.user_exists(email):
            raise NotFoundException(resource="User", identifier=email)

        groups = await self.identity.list_groups_for_user(email)
        if tenant_group_name(self.tenant_id) not in groups:
            raise BadRequestException(detail=f"User '{email}' is not a member of this tenant")

    async def add_tenant_member(self, email: str) -> str:
        """
        Admit a registered user to the tenant.

        Self sign-up never grants membership; this is the only way in.

        Returns:
            The tenant group name

        Raises:
            NotFoundException: If the user does not exist
        """
        if not await self.identity.user_exists(email):
            raise NotFoundException(resource="User", identifier=email)

        group = tenant_group_name(self.tenant_id)
        await self.identity.create_group(group)
        await self.identity.add_user_to_group(email, group)
        logger.info("Admitted %s to tenant %s", email, self.tenant_id)
        return group

    async def remove_tenant_member(self, email: str) -> List[str]:
        """
        Remove a user from the tenant together with every tenant role.

        Returns:
            The groups the user was removed from
        """
        group = tenant_group_name(self.tenant_id)
        role_prefix = f"{group}:"
        groups = await self.identity.list_groups_for_user(email)
        removed = [g for g in groups if g == group or g.startswith(role_prefix)]

        for name in removed:
            await self.identity.remove_user_from_group(email, name)

        logger.info("Removed %s from tenant %s", email, self.tenant_id)
        return removed
