"""
Tenant service for the platform registry and tenant schema lifecycle.
"""

import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.tenant import Tenant, TenantStatus
from hms.repositories.tenant_repository import TenantRepository
from hms.schemas.tenant import TenantCreate, TenantUpdate
from hms.services.provisioning_service import (
    ProvisioningService,
    SchemaStatus,
    UpgradeOutcome,
)
from hms.core.exceptions import (
    TenantNotFoundException,
    DuplicateException,
    ValidationException,
)
from hms.core.subdomain import check_subdomain_format, sanitize_subdomain
from hms.core.tenancy import generate_tenant_id, validate_tenant_id

logger = logging.getLogger(__name__)


class TenantService:
    """
    Service for tenant business operations.

    Handles tenant registration, updates, status changes and queries, and
    drives schema provisioning for each tenant.
    """

    def __init__(self, session: AsyncSession, provisioning: ProvisioningService):
        """
        Initialize service with database session.

        Args:
            session: Async database session on the public schema
            provisioning: Tenant schema provisioning service
        """
        self.session = session
        self.repository = TenantRepository(session)
        self.provisioning = provisioning

    async def get(self, tenant_id: str) -> Tenant:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant identifier

        Returns:
            Tenant instance

        Raises:
            TenantNotFoundException: If tenant not found
        """
        tenant = await self.repository.get_by_id(tenant_id)

        if not tenant:
            raise TenantNotFoundException(identifier=tenant_id)

        return tenant

    async def list(
        self,
        search: str | None = None,
        status: TenantStatus | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Tenant], int]:
        """List tenants with search, status filter and pagination."""
        return await self.repository.search(
            search_term=search,
            status=status,
            skip=skip,
            limit=limit,
        )

    async def create(self, data: TenantCreate) -> Tenant:
        """
        Register a tenant and, by default, provision its schema.

        If provisioning fails the exception propagates and the registry row
        is rolled back with the request transaction.

        Args:
            data: Tenant creation data

        Returns:
            Created tenant

        Raises:
            InvalidTenantIdentifierException: If the id is not a safe schema name
            DuplicateException: If the id or subdomain is taken
            ValidationException: If the subdomain format is invalid
            ProvisioningException: If schema provisioning fails
        """
        tenant_id = validate_tenant_id(data.id or generate_tenant_id())

        if await self.repository.get_by_id(tenant_id):
            raise DuplicateException(resource="Tenant", field="id")

        if data.subdomain:
            await self._check_subdomain(data.subdomain)

        tenant = await self.repository.create({
            "id": tenant_id,
            "name": data.name,
            "email": data.email,
            "plan": data.plan,
            "status": data.status,
            "subdomain": data.subdomain,
        })
        logger.info("Registered tenant %s (%s)", tenant_id, data.name)

        if data.provision_schema:
            await self.provisioning.provision(tenant_id)
            tenant = await self.repository.mark_provisioned(tenant_id)

        return tenant

    async def update(self, tenant_id: str, data: TenantUpdate) -> Tenant:
        """
        Update a tenant.

        Args:
            tenant_id: Tenant identifier
            data: Update data

        Returns:
            Updated tenant

        Raises:
            TenantNotFoundException: If tenant not found
            DuplicateException: If the new subdomain is taken
        """
        await self.get(tenant_id)

        if data.subdomain:
            await self._check_subdomain(data.subdomain, exclude_id=tenant_id)

        update_data = data.model_dump(exclude_unset=True)
        return await self.repository.update(tenant_id, update_data)

    async def delete(self, tenant_id: str, drop_schema: bool = False) -> None:
        """
        Remove a tenant from the registry.

        Args:
            tenant_id: Tenant identifier
            drop_schema: Also drop the tenant schema and all its data
        """
        await self.get(tenant_id)
        await self.repository.delete(tenant_id)

        if drop_schema:
            await self.provisioning.drop(tenant_id)

        logger.warning("Deleted tenant %s (schema dropped: %s)", tenant_id, drop_schema)

    async def activate(self, tenant_id: str) -> Tenant:
        return await self._set_status(tenant_id, TenantStatus.ACTIVE)

    async def deactivate(self, tenant_id: str) -> Tenant:
        return await self._set_status(tenant_id, TenantStatus.INACTIVE)

    async def suspend(self, tenant_id: str) -> Tenant:
        return await self._set_status(tenant_id, TenantStatus.SUSPENDED)

    async def validate_subdomain(
        self,
        subdomain: str,
        exclude_id: str | None = None,
    ) -> Dict[str, Any]:
        """
        Check subdomain format and availability.

        Args:
            subdomain: Candidate subdomain
            exclude_id: Tenant whose current subdomain should not count as taken

        Returns:
            Dict shaped like ``SubdomainValidationResponse``
        """
        check = check_subdomain_format(subdomain)

        if not check.is_valid:
            suggestion = sanitize_subdomain(subdomain or "")
            return {
                "subdomain": subdomain,
                "is_valid_format": False,
                "is_available": False,
                "code": check.code,
                "suggestion": suggestion if check_subdomain_format(suggestion).is_valid else None,
                "message": check.message,
            }

        taken = await self.repository.subdomain_exists(subdomain, exclude_id=exclude_id)
        return {
            "subdomain": subdomain,
            "is_valid_format": True,
            "is_available": not taken,
            "code": "TAKEN" if taken else None,
            "message": "Subdomain is already taken" if taken else "Subdomain is available",
        }

    # ═══════════════════════════════════════════════════════════════════════════
    # SCHEMA LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════════

    async def provision_schema(self, tenant_id: str) -> SchemaStatus:
        """
        Create or complete the schema of a registered tenant.

        Raises:
            TenantNotFoundException: If tenant not found
            ProvisioningException: If provisioning fails
        """
        await self.get(tenant_id)
        schema_status = await self.provisioning.provision(tenant_id)
        await self.repository.mark_provisioned(tenant_id)
        return schema_status

    async def schema_status(self, tenant_id: str) -> SchemaStatus:
        await self.get(tenant_id)
        return await self.provisioning.status(tenant_id)

    async def upgrade_schemas(
        self,
        tenant_ids: List[str] | None = None,
    ) -> List[UpgradeOutcome]:
        """
        Bring tenant schemas to the latest revision.

        Args:
            tenant_ids: Tenants to upgrade, every provisioned tenant if None

        Returns:
            One outcome per tenant
        """
        unknown: List[UpgradeOutcome] = []

        if tenant_ids is None:
            tenant_ids = await self.repository.get_provisioned_ids()
        else:
            registered = []
            for tenant_id in tenant_ids:
                if await self.repository.get_by_id(tenant_id):
                    registered.append(tenant_id)
                else:
                    unknown.append(
                        UpgradeOutcome(
                            tenant_id=tenant_id,
                            success=False,
                            error=TenantNotFoundException(identifier=tenant_id).detail,
                        )
                    )
            tenant_ids = registered

        outcomes = await self.provisioning.upgrade_all(tenant_ids)

        for outcome in outcomes:
            if outcome.success:
                await self.repository.mark_provisioned(outcome.tenant_id)

        return outcomes + unknown

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════════

    async def _set_status(self, tenant_id: str, status: TenantStatus) -> Tenant:
        await self.get(tenant_id)
        tenant = await self.repository.update_status(tenant_id, status)
        logger.info("Tenant %s is now %s", tenant_id, status.value)
        return tenant

    async def _check_subdomain(self, subdomain: str, exclude_id: str | None = None) -> None:
        check = check_subdomain_format(subdomain)
        if not check.is_valid:
            raise ValidationException(detail=check.message)

        if await self.repository.subdomain_exists(subdomain, exclude_id=exclude_id):
            raise DuplicateException(resource="Tenant", field="subdomain")
