"""
Tenant schema provisioning.

Creates a tenant's Postgres schema and replays the tenant migration set
into it. Schema creation and every migration share one transaction, so a
failure anywhere leaves no partial schema behind.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List

from alembic.util import CommandError
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from hms.core.exceptions import AppException, ProvisioningException
from hms.core.tenancy import quote_schema, validate_tenant_id
from hms.migrations import (
    get_current_revision,
    get_head_revision,
    run_tenant_upgrade,
    schema_exists,
)

logger = logging.getLogger(__name__)

MigrationRunner = Callable[[Connection, str], None]


@dataclass
class SchemaStatus:
    """Lifecycle state of one tenant schema."""

    schema_name: str
    exists: bool
    current_revision: str | None
    head_revision: str | None

    @property
    def is_up_to_date(self) -> bool:
        return self.exists and self.current_revision == self.head_revision


@dataclass
class UpgradeOutcome:
    """Result of upgrading one tenant schema during a bulk upgrade."""

    tenant_id: str
    success: bool
    revision: str | None = None
    error: str | None = None


class ProvisioningService:
    """
    Creates, upgrades, inspects and drops tenant schemas.

    Args:
        engine: Async engine used for DDL
        runner: Sync callable applying migrations to ``(connection, schema)``
        head_resolver: Callable returning the latest tenant revision
    """

    def __init__(
        self,
        engine: AsyncEngine,
        runner: MigrationRunner = run_tenant_upgrade,
        head_resolver: Callable[[], str | None] = get_head_revision,
    ):
        self.engine = engine
        self.runner = runner
        self.head_resolver = head_resolver

    async def provision(self, tenant_id: str) -> SchemaStatus:
        """
        Create a tenant schema (if missing) and bring it to the head revision.

        Re-provisioning an existing schema only applies missing migrations.

        Args:
            tenant_id: Tenant identifier, used as schema name

        Returns:
            Schema status after provisioning

        Raises:
            InvalidTenantIdentifierException: If the id is not a safe schema name
            ProvisioningException: If schema creation or a migration fails
        """
        schema = validate_tenant_id(tenant_id)
        logger.info("Provisioning schema for tenant %s", schema)

        try:
            async with self.engine.begin() as conn:
                await conn.execute(
                    text(f"CREATE SCHEMA IF NOT EXISTS {quote_schema(schema)}")
                )
                await conn.run_sync(self.runner, schema)
        except (SQLAlchemyError, CommandError) as exc:
            logger.error(
                "Provisioning failed for tenant %s, transaction rolled back: %s",
                schema,
                exc,
            )
            raise ProvisioningException(identifier=schema, reason=str(exc)) from exc

        schema_status = await self.status(schema)
        logger.info(
            "Provisioned schema for tenant %s at revision %s",
            schema,
            schema_status.current_revision,
        )
        return schema_status

    async def status(self, tenant_id: str) -> SchemaStatus:
        """
        Report whether a tenant schema exists and which revision it is at.

        Args:
            tenant_id: Tenant identifier

        Returns:
            Schema status
        """
        schema = validate_tenant_id(tenant_id)

        async with self.engine.connect() as conn:
            exists = await conn.run_sync(schema_exists, schema)
            current = None
            if exists:
                current = await conn.run_sync(get_current_revision, schema)

        return SchemaStatus(
            schema_name=schema,
            exists=exists,
            current_revision=current,
            head_revision=self.head_resolver(),
        )

    async def upgrade_all(self, tenant_ids: List[str]) -> List[UpgradeOutcome]:
        """
        Bring every listed tenant schema to the head revision.

        A failing tenant does not stop the others.

        Args:
            tenant_ids: Tenants to upgrade

        Returns:
            One outcome per tenant, in input order
        """
        outcomes: List[UpgradeOutcome] = []

        for tenant_id in tenant_ids:
            try:
                schema_status = await self.provision(tenant_id)
            except AppException as exc:
                outcomes.append(
                    UpgradeOutcome(tenant_id=tenant_id, success=False, error=exc.detail)
                )
                continue
            outcomes.append(
                UpgradeOutcome(
                    tenant_id=tenant_id,
                    success=True,
                    revision=schema_status.current_revision,
                )
            )

        failed = sum(1 for outcome in outcomes if not outcome.success)
        logger.info(
            "Upgraded %d tenant schemas, %d failed",
            len(outcomes) - failed,
            failed,
        )
        return outcomes

    async def drop(self, tenant_id: str) -> None:
        """
        Drop a tenant schema and everything in it.

        Args:
            tenant_id: Tenant identifier
        """
        schema = validate_tenant_id(tenant_id)

        try:
            async with self.engine.begin() as conn:
                await conn.execute(
                    text(f"DROP SCHEMA IF EXISTS {quote_schema(schema)} CASCADE")
                )
        except SQLAlchemyError as exc:
            raise ProvisioningException(identifier=schema, reason=str(exc)) from exc

        logger.warning("Dropped schema for tenant %s", schema)
