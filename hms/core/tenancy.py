"""
Tenant identifiers and request-scoped tenant context.

A tenant identifier is also the name of the tenant's Postgres schema, so it
must be a safe schema name before it ever reaches SQL.
"""

import re
import time
from contextvars import ContextVar

from hms.config import settings
from hms.core.exceptions import InvalidTenantIdentifierException

TENANT_ID_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

# Schemas that must never be handed to a tenant
RESERVED_SCHEMAS = frozenset({"public", "information_schema"})

# Tenant bound to the request being handled, if any
current_tenant_id: ContextVar[str | None] = ContextVar("current_tenant_id", default=None)


def validate_tenant_id(tenant_id: str) -> str:
    """
    Validate a tenant identifier for use as a schema name.

    Args:
        tenant_id: Raw identifier

    Returns:
        The identifier, unchanged

    Raises:
        InvalidTenantIdentifierException: If it is not a usable schema name
    """
    if not tenant_id or not TENANT_ID_PATTERN.match(tenant_id):
        raise InvalidTenantIdentifierException(
            identifier=tenant_id,
            reason="use 1-63 lowercase letters, digits or underscores, not starting with a digit",
        )

    if tenant_id.startswith("pg_"):
        raise InvalidTenantIdentifierException(
            identifier=tenant_id,
            reason="the 'pg_' prefix is reserved",
        )

    if tenant_id in RESERVED_SCHEMAS or tenant_id == settings.admin_tenant_id:
        raise InvalidTenantIdentifierException(
            identifier=tenant_id,
            reason="name is reserved",
        )

    return tenant_id


def is_valid_tenant_id(tenant_id: str | None) -> bool:
    """Check a tenant identifier without raising."""
    if tenant_id is None:
        return False
    try:
        validate_tenant_id(tenant_id)
    except InvalidTenantIdentifierException:
        return False
    return True


def is_admin_tenant(tenant_id: str | None) -> bool:
    """Whether the identifier is the reserved platform-admin tenant."""
    return tenant_id == settings.admin_tenant_id


def quote_schema(tenant_id: str) -> str:
    """
    Quote a validated tenant identifier for interpolation into DDL.

    Raises:
        InvalidTenantIdentifierException: If the identifier is invalid
    """
    validate_tenant_id(tenant_id)
    return '"' + tenant_id.replace('"', '""') + '"'


def generate_tenant_id() -> str:
    """Generate a tenant identifier from the current time."""
    return f"tenant_{int(time.time() * 1000)}"
