"""
FastAPI dependencies for dependency injection
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hms.config import settings
from hms.database import engine, get_db_session, open_tenant_session
from hms.models.role import (
    ROLE_DOCTOR,
    ROLE_HOSPITAL_ADMIN,
    ROLE_NURSE,
    ROLE_RECEPTIONIST,
)
from hms.models.tenant import Tenant
from hms.repositories.tenant_repository import TenantRepository
from hms.schemas.auth import AuthenticatedUser
from hms.services.identity_service import IdentityService
from hms.services.messaging_service import MessagingService
from hms.services.provisioning_service import ProvisioningService
from hms.services.storage_service import StorageService
from hms.core.exceptions import (
    ForbiddenException,
    TenantInactiveException,
    TenantNotFoundException,
    TenantSchemaNotProvisionedException,
    UnauthorizedException,
)
from hms.core.security import decode_access_token
from hms.core.tenancy import is_admin_tenant, validate_tenant_id


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# ═══════════════════════════════════════════════════════════════════════════════
# TENANT RESOLUTION
# ═══════════════════════════════════════════════════════════════════════════════


async def get_current_tenant(
    x_tenant_id: Annotated[str | None, Header(alias=settings.tenant_header)] = None,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
) -> str | None:
    """
    Extract current tenant from request headers or query params.

    Raises:
        InvalidTenantIdentifierException: If the identifier is not a usable schema name
    """
    tenant = x_tenant_id or tenant_id

    if tenant:
        tenant = tenant.strip().lower()
        if not is_admin_tenant(tenant):
            validate_tenant_id(tenant)
        return tenant

    return None


def require_tenant(
    tenant_id: Annotated[str | None, Depends(get_current_tenant)]
) -> str:
    """Require tenant ID to be present."""
    if not tenant_id:
        raise TenantNotFoundException(
            identifier=f"missing - {settings.tenant_header} header or tenantId query param required"
        )
    return tenant_id


# ═══════════════════════════════════════════════════════════════════════════════
# AUTHENTICATION
# ═══════════════════════════════════════════════════════════════════════════════


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> AuthenticatedUser:
    """
    Decode the application access token from the Authorization header.

    Raises:
        UnauthorizedException: If the header is missing, malformed or the
            token is invalid or expired
    """
    if not authorization:
        raise UnauthorizedException(detail="Not authenticated")

    if not authorization.startswith("Bearer "):
        raise UnauthorizedException(detail="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]
    payload = decode_access_token(token)

    if not payload or not payload.get("sub") or not payload.get("tenant_id"):
        raise UnauthorizedException(detail="Invalid or expired token")

    return AuthenticatedUser(
        email=payload["sub"],
        tenant_id=payload["tenant_id"],
        roles=payload.get("roles", []),
        is_platform_admin=payload.get("is_platform_admin", False),
    )


def require_platform_admin(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)]
) -> AuthenticatedUser:
    """Require a platform administrator token."""
    if not user.is_platform_admin:
        raise ForbiddenException(detail="Platform administrator access required")
    return user


def require_tenant_member(
    tenant_id: Annotated[str, Depends(require_tenant)],
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> str:
    """
    Require a token issued for the request tenant.

    Platform administrators may act on any tenant.
    """
    if user.tenant_id != tenant_id and not user.is_platform_admin:
        raise ForbiddenException(detail="Token is not valid for this tenant")
    return tenant_id


def require_role(*roles: str):
    """
    Dependency factory requiring one of the given tenant roles.

    Roles come from the access token, which is checked against the request
    tenant first. Platform administrators pass every role check.

    Args:
        roles: Accepted role names

    Returns:
        Dependency function
    """
    accepted = frozenset(roles)

    def role_checker(
        tenant_id: Annotated[str, Depends(require_tenant_member)],
        user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if user.is_platform_admin or accepted.intersection(user.roles):
            return user
        raise ForbiddenException(
            detail=f"Requires one of the roles: {', '.join(sorted(accepted))}"
        )

    return role_checker


# ═══════════════════════════════════════════════════════════════════════════════
# TENANT SCHEMA ROUTING
# ═══════════════════════════════════════════════════════════════════════════════


async def get_tenant_context(
    tenant_id: Annotated[str, Depends(require_tenant_member)],
    session: DBSession,
) -> Tenant:
    """
    Resolve the request tenant and check it may be routed to.

    Raises:
        ForbiddenException: If the token belongs to another tenant
        TenantNotFoundException: If the tenant is not registered
        TenantInactiveException: If the tenant is inactive or suspended
        TenantSchemaNotProvisionedException: If the schema was never created
    """
    validate_tenant_id(tenant_id)

    tenant = await TenantRepository(session).get_by_id(tenant_id)

    if not tenant:
        raise TenantNotFoundException(identifier=tenant_id)

    if not tenant.is_accessible:
        raise TenantInactiveException(identifier=tenant_id, status_value=tenant.status.value)

    if not tenant.is_provisioned:
        raise TenantSchemaNotProvisionedException(identifier=tenant_id)

    return tenant


async def get_tenant_db(
    tenant: Annotated[Tenant, Depends(get_tenant_context)],
) -> AsyncGenerator[AsyncSession, None]:
    """Get a session routed to the request tenant's schema."""
    async with open_tenant_session(tenant.id) as session:
        yield session


# ═══════════════════════════════════════════════════════════════════════════════
# MANAGED SERVICES
# ═══════════════════════════════════════════════════════════════════════════════


def get_identity_service() -> IdentityService:
    return IdentityService()


def get_messaging_service() -> MessagingService:
    return MessagingService()


def get_storage_service() -> StorageService:
    return StorageService()


def get_provisioning_service() -> ProvisioningService:
    return ProvisioningService(engine)


# Type aliases for common dependencies
CurrentTenant = Annotated[str | None, Depends(get_current_tenant)]
RequiredTenant = Annotated[str, Depends(require_tenant)]
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
PlatformAdmin = Annotated[AuthenticatedUser, Depends(require_platform_admin)]
MemberTenant = Annotated[str, Depends(require_tenant_member)]
TenantContext = Annotated[Tenant, Depends(get_tenant_context)]
TenantDBSession = Annotated[AsyncSession, Depends(get_tenant_db)]
Identity = Annotated[IdentityService, Depends(get_identity_service)]
Messaging = Annotated[MessagingService, Depends(get_messaging_service)]
Storage = Annotated[StorageService, Depends(get_storage_service)]
Provisioning = Annotated[ProvisioningService, Depends(get_provisioning_service)]

# Role guards
HospitalAdmin = Annotated[AuthenticatedUser, Depends(require_role(ROLE_HOSPITAL_ADMIN))]
PatientEditor = Annotated[
    AuthenticatedUser,
    Depends(require_role(ROLE_HOSPITAL_ADMIN, ROLE_DOCTOR, ROLE_RECEPTIONIST)),
]
BedManager = Annotated[AuthenticatedUser, Depends(require_role(ROLE_HOSPITAL_ADMIN, ROLE_NURSE))]
