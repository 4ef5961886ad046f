"""
Tenant membership API endpoints.

Self sign-up creates an account only; a hospital administrator (or a
platform administrator) admits it to the tenant here.
"""

from fastapi import APIRouter, status

from hms.services.role_service import RoleService
from hms.schemas.role import TenantMemberRequest, TenantMembershipResponse
from hms.core.dependencies import HospitalAdmin, TenantContext, TenantDBSession, Identity

router = APIRouter()


@router.post(
    "",
    response_model=TenantMembershipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Admit User to Tenant",
    description="Add a registered user to the tenant group.",
)
async def add_member(
    data: TenantMemberRequest,
    admin: HospitalAdmin,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> TenantMembershipResponse:
    service = RoleService(session, identity, tenant.id)
    group = await service.add_tenant_member(data.email)
    return TenantMembershipResponse(
        email=data.email,
        tenant_id=tenant.id,
        groups=[group],
        message="User admitted to tenant",
    )


@router.delete(
    "",
    response_model=TenantMembershipResponse,
    summary="Remove User from Tenant",
    description="Remove a user from the tenant group and every tenant role.",
)
async def remove_member(
    data: TenantMemberRequest,
    admin: HospitalAdmin,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> TenantMembershipResponse:
    service = RoleService(session, identity, tenant.id)
    groups = await service.remove_tenant_member(data.email)
    return TenantMembershipResponse(
        email=data.email,
        tenant_id=tenant.id,
        groups=groups,
        message="User removed from tenant",
    )
