"""
Role API endpoints.

Tenant-scoped role definitions and role membership.
"""

from typing import List

from fastapi import APIRouter, status

from hms.services.role_service import RoleService
from hms.services.identity_service import role_group_name
from hms.schemas.role import (
    RoleCreate,
    RoleResponse,
    RoleMemberRequest,
    RoleMembershipResponse,
)
from hms.schemas.base import MessageResponse
from hms.core.dependencies import HospitalAdmin, TenantContext, TenantDBSession, Identity

router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════════
# ROLE CRUD ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get(
    "",
    response_model=List[RoleResponse],
    summary="List Roles",
    description="Get all roles of the tenant.",
)
async def list_roles(
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> List[RoleResponse]:
    service = RoleService(session, identity, tenant.id)
    roles = await service.list_roles()
    return [RoleResponse.model_validate(r) for r in roles]


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Role",
    description="Create a role and its identity-provider group.",
)
async def create_role(
    data: RoleCreate,
    admin: HospitalAdmin,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> RoleResponse:
    service = RoleService(session, identity, tenant.id)
    role = await service.create_role(data)
    return RoleResponse.model_validate(role)


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Get Role",
    description="Get a role by ID.",
)
async def get_role(
    role_id: int,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> RoleResponse:
    service = RoleService(session, identity, tenant.id)
    role = await service.get_role(role_id)
    return RoleResponse.model_validate(role)


@router.delete(
    "/{role_id}",
    response_model=MessageResponse,
    summary="Delete Role",
    description="Delete a role and its identity-provider group.",
)
async def delete_role(
    role_id: int,
    admin: HospitalAdmin,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> MessageResponse:
    service = RoleService(session, identity, tenant.id)
    await service.delete_role(role_id)
    return MessageResponse(message="Role deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# MEMBERSHIP ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/{role_id}/members",
    response_model=RoleMembershipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Role to User",
)
async def add_role_member(
    role_id: int,
    data: RoleMemberRequest,
    admin: HospitalAdmin,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> RoleMembershipResponse:
    service = RoleService(session, identity, tenant.id)
    role = await service.add_member(role_id, data.email)
    return RoleMembershipResponse(
        role_id=role.id,
        role_name=role.name,
        email=data.email,
        group_name=role_group_name(tenant.id, role.name),
        message=f"Role '{role.name}' assigned",
    )


@router.delete(
    "/{role_id}/members",
    response_model=RoleMembershipResponse,
    summary="Remove Role from User",
)
async def remove_role_member(
    role_id: int,
    data: RoleMemberRequest,
    admin: HospitalAdmin,
    tenant: TenantContext,
    session: TenantDBSession,
    identity: Identity,
) -> RoleMembershipResponse:
    service = RoleService(session, identity, tenant.id)
    role = await service.remove_member(role_id, data.email)
    return RoleMembershipResponse(
        role_id=role.id,
        role_name=role.name,
        email=data.email,
        group_name=role_group_name(tenant.id, role.name),
        message=f"Role '{role.name}' removed",
    )
