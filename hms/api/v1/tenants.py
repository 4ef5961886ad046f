"""
Tenant API endpoints.

Platform-admin operations on the tenant registry and tenant schemas.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status, Path

from hms.services.tenant_service import TenantService
from hms.models.tenant import TenantStatus
from hms.schemas.tenant import (
    TenantCreate,
    TenantUpdate,
    TenantResponse,
    TenantListResponse,
    SubdomainValidationResponse,
    SchemaStatusResponse,
    SchemaUpgradeRequest,
    SchemaUpgradeResult,
    SchemaUpgradeResponse,
)
from hms.schemas.base import MessageResponse
from hms.services.provisioning_service import SchemaStatus
from hms.core.dependencies import DBSession, PlatformAdmin, Provisioning

router = APIRouter()

TenantIdPath = Annotated[str, Path(description="Tenant identifier")]


def _schema_status_response(tenant_id: str, schema_status: SchemaStatus) -> SchemaStatusResponse:
    return SchemaStatusResponse(
        tenant_id=tenant_id,
        schema_name=schema_status.schema_name,
        exists=schema_status.exists,
        current_revision=schema_status.current_revision,
        head_revision=schema_status.head_revision,
        is_up_to_date=schema_status.is_up_to_date,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# TENANT CRUD ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get(
    "",
    response_model=TenantListResponse,
    summary="List Tenants",
    description="Get tenants with search, status filter and pagination.",
)
async def list_tenants(
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
    skip: Annotated[int, Query(ge=0, description="Records to skip")] = 0,
    limit: Annotated[int, Query(ge=1, le=100, description="Max records")] = 50,
    search: Annotated[str | None, Query(description="Search term")] = None,
    status_filter: Annotated[TenantStatus | None, Query(alias="status")] = None,
) -> TenantListResponse:
    service = TenantService(session, provisioning)
    tenants, total = await service.list(
        search=search,
        status=status_filter,
        skip=skip,
        limit=limit,
    )
    return TenantListResponse(
        tenants=[TenantResponse.model_validate(t) for t in tenants],
        total=total,
    )


@router.post(
    "",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Tenant",
    description="Register a hospital and provision its schema.",
)
async def create_tenant(
    data: TenantCreate,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> TenantResponse:
    """
    Create a new tenant.

    - **id**: schema-safe identifier, generated when omitted
    - **provision_schema**: create and migrate the schema right away (default)
    """
    service = TenantService(session, provisioning)
    tenant = await service.create(data)
    return TenantResponse.model_validate(tenant)


@router.get(
    "/validate/subdomain/{subdomain}",
    response_model=SubdomainValidationResponse,
    summary="Validate Subdomain",
    description="Check subdomain format and availability.",
)
async def validate_subdomain(
    subdomain: str,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
    exclude_id: Annotated[str | None, Query(alias="excludeId")] = None,
) -> SubdomainValidationResponse:
    service = TenantService(session, provisioning)
    result = await service.validate_subdomain(subdomain, exclude_id=exclude_id)
    return SubdomainValidationResponse(**result)


@router.post(
    "/schemas/upgrade",
    response_model=SchemaUpgradeResponse,
    summary="Upgrade Tenant Schemas",
    description="Apply pending migrations to tenant schemas.",
)
async def upgrade_schemas(
    data: SchemaUpgradeRequest,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> SchemaUpgradeResponse:
    service = TenantService(session, provisioning)
    outcomes = await service.upgrade_schemas(data.tenant_ids)
    results = [
        SchemaUpgradeResult(
            tenant_id=o.tenant_id,
            success=o.success,
            revision=o.revision,
            error=o.error,
        )
        for o in outcomes
    ]
    success_count = sum(1 for r in results if r.success)
    return SchemaUpgradeResponse(
        results=results,
        success_count=success_count,
        failure_count=len(results) - success_count,
    )


@router.get(
    "/{tenant_id}",
    response_model=TenantResponse,
    summary="Get Tenant",
    description="Get a tenant by identifier.",
)
async def get_tenant(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> TenantResponse:
    service = TenantService(session, provisioning)
    tenant = await service.get(tenant_id)
    return TenantResponse.model_validate(tenant)


@router.patch(
    "/{tenant_id}",
    response_model=TenantResponse,
    summary="Update Tenant",
    description="Update tenant details.",
)
async def update_tenant(
    tenant_id: TenantIdPath,
    data: TenantUpdate,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> TenantResponse:
    service = TenantService(session, provisioning)
    tenant = await service.update(tenant_id, data)
    return TenantResponse.model_validate(tenant)


@router.delete(
    "/{tenant_id}",
    response_model=MessageResponse,
    summary="Delete Tenant",
    description="Remove a tenant, optionally dropping its schema and data.",
)
async def delete_tenant(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
    drop_schema: Annotated[bool, Query(alias="dropSchema")] = False,
) -> MessageResponse:
    service = TenantService(session, provisioning)
    await service.delete(tenant_id, drop_schema=drop_schema)
    return MessageResponse(message=f"Tenant '{tenant_id}' deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# STATUS ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/{tenant_id}/activate",
    response_model=TenantResponse,
    summary="Activate Tenant",
)
async def activate_tenant(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> TenantResponse:
    tenant = await TenantService(session, provisioning).activate(tenant_id)
    return TenantResponse.model_validate(tenant)


@router.post(
    "/{tenant_id}/deactivate",
    response_model=TenantResponse,
    summary="Deactivate Tenant",
)
async def deactivate_tenant(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> TenantResponse:
    tenant = await TenantService(session, provisioning).deactivate(tenant_id)
    return TenantResponse.model_validate(tenant)


@router.post(
    "/{tenant_id}/suspend",
    response_model=TenantResponse,
    summary="Suspend Tenant",
)
async def suspend_tenant(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> TenantResponse:
    tenant = await TenantService(session, provisioning).suspend(tenant_id)
    return TenantResponse.model_validate(tenant)


# ═══════════════════════════════════════════════════════════════════════════════
# SCHEMA ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get(
    "/{tenant_id}/schema",
    response_model=SchemaStatusResponse,
    summary="Tenant Schema Status",
    description="Report whether the tenant schema exists and is up to date.",
)
async def get_schema_status(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> SchemaStatusResponse:
    service = TenantService(session, provisioning)
    schema_status = await service.schema_status(tenant_id)
    return _schema_status_response(tenant_id, schema_status)


@router.post(
    "/{tenant_id}/schema",
    response_model=SchemaStatusResponse,
    summary="Initialize Tenant Schema",
    description="Create the tenant schema if needed and apply all migrations.",
)
async def initialize_schema(
    tenant_id: TenantIdPath,
    session: DBSession,
    provisioning: Provisioning,
    admin: PlatformAdmin,
) -> SchemaStatusResponse:
    service = TenantService(session, provisioning)
    schema_status = await service.provision_schema(tenant_id)
    return _schema_status_response(tenant_id, schema_status)
