"""
Tenant-related Pydantic schemas
"""

from datetime import datetime
from typing import List

from pydantic import EmailStr, Field, field_validator

from hms.schemas.base import BaseSchema
from hms.models.tenant import TenantStatus, SubscriptionPlan


class TenantBase(BaseSchema):
    """Base tenant schema with common fields."""

    name: str = Field(
        min_length=2,
        max_length=255,
        description="Hospital name"
    )
    email: EmailStr = Field(
        description="Contact email address"
    )
    plan: SubscriptionPlan = Field(
        default=SubscriptionPlan.BASIC,
        description="Subscription plan"
    )


class TenantCreate(TenantBase):
    """Schema for creating a new tenant."""

    id: str | None = Field(
        default=None,
        max_length=63,
        description="Tenant identifier and schema name (generated if not provided)"
    )
    status: TenantStatus = Field(
        default=TenantStatus.ACTIVE,
        description="Initial status"
    )
    subdomain: str | None = Field(
        default=None,
        max_length=63,
        description="Tenant subdomain"
    )
    provision_schema: bool = Field(
        default=True,
        description="Create and migrate the tenant schema immediately"
    )

    @field_validator('id', 'subdomain', mode='before')
    @classmethod
    def normalize_identifier(cls, v: str | None) -> str | None:
        if v:
            return v.lower().strip()
        return v


class TenantUpdate(BaseSchema):
    """Schema for updating a tenant."""

    name: str | None = Field(
        default=None,
        min_length=2,
        max_length=255,
    )
    email: EmailStr | None = Field(default=None)
    plan: SubscriptionPlan | None = Field(default=None)
    status: TenantStatus | None = Field(default=None)
    subdomain: str | None = Field(
        default=None,
        max_length=63,
    )

    @field_validator('subdomain', mode='before')
    @classmethod
    def normalize_subdomain(cls, v: str | None) -> str | None:
        if v:
            return v.lower().strip()
        return v


class TenantResponse(TenantBase):
    """Full tenant response schema."""

    id: str = Field(description="Tenant identifier and schema name")
    status: TenantStatus = Field(description="Tenant status")
    subdomain: str | None = Field(default=None, description="Tenant subdomain")
    schema_provisioned_at: datetime | None = Field(
        default=None,
        description="When the tenant schema was provisioned"
    )
    joindate: datetime = Field(description="Join date")
    updated_at: datetime = Field(description="Last update timestamp")


class TenantListResponse(BaseSchema):
    """Tenant list with total count."""

    tenants: List[TenantResponse] = Field(description="Tenants on this page")
    total: int = Field(description="Total matching tenants")


class SubdomainValidationResponse(BaseSchema):
    """Subdomain format and availability result."""

    subdomain: str = Field(description="Checked subdomain")
    is_valid_format: bool = Field(description="Whether the format rules pass")
    is_available: bool = Field(description="Whether no other tenant uses it")
    code: str | None = Field(default=None, description="Failure code")
    suggestion: str | None = Field(default=None, description="Sanitized alternative when the format is invalid")
    message: str = Field(description="Human-readable result")


class SchemaStatusResponse(BaseSchema):
    """Tenant schema lifecycle status."""

    tenant_id: str = Field(description="Tenant identifier")
    schema_name: str = Field(description="Postgres schema name")
    exists: bool = Field(description="Whether the schema exists")
    current_revision: str | None = Field(description="Applied migration revision")
    head_revision: str | None = Field(description="Latest available revision")
    is_up_to_date: bool = Field(description="Whether all migrations are applied")


class SchemaUpgradeRequest(BaseSchema):
    """Upgrade request for several tenant schemas."""

    tenant_ids: List[str] | None = Field(
        default=None,
        description="Tenants to upgrade (all provisioned tenants if omitted)"
    )


class SchemaUpgradeResult(BaseSchema):
    """Per-tenant outcome of a bulk upgrade."""

    tenant_id: str
    success: bool
    revision: str | None = None
    error: str | None = None


class SchemaUpgradeResponse(BaseSchema):
    """Bulk upgrade summary."""

    results: List[SchemaUpgradeResult]
    success_count: int
    failure_count: int
