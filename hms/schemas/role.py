"""
Role-related Pydantic schemas
"""

from typing import List

from pydantic import EmailStr, Field

from hms.schemas.base import BaseSchema, IDTimestampSchema


class RoleCreate(BaseSchema):
    """Role creation request schema."""

    name: str = Field(
        min_length=2,
        max_length=50,
        pattern=r'^[a-z][a-z0-9_]*$',
        description="Role name (lowercase, underscores allowed)",
    )
    description: str | None = Field(
        default=None,
        max_length=500,
        description="Role description",
    )
    permissions: List[str] = Field(
        default_factory=list,
        description="Permission identifiers granted by the role",
    )


class RoleResponse(IDTimestampSchema):
    """Role response schema."""

    name: str = Field(description="Role name")
    description: str | None = Field(default=None, description="Role description")
    permissions: List[str] = Field(description="Permission identifiers")


class RoleMemberRequest(BaseSchema):
    """Add or remove a user from a role."""

    email: EmailStr = Field(description="User's email address")


class RoleMembershipResponse(BaseSchema):
    """Role membership change result."""

    role_id: int = Field(description="Role ID")
    role_name: str = Field(description="Role name")
    email: str = Field(description="User's email address")
    group_name: str = Field(description="Identity-provider group")
    message: str = Field(description="Operation result message")


class TenantMemberRequest(BaseSchema):
    """Admit or remove a user from the tenant."""

    email: EmailStr = Field(description="User's email address")


class TenantMembershipResponse(BaseSchema):
    """Tenant membership change result."""

    email: str = Field(description="User's email address")
    tenant_id: str = Field(description="Tenant ID")
    groups: List[str] = Field(description="Identity-provider groups changed")
    message: str = Field(description="Operation result message")
