"""
Pydantic schemas for request/response validation
"""

from hms.schemas.base import BaseSchema, PaginatedResponse, MessageResponse
from hms.schemas.tenant import (
    TenantCreate,
    TenantUpdate,
    TenantResponse,
    TenantListResponse,
    SchemaStatusResponse,
)
from hms.schemas.auth import (
    SignUpRequest,
    SignInRequest,
    TokenResponse,
    AuthenticatedUser,
)

__all__ = [
    "BaseSchema",
    "PaginatedResponse",
    "MessageResponse",
    "TenantCreate",
    "TenantUpdate",
    "TenantResponse",
    "TenantListResponse",
    "SchemaStatusResponse",
    "SignUpRequest",
    "SignInRequest",
    "TokenResponse",
    "AuthenticatedUser",
]
