"""Core modules for the application."""

from hms.core.exceptions import (
    AppException,
    NotFoundException,
    ValidationException,
    DuplicateException,
)
from hms.core.security import (
    create_access_token,
    decode_access_token,
    generate_verification_code,
)
from hms.core.tenancy import (
    current_tenant_id,
    validate_tenant_id,
    is_admin_tenant,
)

__all__ = [
    "AppException",
    "NotFoundException",
    "ValidationException",
    "DuplicateException",
    "create_access_token",
    "decode_access_token",
    "generate_verification_code",
    "current_tenant_id",
    "validate_tenant_id",
    "is_admin_tenant",
]
