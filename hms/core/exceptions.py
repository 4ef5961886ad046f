"""
Custom exceptions for the application
"""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: Any = None):
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with identifier '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationException(AppException):
    """Validation error exception."""

    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class BadRequestException(AppException):
    """Malformed or unacceptable request."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class DuplicateException(AppException):
    """Duplicate resource exception."""

    def __init__(self, resource: str = "Resource", field: str = "identifier"):
        detail = f"{resource} with this {field} already exists"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictException(AppException):
    """Request conflicts with the current state of a resource."""

    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


# ═══════════════════════════════════════════════════════════════════════════════
# TENANCY
# ═══════════════════════════════════════════════════════════════════════════════


class TenantNotFoundException(NotFoundException):
    """Tenant not found exception."""

    def __init__(self, identifier: Any = None):
        super().__init__(resource="Tenant", identifier=identifier)


class InvalidTenantIdentifierException(ValidationException):
    """Tenant identifier cannot be used as a schema name."""

    def __init__(self, identifier: Any = None, reason: str | None = None):
        detail = f"Invalid tenant identifier '{identifier}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail=detail)


class TenantInactiveException(ForbiddenException):
    """Tenant exists but may not be accessed."""

    def __init__(self, identifier: Any = None, status_value: str | None = None):
        detail = f"Tenant '{identifier}' is not active"
        if status_value:
            detail = f"Tenant '{identifier}' is {status_value}"
        super().__init__(detail=detail)


class TenantSchemaNotProvisionedException(AppException):
    """Tenant exists but its schema has not been initialized."""

    def __init__(self, identifier: Any = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Schema for tenant '{identifier}' has not been initialized",
        )


class ProvisioningException(AppException):
    """Schema creation or migration failed."""

    def __init__(self, identifier: Any = None, reason: str | None = None):
        detail = f"Provisioning of tenant schema '{identifier}' failed"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


# ═══════════════════════════════════════════════════════════════════════════════
# MANAGED SERVICES
# ═══════════════════════════════════════════════════════════════════════════════


class ExternalServiceException(AppException):
    """A managed cloud service call failed."""

    service_name = "External service"

    def __init__(self, detail: str | None = None, status_code: int = status.HTTP_502_BAD_GATEWAY):
        super().__init__(
            status_code=status_code,
            detail=detail or f"{self.service_name} request failed",
        )


class IdentityProviderException(ExternalServiceException):
    """Identity provider request failed."""

    service_name = "Identity provider"


class MessagingException(ExternalServiceException):
    """Email or SMS delivery failed."""

    service_name = "Messaging service"


class StorageException(ExternalServiceException):
    """Object storage request failed."""

    service_name = "Storage service"
