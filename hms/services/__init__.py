"""
Service layer for business logic.

Services orchestrate operations between repositories and the managed
AWS services, and handle business rules and validation.
"""

from hms.services.provisioning_service import ProvisioningService, SchemaStatus
from hms.services.tenant_service import TenantService
from hms.services.identity_service import IdentityService
from hms.services.auth_service import AuthService
from hms.services.messaging_service import MessagingService
from hms.services.storage_service import StorageService
from hms.services.role_service import RoleService
from hms.services.patient_service import PatientService
from hms.services.bed_service import BedService

__all__ = [
    "ProvisioningService",
    "SchemaStatus",
    "TenantService",
    "IdentityService",
    "AuthService",
    "MessagingService",
    "StorageService",
    "RoleService",
    "PatientService",
    "BedService",
]
