"""
Repository layer for database access.
"""

from hms.repositories.base import BaseRepository
from hms.repositories.tenant_repository import TenantRepository
from hms.repositories.verification_repository import VerificationRepository
from hms.repositories.role_repository import RoleRepository
from hms.repositories.patient_repository import PatientRepository
from hms.repositories.bed_repository import BedRepository

__all__ = [
    "BaseRepository",
    "TenantRepository",
    "VerificationRepository",
    "RoleRepository",
    "PatientRepository",
    "BedRepository",
]
