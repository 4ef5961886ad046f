"""
SQLAlchemy models for the platform registry and the tenant schemas
"""

from hms.models.base import (
    Base,
    TenantBase,
    TimestampMixin,
    IntegerIDMixin,
    TENANT_SCHEMA_PLACEHOLDER,
)
from hms.models.tenant import Tenant, TenantStatus, SubscriptionPlan
from hms.models.verification import UserVerification, VerificationType
from hms.models.role import Role
from hms.models.patient import Patient, PatientStatus
from hms.models.bed import Bed, BedStatus

__all__ = [
    "Base",
    "TenantBase",
    "TimestampMixin",
    "IntegerIDMixin",
    "TENANT_SCHEMA_PLACEHOLDER",
    "Tenant",
    "TenantStatus",
    "SubscriptionPlan",
    "UserVerification",
    "VerificationType",
    "Role",
    "Patient",
    "PatientStatus",
    "Bed",
    "BedStatus",
]
