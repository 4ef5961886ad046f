"""Global test configuration and fixtures."""
import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("COGNITO_USER_POOL_ID", "us-east-1_testpool")
os.environ.setdefault("COGNITO_CLIENT_ID", "testclientid")

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from unittest.mock import MagicMock

import boto3
import pytest
from fastapi.testclient import TestClient

from hms.core.security import create_access_token
from hms.database import get_db_session
from hms.main import app
from hms.models.tenant import Tenant, TenantStatus, SubscriptionPlan


async def override_db_session() -> AsyncGenerator[MagicMock, None]:
    yield MagicMock(name="session")


@pytest.fixture
def client():
    """Test client with the database session replaced."""
    app.dependency_overrides[get_db_session] = override_db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_headers():
    """Build Authorization (and tenant) headers for a principal."""

    def _make(
        tenant_id: str = "hosp_a",
        roles: list[str] | None = None,
        is_platform_admin: bool = False,
        header_tenant: str | None = None,
        email: str = "jane@example.com",
    ) -> dict[str, str]:
        token = create_access_token({
            "sub": email,
            "tenant_id": tenant_id,
            "roles": roles or [],
            "is_platform_admin": is_platform_admin,
        })
        headers = {"Authorization": f"Bearer {token}"}
        if header_tenant:
            headers["X-Tenant-ID"] = header_tenant
        return headers

    return _make


@pytest.fixture
def make_tenant():
    """Build a transient Tenant row."""

    def _make(
        tenant_id: str = "hosp_a",
        status: TenantStatus = TenantStatus.ACTIVE,
        provisioned: bool = True,
        subdomain: str | None = None,
    ) -> Tenant:
        now = datetime.now(timezone.utc)
        return Tenant(
            id=tenant_id,
            name="General Hospital",
            email="admin@general.example.com",
            plan=SubscriptionPlan.BASIC,
            status=status,
            subdomain=subdomain,
            schema_provisioned_at=now if provisioned else None,
            joindate=now,
            updated_at=now,
        )

    return _make


@pytest.fixture
def aws_client():
    """Real boto3 clients with dummy credentials, for use with Stubber."""

    def _make(service_name: str):
        return boto3.client(
            service_name,
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )

    return _make
