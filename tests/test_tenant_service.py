"""Tenant registry and schema lifecycle with repository and provisioning mocked."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from hms.core.exceptions import (
    DuplicateException,
    InvalidTenantIdentifierException,
    ProvisioningException,
    TenantNotFoundException,
    ValidationException,
)
from hms.schemas.tenant import TenantCreate
from hms.services.provisioning_service import ProvisioningService, SchemaStatus, UpgradeOutcome
from hms.services.tenant_service import TenantService


@pytest.fixture
def provisioning():
    provisioning = AsyncMock(spec=ProvisioningService)
    provisioning.provision.side_effect = lambda tenant_id: SchemaStatus(tenant_id, True, "0003", "0003")
    return provisioning


@pytest.fixture
def service(provisioning, make_tenant):
    service = TenantService(MagicMock(name="session"), provisioning)
    service.repository = AsyncMock()
    service.repository.get_by_id.return_value = None
    service.repository.subdomain_exists.return_value = False
    service.repository.create.side_effect = lambda data: make_tenant(data["id"], provisioned=False)
    service.repository.mark_provisioned.side_effect = lambda tenant_id: make_tenant(tenant_id)
    return service


def tenant_data(**overrides) -> TenantCreate:
    values = {"name": "General Hospital", "email": "it@general.example.com"}
    values.update(overrides)
    return TenantCreate(**values)


async def test_create_registers_and_provisions(service, provisioning):
    tenant = await service.create(tenant_data(id="Hosp_A", subdomain="general"))

    assert tenant.id == "hosp_a"
    assert tenant.is_provisioned
    provisioning.provision.assert_awaited_once_with("hosp_a")
    service.repository.mark_provisioned.assert_awaited_once_with("hosp_a")


async def test_create_without_provisioning(service, provisioning):
    tenant = await service.create(tenant_data(id="hosp_a", provision_schema=False))

    assert not tenant.is_provisioned
    provisioning.provision.assert_not_awaited()


async def test_create_generates_identifier(service):
    tenant = await service.create(tenant_data())

    assert tenant.id.startswith("tenant_")


async def test_create_rejects_unsafe_identifier(service):
    with pytest.raises(InvalidTenantIdentifierException):
        await service.create(tenant_data(id="pg_catalog"))

    service.repository.create.assert_not_awaited()


async def test_create_rejects_duplicate_id(service, make_tenant):
    service.repository.get_by_id.return_value = make_tenant("hosp_a")

    with pytest.raises(DuplicateException):
        await service.create(tenant_data(id="hosp_a"))


async def test_create_rejects_taken_subdomain(service):
    service.repository.subdomain_exists.return_value = True

    with pytest.raises(DuplicateException):
        await service.create(tenant_data(id="hosp_a", subdomain="general"))


async def test_create_rejects_reserved_subdomain(service):
    with pytest.raises(ValidationException):
        await service.create(tenant_data(id="hosp_a", subdomain="admin"))


async def test_create_propagates_provisioning_failure(service, provisioning):
    provisioning.provision.side_effect = ProvisioningException(identifier="hosp_a", reason="boom")

    with pytest.raises(ProvisioningException):
        await service.create(tenant_data(id="hosp_a"))

    service.repository.mark_provisioned.assert_not_awaited()


async def test_delete_drops_schema_after_row(service, provisioning, make_tenant):
    service.repository.get_by_id.return_value = make_tenant("hosp_a")
    calls = []
    service.repository.delete.side_effect = lambda tenant_id: calls.append("row")
    provisioning.drop.side_effect = lambda tenant_id: calls.append("schema")

    await service.delete("hosp_a", drop_schema=True)

    assert calls == ["row", "schema"]


async def test_delete_keeps_schema_by_default(service, provisioning, make_tenant):
    service.repository.get_by_id.return_value = make_tenant("hosp_a")

    await service.delete("hosp_a")

    provisioning.drop.assert_not_awaited()


async def test_validate_subdomain_suggests_fix(service):
    result = await service.validate_subdomain("General-Hospital")

    assert result["is_valid_format"] is False
    assert result["code"] == "UPPERCASE"
    assert result["suggestion"] == "general-hospital"


async def test_validate_subdomain_taken(service):
    service.repository.subdomain_exists.return_value = True

    result = await service.validate_subdomain("general", exclude_id="hosp_b")

    assert result["is_available"] is False
    assert result["code"] == "TAKEN"
    service.repository.subdomain_exists.assert_awaited_once_with("general", exclude_id="hosp_b")


async def test_schema_status_of_unknown_tenant(service, provisioning):
    with pytest.raises(TenantNotFoundException):
        await service.schema_status("hosp_x")

    provisioning.status.assert_not_awaited()


async def test_upgrade_reports_unknown_tenants(service, provisioning, make_tenant):
    service.repository.get_by_id.side_effect = lambda tenant_id: (
        make_tenant(tenant_id) if tenant_id == "hosp_a" else None
    )
    provisioning.upgrade_all.return_value = [UpgradeOutcome("hosp_a", True, revision="0003")]

    outcomes = await service.upgrade_schemas(["hosp_a", "hosp_x"])

    provisioning.upgrade_all.assert_awaited_once_with(["hosp_a"])
    assert [(o.tenant_id, o.success) for o in outcomes] == [("hosp_a", True), ("hosp_x", False)]
    service.repository.mark_provisioned.assert_awaited_once_with("hosp_a")


async def test_upgrade_defaults_to_every_provisioned_tenant(service, provisioning):
    service.repository.get_provisioned_ids.return_value = ["hosp_a", "hosp_b"]
    provisioning.upgrade_all.return_value = [
        UpgradeOutcome("hosp_a", True, revision="0003"),
        UpgradeOutcome("hosp_b", False, error="boom"),
    ]

    outcomes = await service.upgrade_schemas()

    provisioning.upgrade_all.assert_awaited_once_with(["hosp_a", "hosp_b"])
    assert len(outcomes) == 2
    service.repository.mark_provisioned.assert_awaited_once_with("hosp_a")
