"""Role definitions and membership backed by identity-provider groups."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from hms.core.exceptions import BadRequestException, DuplicateException, NotFoundException
from hms.schemas.role import RoleCreate
from hms.services.identity_service import IdentityService
from hms.services.role_service import RoleService


@pytest.fixture
def identity():
    identity = AsyncMock(spec=IdentityService)
    identity.user_exists.return_value = True
    identity.list_groups_for_user.return_value = ["hosp_a"]
    return identity


@pytest.fixture
def service(identity):
    service = RoleService(MagicMock(name="session"), identity, "hosp_a")
    service.repository = AsyncMock()
    service.repository.get_by_name.return_value = None
    service.repository.get_by_id.return_value = SimpleNamespace(
        id=2, name="doctor", description="Medical staff"
    )
    service.repository.create.side_effect = lambda data: SimpleNamespace(id=5, **data)
    return service


async def test_create_role_creates_group(service, identity):
    role = await service.create_role(RoleCreate(name="pharmacist", description="Dispensary"))

    assert role.name == "pharmacist"
    identity.create_group.assert_awaited_once_with("hosp_a:pharmacist", description="Dispensary")


async def test_create_duplicate_role(service, identity):
    service.repository.get_by_name.return_value = SimpleNamespace(id=2, name="doctor")

    with pytest.raises(DuplicateException):
        await service.create_role(RoleCreate(name="doctor"))

    identity.create_group.assert_not_awaited()


async def test_delete_role_removes_group(service, identity):
    await service.delete_role(2)

    service.repository.delete.assert_awaited_once_with(2)
    identity.delete_group.assert_awaited_once_with("hosp_a:doctor")


async def test_add_member(service, identity):
    await service.add_member(2, "jane@example.com")

    identity.add_user_to_group.assert_awaited_once_with("jane@example.com", "hosp_a:doctor")


async def test_add_member_requires_tenant_membership(service, identity):
    identity.list_groups_for_user.return_value = ["hosp_b"]

    with pytest.raises(BadRequestException):
        await service.add_member(2, "jane@example.com")

    identity.add_user_to_group.assert_not_awaited()


async def test_add_unknown_user(service, identity):
    identity.user_exists.return_value = False

    with pytest.raises(NotFoundException):
        await service.add_member(2, "ghost@example.com")


async def test_unknown_role(service):
    service.repository.get_by_id.return_value = None

    with pytest.raises(NotFoundException):
        await service.add_member(99, "jane@example.com")


async def test_remove_member(service, identity):
    await service.remove_member(2, "jane@example.com")

    identity.remove_user_from_group.assert_awaited_once_with("jane@example.com", "hosp_a:doctor")


async def test_add_tenant_member(service, identity):
    group = await service.add_tenant_member("jane@example.com")

    assert group == "hosp_a"
    identity.create_group.assert_awaited_once_with("hosp_a")
    identity.add_user_to_group.assert_awaited_once_with("jane@example.com", "hosp_a")


async def test_add_unknown_tenant_member(service, identity):
    identity.user_exists.return_value = False

    with pytest.raises(NotFoundException):
        await service.add_tenant_member("ghost@example.com")

    identity.add_user_to_group.assert_not_awaited()


async def test_admitted_user_can_then_be_granted_a_role(service, identity):
    identity.list_groups_for_user.return_value = []
    with pytest.raises(BadRequestException):
        await service.add_member(2, "jane@example.com")

    await service.add_tenant_member("jane@example.com")
    identity.list_groups_for_user.return_value = ["hosp_a"]
    await service.add_member(2, "jane@example.com")

    identity.add_user_to_group.assert_awaited_with("jane@example.com", "hosp_a:doctor")


async def test_remove_tenant_member_drops_roles(service, identity):
    identity.list_groups_for_user.return_value = [
        "hosp_a",
        "hosp_a:doctor",
        "hosp_ab",
        "hosp_b:nurse",
    ]

    removed = await service.remove_tenant_member("jane@example.com")

    assert removed == ["hosp_a", "hosp_a:doctor"]
    assert [c.args for c in identity.remove_user_from_group.await_args_list] == [
        ("jane@example.com", "hosp_a"),
        ("jane@example.com", "hosp_a:doctor"),
    ]
