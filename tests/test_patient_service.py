"""Patient records with the repositories mocked out."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from hms.core.exceptions import DuplicateException, NotFoundException
from hms.schemas.patient import PatientCreate, PatientUpdate
from hms.services.patient_service import PatientService


@pytest.fixture
def service():
    service = PatientService(MagicMock(name="session"))
    service.repository = AsyncMock()
    service.beds = AsyncMock()
    service.repository.exists_by_field.return_value = False
    service.repository.get_by_id.return_value = SimpleNamespace(id=3, patient_number="P-0003")
    service.repository.create.side_effect = lambda data: SimpleNamespace(id=3, **data)
    service.repository.update.side_effect = lambda patient_id, data: SimpleNamespace(id=patient_id, **data)
    service.beds.get_by_patient.return_value = None
    return service


def patient_data(**overrides) -> PatientCreate:
    values = {"patient_number": "P-0003", "first_name": "John", "last_name": "Doe"}
    values.update(overrides)
    return PatientCreate(**values)


async def test_create_patient(service):
    patient = await service.create_patient(patient_data())

    assert patient.patient_number == "P-0003"
    service.repository.exists_by_field.assert_awaited_once_with("patient_number", "P-0003")


async def test_duplicate_patient_number(service):
    service.repository.exists_by_field.return_value = True

    with pytest.raises(DuplicateException) as exc_info:
        await service.create_patient(patient_data())

    assert exc_info.value.status_code == 409
    assert "patient_number" in exc_info.value.detail
    service.repository.create.assert_not_awaited()


async def test_concurrent_duplicate_surfaces_as_conflict(service):
    service.repository.create.side_effect = DuplicateException(resource="Patient", field="unique value")

    with pytest.raises(DuplicateException) as exc_info:
        await service.create_patient(patient_data())

    assert exc_info.value.status_code == 409


async def test_update_writes_only_given_fields(service):
    patient = await service.update_patient(3, PatientUpdate(phone="+15550100"))

    assert patient.phone == "+15550100"
    service.repository.update.assert_awaited_once_with(3, {"phone": "+15550100"})


async def test_update_missing_patient(service):
    service.repository.get_by_id.return_value = None

    with pytest.raises(NotFoundException):
        await service.update_patient(3, PatientUpdate(phone="+15550100"))

    service.repository.update.assert_not_awaited()


async def test_delete_patient(service):
    await service.delete_patient(3)

    service.beds.get_by_patient.assert_awaited_once_with(3)
    service.repository.delete.assert_awaited_once_with(3)


async def test_delete_missing_patient(service):
    service.repository.get_by_id.return_value = None

    with pytest.raises(NotFoundException):
        await service.delete_patient(3)

    service.repository.delete.assert_not_awaited()
