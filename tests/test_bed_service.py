"""Bed occupancy rules with the repositories mocked out."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from hms.core.exceptions import ConflictException, NotFoundException, ValidationException
from hms.models.bed import BedStatus
from hms.schemas.bed import BedUpdate
from hms.services.bed_service import BedService
from hms.services.patient_service import PatientService


def make_bed(status=BedStatus.AVAILABLE, patient_id=None):
    return SimpleNamespace(id=7, bed_number="ICU-7", status=status.value, patient_id=patient_id)


@pytest.fixture
def service():
    service = BedService(MagicMock(name="session"))
    service.repository = AsyncMock()
    service.patients = AsyncMock()
    service.repository.get_by_patient.return_value = None
    service.repository.update.side_effect = lambda bed_id, data, **kwargs: SimpleNamespace(id=bed_id, **data)
    return service


async def test_assign_available_bed(service):
    service.repository.get_for_update.return_value = make_bed()
    service.patients.get_by_id.return_value = SimpleNamespace(id=3)

    bed = await service.assign(7, 3)

    assert bed.status == "occupied"
    assert bed.patient_id == 3
    service.repository.get_for_update.assert_awaited_once_with(7)


@pytest.mark.parametrize("status", [BedStatus.OCCUPIED, BedStatus.MAINTENANCE, BedStatus.RESERVED])
async def test_assign_unavailable_bed(service, status):
    service.repository.get_for_update.return_value = make_bed(status)

    with pytest.raises(ConflictException):
        await service.assign(7, 3)

    service.repository.update.assert_not_awaited()


async def test_assign_missing_bed(service):
    service.repository.get_for_update.return_value = None

    with pytest.raises(NotFoundException):
        await service.assign(7, 3)


async def test_assign_missing_patient(service):
    service.repository.get_for_update.return_value = make_bed()
    service.patients.get_by_id.return_value = None

    with pytest.raises(NotFoundException) as exc_info:
        await service.assign(7, 3)

    assert "Patient" in exc_info.value.detail


async def test_patient_holds_at_most_one_bed(service):
    service.repository.get_for_update.return_value = make_bed()
    service.patients.get_by_id.return_value = SimpleNamespace(id=3)
    service.repository.get_by_patient.return_value = SimpleNamespace(bed_number="WARD-2")

    with pytest.raises(ConflictException) as exc_info:
        await service.assign(7, 3)

    assert "WARD-2" in exc_info.value.detail


async def test_release_clears_patient(service):
    service.repository.get_for_update.return_value = make_bed(BedStatus.OCCUPIED, patient_id=3)

    bed = await service.release(7)

    assert bed.status == "available"
    assert bed.patient_id is None
    assert service.repository.update.await_args.kwargs == {"exclude_none": False}


async def test_release_of_free_bed(service):
    service.repository.get_for_update.return_value = make_bed()

    with pytest.raises(ConflictException):
        await service.release(7)


async def test_update_cannot_occupy(service):
    service.repository.get_by_id.return_value = make_bed()

    with pytest.raises(ValidationException):
        await service.update_bed(7, BedUpdate(status=BedStatus.OCCUPIED))


async def test_update_status_of_occupied_bed(service):
    service.repository.get_by_id.return_value = make_bed(BedStatus.OCCUPIED, patient_id=3)

    with pytest.raises(ConflictException):
        await service.update_bed(7, BedUpdate(status=BedStatus.MAINTENANCE))


async def test_update_unit_of_occupied_bed(service):
    service.repository.get_by_id.return_value = make_bed(BedStatus.OCCUPIED, patient_id=3)

    bed = await service.update_bed(7, BedUpdate(unit="ICU East"))

    assert bed.unit == "ICU East"


async def test_delete_occupied_bed(service):
    service.repository.get_by_id.return_value = make_bed(BedStatus.OCCUPIED, patient_id=3)

    with pytest.raises(ConflictException):
        await service.delete_bed(7)


async def test_delete_patient_in_bed():
    service = PatientService(MagicMock(name="session"))
    service.repository = AsyncMock()
    service.beds = AsyncMock()
    service.repository.get_by_id.return_value = SimpleNamespace(id=3)
    service.beds.get_by_patient.return_value = SimpleNamespace(bed_number="ICU-7")

    with pytest.raises(ConflictException):
        await service.delete_patient(3)

    service.repository.delete.assert_not_awaited()
