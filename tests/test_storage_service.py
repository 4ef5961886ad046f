"""S3 pre-signed URL service tests."""
import pytest
from botocore.stub import Stubber

from hms.core.exceptions import ForbiddenException, StorageException
from hms.services.storage_service import (
    StorageService,
    build_object_key,
    ensure_tenant_key,
    safe_filename,
)

BUCKET = "hospital-medical-records"


@pytest.fixture
def s3(aws_client):
    return aws_client("s3")


@pytest.fixture
def service(s3):
    return StorageService(client=s3, bucket=BUCKET, expires_in=900)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("scan.pdf", "scan.pdf"),
        ("../../etc/passwd", "passwd"),
        ("C:\\scans\\x ray.png", "x_ray.png"),
        ("..hidden", "hidden"),
        ("...", "file"),
    ],
)
def test_safe_filename(filename, expected):
    assert safe_filename(filename) == expected


def test_object_keys_are_tenant_prefixed_and_unique():
    first = build_object_key("hosp_a", "/lab-results/", "report.pdf")
    second = build_object_key("hosp_a", "lab-results", "report.pdf")

    assert first.startswith("hosp_a/lab-results/")
    assert first.endswith("_report.pdf")
    assert first != second


@pytest.mark.parametrize(
    "key",
    ["hosp_b/uploads/a.pdf", "hosp_a", "hosp_a/../hosp_b/a.pdf", "hosp_ab/uploads/a.pdf"],
)
def test_keys_outside_the_tenant_are_forbidden(key):
    with pytest.raises(ForbiddenException):
        ensure_tenant_key("hosp_a", key)


def test_create_upload_url(service):
    result = service.create_upload_url("hosp_a", "scan.pdf", content_type="application/pdf")

    assert result["method"] == "PUT"
    assert result["key"].startswith("hosp_a/uploads/")
    assert BUCKET in result["url"]
    assert result["key"].split("/")[-1] in result["url"]
    assert result["expires_at"] is not None


def test_create_download_url(service):
    result = service.create_download_url("hosp_a", "hosp_a/uploads/abc_scan.pdf")

    assert result["method"] == "GET"
    assert result["key"] == "hosp_a/uploads/abc_scan.pdf"


def test_download_of_another_tenants_object_is_forbidden(service):
    with pytest.raises(ForbiddenException):
        service.create_download_url("hosp_a", "hosp_b/uploads/abc_scan.pdf")


async def test_delete_object(s3, service):
    with Stubber(s3) as stubber:
        stubber.add_response(
            "delete_object",
            {},
            {"Bucket": BUCKET, "Key": "hosp_a/uploads/abc_scan.pdf"},
        )
        await service.delete_object("hosp_a", "hosp_a/uploads/abc_scan.pdf")
        stubber.assert_no_pending_responses()


async def test_delete_object_failure(s3, service):
    with Stubber(s3) as stubber:
        stubber.add_client_error(
            "delete_object",
            service_error_code="AccessDenied",
            service_message="Access Denied",
            http_status_code=403,
        )
        with pytest.raises(StorageException) as exc_info:
            await service.delete_object("hosp_a", "hosp_a/uploads/abc_scan.pdf")

    assert exc_info.value.status_code == 502
