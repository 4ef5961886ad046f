"""
Object storage service issuing pre-signed S3 URLs.

Every key is prefixed with the owning tenant's identifier, and a tenant can
only sign URLs for keys under its own prefix.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

from botocore.client import BaseClient
from botocore.exceptions import ClientError
from starlette.concurrency import run_in_threadpool

from hms.config import settings
from hms.core.aws import client_error_code, client_error_message, get_aws_client
from hms.core.exceptions import ForbiddenException, StorageException

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def safe_filename(filename: str) -> str:
    """Strip directories and replace characters unsafe in object keys."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = UNSAFE_FILENAME_CHARS.sub("_", name).lstrip(".")
    return name or "file"


def build_object_key(tenant_id: str, folder: str, filename: str) -> str:
    """
    Build a unique tenant-prefixed key.

    Format: ``<tenant>/<folder>/<uuid hex>_<filename>``
    """
    return f"{tenant_id}/{folder.strip('/')}/{uuid4().hex}_{safe_filename(filename)}"


def ensure_tenant_key(tenant_id: str, key: str) -> str:
    """
    Check that a key belongs to a tenant.

    Raises:
        ForbiddenException: If the key is outside the tenant prefix
    """
    parts = key.split("/")
    if parts[0] != tenant_id or len(parts) < 2 or ".." in parts:
        raise ForbiddenException(detail="Object does not belong to this tenant")
    return key


class StorageService:
    """
    Signs S3 upload and download URLs for tenant-owned objects.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        expires_in: URL lifetime in seconds
    """

    def __init__(
        self,
        client: BaseClient | None = None,
        bucket: str | None = None,
        expires_in: int | None = None,
    ):
        self.client = client or get_aws_client("s3")
        self.bucket = bucket or settings.s3_bucket_name
        self.expires_in = expires_in or settings.presigned_url_expires_in

    def _sign(self, operation: str, params: Dict[str, Any], method: str) -> Dict[str, Any]:
        try:
            url = self.client.generate_presigned_url(
                operation,
                Params={"Bucket": self.bucket, **params},
                ExpiresIn=self.expires_in,
            )
        except ClientError as exc:
            raise StorageException(detail=client_error_message(exc)) from exc

        return {
            "url": url,
            "key": params["Key"],
            "method": method,
            "expires_at": datetime.now(timezone.utc) + timedelta(seconds=self.expires_in),
        }

    def create_upload_url(
        self,
        tenant_id: str,
        filename: str,
        content_type: str = "application/octet-stream",
        folder: str = "uploads",
    ) -> Dict[str, Any]:
        """
        Sign a PUT URL for a new object.

        Args:
            tenant_id: Owning tenant
            filename: Client-side file name
            content_type: Content type the upload must use
            folder: Folder below the tenant prefix

        Returns:
            Dict with ``url``, ``key``, ``method`` and ``expires_at``
        """
        key = build_object_key(tenant_id, folder, filename)
        logger.info("Signing upload URL for %s", key)
        return self._sign(
            "put_object",
            {"Key": key, "ContentType": content_type},
            "PUT",
        )

    def create_download_url(self, tenant_id: str, key: str) -> Dict[str, Any]:
        """
        Sign a GET URL for an existing tenant object.

        Raises:
            ForbiddenException: If the key is outside the tenant prefix
        """
        ensure_tenant_key(tenant_id, key)
        return self._sign("get_object", {"Key": key}, "GET")

    async def delete_object(self, tenant_id: str, key: str) -> None:
        """
        Delete a tenant object.

        Raises:
            ForbiddenException: If the key is outside the tenant prefix
            StorageException: If S3 refuses the request
        """
        ensure_tenant_key(tenant_id, key)
        try:
            await run_in_threadpool(self.client.delete_object, Bucket=self.bucket, Key=key)
        except ClientError as exc:
            logger.error("S3 delete of %s failed: %s", key, client_error_code(exc))
            raise StorageException(detail=client_error_message(exc)) from exc

        logger.info("Deleted object %s", key)
