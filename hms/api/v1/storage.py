"""
Object storage API endpoints.

Issues pre-signed URLs so clients move file bytes directly to and from S3.
"""

from fastapi import APIRouter

from hms.schemas.storage import UploadUrlRequest, ObjectKeyRequest, SignedUrlResponse
from hms.schemas.base import MessageResponse
from hms.core.dependencies import MemberTenant, Storage

router = APIRouter()


@router.post(
    "/upload-url",
    response_model=SignedUrlResponse,
    summary="Create Upload URL",
    description="Sign a PUT URL for a new object under the tenant prefix.",
)
async def create_upload_url(
    data: UploadUrlRequest,
    tenant_id: MemberTenant,
    storage: Storage,
) -> SignedUrlResponse:
    signed = storage.create_upload_url(
        tenant_id,
        data.filename,
        content_type=data.content_type,
        folder=data.folder,
    )
    return SignedUrlResponse(**signed)


@router.post(
    "/download-url",
    response_model=SignedUrlResponse,
    summary="Create Download URL",
    description="Sign a GET URL for an object owned by the tenant.",
)
async def create_download_url(
    data: ObjectKeyRequest,
    tenant_id: MemberTenant,
    storage: Storage,
) -> SignedUrlResponse:
    signed = storage.create_download_url(tenant_id, data.key)
    return SignedUrlResponse(**signed)


@router.delete(
    "/objects",
    response_model=MessageResponse,
    summary="Delete Object",
)
async def delete_object(
    data: ObjectKeyRequest,
    tenant_id: MemberTenant,
    storage: Storage,
) -> MessageResponse:
    await storage.delete_object(tenant_id, data.key)
    return MessageResponse(message="Object deleted")
