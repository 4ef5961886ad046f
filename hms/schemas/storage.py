"""
Object storage request/response schemas
"""

from datetime import datetime

from pydantic import Field

from hms.schemas.base import BaseSchema


class UploadUrlRequest(BaseSchema):
    """Request a pre-signed upload URL."""

    filename: str = Field(min_length=1, max_length=255)
    content_type: str = Field(default="application/octet-stream", max_length=255)
    folder: str = Field(
        default="uploads",
        pattern=r'^[a-z0-9][a-z0-9_\-/]{0,99}$',
        description="Sub-folder below the tenant prefix",
    )


class ObjectKeyRequest(BaseSchema):
    """Reference to an existing object."""

    key: str = Field(min_length=1, max_length=1024)


class SignedUrlResponse(BaseSchema):
    """Pre-signed URL with the object key it grants access to."""

    url: str = Field(description="Pre-signed URL")
    key: str = Field(description="Object key")
    method: str = Field(description="HTTP method the URL is signed for")
    expires_at: datetime = Field(description="URL expiry")
