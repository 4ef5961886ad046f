"""
Messaging request/response schemas
"""

from typing import Any, Dict, List

from pydantic import EmailStr, Field, model_validator

from hms.schemas.base import BaseSchema


class EmailRequest(BaseSchema):
    """Transactional email request.

    Either ``body`` or ``template`` must be provided; ``{{name}}`` placeholders
    in subject and body are filled from ``variables``.
    """

    to: List[EmailStr] = Field(min_length=1, max_length=50)
    subject: str = Field(min_length=1, max_length=998)
    body: str | None = Field(default=None)
    html_body: str | None = Field(default=None)
    variables: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_body(self):
        if not self.body and not self.html_body:
            raise ValueError("either body or html_body is required")
        return self


class SMSRequest(BaseSchema):
    """SMS request."""

    phone_number: str = Field(
        pattern=r'^\+[1-9]\d{6,14}$',
        description="Destination in E.164 format",
    )
    message: str = Field(min_length=1, max_length=1600)
    variables: Dict[str, Any] = Field(default_factory=dict)


class PublishRequest(BaseSchema):
    """Topic publish request."""

    message: str = Field(min_length=1)
    subject: str | None = Field(default=None, max_length=100)
    topic_arn: str | None = Field(
        default=None,
        description="Target topic (defaults to the configured topic)",
    )
    attributes: Dict[str, str] = Field(default_factory=dict)


class MessageSentResponse(BaseSchema):
    """Delivery acknowledgement from the messaging service."""

    message_id: str = Field(description="Provider message ID")
    channel: str = Field(description="email, sms or topic")
