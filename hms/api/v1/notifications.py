"""
Notification API endpoints.

Relays transactional email, SMS and topic messages on behalf of a tenant.
"""

from fastapi import APIRouter, status

from hms.services.messaging_service import render_template, sender_for_tenant
from hms.schemas.notification import (
    EmailRequest,
    SMSRequest,
    PublishRequest,
    MessageSentResponse,
)
from hms.core.dependencies import HospitalAdmin, MemberTenant, Messaging

router = APIRouter()


@router.post(
    "/email",
    response_model=MessageSentResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send Email",
    description="Send an email; {{name}} placeholders are filled from variables.",
)
async def send_email(
    data: EmailRequest,
    tenant_id: MemberTenant,
    admin: HospitalAdmin,
    messaging: Messaging,
) -> MessageSentResponse:
    message_id = await messaging.send_email(
        data.to,
        render_template(data.subject, data.variables),
        body=render_template(data.body, data.variables) if data.body else None,
        html_body=render_template(data.html_body, data.variables) if data.html_body else None,
        sender=sender_for_tenant(tenant_id),
    )
    return MessageSentResponse(message_id=message_id, channel="email")


@router.post(
    "/sms",
    response_model=MessageSentResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send SMS",
)
async def send_sms(
    data: SMSRequest,
    tenant_id: MemberTenant,
    admin: HospitalAdmin,
    messaging: Messaging,
) -> MessageSentResponse:
    message_id = await messaging.send_sms(
        data.phone_number,
        render_template(data.message, data.variables),
    )
    return MessageSentResponse(message_id=message_id, channel="sms")


@router.post(
    "/publish",
    response_model=MessageSentResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Publish to Topic",
)
async def publish(
    data: PublishRequest,
    tenant_id: MemberTenant,
    admin: HospitalAdmin,
    messaging: Messaging,
) -> MessageSentResponse:
    attributes = {"tenant_id": tenant_id, **data.attributes}
    message_id = await messaging.publish(
        data.message,
        subject=data.subject,
        topic_arn=data.topic_arn,
        attributes=attributes,
    )
    return MessageSentResponse(message_id=message_id, channel="topic")
