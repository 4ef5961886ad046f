"""
Messaging service for transactional email (SES), SMS and topic publishes (SNS).
"""

import logging
import re
from typing import Any, Dict, List

from botocore.client import BaseClient
from botocore.exceptions import ClientError
from starlette.concurrency import run_in_threadpool

from hms.config import settings
from hms.core.aws import client_error_code, client_error_message, get_aws_client
from hms.core.exceptions import BadRequestException, MessagingException, ValidationException
from hms.core.tenancy import is_admin_tenant

logger = logging.getLogger(__name__)

E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")
PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def render_template(template: str, variables: Dict[str, Any]) -> str:
    """
    Fill ``{{name}}`` placeholders.

    Unknown placeholders are left as they are.

    Args:
        template: Text with placeholders
        variables: Values by placeholder name

    Returns:
        Rendered text
    """
    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def sender_for_tenant(tenant_id: str | None) -> str:
    """Sender address for mail sent on behalf of a tenant."""
    if is_admin_tenant(tenant_id):
        return settings.admin_email_sender
    return settings.email_sender


class MessagingService:
    """
    Sends email through SES and SMS or topic messages through SNS.

    Args:
        ses_client: boto3 SES client
        sns_client: boto3 SNS client
        topic_arn: Default topic for ``publish``
    """

    def __init__(
        self,
        ses_client: BaseClient | None = None,
        sns_client: BaseClient | None = None,
        topic_arn: str | None = None,
    ):
        self.ses = ses_client or get_aws_client("ses")
        self.sns = sns_client or get_aws_client("sns")
        self.topic_arn = topic_arn or settings.sns_topic_arn

    async def send_email(
        self,
        to: List[str],
        subject: str,
        body: str | None = None,
        html_body: str | None = None,
        sender: str | None = None,
    ) -> str:
        """
        Send an email.

        Args:
            to: Recipient addresses
            subject: Subject line
            body: Plain-text body
            html_body: HTML body
            sender: Source address (defaults to the platform sender)

        Returns:
            SES message ID

        Raises:
            ValidationException: If neither body is given
            MessagingException: If SES refuses the message
        """
        if not body and not html_body:
            raise ValidationException(detail="Email body is required")

        message_body: Dict[str, Any] = {}
        if body:
            message_body["Text"] = {"Data": body, "Charset": "UTF-8"}
        if html_body:
            message_body["Html"] = {"Data": html_body, "Charset": "UTF-8"}

        try:
            response = await run_in_threadpool(
                self.ses.send_email,
                Source=sender or settings.email_sender,
                Destination={"ToAddresses": list(to)},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": message_body,
                },
            )
        except ClientError as exc:
            code = client_error_code(exc)
            logger.error("SES send_email to %s failed: %s", to, code)
            if code == "MessageRejected":
                raise MessagingException(
                    detail=(
                        "Email rejected by SES. In sandbox mode the recipient address "
                        f"must be verified: {client_error_message(exc)}"
                    )
                ) from exc
            raise MessagingException(detail=client_error_message(exc)) from exc

        logger.info("Sent email %s to %d recipient(s)", response["MessageId"], len(to))
        return response["MessageId"]

    async def send_sms(self, phone_number: str, message: str) -> str:
        """
        Send an SMS.

        Args:
            phone_number: Destination in E.164 format
            message: Text to send

        Returns:
            SNS message ID
        """
        if not E164_PATTERN.match(phone_number):
            raise ValidationException(
                detail=f"Phone number '{phone_number}' is not in E.164 format"
            )

        try:
            response = await run_in_threadpool(
                self.sns.publish,
                PhoneNumber=phone_number,
                Message=message,
            )
        except ClientError as exc:
            logger.error("SNS SMS publish failed: %s", client_error_code(exc))
            raise MessagingException(detail=client_error_message(exc)) from exc

        return response["MessageId"]

    async def publish(
        self,
        message: str,
        subject: str | None = None,
        topic_arn: str | None = None,
        attributes: Dict[str, str] | None = None,
    ) -> str:
        """
        Publish a message to an SNS topic.

        Args:
            message: Message body
            subject: Optional subject (used by email subscriptions)
            topic_arn: Target topic, defaults to the configured one
            attributes: String message attributes

        Returns:
            SNS message ID
        """
        target = topic_arn or self.topic_arn
        if not target:
            raise BadRequestException(detail="No topic ARN given and none configured")

        params: Dict[str, Any] = {"TopicArn": target, "Message": message}
        if subject:
            params["Subject"] = subject
        if attributes:
            params["MessageAttributes"] = {
                name: {"DataType": "String", "StringValue": value}
                for name, value in attributes.items()
            }

        try:
            response = await run_in_threadpool(self.sns.publish, **params)
        except ClientError as exc:
            logger.error("SNS publish to %s failed: %s", target, client_error_code(exc))
            raise MessagingException(detail=client_error_message(exc)) from exc

        return response["MessageId"]
