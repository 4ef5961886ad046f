"""
Shared boto3 client construction for the managed AWS services.
"""

from functools import lru_cache

import boto3
from botocore.client import BaseClient, Config

from hms.config import settings


@lru_cache(maxsize=None)
def get_aws_client(service_name: str) -> BaseClient:
    """
    Get a cached boto3 client for an AWS service.

    Credentials come from the standard boto3 chain (environment, profile,
    instance role). ``settings.aws_endpoint_url`` redirects every client,
    which is how a local emulator is targeted.

    Args:
        service_name: boto3 service name, e.g. ``"cognito-idp"`` or ``"s3"``
    """
    return boto3.client(
        service_name,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        config=Config(
            signature_version="s3v4" if service_name == "s3" else None,
            retries={"max_attempts": 3, "mode": "standard"},
        ),
    )


def client_error_code(error: Exception) -> str:
    """Extract the AWS error code from a botocore ``ClientError``."""
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Code", "")


def client_error_message(error: Exception) -> str:
    """Extract the AWS error message from a botocore ``ClientError``."""
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Message", str(error))
