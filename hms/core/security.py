"""
Security utilities for access tokens, one-time codes and identity-provider hashes
"""

import base64
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from hms.config import settings

# JWT settings
ALGORITHM = "HS256"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a JWT access token."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def generate_verification_code() -> str:
    """
    Generate a one-time code.

    Format: six uppercase hex characters (three random bytes).
    """
    return secrets.token_hex(3).upper()


def cognito_username(email: str) -> str:
    """
    Derive the identity-provider username from an email address.

    ``jane.doe@example.com`` becomes ``jane_doe_example_com``.
    """
    return email.replace("@", "_").replace(".", "_")


def cognito_secret_hash(username: str, client_id: str, client_secret: str) -> str:
    """
    Compute the SECRET_HASH required by app clients that have a secret.

    Base64 of HMAC-SHA256 over ``username + client_id`` keyed by the client secret.
    """
    digest = hmac.new(
        client_secret.encode("utf-8"),
        msg=(username + client_id).encode("utf-8"),
        digestmod=hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("utf-8")
