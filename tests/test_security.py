"""Security utility tests."""
import base64
import hashlib
import hmac
import re
from datetime import timedelta

from hms.core.security import (
    cognito_secret_hash,
    cognito_username,
    create_access_token,
    decode_access_token,
    generate_verification_code,
)


def test_access_token_carries_claims():
    token = create_access_token({"sub": "jane@example.com", "tenant_id": "hosp_a", "roles": ["doctor"]})
    payload = decode_access_token(token)

    assert payload["sub"] == "jane@example.com"
    assert payload["tenant_id"] == "hosp_a"
    assert payload["roles"] == ["doctor"]
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "jane@example.com"}, expires_delta=timedelta(seconds=-10))
    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token({"sub": "jane@example.com"})
    assert decode_access_token(token + "x") is None
    assert decode_access_token("not-a-token") is None


def test_verification_code_format():
    codes = {generate_verification_code() for _ in range(20)}
    assert all(re.fullmatch(r"[0-9A-F]{6}", code) for code in codes)
    assert len(codes) > 1


def test_cognito_username_from_email():
    assert cognito_username("jane.doe@example.com") == "jane_doe_example_com"


def test_cognito_secret_hash():
    expected = base64.b64encode(
        hmac.new(b"s3cret", b"jane_example_comclient123", hashlib.sha256).digest()
    ).decode()
    assert cognito_secret_hash("jane_example_com", "client123", "s3cret") == expected
