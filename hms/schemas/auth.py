"""
Authentication-related Pydantic schemas
"""

from typing import List

from pydantic import BaseModel, EmailStr, Field

from hms.schemas.base import BaseSchema


class SignUpRequest(BaseModel):
    """Sign-up request schema."""

    email: EmailStr = Field(description="User's email address")
    password: str = Field(
        min_length=8,
        max_length=128,
        description="User's password",
    )


class SignInRequest(BaseModel):
    """Sign-in request schema."""

    email: EmailStr = Field(description="User's email address")
    password: str = Field(min_length=1, description="User's password")


class VerifyEmailRequest(BaseModel):
    """Email verification request schema."""

    email: EmailStr = Field(description="User's email address")
    code: str = Field(min_length=4, max_length=32, description="Verification code")


class ForgotPasswordRequest(BaseModel):
    """Password reset initiation schema."""

    email: EmailStr = Field(description="User's email address")


class ResetPasswordRequest(BaseModel):
    """Password reset confirmation schema."""

    email: EmailStr = Field(description="User's email address")
    code: str = Field(min_length=4, max_length=32, description="Reset code")
    new_password: str = Field(
        min_length=8,
        max_length=128,
        description="New password",
    )


class SignUpResponse(BaseSchema):
    """Sign-up result."""

    email: str = Field(description="Registered email address")
    user_sub: str | None = Field(default=None, description="Identity-provider subject")
    user_confirmed: bool = Field(description="Whether the account is already confirmed")
    message: str = Field(description="Next step for the user")


class TokenResponse(BaseSchema):
    """Sign-in result."""

    access_token: str = Field(description="Application JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token expiration in seconds")
    tenant_id: str = Field(description="Tenant the token is bound to")
    email: str = Field(description="Authenticated email")
    roles: List[str] = Field(description="Role names within the tenant")
    id_token: str | None = Field(default=None, description="Identity-provider ID token")
    refresh_token: str | None = Field(default=None, description="Identity-provider refresh token")


class AuthenticatedUser(BaseSchema):
    """Principal decoded from an application access token."""

    email: str = Field(description="Authenticated email")
    tenant_id: str = Field(description="Tenant the token is bound to")
    roles: List[str] = Field(default_factory=list, description="Role names")
    is_platform_admin: bool = Field(default=False, description="Platform administrator flag")
