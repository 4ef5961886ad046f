"""
Authentication API endpoints.

Sign-up, email verification, password reset and sign-in against the
identity provider, scoped to the tenant named in the request.
"""

from fastapi import APIRouter, status

from hms.services.auth_service import AuthService
from hms.schemas.auth import (
    SignUpRequest,
    SignUpResponse,
    SignInRequest,
    TokenResponse,
    VerifyEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    AuthenticatedUser,
)
from hms.schemas.base import MessageResponse
from hms.core.dependencies import (
    DBSession,
    CurrentTenant,
    RequiredTenant,
    CurrentUser,
    Identity,
    Messaging,
)

router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════════
# REGISTRATION
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign Up",
    description="Register a user for the request tenant and email a verification code.",
)
async def sign_up(
    data: SignUpRequest,
    tenant_id: RequiredTenant,
    session: DBSession,
    identity: Identity,
    messaging: Messaging,
) -> SignUpResponse:
    service = AuthService(session, identity, messaging)
    result = await service.sign_up(data.email, data.password, tenant_id)
    return SignUpResponse(**result)


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    summary="Verify Email",
    description="Confirm a user with the code sent at sign-up.",
)
async def verify_email(
    data: VerifyEmailRequest,
    session: DBSession,
    identity: Identity,
    messaging: Messaging,
) -> MessageResponse:
    service = AuthService(session, identity, messaging)
    await service.verify_email(data.email, data.code)
    return MessageResponse(message="Email verified successfully")


# ═══════════════════════════════════════════════════════════════════════════════
# PASSWORD RESET
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Forgot Password",
    description="Email a password reset code.",
)
async def forgot_password(
    data: ForgotPasswordRequest,
    tenant_id: CurrentTenant,
    session: DBSession,
    identity: Identity,
    messaging: Messaging,
) -> MessageResponse:
    service = AuthService(session, identity, messaging)
    await service.forgot_password(data.email, tenant_id)
    return MessageResponse(message="Password reset code sent to your email")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset Password",
    description="Set a new password using a reset code.",
)
async def reset_password(
    data: ResetPasswordRequest,
    session: DBSession,
    identity: Identity,
    messaging: Messaging,
) -> MessageResponse:
    service = AuthService(session, identity, messaging)
    await service.reset_password(data.email, data.code, data.new_password)
    return MessageResponse(message="Password has been reset")


# ═══════════════════════════════════════════════════════════════════════════════
# SIGN-IN
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/signin",
    response_model=TokenResponse,
    summary="Sign In",
    description="Authenticate and receive an access token bound to the request tenant.",
)
async def sign_in(
    data: SignInRequest,
    tenant_id: RequiredTenant,
    session: DBSession,
    identity: Identity,
    messaging: Messaging,
) -> TokenResponse:
    """
    Sign in to a tenant.

    The returned ``access_token`` authorizes tenant-scoped endpoints; the
    identity-provider tokens are passed through for clients that need them.
    """
    service = AuthService(session, identity, messaging)
    result = await service.sign_in(data.email, data.password, tenant_id)
    return TokenResponse(**result)


@router.get(
    "/me",
    response_model=AuthenticatedUser,
    summary="Current User",
    description="Get the principal encoded in the access token.",
)
async def get_me(user: CurrentUser) -> AuthenticatedUser:
    return user
