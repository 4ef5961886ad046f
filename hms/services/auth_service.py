"""
Authentication flows: sign-up, email verification, password reset and sign-in.

Passwords live in the identity provider. This service stores the one-time
codes it emails to users and issues the application access token after a
successful sign-in.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from hms.config import settings
from hms.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    MessagingException,
    NotFoundException,
    TenantInactiveException,
    TenantNotFoundException,
)
from hms.core.security import create_access_token, generate_verification_code
from hms.core.tenancy import is_admin_tenant
from hms.models.verification import VerificationType
from hms.repositories.tenant_repository import TenantRepository
from hms.repositories.verification_repository import VerificationRepository
from hms.services.identity_service import IdentityService, tenant_group_name
from hms.services.messaging_service import (
    MessagingService,
    render_template,
    sender_for_tenant,
)

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email address"
VERIFICATION_BODY = (
    "Your verification code is {{code}}.\n\n"
    "The code expires in {{minutes}} minutes."
)
RESET_SUBJECT = "Reset your password"
RESET_BODY = (
    "Your password reset code is {{code}}.\n\n"
    "The code expires in {{minutes}} minutes. "
    "If you did not ask for a reset, ignore this email."
)


class AuthService:
    """
    Orchestrates the identity provider, one-time codes and email delivery.

    Args:
        session: Async database session on the public schema
        identity: Identity provider wrapper
        messaging: Email sender
    """

    def __init__(
        self,
        session: AsyncSession,
        identity: IdentityService,
        messaging: MessagingService,
    ):
        self.session = session
        self.identity = identity
        self.messaging = messaging
        self.verifications = VerificationRepository(session)
        self.tenants = TenantRepository(session)

    async def sign_up(self, email: str, password: str, tenant_id: str) -> Dict[str, Any]:
        """
        Register a user for a tenant and email a verification code.

        The new account is not a tenant member yet. Membership is granted
        by a hospital administrator (or a platform administrator) through
        the members endpoints.

        Args:
            email: User email
            password: Initial password
            tenant_id: Tenant the user registers with

        Returns:
            Dict shaped like ``SignUpResponse``

        Raises:
            ForbiddenException: For the platform admin tenant, whose members
                are added by an operator
        """
        if is_admin_tenant(tenant_id):
            raise ForbiddenException(detail="Sign-up is not open for the platform admin tenant")
        await self._ensure_tenant_accessible(tenant_id)

        result = await self.identity.sign_up(email, password)

        await self.verifications.purge_expired()
        ttl_minutes = settings.verification_code_ttl_minutes
        code = generate_verification_code()
        await self.verifications.add_code(
            email,
            code,
            VerificationType.VERIFICATION,
            timedelta(minutes=ttl_minutes),
        )

        await self.messaging.send_email(
            [email],
            VERIFICATION_SUBJECT,
            body=render_template(VERIFICATION_BODY, {"code": code, "minutes": ttl_minutes}),
            sender=sender_for_tenant(tenant_id),
        )
        logger.info("Signed up %s for tenant %s", email, tenant_id)

        return {
            "email": email,
            "user_sub": result["user_sub"],
            "user_confirmed": result["user_confirmed"],
            "message": "Verification code sent to your email",
        }

    async def verify_email(self, email: str, code: str) -> None:
        """
        Confirm a user with the code emailed at sign-up.

        Raises:
            BadRequestException: If the code is unknown or expired
        """
        record = await self.verifications.find_valid(email, code, VerificationType.VERIFICATION)
        if not record:
            raise BadRequestException(detail="Invalid verification code")

        await self.identity.confirm_sign_up(email)
        await self.verifications.consume(email, code, VerificationType.VERIFICATION)
        logger.info("Verified email %s", email)

    async def forgot_password(self, email: str, tenant_id: str | None = None) -> None:
        """
        Email a password reset code.

        The code is removed again when the email cannot be sent.

        Raises:
            NotFoundException: If no such user is registered
            MessagingException: If the email is rejected
        """
        if not await self.identity.user_exists(email):
            raise NotFoundException(resource="User", identifier=email)

        await self.verifications.purge_expired()
        ttl_minutes = settings.reset_code_ttl_minutes
        code = generate_verification_code()
        await self.verifications.add_code(
            email,
            code,
            VerificationType.RESET,
            timedelta(minutes=ttl_minutes),
        )

        try:
            await self.messaging.send_email(
                [email],
                RESET_SUBJECT,
                body=render_template(RESET_BODY, {"code": code, "minutes": ttl_minutes}),
                sender=sender_for_tenant(tenant_id),
            )
        except MessagingException:
            await self.verifications.consume(email, code, VerificationType.RESET)
            logger.error("Could not send reset code to %s", email)
            raise

        logger.info("Sent password reset code to %s", email)

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        """
        Set a new password with a reset code.

        The code is deleted only after the provider accepted the password.

        Raises:
            BadRequestException: If the code is unknown or expired
        """
        record = await self.verifications.find_valid(email, code, VerificationType.RESET)
        if not record:
            raise BadRequestException(detail="Invalid or expired reset code")

        await self.identity.set_password(email, new_password)
        await self.verifications.consume(email, code, VerificationType.RESET)
        logger.info("Password reset for %s", email)

    async def sign_in(self, email: str, password: str, tenant_id: str) -> Dict[str, Any]:
        """
        Authenticate a user for a tenant.

        The user must belong to the tenant group, or to the platform admin
        group.

        Returns:
            Dict shaped like ``TokenResponse``

        Raises:
            IdentityProviderException: On bad credentials
            ForbiddenException: If the user is not a member of the tenant
        """
        await self._ensure_tenant_accessible(tenant_id)

        auth_result = await self.identity.initiate_auth(email, password)
        groups = await self.identity.list_groups_for_user(email)

        is_platform_admin = tenant_group_name(settings.admin_tenant_id) in groups
        if tenant_group_name(tenant_id) not in groups and not is_platform_admin:
            logger.warning("Sign-in of %s refused for tenant %s", email, tenant_id)
            raise ForbiddenException(detail="User does not belong to this tenant")

        roles = self._roles_for_tenant(groups, tenant_id)
        expires_in = settings.access_token_expire_minutes * 60
        access_token = create_access_token(
            {
                "sub": email,
                "tenant_id": tenant_id,
                "roles": roles,
                "is_platform_admin": is_platform_admin,
            },
            expires_delta=timedelta(seconds=expires_in),
        )
        logger.info("Signed in %s for tenant %s", email, tenant_id)

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": expires_in,
            "tenant_id": tenant_id,
            "email": email,
            "roles": roles,
            "id_token": auth_result.get("IdToken"),
            "refresh_token": auth_result.get("RefreshToken"),
        }

    @staticmethod
    def _roles_for_tenant(groups: List[str], tenant_id: str) -> List[str]:
        prefix = f"{tenant_group_name(tenant_id)}:"
        return sorted(group[len(prefix):] for group in groups if group.startswith(prefix))

    async def _ensure_tenant_accessible(self, tenant_id: str) -> None:
        # The platform admin tenant has no registry row
        if is_admin_tenant(tenant_id):
            return

        tenant = await self.tenants.get_by_id(tenant_id)
        if not tenant:
            raise TenantNotFoundException(identifier=tenant_id)
        if not tenant.is_accessible:
            raise TenantInactiveException(identifier=tenant_id, status_value=tenant.status.value)
