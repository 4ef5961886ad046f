"""
Identity service backed by AWS Cognito user pools.

Users are keyed by a username derived from their email. Tenant membership
and tenant roles are both Cognito groups:

- ``<tenant_id>``: every user of the tenant
- ``<tenant_id>:<role>``: users holding a role within the tenant
"""

import logging
from typing import Any, Dict, List

from botocore.client import BaseClient
from botocore.exceptions import ClientError
from fastapi import status
from starlette.concurrency import run_in_threadpool

from hms.config import settings
from hms.core.aws import client_error_code, client_error_message, get_aws_client
from hms.core.exceptions import IdentityProviderException
from hms.core.security import cognito_secret_hash, cognito_username

logger = logging.getLogger(__name__)

# Cognito error code -> HTTP status surfaced to the client
COGNITO_ERROR_STATUS = {
    "UsernameExistsException": status.HTTP_409_CONFLICT,
    "GroupExistsException": status.HTTP_409_CONFLICT,
    "NotAuthorizedException": status.HTTP_401_UNAUTHORIZED,
    "UserNotFoundException": status.HTTP_404_NOT_FOUND,
    "ResourceNotFoundException": status.HTTP_404_NOT_FOUND,
    "InvalidPasswordException": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "InvalidParameterException": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "UserNotConfirmedException": status.HTTP_403_FORBIDDEN,
}


def tenant_group_name(tenant_id: str) -> str:
    """Group holding every user of a tenant."""
    return tenant_id


def role_group_name(tenant_id: str, role_name: str) -> str:
    """Group holding the users of one tenant role."""
    return f"{tenant_id}:{role_name}"


def map_cognito_error(error: ClientError) -> IdentityProviderException:
    """
    Translate a Cognito ``ClientError`` into an application exception.

    Unknown error codes become 502 Bad Gateway.
    """
    code = client_error_code(error)
    return IdentityProviderException(
        detail=client_error_message(error),
        status_code=COGNITO_ERROR_STATUS.get(code, status.HTTP_502_BAD_GATEWAY),
    )


class IdentityService:
    """
    Thin async wrapper around the Cognito Identity Provider API.

    boto3 is blocking, so every call is dispatched to the threadpool.
    """

    def __init__(
        self,
        client: BaseClient | None = None,
        user_pool_id: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
    ):
        self.client = client or get_aws_client("cognito-idp")
        self.user_pool_id = user_pool_id or settings.cognito_user_pool_id
        self.client_id = client_id or settings.cognito_client_id
        self.client_secret = (
            client_secret if client_secret is not None else settings.cognito_client_secret
        )

    async def _call(self, operation: str, **params: Any) -> Dict[str, Any]:
        try:
            return await run_in_threadpool(getattr(self.client, operation), **params)
        except ClientError as exc:
            logger.warning(
                "Cognito %s failed: %s %s",
                operation,
                client_error_code(exc),
                client_error_message(exc),
            )
            raise map_cognito_error(exc) from exc

    def _secret_hash(self, username: str) -> Dict[str, str]:
        if not self.client_secret:
            return {}
        return {
            "SecretHash": cognito_secret_hash(username, self.client_id, self.client_secret)
        }

    # ═══════════════════════════════════════════════════════════════════════════
    # USERS
    # ═══════════════════════════════════════════════════════════════════════════

    async def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        """
        Register a user in the user pool.

        Args:
            email: User email
            password: Initial password

        Returns:
            Dict with ``user_sub`` and ``user_confirmed``
        """
        username = cognito_username(email)
        response = await self._call(
            "sign_up",
            ClientId=self.client_id,
            Username=username,
            Password=password,
            UserAttributes=[{"Name": "email", "Value": email}],
            **self._secret_hash(username),
        )
        return {
            "user_sub": response.get("UserSub"),
            "user_confirmed": response.get("UserConfirmed", False),
        }

    async def confirm_sign_up(self, email: str) -> None:
        """Confirm a user without a provider-issued code."""
        await self._call(
            "admin_confirm_sign_up",
            UserPoolId=self.user_pool_id,
            Username=cognito_username(email),
        )

    async def initiate_auth(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate with username and password.

        Returns:
            Cognito ``AuthenticationResult`` (tokens and expiry)

        Raises:
            IdentityProviderException: On bad credentials or when Cognito
                answers with a challenge instead of tokens
        """
        username = cognito_username(email)
        auth_parameters = {"USERNAME": username, "PASSWORD": password}
        if self.client_secret:
            auth_parameters["SECRET_HASH"] = cognito_secret_hash(
                username, self.client_id, self.client_secret
            )

        response = await self._call(
            "initiate_auth",
            ClientId=self.client_id,
            AuthFlow="USER_PASSWORD_AUTH",
            AuthParameters=auth_parameters,
        )

        if "AuthenticationResult" not in response:
            raise IdentityProviderException(
                detail=f"Sign-in requires challenge {response.get('ChallengeName')}",
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        return response["AuthenticationResult"]

    async def user_exists(self, email: str) -> bool:
        """Check whether a user is registered in the pool."""
        try:
            await self._call(
                "admin_get_user",
                UserPoolId=self.user_pool_id,
                Username=cognito_username(email),
            )
        except IdentityProviderException as exc:
            if exc.status_code == status.HTTP_404_NOT_FOUND:
                return False
            raise
        return True

    async def set_password(self, email: str, password: str) -> None:
        """Set a permanent password for a user."""
        await self._call(
            "admin_set_user_password",
            UserPoolId=self.user_pool_id,
            Username=cognito_username(email),
            Password=password,
            Permanent=True,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # GROUPS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_group(self, group_name: str, description: str | None = None) -> None:
        """Create a group; an existing group is left untouched."""
        params: Dict[str, Any] = {"GroupName": group_name, "UserPoolId": self.user_pool_id}
        if description:
            params["Description"] = description
        try:
            await self._call("create_group", **params)
        except IdentityProviderException as exc:
            if exc.status_code != status.HTTP_409_CONFLICT:
                raise
            logger.debug("Group %s already exists", group_name)

    async def delete_group(self, group_name: str) -> None:
        """Delete a group; a missing group is ignored."""
        try:
            await self._call(
                "delete_group",
                GroupName=group_name,
                UserPoolId=self.user_pool_id,
            )
        except IdentityProviderException as exc:
            if exc.status_code != status.HTTP_404_NOT_FOUND:
                raise

    async def add_user_to_group(self, email: str, group_name: str) -> None:
        await self._call(
            "admin_add_user_to_group",
            UserPoolId=self.user_pool_id,
            Username=cognito_username(email),
            GroupName=group_name,
        )

    async def remove_user_from_group(self, email: str, group_name: str) -> None:
        await self._call(
            "admin_remove_user_from_group",
            UserPoolId=self.user_pool_id,
            Username=cognito_username(email),
            GroupName=group_name,
        )

    async def list_groups_for_user(self, email: str) -> List[str]:
        """
        List the names of every group a user belongs to.

        Follows ``NextToken`` until all pages are read.
        """
        groups: List[str] = []
        params: Dict[str, Any] = {
            "UserPoolId": self.user_pool_id,
            "Username": cognito_username(email),
        }

        while True:
            response = await self._call("admin_list_groups_for_user", **params)
            groups.extend(group["GroupName"] for group in response.get("Groups", []))
            next_token = response.get("NextToken")
            if not next_token:
                break
            params["NextToken"] = next_token

        return groups
