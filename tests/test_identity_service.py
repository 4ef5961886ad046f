"""Cognito identity wrapper tests using botocore's Stubber."""
import pytest
from botocore.stub import ANY, Stubber

from hms.core.exceptions import IdentityProviderException
from hms.core.security import cognito_secret_hash
from hms.services.identity_service import (
    IdentityService,
    role_group_name,
    tenant_group_name,
)

POOL_ID = "us-east-1_testpool"
CLIENT_ID = "testclientid"


@pytest.fixture
def cognito(aws_client):
    client = aws_client("cognito-idp")
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


def make_service(client, client_secret=""):
    return IdentityService(
        client=client,
        user_pool_id=POOL_ID,
        client_id=CLIENT_ID,
        client_secret=client_secret,
    )


def test_group_names():
    assert tenant_group_name("hosp_a") == "hosp_a"
    assert role_group_name("hosp_a", "doctor") == "hosp_a:doctor"


async def test_sign_up_without_secret(cognito):
    client, stubber = cognito
    stubber.add_response(
        "sign_up",
        {"UserConfirmed": False, "UserSub": "sub-123"},
        {
            "ClientId": CLIENT_ID,
            "Username": "jane_example_com",
            "Password": "Secret123!",
            "UserAttributes": [{"Name": "email", "Value": "jane@example.com"}],
        },
    )

    result = await make_service(client).sign_up("jane@example.com", "Secret123!")

    assert result == {"user_sub": "sub-123", "user_confirmed": False}


async def test_sign_up_sends_secret_hash(cognito):
    client, stubber = cognito
    stubber.add_response(
        "sign_up",
        {"UserConfirmed": False, "UserSub": "sub-123"},
        {
            "ClientId": CLIENT_ID,
            "Username": "jane_example_com",
            "Password": "Secret123!",
            "UserAttributes": [{"Name": "email", "Value": "jane@example.com"}],
            "SecretHash": cognito_secret_hash("jane_example_com", CLIENT_ID, "s3cr3t"),
        },
    )

    await make_service(client, client_secret="s3cr3t").sign_up("jane@example.com", "Secret123!")


async def test_existing_user_maps_to_conflict(cognito):
    client, stubber = cognito
    stubber.add_client_error(
        "sign_up",
        service_error_code="UsernameExistsException",
        service_message="User already exists",
        http_status_code=400,
    )

    with pytest.raises(IdentityProviderException) as exc_info:
        await make_service(client).sign_up("jane@example.com", "Secret123!")

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "User already exists"


async def test_unknown_error_maps_to_bad_gateway(cognito):
    client, stubber = cognito
    stubber.add_client_error(
        "admin_confirm_sign_up",
        service_error_code="InternalErrorException",
        service_message="Something broke",
        http_status_code=500,
    )

    with pytest.raises(IdentityProviderException) as exc_info:
        await make_service(client).confirm_sign_up("jane@example.com")

    assert exc_info.value.status_code == 502


async def test_initiate_auth_returns_tokens(cognito):
    client, stubber = cognito
    stubber.add_response(
        "initiate_auth",
        {
            "AuthenticationResult": {
                "AccessToken": "access",
                "IdToken": "id",
                "RefreshToken": "refresh",
                "ExpiresIn": 3600,
                "TokenType": "Bearer",
            }
        },
        {
            "ClientId": CLIENT_ID,
            "AuthFlow": "USER_PASSWORD_AUTH",
            "AuthParameters": {"USERNAME": "jane_example_com", "PASSWORD": "Secret123!"},
        },
    )

    result = await make_service(client).initiate_auth("jane@example.com", "Secret123!")

    assert result["IdToken"] == "id"
    assert result["RefreshToken"] == "refresh"


async def test_initiate_auth_challenge_is_unauthorized(cognito):
    client, stubber = cognito
    stubber.add_response(
        "initiate_auth",
        {"ChallengeName": "NEW_PASSWORD_REQUIRED", "Session": "session-token-value-0000"},
        {"ClientId": CLIENT_ID, "AuthFlow": "USER_PASSWORD_AUTH", "AuthParameters": ANY},
    )

    with pytest.raises(IdentityProviderException) as exc_info:
        await make_service(client).initiate_auth("jane@example.com", "Secret123!")

    assert exc_info.value.status_code == 401
    assert "NEW_PASSWORD_REQUIRED" in exc_info.value.detail


async def test_wrong_password_is_unauthorized(cognito):
    client, stubber = cognito
    stubber.add_client_error(
        "initiate_auth",
        service_error_code="NotAuthorizedException",
        service_message="Incorrect username or password.",
        http_status_code=400,
    )

    with pytest.raises(IdentityProviderException) as exc_info:
        await make_service(client).initiate_auth("jane@example.com", "wrong")

    assert exc_info.value.status_code == 401


async def test_user_exists(cognito):
    client, stubber = cognito
    stubber.add_response(
        "admin_get_user",
        {"Username": "jane_example_com"},
        {"UserPoolId": POOL_ID, "Username": "jane_example_com"},
    )
    stubber.add_client_error(
        "admin_get_user",
        service_error_code="UserNotFoundException",
        service_message="User does not exist.",
        http_status_code=400,
    )

    service = make_service(client)

    assert await service.user_exists("jane@example.com") is True
    assert await service.user_exists("ghost@example.com") is False


async def test_set_password_is_permanent(cognito):
    client, stubber = cognito
    stubber.add_response(
        "admin_set_user_password",
        {},
        {
            "UserPoolId": POOL_ID,
            "Username": "jane_example_com",
            "Password": "NewSecret123!",
            "Permanent": True,
        },
    )

    await make_service(client).set_password("jane@example.com", "NewSecret123!")


async def test_create_group_ignores_existing(cognito):
    client, stubber = cognito
    stubber.add_client_error(
        "create_group",
        service_error_code="GroupExistsException",
        service_message="A group with the name already exists.",
        http_status_code=400,
    )

    await make_service(client).create_group("hosp_a")


async def test_create_group_propagates_other_errors(cognito):
    client, stubber = cognito
    stubber.add_client_error(
        "create_group",
        service_error_code="InvalidParameterException",
        service_message="Bad group name",
        http_status_code=400,
    )

    with pytest.raises(IdentityProviderException) as exc_info:
        await make_service(client).create_group("hosp_a")

    assert exc_info.value.status_code == 422


async def test_delete_group_ignores_missing(cognito):
    client, stubber = cognito
    stubber.add_client_error(
        "delete_group",
        service_error_code="ResourceNotFoundException",
        service_message="Group not found.",
        http_status_code=400,
    )

    await make_service(client).delete_group("hosp_a:doctor")


async def test_add_user_to_group(cognito):
    client, stubber = cognito
    stubber.add_response(
        "admin_add_user_to_group",
        {},
        {"UserPoolId": POOL_ID, "Username": "jane_example_com", "GroupName": "hosp_a:nurse"},
    )

    await make_service(client).add_user_to_group("jane@example.com", "hosp_a:nurse")


async def test_list_groups_follows_pagination(cognito):
    client, stubber = cognito
    stubber.add_response(
        "admin_list_groups_for_user",
        {"Groups": [{"GroupName": "hosp_a"}], "NextToken": "page-2"},
        {"UserPoolId": POOL_ID, "Username": "jane_example_com"},
    )
    stubber.add_response(
        "admin_list_groups_for_user",
        {"Groups": [{"GroupName": "hosp_a:doctor"}]},
        {"UserPoolId": POOL_ID, "Username": "jane_example_com", "NextToken": "page-2"},
    )

    groups = await make_service(client).list_groups_for_user("jane@example.com")

    assert groups == ["hosp_a", "hosp_a:doctor"]
