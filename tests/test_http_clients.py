"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from crewdesk.adapters.hubspot_client import HttpxHubSpotClient
from crewdesk.adapters.identity_gateway import HttpxIdentityGateway
from crewdesk.domain.errors import AuthError, ErrorCode, RemoteError, ValidationError
from crewdesk.domain.serialization import encode_user
from crewdesk.domain.users import LoginCredentials
from tests.conftest import make_profile, make_signup


def _hubspot(handler) -> HttpxHubSpotClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxHubSpotClient(
        access_token="token",
        base_url="https://api.hubapi.test",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_hubspot_list_objects_sends_bearer_and_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"results": [], "total": 0})

    client = _hubspot(handler)
    result = asyncio.run(
        client.list_objects(
            "deals", limit=5, after="10", properties=["amount", "stage"]
        )
    )

    assert result == {"results": [], "total": 0}
    request = seen[0]
    assert request.headers["Authorization"] == "Bearer token"
    assert request.url.path == "/crm/v3/objects/deals"
    assert request.url.params["limit"] == "5"
    assert request.url.params["after"] == "10"
    assert request.url.params["properties"] == "amount,stage"


def test_hubspot_update_contact_uses_patch() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.url.path == "/crm/v3/objects/contacts/42"
        assert json.loads(request.content) == {"properties": {"company": "Lens"}}
        return httpx.Response(200, json={"id": "42"})

    client = _hubspot(handler)
    assert asyncio.run(client.update_contact("42", {"company": "Lens"})) == {"id": "42"}


def test_hubspot_error_keeps_truncated_body() -> None:
    body = "<html>" + "x" * 500 + "</html>"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text=body)

    client = _hubspot(handler)
    with pytest.raises(RemoteError) as excinfo:
        asyncio.run(client.get_schemas())

    assert excinfo.value.status_code == 502
    assert excinfo.value.detail == body[:200]


def test_hubspot_non_json_success_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>ok</html>")

    client = _hubspot(handler)
    assert asyncio.run(client.get_account_info()) == {"raw": "<html>ok</html>"}


def test_hubspot_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = _hubspot(handler)
    with pytest.raises(RemoteError):
        asyncio.run(client.get_pipelines("deals"))


def test_hubspot_contact_deal_ids() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/crm/v4/objects/contacts/7/associations/deals"
        return httpx.Response(
            200, json={"results": [{"toObjectId": 11}, {"toObjectId": 12}]}
        )

    client = _hubspot(handler)
    assert asyncio.run(client.get_contact_deal_ids("7")) == ["11", "12"]


def _gateway(handler) -> HttpxIdentityGateway:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxIdentityGateway(
        base_url="https://crewdesk.test",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_identity_gateway_login() -> None:
    profile = make_profile()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/login"
        assert json.loads(request.content) == {
            "email": "alex@example.com",
            "password": "demo123",
        }
        return httpx.Response(200, json=encode_user(profile))

    gateway = _gateway(handler)
    user = asyncio.run(
        gateway.login(LoginCredentials("alex@example.com", "demo123"))
    )

    assert user == profile


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (401, ErrorCode.INVALID_CREDENTIALS),
        (409, ErrorCode.EMAIL_ALREADY_EXISTS),
    ],
)
def test_identity_gateway_auth_errors(status_code: int, expected: ErrorCode) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"detail": "nope"})

    gateway = _gateway(handler)
    with pytest.raises(AuthError) as excinfo:
        asyncio.run(gateway.signup(make_signup()))

    assert excinfo.value.reason is expected


def test_identity_gateway_validation_and_remote_errors() -> None:
    responses = iter(
        [
            httpx.Response(422, json={"detail": "Name is required"}),
            httpx.Response(500, text="Internal Server Error"),
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    gateway = _gateway(handler)
    with pytest.raises(ValidationError) as validation:
        asyncio.run(gateway.signup(make_signup()))
    with pytest.raises(RemoteError) as remote:
        asyncio.run(gateway.signup(make_signup()))

    assert validation.value.message == "Name is required"
    assert remote.value.status_code == 500
