"""Tests for the HTTP API."""

import hashlib
import json

from fastapi.testclient import TestClient

from crewdesk.api.app import create_app
from crewdesk.domain.errors import RemoteError
from crewdesk.services.webhooks import WebhookService
from tests.conftest import FakeHubSpotClient

_SIGNUP = {
    "email": "maria@example.com",
    "password": "secret123",
    "name": "Maria Rodriguez",
    "role": "videographer",
    "service_type": "videography",
}


def test_health(container) -> None:
    client = TestClient(create_app(container))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_signup_login_and_fetch(container) -> None:
    client = TestClient(create_app(container))

    created = client.post("/users/signup", json=_SIGNUP)
    assert created.status_code == 201
    user = created.json()
    assert user["crm_contact_id"] == "100"
    assert "password" not in json.dumps(user)

    login = client.post(
        "/users/login", json={"email": "maria@example.com", "password": "secret123"}
    )
    assert login.status_code == 200
    assert login.json()["id"] == user["id"]

    fetched = client.get(f"/users/{user['id']}")
    assert fetched.json()["email"] == "maria@example.com"
    assert len(client.get("/users").json()["users"]) == 1


def test_auth_error_mapping(container) -> None:
    client = TestClient(create_app(container))
    client.post("/users/signup", json=_SIGNUP)

    duplicate = client.post("/users/signup", json=_SIGNUP)
    bad_login = client.post(
        "/users/login", json={"email": "maria@example.com", "password": "wrong"}
    )

    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "EMAIL_ALREADY_EXISTS"
    assert bad_login.status_code == 401
    assert bad_login.json()["detail"] == "Invalid email or password"


def test_validation_and_not_found_mapping(container) -> None:
    client = TestClient(create_app(container))

    short_password = client.post("/users/signup", json={**_SIGNUP, "password": "1"})
    bad_role = client.post("/users/signup", json={**_SIGNUP, "role": "pilot"})
    missing = client.get("/users/nope")

    assert short_password.status_code == 422
    assert short_password.json()["code"] == "VALIDATION_FAILED"
    assert bad_role.status_code == 422
    assert missing.status_code == 404


def test_update_clear_and_sync(
    container, hubspot_client: FakeHubSpotClient
) -> None:
    client = TestClient(create_app(container))
    user = client.post("/users/signup", json=_SIGNUP).json()
    hubspot_client.deal_ids[user["crm_contact_id"]] = ["9001"]

    patched = client.patch(f"/users/{user['id']}", json={"company": "Frame Co"})
    synced = client.post(f"/users/{user['id']}/crm-sync")
    cleared = client.delete("/users")

    assert patched.json()["company"] == "Frame Co"
    assert synced.json()["deal_count"] == 1
    assert synced.json()["user"]["crm_deal_ids"] == ["9001"]
    assert cleared.json() == {"status": "ok"}
    assert client.get("/users").json() == {"users": []}


def test_crm_reads_report_failures_with_200(
    container, hubspot_client: FakeHubSpotClient
) -> None:
    client = TestClient(create_app(container))
    ok = client.get("/crm/test-connection")
    hubspot_client.error = RemoteError(
        "HubSpot API error: 503", status_code=503, detail="<html>down</html>"
    )
    failed = client.get("/crm/contacts", params={"limit": 5})

    assert ok.json()["success"] is True
    assert ok.json()["data"]["portal_id"] == 4242
    assert failed.status_code == 200
    assert failed.json() == {
        "success": False,
        "message": "Failed to fetch contacts",
        "detail": "<html>down</html>",
    }


def test_crm_write_failure_maps_to_bad_gateway(
    container, hubspot_client: FakeHubSpotClient
) -> None:
    client = TestClient(create_app(container))
    hubspot_client.error = RemoteError(
        "HubSpot API error: 400", status_code=400, detail="Property missing"
    )

    response = client.post("/crm/contacts", json={"properties": {"email": "x@y.z"}})

    assert response.status_code == 502
    assert response.json()["upstream_status"] == 400
    assert response.json()["upstream_detail"] == "Property missing"


def test_crm_contact_routes(container, hubspot_client: FakeHubSpotClient) -> None:
    client = TestClient(create_app(container))

    created = client.post(
        "/crm/contacts", json={"properties": {"email": "sam@example.com"}}
    )
    contact_id = created.json()["data"]["id"]
    patched = client.patch(
        f"/crm/contacts/{contact_id}", json={"properties": {"company": "Lens"}}
    )
    search = client.post("/crm/contacts/search", json={"query": "example"})
    by_email = client.get(
        "/crm/contacts/by-email", params={"email": "sam@example.com"}
    )
    upsert = client.post(
        "/crm/contacts/upsert",
        json={"email": "sam@example.com", "properties": {"phone": "555"}},
    )

    assert created.status_code == 201
    assert patched.json()["data"]["properties"]["company"] == "Lens"
    assert search.json()["data"]["total"] == 1
    assert by_email.json()["data"]["total"] == 1
    assert upsert.json()["data"]["id"] == contact_id


def test_crm_metadata_routes(container, hubspot_client: FakeHubSpotClient) -> None:
    client = TestClient(create_app(container))

    schemas = client.get("/crm/schemas")
    pipelines = client.get("/crm/pipelines/deals")
    objects = client.get("/crm/objects/2-1234", params={"properties": "venue,date"})
    deals = client.get("/crm/deals")

    assert schemas.json()["data"]["custom_objects"][0]["name"] == "shoots"
    assert pipelines.json()["success"] is True
    assert objects.json()["success"] is True
    assert deals.json()["success"] is True
    assert ("list", ("2-1234", 10, None, ["venue", "date"], None)) in (
        hubspot_client.calls
    )


def test_hubspot_webhook_signature(container) -> None:
    client = TestClient(create_app(container))
    body = json.dumps({"subscriptionType": "deal.creation", "objectId": 5})
    signature = hashlib.sha256(("webhook-secret" + body).encode()).hexdigest()

    accepted = client.post(
        "/webhooks/hubspot",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-HubSpot-Signature-v3": signature,
        },
    )
    rejected = client.post(
        "/webhooks/hubspot",
        content=body,
        headers={"X-HubSpot-Signature-v3": "0" * 64},
    )

    assert accepted.status_code == 200
    assert accepted.json()["handled"] == 1
    assert rejected.status_code == 401


def test_hubspot_webhook_rejects_undecodable_input(container) -> None:
    client = TestClient(create_app(container))
    body = b"\xff\xfe"

    unsigned = client.post("/webhooks/hubspot", content=body)
    non_ascii = client.post(
        "/webhooks/hubspot",
        content=b"{}",
        headers={"X-HubSpot-Signature-v3": "é".encode()},
    )
    signed = client.post(
        "/webhooks/hubspot",
        content=body,
        headers={
            "X-HubSpot-Signature-v3": hashlib.sha256(
                b"webhook-secret" + body
            ).hexdigest()
        },
    )

    assert unsigned.status_code == 401
    assert non_ascii.status_code == 401
    assert signed.status_code == 400


def test_hubspot_webhook_without_secret(container) -> None:
    container.webhook_service = WebhookService(client_secret=None)
    client = TestClient(create_app(container))

    response = client.post("/webhooks/hubspot", content="{}")

    assert response.status_code == 500


def test_hubspot_webhook_test_echo(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/webhooks/hubspot/test", json={"hello": "crew"})

    assert response.json()["received_data"] == {"hello": "crew"}
    assert response.json()["message"] == "Test webhook received"
