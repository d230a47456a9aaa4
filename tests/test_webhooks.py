"""Tests for webhook verification and dispatch."""

import hashlib

from crewdesk.services.webhooks import WebhookService, verify_signature


def _sign(secret: str, body: bytes) -> str:
    return hashlib.sha256(secret.encode() + body).hexdigest()


def test_verify_signature() -> None:
    body = b'{"subscriptionType": "contact.creation"}'
    signature = _sign("secret", body)

    assert verify_signature("secret", body, signature)
    assert not verify_signature("secret", body + b" ", signature)
    assert not verify_signature("other", body, signature)
    assert not verify_signature(None, body, signature)
    assert not verify_signature("secret", body, None)


def test_verify_signature_rejects_non_ascii_header_and_binary_body() -> None:
    body = b"\xff\xfe"

    assert not verify_signature("secret", body, "\u00e9")
    assert verify_signature("secret", body, _sign("secret", body))


def test_handle_normalises_known_and_unknown_types() -> None:
    service = WebhookService(client_secret="secret")

    effects = service.handle(
        [
            {
                "subscriptionType": "contact.propertyChange",
                "objectId": 51,
                "propertyName": "company",
                "propertyValue": "Lens Co",
            },
            {"subscriptionType": "deal.creation", "objectId": 9},
            {"subscriptionType": "ticket.deletion", "objectId": 3},
            "not-an-event",
        ]
    )

    assert [(e.subscription_type, e.handled) for e in effects] == [
        ("contact.propertyChange", True),
        ("deal.creation", True),
        ("ticket.deletion", False),
    ]
    assert effects[0].object_id == "51"
    assert effects[0].property_name == "company"
    assert effects[0].property_value == "Lens Co"


def test_handle_single_payload() -> None:
    service = WebhookService(client_secret=None)

    effects = service.handle({"subscriptionType": "contact.creation"})

    assert len(effects) == 1
    assert effects[0].object_id is None
