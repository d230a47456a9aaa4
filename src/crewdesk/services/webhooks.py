"""HubSpot webhook verification and dispatch."""

import hashlib
import hmac
import logging
from dataclasses import dataclass

_logger = logging.getLogger(__name__)

_KNOWN_SUBSCRIPTIONS = {
    "contact.creation",
    "contact.propertyChange",
    "deal.creation",
    "deal.propertyChange",
}


def verify_signature(secret: str | None, body: bytes, signature: str | None) -> bool:
    """Compare the hex SHA-256 of ``secret + body`` with the supplied signature."""
    if not secret or not signature:
        return False
    expected = hashlib.sha256(secret.encode() + body).hexdigest()
    return hmac.compare_digest(expected.encode(), signature.encode())


@dataclass(frozen=True)
class WebhookEffect:
    """Normalised description of one webhook notification."""

    subscription_type: str
    object_id: str | None
    property_name: str | None = None
    property_value: object | None = None
    handled: bool = True


@dataclass
class WebhookService:
    """Turns verified webhook payloads into effects."""

    client_secret: str | None

    def verify(self, body: bytes, signature: str | None) -> bool:
        return verify_signature(self.client_secret, body, signature)

    def handle(self, payload: dict | list) -> list[WebhookEffect]:
        """Normalise one notification or a batch of them."""
        events = payload if isinstance(payload, list) else [payload]
        return [self._handle_one(event) for event in events if isinstance(event, dict)]

    def _handle_one(self, event: dict) -> WebhookEffect:
        subscription_type = str(event.get("subscriptionType", ""))
        object_id = event.get("objectId")
        effect = WebhookEffect(
            subscription_type=subscription_type,
            object_id=str(object_id) if object_id is not None else None,
            property_name=event.get("propertyName"),
            property_value=event.get("propertyValue"),
            handled=subscription_type in _KNOWN_SUBSCRIPTIONS,
        )
        if effect.handled:
            _logger.info(
                "Webhook %s for object %s (property=%s)",
                subscription_type,
                effect.object_id,
                effect.property_name,
            )
        else:
            _logger.info("Ignoring unknown webhook type %r", subscription_type)
        return effect
