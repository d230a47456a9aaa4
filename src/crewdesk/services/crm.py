"""CRM proxy service normalising HubSpot responses."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from crewdesk.adapters.hubspot_client import HubSpotClient
from crewdesk.domain.errors import RemoteError

_logger = logging.getLogger(__name__)

_STANDARD_OBJECTS = {
    "contacts",
    "companies",
    "deals",
    "tickets",
    "products",
    "line_items",
}
_CONTACT_PROPERTIES = ["firstname", "lastname", "email", "company", "phone"]
_NOT_CONFIGURED = "HubSpot token not configured"


@dataclass(frozen=True)
class CrmResult:
    """Uniform outcome of a CRM read."""

    success: bool
    message: str
    data: dict[str, object] | None = None
    detail: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


@dataclass
class CrmService:
    """Read paths return ``CrmResult``; write paths raise ``RemoteError``."""

    client: HubSpotClient | None

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def test_connection(self) -> CrmResult:
        """Probe account details and contact access."""

        async def probe(client: HubSpotClient) -> dict[str, object]:
            account = await client.get_account_info()
            contacts = await client.list_objects("contacts", limit=1)
            return {
                "portal_id": account.get("portalId"),
                "account_type": account.get("accountType"),
                "time_zone": account.get("timeZone"),
                "contacts_total": contacts.get("total"),
            }

        return await self._read(
            probe,
            success_message="Successfully connected to HubSpot",
            failure_message="Failed to connect to HubSpot",
        )

    async def list_contacts(
        self, limit: int = 10, after: str | None = None, query: str | None = None
    ) -> CrmResult:
        return await self._read(
            lambda client: client.list_objects(
                "contacts", limit=limit, after=after, query=query
            ),
            success_message="Fetched contacts",
            failure_message="Failed to fetch contacts",
        )

    async def list_deals(
        self,
        limit: int = 10,
        after: str | None = None,
        properties: list[str] | None = None,
    ) -> CrmResult:
        return await self._read(
            lambda client: client.list_objects(
                "deals", limit=limit, after=after, properties=properties
            ),
            success_message="Fetched deals",
            failure_message="Failed to fetch deals",
        )

    async def list_custom_objects(
        self,
        object_type: str,
        limit: int = 10,
        after: str | None = None,
        properties: list[str] | None = None,
    ) -> CrmResult:
        return await self._read(
            lambda client: client.list_objects(
                object_type, limit=limit, after=after, properties=properties
            ),
            success_message=f"Fetched {object_type} objects",
            failure_message=(
                f"Failed to fetch {object_type}: the object may not exist "
                "or the token may lack permission"
            ),
        )

    async def get_schemas(self) -> CrmResult:
        """Split object schemas into standard and custom objects."""

        async def fetch(client: HubSpotClient) -> dict[str, object]:
            payload = await client.get_schemas()
            schemas = [s for s in payload.get("results") or [] if isinstance(s, dict)]
            custom = [
                s for s in schemas if s.get("objectTypeId") not in _STANDARD_OBJECTS
            ]
            standard = [
                s for s in schemas if s.get("objectTypeId") in _STANDARD_OBJECTS
            ]
            return {
                "total_schemas": len(schemas),
                "custom_objects": [
                    {
                        "id": s.get("objectTypeId"),
                        "name": s.get("name"),
                        "labels": s.get("labels"),
                        "properties": len(s.get("properties") or []),
                    }
                    for s in custom
                ],
                "standard_objects": [
                    {"id": s.get("objectTypeId"), "name": s.get("name")}
                    for s in standard
                ],
            }

        return await self._read(
            fetch,
            success_message="Fetched schemas",
            failure_message="Failed to fetch schemas",
        )

    async def get_pipelines(self, object_type: str = "deals") -> CrmResult:
        return await self._read(
            lambda client: client.get_pipelines(object_type),
            success_message=f"Fetched {object_type} pipelines",
            failure_message=f"Failed to fetch {object_type} pipelines",
        )

    async def search_contacts(self, query: str, limit: int = 10) -> CrmResult:
        """Token-contains search on contact email."""
        body = {
            "filterGroups": [
                {
                    "filters": [
                        {
                            "propertyName": "email",
                            "operator": "CONTAINS_TOKEN",
                            "value": query,
                        }
                    ]
                }
            ],
            "limit": limit,
            "sorts": [{"propertyName": "createdate", "direction": "DESCENDING"}],
        }
        return await self._read(
            lambda client: client.search_contacts(body),
            success_message="Searched contacts",
            failure_message="Failed to search contacts",
        )

    async def find_contact_by_email(self, email: str) -> CrmResult:
        """Exact-match search on contact email."""
        return await self._read(
            lambda client: client.search_contacts(_exact_email_search(email)),
            success_message=f"Searched contacts with email {email}",
            failure_message="Failed to search for contact",
        )

    async def create_contact(self, properties: dict[str, object]) -> dict[str, object]:
        """Create a contact; raises ``RemoteError`` on failure."""
        return await self._client().create_contact(_drop_empty(properties))

    async def update_contact(
        self, contact_id: str, properties: dict[str, object]
    ) -> dict[str, object]:
        """Update a contact; raises ``RemoteError`` on failure."""
        return await self._client().update_contact(contact_id, properties)

    async def upsert_contact(
        self, email: str, properties: dict[str, object]
    ) -> dict[str, object]:
        """Update the contact with this email, creating it when absent."""
        client = self._client()
        found = await client.search_contacts(_exact_email_search(email))
        results = [r for r in found.get("results") or [] if isinstance(r, dict)]
        merged = {**_drop_empty(properties), "email": email}
        if results:
            hit_id = results[0].get("id")
            if hit_id is None:
                raise RemoteError("HubSpot search returned a contact without an id")
            contact_id = str(hit_id)
            _logger.info("Updating existing HubSpot contact %s", contact_id)
            return await client.update_contact(contact_id, merged)
        _logger.info("Creating HubSpot contact for %s", email)
        return await client.create_contact(merged)

    async def get_contact(
        self, contact_id: str, properties: list[str] | None = None
    ) -> dict[str, object]:
        """Fetch a contact; raises ``RemoteError`` on failure."""
        return await self._client().get_object("contacts", contact_id, properties)

    async def get_contact_deal_ids(self, contact_id: str) -> list[str]:
        """Fetch associated deal ids; raises ``RemoteError`` on failure."""
        return await self._client().get_contact_deal_ids(contact_id)

    def _client(self) -> HubSpotClient:
        if self.client is None:
            raise RemoteError(_NOT_CONFIGURED)
        return self.client

    async def _read(
        self,
        func: Callable[[HubSpotClient], Awaitable[dict[str, object]]],
        *,
        success_message: str,
        failure_message: str,
    ) -> CrmResult:
        if self.client is None:
            return CrmResult(success=False, message=_NOT_CONFIGURED)
        try:
            data = await func(self.client)
        except RemoteError as exc:
            _logger.warning("%s: %s", failure_message, exc)
            detail = exc.detail or exc.message
            return CrmResult(success=False, message=failure_message, detail=detail)
        return CrmResult(success=True, message=success_message, data=data)


def _exact_email_search(email: str) -> dict[str, object]:
    return {
        "filterGroups": [
            {"filters": [{"propertyName": "email", "operator": "EQ", "value": email}]}
        ],
        "properties": _CONTACT_PROPERTIES,
        "limit": 10,
    }


def _drop_empty(properties: dict[str, object]) -> dict[str, object]:
    return {key: value for key, value in properties.items() if value not in (None, "")}
