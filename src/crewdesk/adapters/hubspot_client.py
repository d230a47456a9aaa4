"""HubSpot CRM API client."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from crewdesk.domain.errors import RemoteError

_logger = logging.getLogger(__name__)

_ERROR_DETAIL_LIMIT = 200


class HubSpotClient(Protocol):
    """Interface for the HubSpot endpoints the CRM proxy consumes."""

    async def get_account_info(self) -> dict[str, object]:
        """Return portal details for the configured token."""

    async def list_objects(  # noqa: PLR0913
        self,
        object_type: str,
        limit: int = 10,
        after: str | None = None,
        properties: list[str] | None = None,
        query: str | None = None,
    ) -> dict[str, object]:
        """Return one page of CRM objects."""

    async def get_object(
        self, object_type: str, object_id: str, properties: list[str] | None = None
    ) -> dict[str, object]:
        """Return a single CRM object."""

    async def create_contact(self, properties: dict[str, object]) -> dict[str, object]:
        """Create a contact."""

    async def update_contact(
        self, contact_id: str, properties: dict[str, object]
    ) -> dict[str, object]:
        """Update contact properties."""

    async def search_contacts(self, body: dict[str, object]) -> dict[str, object]:
        """Run a contact search request."""

    async def get_schemas(self) -> dict[str, object]:
        """Return object schemas."""

    async def get_pipelines(self, object_type: str) -> dict[str, object]:
        """Return pipelines for deals or tickets."""

    async def get_contact_deal_ids(self, contact_id: str) -> list[str]:
        """Return ids of deals associated with a contact."""


@dataclass
class HttpxHubSpotClient(HubSpotClient):
    """HTTPX-backed HubSpot client using a private-app bearer token."""

    access_token: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, access_token: str, base_url: str) -> "HttpxHubSpotClient":
        """Create a HubSpot client with a managed httpx session."""
        return cls(
            access_token=access_token,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def get_account_info(self) -> dict[str, object]:
        """Fetch account details."""
        return await self._request("GET", "/account-info/v3/details")

    async def list_objects(  # noqa: PLR0913
        self,
        object_type: str,
        limit: int = 10,
        after: str | None = None,
        properties: list[str] | None = None,
        query: str | None = None,
    ) -> dict[str, object]:
        """List objects of a standard or custom type."""
        params: dict[str, object] = {"limit": limit}
        if after:
            params["after"] = after
        if properties:
            params["properties"] = ",".join(properties)
        if query:
            params["q"] = query
        return await self._request(
            "GET", f"/crm/v3/objects/{object_type}", params=params
        )

    async def get_object(
        self, object_type: str, object_id: str, properties: list[str] | None = None
    ) -> dict[str, object]:
        """Fetch one object by id."""
        params = {"properties": ",".join(properties)} if properties else None
        return await self._request(
            "GET", f"/crm/v3/objects/{object_type}/{object_id}", params=params
        )

    async def create_contact(self, properties: dict[str, object]) -> dict[str, object]:
        """Create a contact from a property map."""
        return await self._request(
            "POST", "/crm/v3/objects/contacts", json_body={"properties": properties}
        )

    async def update_contact(
        self, contact_id: str, properties: dict[str, object]
    ) -> dict[str, object]:
        """Patch contact properties."""
        return await self._request(
            "PATCH",
            f"/crm/v3/objects/contacts/{contact_id}",
            json_body={"properties": properties},
        )

    async def search_contacts(self, body: dict[str, object]) -> dict[str, object]:
        """Search contacts with a filter-group body."""
        return await self._request(
            "POST", "/crm/v3/objects/contacts/search", json_body=body
        )

    async def get_schemas(self) -> dict[str, object]:
        """Fetch object schemas."""
        return await self._request("GET", "/crm/v3/schemas")

    async def get_pipelines(self, object_type: str) -> dict[str, object]:
        """Fetch pipelines and stages."""
        return await self._request("GET", f"/crm/v3/pipelines/{object_type}")

    async def get_contact_deal_ids(self, contact_id: str) -> list[str]:
        """Fetch deal associations for a contact."""
        payload = await self._request(
            "GET", f"/crm/v4/objects/contacts/{contact_id}/associations/deals"
        )
        results = payload.get("results") or []
        return [
            str(result["toObjectId"])
            for result in results
            if isinstance(result, dict) and "toObjectId" in result
        ]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, object] | None = None,
        json_body: dict[str, object] | None = None,
    ) -> dict[str, object]:
        url = f"{self.base_url}{path}"
        _logger.debug("HubSpot %s %s", method, url)
        try:
            response = await self.http_client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "Accept": "application/json",
                },
                timeout=15,
            )
        except httpx.HTTPError as exc:
            raise RemoteError(f"HubSpot request failed: {exc}") from exc

        text = response.text
        if response.is_error:
            raise RemoteError(
                f"HubSpot API error: {response.status_code}",
                status_code=response.status_code,
                detail=text[:_ERROR_DETAIL_LIMIT],
            )
        if not text:
            return {}
        try:
            payload = json.loads(text)
        except ValueError:
            return {"raw": text}
        return payload if isinstance(payload, dict) else {"results": payload}
