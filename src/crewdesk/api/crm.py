"""CRM proxy endpoints.

Reads always answer 200 with a ``success`` flag; writes surface upstream
failures as 502 through the application's error handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from crewdesk.api.models import (
    ContactPropertiesRequest,
    ContactSearchRequest,
    ContactUpsertRequest,
)

if TYPE_CHECKING:
    from crewdesk.services.crm import CrmService

router = APIRouter(prefix="/crm", tags=["crm"])


def _crm(request: Request) -> CrmService:
    return request.app.state.container.crm_service


def _split(properties: str | None) -> list[str] | None:
    if not properties:
        return None
    return [name.strip() for name in properties.split(",") if name.strip()]


@router.get("/test-connection")
async def test_connection(request: Request) -> dict[str, object]:
    return (await _crm(request).test_connection()).to_dict()


@router.get("/contacts")
async def list_contacts(
    request: Request, limit: int = 10, after: str | None = None, q: str | None = None
) -> dict[str, object]:
    result = await _crm(request).list_contacts(limit=limit, after=after, query=q)
    return result.to_dict()


@router.get("/contacts/by-email")
async def contact_by_email(email: str, request: Request) -> dict[str, object]:
    return (await _crm(request).find_contact_by_email(email)).to_dict()


@router.post("/contacts", status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactPropertiesRequest, request: Request
) -> dict[str, object]:
    contact = await _crm(request).create_contact(body.properties)
    return {"success": True, "data": contact}


@router.patch("/contacts/{contact_id}")
async def update_contact(
    contact_id: str, body: ContactPropertiesRequest, request: Request
) -> dict[str, object]:
    contact = await _crm(request).update_contact(contact_id, body.properties)
    return {"success": True, "data": contact}


@router.post("/contacts/upsert")
async def upsert_contact(
    body: ContactUpsertRequest, request: Request
) -> dict[str, object]:
    """Update the contact with this email, or create it."""
    contact = await _crm(request).upsert_contact(body.email, body.properties)
    return {"success": True, "data": contact}


@router.post("/contacts/search")
async def search_contacts(
    body: ContactSearchRequest, request: Request
) -> dict[str, object]:
    result = await _crm(request).search_contacts(body.query, limit=body.limit)
    return result.to_dict()


@router.get("/deals")
async def list_deals(
    request: Request,
    limit: int = 10,
    after: str | None = None,
    properties: str | None = None,
) -> dict[str, object]:
    result = await _crm(request).list_deals(
        limit=limit, after=after, properties=_split(properties)
    )
    return result.to_dict()


@router.get("/objects/{object_type}")
async def list_objects(
    object_type: str,
    request: Request,
    limit: int = 10,
    after: str | None = None,
    properties: str | None = None,
) -> dict[str, object]:
    """List records of any object type, including custom objects."""
    result = await _crm(request).list_custom_objects(
        object_type, limit=limit, after=after, properties=_split(properties)
    )
    return result.to_dict()


@router.get("/schemas")
async def get_schemas(request: Request) -> dict[str, object]:
    return (await _crm(request).get_schemas()).to_dict()


@router.get("/pipelines/{object_type}")
async def get_pipelines(object_type: str, request: Request) -> dict[str, object]:
    return (await _crm(request).get_pipelines(object_type)).to_dict()
