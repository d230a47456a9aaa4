"""Identity endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from crewdesk.api.models import LoginRequest, SignupRequest, UserUpdateRequest
from crewdesk.domain.serialization import encode_user

if TYPE_CHECKING:
    from crewdesk.containers import AppContainer

router = APIRouter(prefix="/users", tags=["users"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, request: Request) -> dict[str, object]:
    """Create an account and, when possible, a linked CRM contact."""
    user = await _container(request).identity_service.create_user(body.to_domain())
    return encode_user(user)


@router.post("/login")
async def login(body: LoginRequest, request: Request) -> dict[str, object]:
    user = _container(request).identity_service.login_user(body.email, body.password)
    return encode_user(user)


@router.get("")
async def list_users(request: Request) -> dict[str, object]:
    users = _container(request).identity_service.list_users()
    return {"users": [encode_user(user) for user in users]}


@router.delete("")
async def clear_users(request: Request) -> dict[str, str]:
    """Delete every account."""
    _container(request).identity_service.clear_users()
    return {"status": "ok"}


@router.get("/{user_id}")
async def get_user(user_id: str, request: Request) -> dict[str, object]:
    return encode_user(_container(request).identity_service.get_user(user_id))


@router.patch("/{user_id}")
async def update_user(
    user_id: str, body: UserUpdateRequest, request: Request
) -> dict[str, object]:
    user = _container(request).identity_service.update_user(
        user_id, body.to_domain()
    )
    return encode_user(user)


@router.post("/{user_id}/crm-sync")
async def sync_user(user_id: str, request: Request) -> dict[str, object]:
    """Refresh a user from their linked CRM contact."""
    result = await _container(request).identity_service.sync_user_with_crm(user_id)
    return {
        "user": encode_user(result.user),
        "contact_properties": result.contact_properties,
        "deal_count": result.deal_count,
    }
