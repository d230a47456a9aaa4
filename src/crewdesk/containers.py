"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from supabase import Client, create_client

from crewdesk.adapters.hubspot_client import HttpxHubSpotClient
from crewdesk.adapters.identity_gateway import (
    HttpxIdentityGateway,
    LocalIdentityGateway,
)
from crewdesk.adapters.json_state_repository import JsonFileStateRepository
from crewdesk.adapters.memory_user_repository import InMemoryUserRepository
from crewdesk.adapters.supabase_state_repository import SupabaseStateRepository
from crewdesk.adapters.supabase_user_repository import SupabaseUserRepository
from crewdesk.config import Settings, parse_token
from crewdesk.seed import seed_chat, seed_events
from crewdesk.services.chat import ChatStore
from crewdesk.services.crm import CrmService
from crewdesk.services.events import EventStore
from crewdesk.services.sessions import IdentityGateway, SessionStore
from crewdesk.services.state import StateRepository
from crewdesk.services.users import IdentityService, UserRepository
from crewdesk.services.webhooks import WebhookService


@dataclass
class AppContainer:
    """Holds backend dependencies served by the HTTP API."""

    settings: Settings
    crm_service: CrmService
    identity_service: IdentityService
    webhook_service: WebhookService
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class ClientContainer:
    """Holds the stores a crew client works against."""

    settings: Settings
    session_store: SessionStore
    event_store: EventStore
    chat_store: ChatStore
    close_resources: Callable[[], Awaitable[None]]


def make_clock(timezone: str) -> Callable[[], datetime]:
    """Return a clock producing aware datetimes in the given zone."""
    zone = ZoneInfo(timezone)

    def clock() -> datetime:
        return datetime.now(tz=zone)

    return clock


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default backend container."""
    resolved_settings = settings or Settings()
    hubspot_client = _hubspot_client(resolved_settings)
    crm_service = CrmService(hubspot_client)
    identity_service = IdentityService(
        repository=_user_repository(resolved_settings),
        crm=crm_service,
        clock=make_clock(resolved_settings.timezone),
    )
    webhook_service = WebhookService(
        parse_token(resolved_settings.hubspot_client_secret)
    )

    async def close_resources() -> None:
        if hubspot_client is not None:
            await hubspot_client.close()

    return AppContainer(
        settings=resolved_settings,
        crm_service=crm_service,
        identity_service=identity_service,
        webhook_service=webhook_service,
        close_resources=close_resources,
    )


def build_client_container(
    settings: Settings | None = None,
    gateway: IdentityGateway | None = None,
) -> ClientContainer:
    """Create the stores, loaded from persisted state or seed data.

    Without an explicit gateway, logins go to ``identity_base_url`` when set
    and to an in-process identity service otherwise.
    """
    resolved_settings = settings or Settings()
    clock = make_clock(resolved_settings.timezone)
    state_repository = _state_repository(resolved_settings)
    hubspot_client = None
    http_gateway = None
    if gateway is None:
        if resolved_settings.identity_base_url:
            http_gateway = HttpxIdentityGateway.create(
                resolved_settings.identity_base_url
            )
            gateway = http_gateway
        else:
            hubspot_client = _hubspot_client(resolved_settings)
            gateway = LocalIdentityGateway(
                IdentityService(
                    repository=_user_repository(resolved_settings),
                    crm=CrmService(hubspot_client),
                    clock=clock,
                )
            )

    session_store = SessionStore(gateway, state_repository)
    session_store.restore()
    event_store = EventStore(
        state_repository, clock=clock, seed=lambda: seed_events(clock())
    )
    event_store.load()
    chat_store = ChatStore(
        state_repository,
        current_user=lambda: session_store.current_user,
        clock=clock,
        seed=lambda: seed_chat(clock()),
        typing_ttl=timedelta(seconds=resolved_settings.typing_ttl_seconds),
        sweep_interval=resolved_settings.typing_sweep_interval_seconds,
    )
    chat_store.load()

    async def close_resources() -> None:
        await chat_store.close()
        if http_gateway is not None:
            await http_gateway.close()
        if hubspot_client is not None:
            await hubspot_client.close()

    return ClientContainer(
        settings=resolved_settings,
        session_store=session_store,
        event_store=event_store,
        chat_store=chat_store,
        close_resources=close_resources,
    )


def _hubspot_client(settings: Settings) -> HttpxHubSpotClient | None:
    token = parse_token(settings.hubspot_access_token)
    if token is None:
        return None
    return HttpxHubSpotClient.create(token, settings.hubspot_base_url)


def _supabase_client(settings: Settings) -> Client:
    return create_client(settings.supabase_url, settings.supabase_service_key)


def _user_repository(settings: Settings) -> UserRepository:
    if settings.uses_supabase:
        return SupabaseUserRepository(_supabase_client(settings))
    return InMemoryUserRepository()


def _state_repository(settings: Settings) -> StateRepository:
    if settings.uses_supabase:
        return SupabaseStateRepository(_supabase_client(settings))
    return JsonFileStateRepository(settings.state_dir)
