"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from crewdesk.adapters.hubspot_client import HubSpotClient
from crewdesk.adapters.memory_user_repository import InMemoryUserRepository
from crewdesk.config import Settings
from crewdesk.containers import AppContainer
from crewdesk.domain.errors import AuthError, ErrorCode, RemoteError
from crewdesk.domain.events import (
    Event,
    EventKind,
    EventStatus,
    MediaType,
    ShotItem,
    ShotPriority,
    TimelineCategory,
    TimelineItem,
)
from crewdesk.domain.time_of_day import TimeOfDay
from crewdesk.domain.users import (
    LoginCredentials,
    ServiceType,
    SignupData,
    UserProfile,
    UserRole,
)
from crewdesk.services.crm import CrmService
from crewdesk.services.sessions import IdentityGateway
from crewdesk.services.state import StateRepository
from crewdesk.services.users import IdentityService
from crewdesk.services.webhooks import WebhookService

NOW = datetime(2025, 6, 14, 11, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class InMemoryStateRepository(StateRepository):
    """State repository that keeps JSON-serialised copies in a dict."""

    records: dict[str, str] = field(default_factory=dict)
    saves: list[str] = field(default_factory=list)
    fail_saves: bool = False

    def load(self, key: str) -> object | None:
        raw = self.records.get(key)
        return json.loads(raw) if raw is not None else None

    def save(self, key: str, value: object) -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.records[key] = json.dumps(value)
        self.saves.append(key)

    def delete(self, key: str) -> None:
        self.records.pop(key, None)


@dataclass
class FakeHubSpotClient(HubSpotClient):
    """Fake HubSpot client backed by an in-memory contact table."""

    contacts: dict[str, dict[str, object]] = field(default_factory=dict)
    deal_ids: dict[str, list[str]] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    error: RemoteError | None = None
    deal_error: RemoteError | None = None

    async def get_account_info(self) -> dict[str, object]:
        self._record("account", None)
        return {"portalId": 4242, "accountType": "STANDARD", "timeZone": "UTC"}

    async def list_objects(  # noqa: PLR0913
        self,
        object_type: str,
        limit: int = 10,
        after: str | None = None,
        properties: list[str] | None = None,
        query: str | None = None,
    ) -> dict[str, object]:
        self._record("list", (object_type, limit, after, properties, query))
        results = list(self.contacts.values()) if object_type == "contacts" else []
        return {"results": results[:limit], "total": len(results)}

    async def get_object(
        self, object_type: str, object_id: str, properties: list[str] | None = None
    ) -> dict[str, object]:
        self._record("get", (object_type, object_id))
        if object_id not in self.contacts:
            raise RemoteError("HubSpot API error: 404", status_code=404, detail="")
        return self.contacts[object_id]

    async def create_contact(self, properties: dict[str, object]) -> dict[str, object]:
        self._record("create", properties)
        contact_id = str(100 + len(self.contacts))
        contact = {"id": contact_id, "properties": dict(properties)}
        self.contacts[contact_id] = contact
        return contact

    async def update_contact(
        self, contact_id: str, properties: dict[str, object]
    ) -> dict[str, object]:
        self._record("update", (contact_id, properties))
        contact = self.contacts.setdefault(
            contact_id, {"id": contact_id, "properties": {}}
        )
        contact["properties"].update(properties)  # type: ignore[union-attr]
        return contact

    async def search_contacts(self, body: dict[str, object]) -> dict[str, object]:
        self._record("search", body)
        condition = body["filterGroups"][0]["filters"][0]  # type: ignore[index]
        value = condition["value"]
        if condition["operator"] == "EQ":
            results = [
                c
                for c in self.contacts.values()
                if c["properties"].get("email") == value
            ]
        else:
            results = [
                c
                for c in self.contacts.values()
                if value in str(c["properties"].get("email", ""))
            ]
        return {"total": len(results), "results": results}

    async def get_schemas(self) -> dict[str, object]:
        self._record("schemas", None)
        return {
            "results": [
                {"objectTypeId": "deals", "name": "deals"},
                {
                    "objectTypeId": "2-1234",
                    "name": "shoots",
                    "labels": {"singular": "Shoot", "plural": "Shoots"},
                    "properties": [{"name": "venue"}, {"name": "date"}],
                },
            ]
        }

    async def get_pipelines(self, object_type: str) -> dict[str, object]:
        self._record("pipelines", object_type)
        return {"results": [{"id": "default", "label": "Sales Pipeline"}]}

    async def get_contact_deal_ids(self, contact_id: str) -> list[str]:
        self._record("deals", contact_id)
        if self.deal_error is not None:
            raise self.deal_error
        return self.deal_ids.get(contact_id, [])

    def _record(self, name: str, payload: object) -> None:
        self.calls.append((name, payload))
        if self.error is not None:
            raise self.error


@dataclass
class FakeIdentityGateway(IdentityGateway):
    """Identity gateway with a fixed account table.

    ``before_return`` runs after the credential check but before the result is
    handed back, which lets tests interleave another session action.
    """

    accounts: dict[str, tuple[str, UserProfile]] = field(default_factory=dict)
    before_return: object | None = None

    async def login(self, credentials: LoginCredentials) -> UserProfile:
        account = self.accounts.get(credentials.email)
        if account is None or account[0] != credentials.password:
            raise AuthError(ErrorCode.INVALID_CREDENTIALS)
        self._interleave()
        return account[1]

    async def signup(self, data: SignupData) -> UserProfile:
        if data.email in self.accounts:
            raise AuthError(ErrorCode.EMAIL_ALREADY_EXISTS)
        profile = make_profile(
            user_id=f"user-{len(self.accounts) + 1}",
            email=data.email,
            name=data.name,
            role=data.role,
        )
        self.accounts[data.email] = (data.password, profile)
        self._interleave()
        return profile

    def _interleave(self) -> None:
        if callable(self.before_return):
            self.before_return()


def make_profile(
    user_id: str = "1",
    email: str = "alex@example.com",
    name: str = "Alex Chen",
    role: UserRole = UserRole.PHOTOGRAPHER,
) -> UserProfile:
    return UserProfile(
        id=user_id,
        email=email,
        name=name,
        role=role,
        service_type=ServiceType.PHOTOGRAPHY,
        last_seen=NOW,
        created_at=NOW,
        updated_at=NOW,
    )


def make_signup(email: str = "maria@example.com", **overrides: object) -> SignupData:
    values: dict[str, object] = {
        "email": email,
        "password": "secret123",
        "name": "Maria Rodriguez",
        "role": UserRole.VIDEOGRAPHER,
        "service_type": ServiceType.VIDEOGRAPHY,
        "company": "Reel Studio",
    }
    values.update(overrides)
    return SignupData(**values)  # type: ignore[arg-type]


def make_event(
    event_id: str = "1",
    date: datetime | None = None,
    timeline: tuple[TimelineItem, ...] | None = None,
    shot_list: tuple[ShotItem, ...] = (),
    status: EventStatus = EventStatus.ACTIVE,
) -> Event:
    """Wedding starting at 09:00 with Setup, Ceremony and Reception."""
    if timeline is None:
        timeline = (
            TimelineItem("t1", TimeOfDay(9, 0), "Setup", TimelineCategory.PREPARATION),
            TimelineItem(
                "t2", TimeOfDay(10, 30), "Ceremony", TimelineCategory.SHOOTING
            ),
            TimelineItem(
                "t3", TimeOfDay(14, 0), "Reception", TimelineCategory.SHOOTING
            ),
        )
    return Event(
        id=event_id,
        title="Sarah & Mike Wedding",
        date=date or NOW.replace(hour=9, minute=0),
        location="Rosewood Estate",
        client="Sarah Johnson",
        kind=EventKind.WEDDING,
        status=status,
        timeline=timeline,
        shot_list=shot_list,
    )


def make_shot(
    shot_id: str, time: TimeOfDay | None = None, completed: bool = False
) -> ShotItem:
    return ShotItem(
        id=shot_id,
        title=f"Shot {shot_id}",
        priority=ShotPriority.MEDIUM,
        media_type=MediaType.PHOTO,
        time=time,
        completed=completed,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state_repository() -> InMemoryStateRepository:
    return InMemoryStateRepository()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        hubspot_access_token="test-token",
        hubspot_client_secret="webhook-secret",
        supabase_url=None,
        supabase_service_key=None,
        identity_base_url=None,
        state_dir=tmp_path / "state",
    )


@pytest.fixture
def hubspot_client() -> FakeHubSpotClient:
    return FakeHubSpotClient()


@pytest.fixture
def crm_service(hubspot_client: FakeHubSpotClient) -> CrmService:
    return CrmService(hubspot_client)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def identity_service(
    user_repository: InMemoryUserRepository,
    crm_service: CrmService,
    clock: FakeClock,
) -> IdentityService:
    ids = iter(str(n) for n in range(1000, 2000))
    return IdentityService(
        repository=user_repository,
        crm=crm_service,
        clock=clock,
        new_id=lambda: next(ids),
    )


@pytest.fixture
def container(
    settings: Settings,
    crm_service: CrmService,
    identity_service: IdentityService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        crm_service=crm_service,
        identity_service=identity_service,
        webhook_service=WebhookService(settings.hubspot_client_secret),
        close_resources=close_resources,
    )
