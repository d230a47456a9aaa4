"""Identity service owning crew accounts."""

import hashlib
import hmac
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol

from crewdesk.domain.errors import (
    AuthError,
    CrewdeskError,
    ErrorCode,
    NotFoundError,
    RemoteError,
)
from crewdesk.domain.ids import TimeBasedIdGenerator
from crewdesk.domain.users import (
    SignupData,
    StoredUser,
    UserProfile,
    UserUpdate,
    validate_signup,
)
from crewdesk.services.crm import CrmService

_logger = logging.getLogger(__name__)

_HASH_ITERATIONS = 120_000
_SYNC_PROPERTIES = [
    "email",
    "firstname",
    "lastname",
    "company",
    "phone",
    "jobtitle",
    "city",
    "state",
    "country",
]


class UserRepository(Protocol):
    """Persistence interface for stored users."""

    def get_by_email(self, email: str) -> StoredUser | None:
        """Return the user with this email, if present."""

    def get_by_id(self, user_id: str) -> StoredUser | None:
        """Return the user with this id, if present."""

    def create_user(self, user: StoredUser) -> StoredUser:
        """Insert a new user and return it."""

    def update_user(self, user: StoredUser) -> StoredUser:
        """Replace an existing user and return it."""

    def list_users(self) -> list[StoredUser]:
        """Return all users."""

    def clear(self) -> None:
        """Delete all users."""


@dataclass(frozen=True)
class CrmSyncResult:
    """Outcome of pulling a user's data from the CRM."""

    user: UserProfile
    contact_properties: dict[str, object]
    deal_count: int


@dataclass
class IdentityService:
    """Account creation, login and CRM linkage."""

    repository: UserRepository
    crm: CrmService
    clock: Callable[[], datetime]
    new_id: Callable[[], str] = field(default_factory=TimeBasedIdGenerator)

    async def create_user(self, data: SignupData) -> UserProfile:
        """Create an account, linking a CRM contact when possible.

        CRM linkage is best-effort: a failure is logged and the account is
        created without a contact id.
        """
        validate_signup(data)
        email = normalise_email(data.email)
        if self.repository.get_by_email(email) is not None:
            raise AuthError(ErrorCode.EMAIL_ALREADY_EXISTS)

        contact_id = data.crm_contact_id
        if not contact_id and self.crm.is_configured:
            contact_id = await self._create_crm_contact(data)

        now = self.clock()
        profile = UserProfile(
            id=self.new_id(),
            email=email,
            name=data.name,
            role=data.role,
            service_type=data.service_type,
            company=data.company,
            is_online=True,
            last_seen=now,
            crm_contact_id=contact_id,
            created_at=now,
            updated_at=now,
        )
        stored = self.repository.create_user(
            StoredUser(
                profile=profile,
                password_hash=hash_password(data.password),
                phone=data.phone,
            )
        )
        _logger.info("Created user %s", profile.id)
        return stored.profile

    def login_user(self, email: str, password: str) -> UserProfile:
        """Check credentials and mark the user online."""
        stored = self.repository.get_by_email(normalise_email(email))
        if stored is None or not verify_password(password, stored.password_hash):
            raise AuthError(ErrorCode.INVALID_CREDENTIALS)
        now = self.clock()
        profile = replace(stored.profile, is_online=True, last_seen=now, updated_at=now)
        self.repository.update_user(replace(stored, profile=profile))
        return profile

    def get_user(self, user_id: str) -> UserProfile:
        return self._require(user_id).profile

    def update_user(self, user_id: str, update: UserUpdate) -> UserProfile:
        """Apply a partial update to a user."""
        stored = self._require(user_id)
        email = normalise_email(update.email) if update.email is not None else None
        if email is not None:
            owner = self.repository.get_by_email(email)
            if owner is not None and owner.profile.id != user_id:
                raise AuthError(ErrorCode.EMAIL_ALREADY_EXISTS)
        changes = {
            name: value
            for name, value in (
                ("email", email),
                ("name", update.name),
                ("role", update.role),
                ("service_type", update.service_type),
                ("company", update.company),
                ("crm_contact_id", update.crm_contact_id),
            )
            if value is not None
        }
        profile = replace(stored.profile, **changes, updated_at=self.clock())
        phone = update.phone if update.phone is not None else stored.phone
        self.repository.update_user(replace(stored, profile=profile, phone=phone))
        _logger.info("Updated user %s", user_id)
        return profile

    def list_users(self) -> list[UserProfile]:
        return [stored.profile for stored in self.repository.list_users()]

    def clear_users(self) -> None:
        self.repository.clear()
        _logger.info("Cleared all users")

    async def sync_user_with_crm(self, user_id: str) -> CrmSyncResult:
        """Refresh name, company and deal ids from the linked CRM contact."""
        stored = self._require(user_id)
        contact_id = stored.profile.crm_contact_id
        if not contact_id:
            raise NotFoundError("CRM contact", user_id)

        contact = await self.crm.get_contact(contact_id, _SYNC_PROPERTIES)
        properties = contact.get("properties") or {}
        try:
            deal_ids = await self.crm.get_contact_deal_ids(contact_id)
        except RemoteError as exc:
            _logger.warning("Failed to fetch deals for contact %s: %s", contact_id, exc)
            deal_ids = []

        full_name = " ".join(
            part
            for part in (properties.get("firstname"), properties.get("lastname"))
            if part
        ).strip()
        profile = replace(
            stored.profile,
            name=full_name or stored.profile.name,
            company=properties.get("company") or stored.profile.company,
            crm_deal_ids=tuple(deal_ids),
            updated_at=self.clock(),
        )
        self.repository.update_user(replace(stored, profile=profile))
        _logger.info("Synced user %s with CRM: deals=%s", user_id, len(deal_ids))
        return CrmSyncResult(
            user=profile, contact_properties=dict(properties), deal_count=len(deal_ids)
        )

    async def _create_crm_contact(self, data: SignupData) -> str | None:
        first_name, _, last_name = data.name.strip().partition(" ")
        try:
            contact = await self.crm.create_contact(
                {
                    "email": data.email,
                    "firstname": first_name,
                    "lastname": last_name.strip(),
                    "company": data.company or "",
                    "phone": data.phone or "",
                    "jobtitle": data.role.value,
                    "hs_lead_status": "NEW",
                    "lifecyclestage": "lead",
                }
            )
        except CrewdeskError as exc:
            _logger.warning("Failed to create CRM contact for %s: %s", data.email, exc)
            return None
        contact_id = contact.get("id")
        _logger.info("Created CRM contact %s", contact_id)
        return str(contact_id) if contact_id else None

    def _require(self, user_id: str) -> StoredUser:
        stored = self.repository.get_by_id(user_id)
        if stored is None:
            raise NotFoundError("User", user_id)
        return stored


def normalise_email(email: str) -> str:
    """Canonical form used for lookups and storage."""
    return email.strip().lower()


def hash_password(password: str) -> str:
    """Hash a password with PBKDF2-SHA256 and a random salt."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), _HASH_ITERATIONS
    )
    return f"pbkdf2_sha256${_HASH_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a stored hash."""
    try:
        _, iterations, salt, expected = encoded.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), rounds)
    return hmac.compare_digest(digest.hex(), expected)
