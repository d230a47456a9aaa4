"""Domain models for crew identities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from crewdesk.domain.errors import ValidationError


class UserRole(StrEnum):
    """Role a crew member plays on a shoot."""

    PHOTOGRAPHER = "photographer"
    VIDEOGRAPHER = "videographer"
    CLIENT = "client"
    ASSISTANT = "assistant"
    DIRECTOR = "director"


class ServiceType(StrEnum):
    """Kind of service a crew member offers."""

    PHOTOGRAPHY = "photography"
    VIDEOGRAPHY = "videography"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class Preferences:
    """Per-user app preferences."""

    notifications: bool = True
    dark_mode: bool = False
    language: str = "en"


@dataclass(frozen=True)
class UserProfile:
    """Authenticated identity without secret material."""

    id: str
    email: str
    name: str
    role: UserRole
    service_type: ServiceType
    last_seen: datetime
    created_at: datetime
    updated_at: datetime
    company: str | None = None
    avatar: str | None = None
    is_online: bool = True
    preferences: Preferences = field(default_factory=Preferences)
    crm_contact_id: str | None = None
    crm_deal_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class StoredUser:
    """User record as kept by the identity service."""

    profile: UserProfile
    password_hash: str
    phone: str | None = None


@dataclass(frozen=True)
class LoginCredentials:
    """Email and password pair."""

    email: str
    password: str


@dataclass(frozen=True)
class SignupData:
    """Fields required to create an account."""

    email: str
    password: str
    name: str
    role: UserRole
    service_type: ServiceType
    company: str | None = None
    phone: str | None = None
    crm_contact_id: str | None = None


@dataclass(frozen=True)
class UserUpdate:
    """Partial update of a stored user; ``None`` leaves a field unchanged."""

    email: str | None = None
    name: str | None = None
    role: UserRole | None = None
    service_type: ServiceType | None = None
    company: str | None = None
    phone: str | None = None
    crm_contact_id: str | None = None


_MIN_PASSWORD_LENGTH = 6


def validate_signup(data: SignupData) -> None:
    """Reject signup data missing required fields."""
    if "@" not in data.email or data.email.startswith("@"):
        raise ValidationError("A valid email is required")
    if len(data.password) < _MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {_MIN_PASSWORD_LENGTH} characters"
        )
    if not data.name.strip():
        raise ValidationError("Name is required")
