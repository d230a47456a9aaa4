"""Pydantic request models for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from crewdesk.domain.users import ServiceType, SignupData, UserRole, UserUpdate


class SignupRequest(BaseModel):
    """Account creation payload."""

    email: str
    password: str
    name: str
    role: UserRole
    service_type: ServiceType
    company: str | None = None
    phone: str | None = None
    crm_contact_id: str | None = None

    def to_domain(self) -> SignupData:
        return SignupData(**self.model_dump())


class LoginRequest(BaseModel):
    email: str
    password: str


class UserUpdateRequest(BaseModel):
    """Partial user update; omitted fields are left unchanged."""

    email: str | None = None
    name: str | None = None
    role: UserRole | None = None
    service_type: ServiceType | None = None
    company: str | None = None
    phone: str | None = None
    crm_contact_id: str | None = None

    def to_domain(self) -> UserUpdate:
        return UserUpdate(**self.model_dump())


class ContactPropertiesRequest(BaseModel):
    properties: dict[str, Any]


class ContactUpsertRequest(BaseModel):
    email: str
    properties: dict[str, Any] = Field(default_factory=dict)


class ContactSearchRequest(BaseModel):
    query: str
    limit: int = Field(default=10, ge=1, le=100)
