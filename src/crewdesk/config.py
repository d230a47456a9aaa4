"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    hubspot_access_token: str | None = None
    hubspot_client_secret: str | None = None
    hubspot_base_url: str = "https://api.hubapi.com"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    state_dir: Path = Path(".crewdesk")
    identity_base_url: str | None = None
    timezone: str = "UTC"
    typing_ttl_seconds: float = 3.0
    typing_sweep_interval_seconds: float = 1.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)


def parse_token(raw: str | None) -> str | None:
    """Normalise an optional secret, treating blank values as unset."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
