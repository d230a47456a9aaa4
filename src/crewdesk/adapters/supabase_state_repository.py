"""Supabase-backed state repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from crewdesk.services.state import StateRepository


@dataclass
class SupabaseStateRepository(StateRepository):
    """Supabase implementation keeping one ``app_state`` row per key."""

    client: Client
    owner: str = "default"

    def load(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""
        response = (
            self.client.table("app_state")
            .select("value")
            .eq("owner", self.owner)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0]["value"]
        return None

    def save(self, key: str, value: object) -> None:
        """Upsert the whole value for a key."""
        self.client.table("app_state").upsert(
            {
                "owner": self.owner,
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="owner,key",
        ).execute()

    def delete(self, key: str) -> None:
        """Delete the row for a key."""
        self.client.table("app_state").delete().eq("owner", self.owner).eq(
            "key", key
        ).execute()
