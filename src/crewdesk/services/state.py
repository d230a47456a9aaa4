"""Durable storage interface for store snapshots."""

from typing import Protocol

SESSION_KEY = "session"
EVENTS_KEY = "events"
CHAT_KEY = "chat"


class StateRepository(Protocol):
    """Keeps one JSON-compatible record per store key."""

    def load(self, key: str) -> object | None:
        """Return the stored record, or None when nothing was saved."""

    def save(self, key: str, value: object) -> None:
        """Replace the stored record for a key."""

    def delete(self, key: str) -> None:
        """Remove the stored record for a key, if any."""
