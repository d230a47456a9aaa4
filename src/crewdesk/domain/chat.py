"""Domain models for team chat."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "system"


@dataclass(frozen=True)
class ChatMessage:
    """A single message posted to a room."""

    id: str
    sender_id: str
    sender_name: str
    content: str
    type: MessageType
    timestamp: datetime
    is_read: bool = False
    sender_avatar: str | None = None
    event_id: str | None = None
    reply_to: str | None = None


@dataclass(frozen=True)
class ChatRoom:
    """A chat room, optionally linked to an event."""

    id: str
    name: str
    participants: tuple[str, ...]
    created_at: datetime
    updated_at: datetime
    unread_count: int = 0
    event_id: str | None = None
    last_message: ChatMessage | None = None


@dataclass(frozen=True)
class TypingIndicator:
    """Ephemeral signal that a user is typing in a room."""

    user_id: str
    user_name: str
    timestamp: datetime
