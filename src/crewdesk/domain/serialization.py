"""JSON-compatible encoding of domain values.

Dates are written as ISO-8601 strings and times of day as ``HH:MM``; decoding
re-hydrates both so a round trip reproduces equal values.
"""

from datetime import datetime

from crewdesk.domain.chat import ChatMessage, ChatRoom, MessageType
from crewdesk.domain.errors import ValidationError
from crewdesk.domain.events import (
    CrewRole,
    Event,
    EventKind,
    EventStatus,
    MediaType,
    Note,
    ShotItem,
    ShotPriority,
    TeamMember,
    TimelineCategory,
    TimelineItem,
)
from crewdesk.domain.time_of_day import TimeOfDay
from crewdesk.domain.users import (
    Preferences,
    ServiceType,
    StoredUser,
    UserProfile,
    UserRole,
)


def encode_user(user: UserProfile) -> dict[str, object]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "service_type": user.service_type.value,
        "company": user.company,
        "avatar": user.avatar,
        "is_online": user.is_online,
        "last_seen": user.last_seen.isoformat(),
        "preferences": {
            "notifications": user.preferences.notifications,
            "dark_mode": user.preferences.dark_mode,
            "language": user.preferences.language,
        },
        "crm_contact_id": user.crm_contact_id,
        "crm_deal_ids": list(user.crm_deal_ids),
        "created_at": user.created_at.isoformat(),
        "updated_at": user.updated_at.isoformat(),
    }


def decode_user(row: dict) -> UserProfile:
    try:
        preferences = row.get("preferences") or {}
        return UserProfile(
            id=str(row["id"]),
            email=row["email"],
            name=row["name"],
            role=UserRole(row["role"]),
            service_type=ServiceType(row["service_type"]),
            company=row.get("company"),
            avatar=row.get("avatar"),
            is_online=bool(row.get("is_online", True)),
            last_seen=_parse_datetime(row["last_seen"]),
            preferences=Preferences(
                notifications=preferences.get("notifications", True),
                dark_mode=preferences.get("dark_mode", False),
                language=preferences.get("language", "en"),
            ),
            crm_contact_id=row.get("crm_contact_id"),
            crm_deal_ids=tuple(str(deal) for deal in row.get("crm_deal_ids") or ()),
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed user record: {exc}") from exc


def encode_stored_user(user: StoredUser) -> dict[str, object]:
    row = encode_user(user.profile)
    row["password_hash"] = user.password_hash
    row["phone"] = user.phone
    return row


def decode_stored_user(row: dict) -> StoredUser:
    if "password_hash" not in row:
        raise ValidationError("Malformed user record: missing password hash")
    return StoredUser(
        profile=decode_user(row),
        password_hash=row["password_hash"],
        phone=row.get("phone"),
    )


def encode_events(events: tuple[Event, ...]) -> list[dict[str, object]]:
    return [encode_event(event) for event in events]


def decode_events(rows: list[dict]) -> tuple[Event, ...]:
    return tuple(decode_event(row) for row in rows)


def encode_event(event: Event) -> dict[str, object]:
    return {
        "id": event.id,
        "title": event.title,
        "date": event.date.isoformat(),
        "location": event.location,
        "client": event.client,
        "kind": event.kind.value,
        "status": event.status.value,
        "cover_image": event.cover_image,
        "color": event.color,
        "team": [
            {
                "id": member.id,
                "name": member.name,
                "role": member.role.value,
                "avatar": member.avatar,
                "is_online": member.is_online,
            }
            for member in event.team
        ],
        "shot_list": [_encode_shot(shot) for shot in event.shot_list],
        "timeline": [
            {
                "id": item.id,
                "time": str(item.time),
                "title": item.title,
                "category": item.category.value,
                "description": item.description,
            }
            for item in event.timeline
        ],
        "notes": [
            {
                "id": note.id,
                "author": note.author,
                "author_avatar": note.author_avatar,
                "content": note.content,
                "timestamp": note.timestamp.isoformat(),
            }
            for note in event.notes
        ],
    }


def decode_event(row: dict) -> Event:
    try:
        return Event(
            id=str(row["id"]),
            title=row["title"],
            date=_parse_datetime(row["date"]),
            location=row.get("location", ""),
            client=row.get("client", ""),
            kind=EventKind(row["kind"]),
            status=EventStatus(row["status"]),
            cover_image=row.get("cover_image", ""),
            color=row.get("color", ""),
            team=tuple(
                TeamMember(
                    id=str(member["id"]),
                    name=member["name"],
                    role=CrewRole(member["role"]),
                    avatar=member.get("avatar"),
                    is_online=bool(member.get("is_online", False)),
                )
                for member in row.get("team") or ()
            ),
            shot_list=tuple(_decode_shot(shot) for shot in row.get("shot_list") or ()),
            timeline=tuple(
                TimelineItem(
                    id=str(item["id"]),
                    time=TimeOfDay.parse(item["time"]),
                    title=item["title"],
                    category=TimelineCategory(item["category"]),
                    description=item.get("description"),
                )
                for item in row.get("timeline") or ()
            ),
            notes=tuple(
                Note(
                    id=str(note["id"]),
                    author=note["author"],
                    author_avatar=note.get("author_avatar"),
                    content=note["content"],
                    timestamp=_parse_datetime(note["timestamp"]),
                )
                for note in row.get("notes") or ()
            ),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed event record: {exc}") from exc


def encode_chat(
    rooms: tuple[ChatRoom, ...], messages: dict[str, tuple[ChatMessage, ...]]
) -> dict[str, object]:
    return {
        "rooms": [_encode_room(room) for room in rooms],
        "messages": {
            room_id: [_encode_message(message) for message in room_messages]
            for room_id, room_messages in messages.items()
        },
    }


def decode_chat(
    data: dict,
) -> tuple[tuple[ChatRoom, ...], dict[str, tuple[ChatMessage, ...]]]:
    try:
        rooms = tuple(_decode_room(row) for row in data.get("rooms") or ())
        messages = {
            room_id: tuple(_decode_message(row) for row in rows)
            for room_id, rows in (data.get("messages") or {}).items()
        }
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed chat record: {exc}") from exc
    return rooms, messages


def _encode_shot(shot: ShotItem) -> dict[str, object]:
    return {
        "id": shot.id,
        "title": shot.title,
        "description": shot.description,
        "time": str(shot.time) if shot.time else None,
        "location": shot.location,
        "equipment": list(shot.equipment),
        "assigned_to": list(shot.assigned_to),
        "completed": shot.completed,
        "priority": shot.priority.value,
        "media_type": shot.media_type.value,
    }


def _decode_shot(row: dict) -> ShotItem:
    time_value = row.get("time")
    return ShotItem(
        id=str(row["id"]),
        title=row["title"],
        description=row.get("description"),
        time=TimeOfDay.parse(time_value) if time_value else None,
        location=row.get("location"),
        equipment=tuple(row.get("equipment") or ()),
        assigned_to=tuple(row.get("assigned_to") or ()),
        completed=bool(row.get("completed", False)),
        priority=ShotPriority(row["priority"]),
        media_type=MediaType(row["media_type"]),
    )


def _encode_room(room: ChatRoom) -> dict[str, object]:
    return {
        "id": room.id,
        "name": room.name,
        "event_id": room.event_id,
        "participants": list(room.participants),
        "unread_count": room.unread_count,
        "last_message": _encode_message(room.last_message)
        if room.last_message
        else None,
        "created_at": room.created_at.isoformat(),
        "updated_at": room.updated_at.isoformat(),
    }


def _decode_room(row: dict) -> ChatRoom:
    last_message = row.get("last_message")
    return ChatRoom(
        id=str(row["id"]),
        name=row["name"],
        event_id=row.get("event_id"),
        participants=tuple(str(p) for p in row.get("participants") or ()),
        unread_count=int(row.get("unread_count", 0)),
        last_message=_decode_message(last_message) if last_message else None,
        created_at=_parse_datetime(row["created_at"]),
        updated_at=_parse_datetime(row["updated_at"]),
    )


def _encode_message(message: ChatMessage) -> dict[str, object]:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "sender_name": message.sender_name,
        "sender_avatar": message.sender_avatar,
        "content": message.content,
        "type": message.type.value,
        "timestamp": message.timestamp.isoformat(),
        "is_read": message.is_read,
        "event_id": message.event_id,
        "reply_to": message.reply_to,
    }


def _decode_message(row: dict) -> ChatMessage:
    return ChatMessage(
        id=str(row["id"]),
        sender_id=str(row["sender_id"]),
        sender_name=row["sender_name"],
        sender_avatar=row.get("sender_avatar"),
        content=row["content"],
        type=MessageType(row.get("type", "text")),
        timestamp=_parse_datetime(row["timestamp"]),
        is_read=bool(row.get("is_read", False)),
        event_id=row.get("event_id"),
        reply_to=row.get("reply_to"),
    )


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)
