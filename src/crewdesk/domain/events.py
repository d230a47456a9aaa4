"""Domain models for scheduled events."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from crewdesk.domain.time_of_day import TimeOfDay


class EventStatus(StrEnum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class EventKind(StrEnum):
    WEDDING = "wedding"
    CORPORATE = "corporate"
    PORTRAIT = "portrait"
    COMMERCIAL = "commercial"
    DOCUMENTARY = "documentary"


class ShotPriority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MediaType(StrEnum):
    PHOTO = "photo"
    VIDEO = "video"
    BOTH = "both"


class TimelineCategory(StrEnum):
    PREPARATION = "preparation"
    SHOOTING = "shooting"
    BREAK = "break"
    TRANSITION = "transition"


class CrewRole(StrEnum):
    PHOTOGRAPHER = "photographer"
    VIDEOGRAPHER = "videographer"
    ASSISTANT = "assistant"
    DIRECTOR = "director"


@dataclass(frozen=True)
class TeamMember:
    """Crew member assigned to an event."""

    id: str
    name: str
    role: CrewRole
    avatar: str | None = None
    is_online: bool = False


@dataclass(frozen=True)
class ShotItem:
    """A planned photo or video capture."""

    id: str
    title: str
    priority: ShotPriority
    media_type: MediaType
    completed: bool = False
    time: TimeOfDay | None = None
    description: str | None = None
    location: str | None = None
    equipment: tuple[str, ...] = ()
    assigned_to: tuple[str, ...] = ()


@dataclass(frozen=True)
class TimelineItem:
    """A scheduled phase of an event."""

    id: str
    time: TimeOfDay
    title: str
    category: TimelineCategory
    description: str | None = None


@dataclass(frozen=True)
class Note:
    """A note left on an event by a crew member."""

    id: str
    author: str
    content: str
    timestamp: datetime
    author_avatar: str | None = None


@dataclass(frozen=True)
class EventDraft:
    """An event before it has been assigned an id."""

    title: str
    date: datetime
    location: str
    client: str
    kind: EventKind
    status: EventStatus = EventStatus.UPCOMING
    cover_image: str = ""
    color: str = ""
    team: tuple[TeamMember, ...] = ()
    shot_list: tuple[ShotItem, ...] = ()
    timeline: tuple[TimelineItem, ...] = ()
    notes: tuple[Note, ...] = ()


@dataclass(frozen=True)
class Event:
    """A scheduled engagement owning its shot list, timeline and notes.

    Timeline order is chronological and significant; consumers never re-sort it.
    """

    id: str
    title: str
    date: datetime
    location: str
    client: str
    kind: EventKind
    status: EventStatus
    cover_image: str = ""
    color: str = ""
    team: tuple[TeamMember, ...] = ()
    shot_list: tuple[ShotItem, ...] = ()
    timeline: tuple[TimelineItem, ...] = ()
    notes: tuple[Note, ...] = ()

    @classmethod
    def from_draft(cls, event_id: str, draft: EventDraft) -> "Event":
        """Build an event from a draft and a freshly assigned id."""
        return cls(
            id=event_id,
            title=draft.title,
            date=draft.date,
            location=draft.location,
            client=draft.client,
            kind=draft.kind,
            status=draft.status,
            cover_image=draft.cover_image,
            color=draft.color,
            team=draft.team,
            shot_list=draft.shot_list,
            timeline=draft.timeline,
            notes=draft.notes,
        )
