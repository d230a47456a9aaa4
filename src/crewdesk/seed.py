"""Demo data used when no persisted state exists yet."""

from datetime import datetime, timedelta

from crewdesk.domain.chat import ChatMessage, ChatRoom, MessageType
from crewdesk.domain.events import (
    CrewRole,
    Event,
    EventKind,
    EventStatus,
    MediaType,
    ShotItem,
    ShotPriority,
    TeamMember,
    TimelineCategory,
    TimelineItem,
)
from crewdesk.domain.time_of_day import TimeOfDay
from crewdesk.domain.users import ServiceType, UserProfile, UserRole

_TEAM = (
    TeamMember(id="1", name="Alex Chen", role=CrewRole.PHOTOGRAPHER, is_online=True),
    TeamMember(id="2", name="Maria Rodriguez", role=CrewRole.VIDEOGRAPHER),
    TeamMember(id="3", name="Sarah Johnson", role=CrewRole.ASSISTANT),
)


def seed_events(now: datetime) -> tuple[Event, ...]:
    """Two demo events: a wedding today and a corporate gala in two days."""
    today = now.replace(hour=9, minute=0, second=0, microsecond=0)
    wedding = Event(
        id="1",
        title="Sarah & Mike Wedding",
        date=today,
        location="Rosewood Estate",
        client="Sarah Johnson",
        kind=EventKind.WEDDING,
        status=EventStatus.ACTIVE,
        color="#667eea",
        team=_TEAM,
        timeline=(
            TimelineItem(
                id="t1",
                time=TimeOfDay(9, 0),
                title="Bridal Prep",
                category=TimelineCategory.PREPARATION,
            ),
            TimelineItem(
                id="t2",
                time=TimeOfDay(10, 30),
                title="First Look",
                category=TimelineCategory.SHOOTING,
            ),
            TimelineItem(
                id="t3",
                time=TimeOfDay(14, 0),
                title="Ceremony",
                category=TimelineCategory.SHOOTING,
            ),
            TimelineItem(
                id="t4",
                time=TimeOfDay(17, 0),
                title="Dinner Break",
                category=TimelineCategory.BREAK,
            ),
        ),
        shot_list=(
            ShotItem(
                id="s1",
                title="Dress detail",
                priority=ShotPriority.MEDIUM,
                media_type=MediaType.PHOTO,
                time=TimeOfDay(9, 30),
                assigned_to=("1",),
            ),
            ShotItem(
                id="s2",
                title="First look reaction",
                priority=ShotPriority.HIGH,
                media_type=MediaType.BOTH,
                time=TimeOfDay(10, 30),
                assigned_to=("1", "2"),
            ),
            ShotItem(
                id="s3",
                title="Ring exchange",
                priority=ShotPriority.HIGH,
                media_type=MediaType.BOTH,
                time=TimeOfDay(14, 15),
                equipment=("85mm", "gimbal"),
            ),
            ShotItem(
                id="s4",
                title="Venue wide shots",
                priority=ShotPriority.LOW,
                media_type=MediaType.VIDEO,
                description="Drone if weather allows",
            ),
        ),
    )
    gala = Event(
        id="2",
        title="Corporate Event",
        date=today + timedelta(days=2, hours=9),
        location="Harbour Conference Centre",
        client="TechCorp",
        kind=EventKind.CORPORATE,
        status=EventStatus.UPCOMING,
        color="#764ba2",
        team=_TEAM[:2],
        timeline=(
            TimelineItem(
                id="t5",
                time=TimeOfDay(18, 0),
                title="Arrivals",
                category=TimelineCategory.SHOOTING,
            ),
            TimelineItem(
                id="t6",
                time=TimeOfDay(19, 30),
                title="Keynote",
                category=TimelineCategory.SHOOTING,
            ),
        ),
        shot_list=(
            ShotItem(
                id="s5",
                title="Speaker portraits",
                priority=ShotPriority.HIGH,
                media_type=MediaType.PHOTO,
                time=TimeOfDay(19, 30),
            ),
        ),
    )
    return wedding, gala


def seed_chat(
    now: datetime,
) -> tuple[tuple[ChatRoom, ...], dict[str, tuple[ChatMessage, ...]]]:
    """Three demo rooms: a general room and one per seeded event."""

    def message(  # noqa: PLR0913
        message_id: str,
        sender_id: str,
        sender_name: str,
        content: str,
        minutes_ago: int,
        is_read: bool,
    ) -> ChatMessage:
        return ChatMessage(
            id=message_id,
            sender_id=sender_id,
            sender_name=sender_name,
            content=content,
            type=MessageType.TEXT,
            timestamp=now - timedelta(minutes=minutes_ago),
            is_read=is_read,
        )

    messages = {
        "general": (
            message(
                "1",
                "2",
                "Maria Rodriguez",
                "Hey everyone! Ready for the weekend shoots?",
                120,
                True,
            ),
            message(
                "2",
                "1",
                "Alex Chen",
                "Absolutely! Just finished prepping all my gear.",
                60,
                True,
            ),
            message(
                "3",
                "3",
                "Sarah Johnson",
                "Thanks for all your hard work team!",
                30,
                False,
            ),
        ),
        "event-1": (
            message(
                "4",
                "3",
                "Sarah Johnson",
                "The venue looks amazing! Can't wait to see the photos.",
                45,
                False,
            ),
            message(
                "5",
                "1",
                "Alex Chen",
                "Just arrived at the venue. The lighting is perfect!",
                15,
                False,
            ),
        ),
        "event-2": (
            message(
                "6",
                "2",
                "Maria Rodriguez",
                "Equipment check complete. All cameras are ready to go.",
                120,
                True,
            ),
        ),
    }
    rooms = (
        ChatRoom(
            id="general",
            name="General Chat",
            participants=("1", "2", "3"),
            created_at=now - timedelta(days=7),
            updated_at=now,
            last_message=messages["general"][-1],
        ),
        ChatRoom(
            id="event-1",
            name="Sarah & Mike Wedding",
            participants=("1", "2", "3"),
            created_at=now - timedelta(days=3),
            updated_at=now - timedelta(minutes=15),
            unread_count=2,
            event_id="1",
            last_message=messages["event-1"][-1],
        ),
        ChatRoom(
            id="event-2",
            name="Corporate Event",
            participants=("1", "2"),
            created_at=now - timedelta(days=2),
            updated_at=now - timedelta(hours=2),
            event_id="2",
            last_message=messages["event-2"][-1],
        ),
    )
    return rooms, messages


def demo_profiles(now: datetime) -> dict[UserRole, UserProfile]:
    """Identities offered for quick login, keyed by role."""
    accounts = (
        ("1", "photographer@example.com", "Alex Chen", UserRole.PHOTOGRAPHER),
        ("2", "videographer@example.com", "Maria Rodriguez", UserRole.VIDEOGRAPHER),
        ("3", "client@example.com", "Sarah Johnson", UserRole.CLIENT),
    )
    service_types = {
        UserRole.PHOTOGRAPHER: ServiceType.PHOTOGRAPHY,
        UserRole.VIDEOGRAPHER: ServiceType.VIDEOGRAPHY,
        UserRole.CLIENT: ServiceType.HYBRID,
    }
    return {
        role: UserProfile(
            id=user_id,
            email=email,
            name=name,
            role=role,
            service_type=service_types[role],
            last_seen=now,
            created_at=now,
            updated_at=now,
        )
        for user_id, email, name, role in accounts
    }
