"""Event store: shot lists, timelines and notes for scheduled events."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from crewdesk.domain.errors import NotFoundError, ValidationError
from crewdesk.domain.events import (
    Event,
    EventDraft,
    EventStatus,
    Note,
    ShotItem,
    TimelineItem,
)
from crewdesk.domain.ids import TimeBasedIdGenerator
from crewdesk.domain.results import MutationResult
from crewdesk.domain.serialization import decode_events, encode_events
from crewdesk.domain.timeline import (
    current_timeline_item,
    is_timeline_item_active,
    relevant_shots,
    timeline_progress,
)
from crewdesk.services.observable import Observable
from crewdesk.services.state import EVENTS_KEY, StateRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventOverview:
    """Derived, time-dependent view of one event."""

    event: Event
    current_item: TimelineItem | None
    relevant_shots: list[ShotItem]
    progress: float
    active_item_ids: frozenset[str]


class EventStore(Observable[tuple[Event, ...]]):
    """In-memory event collection written back in full on every mutation."""

    def __init__(
        self,
        repository: StateRepository,
        clock: Callable[[], datetime],
        seed: Callable[[], tuple[Event, ...]] = tuple,
        id_generator: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self.repository = repository
        self.clock = clock
        self.seed = seed
        self.new_id = id_generator or TimeBasedIdGenerator()
        self._events: tuple[Event, ...] = ()
        self._selected_event_id: str | None = None

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    def load(self) -> tuple[Event, ...]:
        """Load events from storage, falling back to the seed set."""
        stored = self.repository.load(EVENTS_KEY)
        events: tuple[Event, ...] | None = None
        if isinstance(stored, list):
            try:
                events = decode_events(stored)
            except ValidationError:
                _logger.exception("Stored events unreadable, using seed data")
        if events is None:
            events = self.seed()
        self._events = events
        self._publish(events)
        return events

    def get_event(self, event_id: str) -> Event | None:
        return next((e for e in self._events if e.id == event_id), None)

    def select_event(self, event_id: str | None) -> None:
        self._selected_event_id = event_id

    @property
    def selected_event(self) -> Event | None:
        if self._selected_event_id is None:
            return None
        return self.get_event(self._selected_event_id)

    def toggle_shot_complete(
        self, event_id: str, shot_id: str
    ) -> MutationResult[Event]:
        """Flip the completed flag of exactly one shot."""
        event = self.get_event(event_id)
        if event is None:
            _logger.warning("Toggle shot: event %s not found", event_id)
            return MutationResult.not_found("Event", event_id)
        if not any(shot.id == shot_id for shot in event.shot_list):
            _logger.warning("Toggle shot: shot %s not in event %s", shot_id, event_id)
            return MutationResult.not_found("Shot", shot_id)

        updated = replace(
            event,
            shot_list=tuple(
                replace(shot, completed=not shot.completed)
                if shot.id == shot_id
                else shot
                for shot in event.shot_list
            ),
        )
        self._commit(self._replaced(updated))
        return MutationResult.ok(updated)

    def add_note(
        self,
        event_id: str,
        content: str,
        author: str,
        author_avatar: str | None = None,
    ) -> MutationResult[Note]:
        """Append a timestamped note to an event."""
        event = self.get_event(event_id)
        if event is None:
            _logger.warning("Add note: event %s not found", event_id)
            return MutationResult.not_found("Event", event_id)

        note = Note(
            id=self.new_id(),
            author=author,
            author_avatar=author_avatar,
            content=content,
            timestamp=self.clock(),
        )
        self._commit(self._replaced(replace(event, notes=(*event.notes, note))))
        return MutationResult.ok(note)

    def add_event(self, draft: EventDraft) -> str:
        """Store a new event and return its id."""
        event = Event.from_draft(self.new_id(), draft)
        self._commit((*self._events, event))
        _logger.info("Added event %s (%s)", event.id, event.title)
        return event.id

    def update_event(self, event: Event) -> Event:
        """Replace an event by id, or append it when the id is new."""
        if self.get_event(event.id) is None:
            self._commit((*self._events, event))
        else:
            self._commit(self._replaced(event))
        return event

    def upcoming_events(self) -> list[Event]:
        return sorted(
            (e for e in self._events if e.status is EventStatus.UPCOMING),
            key=lambda e: e.date,
        )

    def active_events(self) -> list[Event]:
        return [e for e in self._events if e.status is EventStatus.ACTIVE]

    def active_event(self) -> Event | None:
        active = self.active_events()
        return active[0] if active else None

    def overview(self, event_id: str, now: datetime | None = None) -> EventOverview:
        """Compute the time-dependent views for one event."""
        event = self.get_event(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        moment = now or self.clock()
        return EventOverview(
            event=event,
            current_item=current_timeline_item(event, moment),
            relevant_shots=relevant_shots(event, moment),
            progress=timeline_progress(event, moment),
            active_item_ids=frozenset(
                item.id
                for item in event.timeline
                if is_timeline_item_active(event, item, moment)
            ),
        )

    def _replaced(self, updated: Event) -> tuple[Event, ...]:
        return tuple(updated if e.id == updated.id else e for e in self._events)

    def _commit(self, events: tuple[Event, ...]) -> None:
        self.repository.save(EVENTS_KEY, encode_events(events))
        self._events = events
        self._publish(events)
