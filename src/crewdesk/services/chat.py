"""Chat store: rooms, messages and typing indicators."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from crewdesk.domain.chat import ChatMessage, ChatRoom, MessageType, TypingIndicator
from crewdesk.domain.errors import AuthError, ErrorCode, ValidationError
from crewdesk.domain.ids import TimeBasedIdGenerator
from crewdesk.domain.results import MutationResult
from crewdesk.domain.serialization import decode_chat, encode_chat
from crewdesk.domain.users import UserProfile
from crewdesk.services.observable import Observable
from crewdesk.services.state import CHAT_KEY, StateRepository

_logger = logging.getLogger(__name__)

ChatSnapshot = tuple[tuple[ChatRoom, ...], dict[str, tuple[ChatMessage, ...]]]
ChatSeed = Callable[[], ChatSnapshot]


@dataclass(frozen=True)
class ChatState:
    """Snapshot published to chat subscribers."""

    rooms: tuple[ChatRoom, ...] = ()
    messages: dict[str, tuple[ChatMessage, ...]] = field(default_factory=dict)
    active_room: str | None = None
    typing: dict[str, tuple[TypingIndicator, ...]] = field(default_factory=dict)


def _empty_seed() -> ChatSnapshot:
    return (), {}


class ChatStore(Observable[ChatState]):
    """Room and message state with a periodic typing-indicator sweep.

    Rooms and messages are written back in full after each mutation. Typing
    indicators are ephemeral: they are never persisted and expire once older
    than ``typing_ttl``, checked every ``sweep_interval`` seconds, so an
    indicator disappears within ``[ttl, ttl + interval)`` of its last refresh.
    """

    def __init__(  # noqa: PLR0913
        self,
        repository: StateRepository,
        current_user: Callable[[], UserProfile | None],
        clock: Callable[[], datetime],
        seed: ChatSeed = _empty_seed,
        id_generator: Callable[[], str] | None = None,
        typing_ttl: timedelta = timedelta(seconds=3),
        sweep_interval: float = 1.0,
    ) -> None:
        super().__init__()
        self.repository = repository
        self.current_user = current_user
        self.clock = clock
        self.seed = seed
        self.new_id = id_generator or TimeBasedIdGenerator()
        self.typing_ttl = typing_ttl
        self.sweep_interval = sweep_interval
        self._state = ChatState()
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def state(self) -> ChatState:
        return self._state

    def load(self) -> ChatState:
        """Load rooms and messages from storage, falling back to the seed."""
        stored = self.repository.load(CHAT_KEY)
        loaded = None
        if isinstance(stored, dict):
            try:
                loaded = decode_chat(stored)
            except ValidationError:
                _logger.exception("Stored chat data unreadable, using seed data")
        rooms, messages = loaded if loaded is not None else self.seed()
        self._set(replace(self._state, rooms=rooms, messages=messages))
        return self._state

    def get_room(self, room_id: str) -> ChatRoom | None:
        return next((room for room in self._state.rooms if room.id == room_id), None)

    def room_messages(self, room_id: str) -> tuple[ChatMessage, ...]:
        return self._state.messages.get(room_id, ())

    def unread_total(self) -> int:
        return sum(room.unread_count for room in self._state.rooms)

    def typing_users(self, room_id: str) -> tuple[TypingIndicator, ...]:
        return self._state.typing.get(room_id, ())

    def send_message(
        self,
        room_id: str,
        content: str,
        message_type: MessageType = MessageType.TEXT,
    ) -> MutationResult[ChatMessage]:
        """Post a message as the signed-in user."""
        user = self.current_user()
        if user is None:
            raise AuthError(ErrorCode.NOT_AUTHENTICATED)
        room = self.get_room(room_id)
        if room is None:
            _logger.warning("Send message: room %s not found", room_id)
            return MutationResult.not_found("ChatRoom", room_id)

        now = self.clock()
        message = ChatMessage(
            id=self.new_id(),
            sender_id=user.id,
            sender_name=user.name,
            sender_avatar=user.avatar,
            content=content,
            type=message_type,
            timestamp=now,
        )
        messages = {
            **self._state.messages,
            room_id: (*self.room_messages(room_id), message),
        }
        rooms = tuple(
            replace(r, last_message=message, updated_at=now) if r.id == room_id else r
            for r in self._state.rooms
        )
        self._commit(replace(self._state, rooms=rooms, messages=messages))
        return MutationResult.ok(message)

    def mark_read(self, room_id: str) -> MutationResult[ChatRoom]:
        """Mark every message in a room read and clear its unread counter."""
        room = self.get_room(room_id)
        if room is None:
            return MutationResult.not_found("ChatRoom", room_id)
        updated_room = replace(room, unread_count=0)
        messages = {
            **self._state.messages,
            room_id: tuple(
                replace(message, is_read=True)
                for message in self.room_messages(room_id)
            ),
        }
        rooms = tuple(
            updated_room if r.id == room_id else r for r in self._state.rooms
        )
        self._commit(replace(self._state, rooms=rooms, messages=messages))
        return MutationResult.ok(updated_room)

    def set_active_room(self, room_id: str | None) -> MutationResult[ChatRoom] | None:
        """Select a room; selecting one marks it read."""
        self._set(replace(self._state, active_room=room_id))
        if room_id is None:
            return None
        return self.mark_read(room_id)

    def start_typing(self, room_id: str) -> None:
        """Insert or refresh the signed-in user's typing indicator."""
        user = self.current_user()
        if user is None:
            return
        indicator = TypingIndicator(
            user_id=user.id, user_name=user.name, timestamp=self.clock()
        )
        others = tuple(t for t in self.typing_users(room_id) if t.user_id != user.id)
        self._set_typing(room_id, (*others, indicator))

    def stop_typing(self, room_id: str) -> None:
        """Remove the signed-in user's typing indicator."""
        user = self.current_user()
        if user is None:
            return
        remaining = tuple(
            t for t in self.typing_users(room_id) if t.user_id != user.id
        )
        self._set_typing(room_id, remaining)

    def sweep_typing(self, now: datetime | None = None) -> int:
        """Drop indicators older than the TTL across all rooms."""
        moment = now or self.clock()
        removed = 0
        typing: dict[str, tuple[TypingIndicator, ...]] = {}
        for room_id, indicators in self._state.typing.items():
            fresh = tuple(
                t for t in indicators if moment - t.timestamp < self.typing_ttl
            )
            removed += len(indicators) - len(fresh)
            typing[room_id] = fresh
        if removed:
            self._set(replace(self._state, typing=typing))
        return removed

    def start(self) -> None:
        """Start the periodic typing sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop())

    async def close(self) -> None:
        """Cancel the typing sweep."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep_typing()

    def _set_typing(
        self, room_id: str, indicators: tuple[TypingIndicator, ...]
    ) -> None:
        self._set(
            replace(self._state, typing={**self._state.typing, room_id: indicators})
        )

    def _commit(self, state: ChatState) -> None:
        self.repository.save(CHAT_KEY, encode_chat(state.rooms, state.messages))
        self._set(state)

    def _set(self, state: ChatState) -> None:
        self._state = state
        self._publish(state)
