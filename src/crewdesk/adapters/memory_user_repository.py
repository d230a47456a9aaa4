"""In-memory user repository."""

from dataclasses import dataclass

from crewdesk.domain.users import StoredUser
from crewdesk.services.users import UserRepository


@dataclass
class InMemoryUserRepository(UserRepository):
    """Dictionary-backed repository for local runs without Supabase."""

    _users: dict[str, StoredUser]

    def __init__(self) -> None:
        self._users = {}

    def get_by_email(self, email: str) -> StoredUser | None:
        target = email.lower()
        return next(
            (u for u in self._users.values() if u.profile.email.lower() == target),
            None,
        )

    def get_by_id(self, user_id: str) -> StoredUser | None:
        return self._users.get(user_id)

    def create_user(self, user: StoredUser) -> StoredUser:
        self._users[user.profile.id] = user
        return user

    def update_user(self, user: StoredUser) -> StoredUser:
        self._users[user.profile.id] = user
        return user

    def list_users(self) -> list[StoredUser]:
        return list(self._users.values())

    def clear(self) -> None:
        self._users.clear()
