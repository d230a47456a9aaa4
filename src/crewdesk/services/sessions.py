"""Session store holding the authenticated crew identity."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from crewdesk.domain.errors import CrewdeskError, ValidationError
from crewdesk.domain.serialization import decode_user, encode_user
from crewdesk.domain.users import (
    LoginCredentials,
    SignupData,
    UserProfile,
    validate_signup,
)
from crewdesk.services.observable import Observable
from crewdesk.services.state import SESSION_KEY, StateRepository

_logger = logging.getLogger(__name__)


class IdentityGateway(Protocol):
    """Remote identity API the session store delegates to."""

    async def login(self, credentials: LoginCredentials) -> UserProfile:
        """Validate credentials and return the identity."""

    async def signup(self, data: SignupData) -> UserProfile:
        """Create an account and return the identity."""


@dataclass(frozen=True)
class SessionState:
    """Snapshot published to session subscribers."""

    user: UserProfile | None = None
    is_authenticated: bool = False
    is_loading: bool = False
    login_error: str | None = None
    signup_error: str | None = None


class SessionStore(Observable[SessionState]):
    """Login, signup, logout and quick login with durable persistence.

    Each remote call takes a generation number. Logout, quick login or a newer
    call bumps it, and a result arriving for an older generation is dropped
    instead of overwriting the newer state.
    """

    def __init__(self, gateway: IdentityGateway, repository: StateRepository) -> None:
        super().__init__()
        self.gateway = gateway
        self.repository = repository
        self._state = SessionState(is_loading=True)
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_user(self) -> UserProfile | None:
        return self._state.user

    def restore(self) -> UserProfile | None:
        """Load the persisted identity, if any."""
        stored = self.repository.load(SESSION_KEY)
        user = None
        if isinstance(stored, dict):
            try:
                user = decode_user(stored)
            except ValidationError:
                _logger.exception("Discarding unreadable session record")
        self._set(SessionState(user=user, is_authenticated=user is not None))
        return user

    async def login(self, email: str, password: str) -> UserProfile:
        """Authenticate against the identity service."""
        generation = self._begin()
        try:
            user = await self.gateway.login(LoginCredentials(email, password))
        except CrewdeskError as exc:
            _logger.warning("Login failed for %s: %s", email, exc)
            if generation == self._generation:
                self._set(
                    replace(self._state, is_loading=False, login_error=exc.message)
                )
            raise
        self._finish(generation, user, action="login")
        return user

    async def signup(self, data: SignupData) -> UserProfile:
        """Create an account and sign in as it."""
        validate_signup(data)
        generation = self._begin()
        try:
            user = await self.gateway.signup(data)
        except CrewdeskError as exc:
            _logger.warning("Signup failed for %s: %s", data.email, exc)
            if generation == self._generation:
                self._set(
                    replace(self._state, is_loading=False, signup_error=exc.message)
                )
            raise
        self._finish(generation, user, action="signup")
        return user

    def logout(self) -> None:
        """Forget the persisted identity."""
        self._generation += 1
        self.repository.delete(SESSION_KEY)
        self._set(SessionState())

    def quick_login(self, user: UserProfile) -> None:
        """Sign in as a known identity without remote validation."""
        self._generation += 1
        self._authenticate(user)

    def _begin(self) -> int:
        self._generation += 1
        self._set(
            replace(self._state, is_loading=True, login_error=None, signup_error=None)
        )
        return self._generation

    def _finish(self, generation: int, user: UserProfile, *, action: str) -> None:
        if generation != self._generation:
            _logger.info("Dropping stale %s result for %s", action, user.email)
            return
        self._authenticate(user)

    def _authenticate(self, user: UserProfile) -> None:
        self.repository.save(SESSION_KEY, encode_user(user))
        self._set(SessionState(user=user, is_authenticated=True))

    def _set(self, state: SessionState) -> None:
        self._state = state
        self._publish(state)
