"""Subscriber registry shared by the client-side stores."""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

S = TypeVar("S")

Listener = Callable[[S], None]

_logger = logging.getLogger(__name__)


class Observable(Generic[S]):
    """Publishes a state snapshot to every subscribed listener."""

    def __init__(self) -> None:
        self._listeners: list[Listener[S]] = []

    def subscribe(self, listener: Listener[S]) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: S) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.exception("State listener %r failed", listener)
