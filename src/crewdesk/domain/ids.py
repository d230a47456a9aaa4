"""Time-based identifier generation."""

import time
from collections.abc import Callable


class TimeBasedIdGenerator:
    """Millisecond-timestamp ids that never repeat within one process."""

    def __init__(self, clock_ms: Callable[[], int] | None = None) -> None:
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last = 0

    def __call__(self) -> str:
        candidate = self._clock_ms()
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)
