"""Time-of-day value type used by timelines and shot lists."""

import re
from dataclasses import dataclass
from typing import Self

from crewdesk.domain.errors import ValidationError

_TIME_PATTERN = re.compile(
    r"^\s*(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<meridiem>[AaPp][Mm])?\s*$"
)


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall-clock time without a date, validated at creation time."""

    hour: int
    minute: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValidationError(f"Hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValidationError(f"Minute out of range: {self.minute}")

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse ``HH:MM`` or ``H:MM AM/PM``."""
        match = _TIME_PATTERN.match(value)
        if match is None:
            raise ValidationError(f"Invalid time of day: {value!r}")
        hour = int(match["hour"])
        minute = int(match["minute"])
        meridiem = match["meridiem"]
        if meridiem:
            if not 1 <= hour <= 12:
                raise ValidationError(f"Invalid 12-hour time: {value!r}")
            hour = hour % 12
            if meridiem.lower() == "pm":
                hour += 12
        return cls(hour=hour, minute=minute)

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"
