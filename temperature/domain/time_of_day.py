"""Wall-clock time of day as minutes since local midnight.

Bed and wake times arrive as "HH:MM" strings from the form and as
"HH:MM:SS[.ffffff]" strings from the profile store. Everything downstream
works on the normalized minute-of-day value.
"""

import re
from dataclasses import dataclass

MINUTES_PER_DAY = 1440

_HHMM_RE = re.compile(r"\d{2}:\d{2}", re.ASCII)


class TimeParseError(ValueError):
    """Raised when a time string is not a valid HH:MM wall-clock time."""

    kind = "invalid_format"

    def __init__(self, raw: object):
        self.raw = raw
        super().__init__(f"Must be in HH:MM format, got {raw!r}")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise TimeParseError(self.minutes)

    @classmethod
    def from_minutes(cls, minutes: int) -> "TimeOfDay":
        """Wrap any minute offset (negative or past midnight) onto the clock."""
        return cls(minutes % MINUTES_PER_DAY)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    @property
    def hhmm(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return self.hhmm


def parse_time_of_day(raw: str) -> TimeOfDay:
    """Parse a strict "HH:MM" string. Raises TimeParseError on any other shape."""
    if not isinstance(raw, str) or not _HHMM_RE.fullmatch(raw):
        raise TimeParseError(raw)
    hour, minute = int(raw[:2]), int(raw[3:])
    if hour > 23 or minute > 59:
        raise TimeParseError(raw)
    return TimeOfDay(hour * 60 + minute)
