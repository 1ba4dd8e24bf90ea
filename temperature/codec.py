"""Profile value codec: UI sleep levels <-> stored x10 integers, and wire times.

The codec trusts its input range. Clamping to [-10, 10] happens only in the
step helper used by the increment/decrement controls.
"""

import math

from temperature.domain.models import MAX_SLEEP_LEVEL, MIN_SLEEP_LEVEL
from temperature.domain.time_of_day import TimeOfDay, parse_time_of_day

LEVEL_SCALE = 10
_WIRE_TIME_SUFFIX = ":00.000000"


def decode_level(stored: int) -> int | float:
    """Stored x10 value -> UI level. Non-multiples of 10 pass through as fractions."""
    whole, remainder = divmod(stored, LEVEL_SCALE)
    return whole if remainder == 0 else stored / LEVEL_SCALE


def encode_level(level: int | float) -> int:
    """UI level -> stored x10 value, halves rounded up."""
    return math.floor(level * LEVEL_SCALE + 0.5)


def step_level(value: int | float, delta: int) -> int | float:
    """Apply a +/- adjustment, clamped to the sleep level range."""
    return max(MIN_SLEEP_LEVEL, min(MAX_SLEEP_LEVEL, value + delta))


def format_wire_time(value: TimeOfDay | str) -> str:
    """HH:MM -> "HH:MM:00.000000" as the profile store expects."""
    if isinstance(value, str):
        value = parse_time_of_day(value)
    return f"{value.hhmm}{_WIRE_TIME_SUFFIX}"


def truncate_wire_time(raw: str) -> str:
    """Stored "HH:MM:SS[.ffffff]" -> "HH:MM"."""
    return raw[:5]
