"""Weekday and time-of-day parsing shared by the slot catalog and the ledger."""

from __future__ import annotations

from datetime import datetime, time
from enum import Enum

from app.core.errors import ValidationError


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def order(self) -> int:
        return WEEKDAYS.index(self)


WEEKDAYS = list(Weekday)

DEFAULT_SLOT_TIMES = (time(19, 0), time(21, 0))

_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_weekday(value: str | Weekday) -> Weekday:
    """Accept "Monday", "monday", "MON" or "mon"."""
    if isinstance(value, Weekday):
        return value
    cleaned = (value or "").strip().lower()
    for day in WEEKDAYS:
        if cleaned in (day.value.lower(), day.value[:3].lower()):
            return day
    raise ValidationError(f"Unknown weekday: {value!r}")


def parse_time(value: str | time) -> time:
    """Accept "HH:MM" or "HH:MM:SS"; slots start on the minute, so seconds must be 00."""
    if isinstance(value, time):
        parsed = value
    else:
        cleaned = (value or "").strip()
        for fmt in _TIME_FORMATS:
            try:
                parsed = datetime.strptime(cleaned, fmt).time()
                break
            except ValueError:
                continue
        else:
            raise ValidationError(f"Invalid time of day: {value!r} (expected HH:MM)")
    if parsed.second or parsed.microsecond:
        raise ValidationError(f"Invalid time of day: {value!r} (seconds must be 00)")
    return parsed


def format_time(value: time) -> str:
    return value.strftime("%H:%M")
