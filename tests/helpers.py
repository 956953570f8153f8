"""Shared helpers for building test timestamps."""

from datetime import datetime, timedelta, timezone

# Monday 2030-01-07, far enough ahead for "upcoming" filters
BASE_DAY = datetime(2030, 1, 7, tzinfo=timezone.utc)


def at(hour: int, minute: int = 0, day_offset: int = 0) -> datetime:
    """Aware UTC timestamp on the test day."""
    return BASE_DAY + timedelta(days=day_offset, hours=hour, minutes=minute)


def iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")
