"""Module: timeutils."""

from datetime import UTC, datetime


# Columns store naive UTC timestamps; every "now" in the app comes from here.
def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def format_appointment_time(value: datetime) -> str:
    """Render as e.g. ``Oct 20, 2026 at 9:30 AM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b %d, %Y} at {hour}:{value:%M} {meridiem}"
