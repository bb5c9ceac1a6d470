"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timedelta, timezone

TIMESTAMP_RESOLUTION = timedelta(microseconds=1)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC, matching how the note store persists them.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def later_than(previous: datetime | None) -> datetime:
    """
    Return the current UTC time, nudged past `previous` if the clock has not moved.

    Two mutations inside the same clock tick would otherwise share an
    updated_at value.
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_RESOLUTION
    return now
