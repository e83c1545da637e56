"""Calendar-day bucketing for completions and active task rotations.

Timestamps are stored as strings in server-local time. The day-key is the
first 10 characters of such a string (YYYY-MM-DD), so comparing two days is
a plain string comparison.
"""

from datetime import datetime

DAY_KEY_LENGTH = 10


def format_timestamp(moment: datetime) -> str:
    """Render a full timestamp string, e.g. ``2024-03-01 09:15:02.123``."""
    return moment.isoformat(sep=" ", timespec="milliseconds")


def day_key(timestamp: str) -> str:
    return timestamp[:DAY_KEY_LENGTH]


def day_key_of(moment: datetime) -> str:
    return day_key(format_timestamp(moment))
