"""Timezone-aware time utilities.

Centralizes the notion of "today" used in the extraction prompt and the
lenient date parsing used when sorting events.
"""
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil import parser as dateparser

DEFAULT_TIMEZONE = "America/New_York"


def get_current_time(timezone: str = DEFAULT_TIMEZONE) -> datetime:
    """Return the current time in the given IANA timezone (DST-aware)."""
    return datetime.now(ZoneInfo(timezone))


def parse_event_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a free-form event date, or return None if it can't be parsed.

    Dates like "TBA" or "Every Friday" come back as None. Aware results are
    reduced to their wall-clock time so they compare with naive ones.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = dateparser.parse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    return parsed
