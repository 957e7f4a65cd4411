"""Display formatting for timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from richdoc.config import RICHDOC_DATE_FORMAT, RICHDOC_TIMEZONE


def format_date(
    instant: datetime,
    *,
    pattern: str = RICHDOC_DATE_FORMAT,
    tz_name: str = RICHDOC_TIMEZONE,
) -> str:
    """Format an instant in the display timezone.

    Naive datetimes are treated as UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(tz_name)).strftime(pattern)
