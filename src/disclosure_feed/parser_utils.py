"""Date parsing helpers shared by the extractors and the feed consumer."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Two defaults that disagree on every field; a parse that depends on them
# found no year in the text.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2004, 2, 2)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        # Numeric timestamps are epoch milliseconds
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            dt = date_parser.parse(text, default=_DEFAULT_A)
            other_year = date_parser.parse(text, default=_DEFAULT_B).year
        except (ValueError, OverflowError):
            return None
        if dt.year != other_year:
            return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt


def normalize_date(value: Any) -> Optional[str]:
    """Normalize a date-like value to ``YYYY-MM-DD``.

    Strings go through dateutil, numbers are read as epoch milliseconds.
    Text without a year (a bare time, "Mar 1") yields ``None``; a missing
    month or day defaults to 1, so "2024" is 2024-01-01.
    Aware timestamps are converted to UTC before the date is taken; naive ones
    keep their calendar date. Anything unparseable yields ``None``.
    """
    dt = _parse_datetime(value)
    if dt is None:
        return None
    return dt.date().isoformat()


def parse_display_date(value: Any) -> datetime:
    """Parse a date permissively for display, falling back to the epoch."""
    dt = _parse_datetime(value)
    if dt is None:
        return EPOCH
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def ensure_text(value: Any) -> str:
    """Coerce a value to stripped text; ``None`` becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip()
