"""Date helpers for documents exchanged with the authority."""

from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 string (or pass through a datetime).

    Returns None for empty or unparseable input. A bare ``date`` becomes
    midnight of that day.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return date_parser.isoparse(str(value).strip())
    except (ValueError, OverflowError):
        try:
            return date_parser.parse(str(value).strip())
        except (ValueError, OverflowError):
            return None


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date, dropping any time component."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    return parsed.date() if parsed is not None else None


def to_iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def as_utc(value: datetime) -> datetime:
    """Aware UTC copy of ``value``; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sort_key(value: Optional[datetime]) -> float:
    """Timestamp usable as a sort key; missing dates sort first.

    Naive datetimes are read as UTC, like in slot comparisons.
    """
    if value is None:
        return float("-inf")
    return as_utc(value).timestamp()
