"""
Datetime parsing utilities for invoicedesk.

Transaction dates travel as ISO 8601 strings in the store and in patches, and
are edited as calendar days in the TUI.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Union

DATE_ONLY_FORMAT = "%Y-%m-%d"  # Date only: "2024-01-15"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M"  # Human-readable: "2024-01-15 10:30"


def parse_datetime(value: Union[str, datetime, None],
                   default: Optional[datetime] = None,
                   assume_utc: bool = False) -> Optional[datetime]:
    """
    Parse a datetime value from an ISO 8601 string or datetime.

    Handles:
    - ISO 8601 strings (with or without timezone)
    - ISO strings with 'Z' suffix for UTC
    - Date-only strings ("2024-01-15")
    - Already-parsed datetime objects
    - None values

    Args:
        value: The value to parse (string, datetime, or None)
        default: Default value to return if parsing fails (default: None)
        assume_utc: If True, treat naive datetimes as UTC

    Returns:
        Parsed datetime object, or default if value is None/unparseable

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
    """
    if value is None:
        return default

    if isinstance(value, datetime):
        if assume_utc and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    if not isinstance(value, str):
        return default

    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError:
        return default

    if assume_utc and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso(dt: datetime) -> str:
    """Serialize a datetime for the store, using a 'Z' suffix for UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    text = dt.astimezone(timezone.utc).isoformat()
    return text.replace("+00:00", "Z")


def same_calendar_day(a: Any, b: Any) -> bool:
    """True when both values are datetimes falling on the same UTC calendar day.

    Time of day is ignored. Anything that is not a datetime never compares equal.
    """
    if not isinstance(a, datetime) or not isinstance(b, datetime):
        return False
    a_utc = parse_datetime(a, assume_utc=True).astimezone(timezone.utc)
    b_utc = parse_datetime(b, assume_utc=True).astimezone(timezone.utc)
    return a_utc.date() == b_utc.date()


def format_datetime(dt: Union[str, datetime, None],
                    format_str: str = DISPLAY_FORMAT) -> str:
    """
    Format a datetime value for display.

    Returns:
        Formatted string, or "N/A" if value is None/unparseable
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        dt = parse_datetime(dt)
        if dt is None:
            return "N/A"

    return dt.strftime(format_str)
