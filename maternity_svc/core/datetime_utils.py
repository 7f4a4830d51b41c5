"""
UTC-first datetime utilities.

- All datetimes are processed in UTC
- Persisted blobs carry ISO 8601 strings with millisecond precision and a 'Z' suffix
- Incoming strings may use any ISO 8601 offset and are normalized to UTC

Usage:
    from maternity_svc.core.datetime_utils import utc_now, parse_datetime, format_iso

    now = utc_now()
    dt = parse_datetime("2024-01-15T10:30:00+05:30")
    format_iso(dt)  # "2024-01-15T05:00:00.000Z"
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Union[str, datetime, date]) -> datetime:
    """
    Parse a datetime value to a UTC datetime.

    Accepts datetime objects, plain dates (taken as midnight UTC) and
    ISO 8601 strings with or without an offset.

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)

        >>> parse_datetime("2024-01-15")
        datetime.datetime(2024, 1, 15, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'") from None


def parse_datetime_safe(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Parse datetime, returning None for missing or unparseable input.
    """
    if value is None or value == "":
        return None
    try:
        return parse_datetime(value)
    except ValueError as e:
        logger.warning(f"Failed to parse datetime '{value}': {e}")
        return None


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 with milliseconds and a 'Z' suffix.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000Z'
    """
    utc_dt = to_utc(dt)
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_dt.microsecond // 1000:03d}Z"


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision so the value survives a format_iso round trip."""
    return dt.replace(microsecond=dt.microsecond // 1000 * 1000)
