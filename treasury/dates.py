"""Date parsing and labelling helpers.

All parsed datetimes are timezone-aware UTC. Strings without an offset are
read as UTC so that month buckets do not shift with the server's timezone.
Month names are fixed English labels, independent of the process locale.
"""

from datetime import date, datetime, time, timezone

from treasury.errors import ParseError

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_PARTIAL_FORMATS = ("%Y-%m", "%Y")


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_epoch_millis(value: float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)


def parse_date_strict(value: object) -> datetime:
    """Parse an ISO-8601 string (or date/datetime/epoch millis) to UTC.

    Raises:
        ParseError: If *value* is missing or not a recognisable date.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return from_epoch_millis(value)
        except (OverflowError, OSError, ValueError):
            raise ParseError(value) from None
    if not isinstance(value, str) or not value.strip():
        raise ParseError(value)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    for fmt in _PARTIAL_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    raise ParseError(value)


def parse_date(value: object) -> datetime | None:
    """Lenient variant of :func:`parse_date_strict`; ``None`` on failure."""
    try:
        return parse_date_strict(value)
    except ParseError:
        return None


def month_key(dt: datetime) -> str:
    """Sortable ``YYYY-MM`` key."""
    return f"{dt.year:04d}-{dt.month:02d}"


def short_month_label(dt: datetime) -> str:
    """``"Mar 2024"``"""
    return f"{MONTH_NAMES[dt.month - 1][:3]} {dt.year}"


def long_month_label(dt: datetime) -> str:
    """``"March 2024"``"""
    return f"{MONTH_NAMES[dt.month - 1]} {dt.year}"


def long_date_label(dt: datetime) -> str:
    """``"March 1, 2024"``"""
    return f"{MONTH_NAMES[dt.month - 1]} {dt.day}, {dt.year}"


def short_day_label(dt: datetime) -> str:
    """``"Mar 1"``"""
    return f"{MONTH_NAMES[dt.month - 1][:3]} {dt.day}"


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)
