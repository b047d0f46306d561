"""Date and time utilities for the voice calendar tools.

Every instant handed to the Calendar service goes through ``format_to_iso``,
which yields UTC with millisecond precision (``2025-07-11T10:00:00.000Z``).
Naive inputs are read as UTC.

Functions used by display code (``calculate_duration``, ``is_event_in_past``,
``is_event_happening``, ``parse_natural_language``, ``format_for_display``)
fail soft and return a default instead of raising.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

import pytz

from .exceptions import InvalidDateFormat, ValidationError

logger = logging.getLogger(__name__)

DateLike = Union[str, datetime, date]

DEFAULT_EVENT_DURATION_MINUTES = 60
DEFAULT_RANGE_DAYS = 7

INVALID_DATE_FORMAT = "Invalid date format. Please use ISO format (YYYY-MM-DDTHH:MM:SS)."
INVALID_DISPLAY_DATE = "Invalid date"

# Display formats, filled by format_for_display
DISPLAY_DATETIME = "{month} {day}, {year} {hour}:{minute} {ampm}"
DISPLAY_DATE = "{month} {day}, {year}"
DISPLAY_TIME = "{hour}:{minute} {ampm}"


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is in UTC.

    Args:
        dt: Datetime to convert

    Returns:
        UTC datetime
    """
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def parse_iso(value: DateLike) -> datetime:
    """
    Parse an ISO-8601 string (or date/datetime) into an aware UTC datetime.

    Raises:
        InvalidDateFormat: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return pytz.utc.localize(datetime(value.year, value.month, value.day))
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateFormat(INVALID_DATE_FORMAT)

    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateFormat(INVALID_DATE_FORMAT) from e
    return ensure_utc(parsed)


def is_valid_iso_date(value: Any) -> bool:
    """Check whether a value parses as an ISO date. Never raises."""
    try:
        parse_iso(value)
    except InvalidDateFormat:
        return False
    return True


def format_to_iso(value: DateLike) -> str:
    """
    Format a date to the canonical ISO string (UTC, milliseconds, ``Z``).

    Raises:
        InvalidDateFormat: If the value cannot be parsed
    """
    dt = parse_iso(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def create_google_datetime(value: DateLike, time_zone: str = "UTC") -> dict[str, str]:
    """Build a Calendar ``{dateTime, timeZone}`` object."""
    return {"dateTime": format_to_iso(value), "timeZone": time_zone}


def create_date_range(
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    now: Optional[datetime] = None,
) -> tuple[str, str]:
    """
    Create a (time_min, time_max) range for event queries.

    Args:
        start: Range start (defaults to the start of today, UTC)
        end: Range end (defaults to the end of the day seven days after start)
        now: Reference instant for the default start

    Returns:
        Tuple of canonical ISO strings

    Raises:
        InvalidDateFormat: If either bound cannot be parsed
        ValidationError: If start is after end
    """
    if start:
        start_dt = parse_iso(start)
    else:
        start_dt = (now or utc_now()).astimezone(pytz.utc).replace(
            hour=0, minute=0, second=0, microsecond=0
        )

    if end:
        end_dt = parse_iso(end)
    else:
        end_dt = (start_dt + timedelta(days=DEFAULT_RANGE_DAYS)).replace(
            hour=23, minute=59, second=59, microsecond=999000
        )

    if start_dt > end_dt:
        raise ValidationError("Start date must be before end date")

    return format_to_iso(start_dt), format_to_iso(end_dt)


def calculate_duration(start: DateLike, end: DateLike) -> int:
    """
    Duration between two instants in whole minutes, rounded to nearest.

    Returns 0 when either value cannot be parsed.
    """
    try:
        delta = parse_iso(end) - parse_iso(start)
    except InvalidDateFormat:
        logger.debug(f"Cannot calculate duration between {start!r} and {end!r}")
        return 0
    return math.floor(delta.total_seconds() / 60 + 0.5)


def add_duration(
    start: DateLike, duration_minutes: int = DEFAULT_EVENT_DURATION_MINUTES
) -> str:
    """
    Add a duration to a start instant.

    Raises:
        InvalidDateFormat: If start cannot be parsed
    """
    return format_to_iso(parse_iso(start) + timedelta(minutes=duration_minutes))


def is_event_in_past(end: DateLike, now: Optional[datetime] = None) -> bool:
    """True when the end instant is strictly before now. False on bad input."""
    try:
        end_dt = parse_iso(end)
    except InvalidDateFormat:
        return False
    return end_dt < ensure_utc(now or utc_now())


def is_event_happening(
    start: DateLike, end: DateLike, now: Optional[datetime] = None
) -> bool:
    """True when now is strictly between start and end. False on bad input."""
    try:
        start_dt = parse_iso(start)
        end_dt = parse_iso(end)
    except InvalidDateFormat:
        return False
    current = ensure_utc(now or utc_now())
    return start_dt < current < end_dt


def parse_natural_language(text: Any, now: Optional[datetime] = None) -> Optional[str]:
    """
    Best-effort conversion of a few relative words to an ISO instant.

    Recognizes "today", "tomorrow" and "yesterday" anywhere in the text
    (case-insensitive), and already-valid ISO strings. Anything else yields
    None.
    """
    if not isinstance(text, str):
        return None

    current = ensure_utc(now or utc_now())
    lowered = text.lower().strip()

    if "today" in lowered:
        return format_to_iso(current)
    if "tomorrow" in lowered:
        return format_to_iso(current + timedelta(days=1))
    if "yesterday" in lowered:
        return format_to_iso(current - timedelta(days=1))
    if is_valid_iso_date(text):
        return format_to_iso(text)
    return None


def _is_date_only(value: DateLike) -> bool:
    if isinstance(value, str):
        return len(value.strip()) == 10
    return isinstance(value, date) and not isinstance(value, datetime)


def format_for_display(
    value: Optional[DateLike],
    fmt: str = DISPLAY_DATETIME,
    tz: str = "UTC",
) -> str:
    """
    Format a date for display, e.g. ``Jul 11, 2025 10:00 AM``.

    All-day dates are not shifted into ``tz``. Returns "Invalid date" when
    the value cannot be parsed or the zone is unknown.
    """
    try:
        dt = parse_iso(value)
        if not _is_date_only(value):
            dt = dt.astimezone(pytz.timezone(tz))
    except (InvalidDateFormat, pytz.UnknownTimeZoneError):
        return INVALID_DISPLAY_DATE

    return fmt.format(
        month=dt.strftime("%b"),
        day=dt.day,
        year=dt.year,
        hour=dt.hour % 12 or 12,
        minute=f"{dt.minute:02d}",
        ampm="AM" if dt.hour < 12 else "PM",
    )


def extract_datetime_components(value: DateLike, tz: str = "UTC") -> dict[str, Any]:
    """
    Split an instant into date and time parts in the given zone.

    Raises:
        InvalidDateFormat: If the value cannot be parsed
    """
    dt = parse_iso(value)
    local = dt.astimezone(pytz.timezone(tz))
    return {
        "date": local.strftime("%Y-%m-%d"),
        "time": local.strftime("%H:%M"),
        "year": local.year,
        "month": local.month,
        "day": local.day,
        "hour": local.hour,
        "minute": local.minute,
        "day_of_week": (local.weekday() + 1) % 7,  # 0 = Sunday
        "timestamp": int(dt.timestamp() * 1000),
    }


def get_timezone_from_offset(offset_minutes: int) -> str:
    """
    Convert a browser-style offset (minutes behind UTC) to ``+HH:MM``.

    Example: -120 (two hours ahead of UTC) -> "+02:00".
    """
    hours, minutes = divmod(abs(offset_minutes), 60)
    sign = "+" if offset_minutes <= 0 else "-"
    return f"{sign}{hours:02d}:{minutes:02d}"
