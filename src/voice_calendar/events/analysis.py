"""Conflict detection, list summaries and quick-event parsing."""

import re
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence, Union

import pytz

from ..models.event import DisplayEvent, EventStatus
from ..utils.date_utils import (
    DEFAULT_EVENT_DURATION_MINUTES,
    ensure_utc,
    format_for_display,
    format_to_iso,
    is_event_happening,
    is_event_in_past,
    parse_iso,
    utc_now,
)
from ..utils.exceptions import InvalidDateFormat

EventLike = Union[dict[str, Any], DisplayEvent]

NO_EVENTS_SUMMARY = "No events found for the specified period."

TIME_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", re.IGNORECASE)
QUICK_EVENT_STOP_WORDS = {"at", "on", "today", "tomorrow"}


def _bound(event: EventLike, key: str) -> Any:
    if isinstance(event, DisplayEvent):
        return getattr(event, key)
    value = event.get(key)
    if isinstance(value, dict):
        return value.get("dateTime") or value.get("date")
    return value


def event_interval(event: EventLike) -> Optional[tuple[datetime, datetime]]:
    """Start and end of a stored event, or None if either is unparseable."""
    try:
        return parse_iso(_bound(event, "start")), parse_iso(_bound(event, "end"))
    except InvalidDateFormat:
        return None


def find_event_conflicts(events: Sequence[EventLike], candidate: dict[str, Any]) -> list[EventLike]:
    """
    Return the events overlapping a candidate interval.

    Overlap is strict and half-open: an event ending exactly when the
    candidate starts does not conflict. Events with unparseable times are
    skipped. The candidate uses ``start_datetime``/``end_datetime`` keys.
    """
    try:
        new_start = parse_iso(candidate.get("start_datetime"))
        new_end = parse_iso(candidate.get("end_datetime"))
    except InvalidDateFormat:
        return []

    conflicts = []
    for event in events:
        interval = event_interval(event)
        if interval is None:
            continue
        start, end = interval
        if new_start < end and new_end > start:
            conflicts.append(event)
    return conflicts


def event_time_status(event: EventLike, now: Optional[datetime] = None) -> str:
    """
    Label an event as "happening", "past" or "upcoming".

    Uses ``is_event_happening`` then ``is_event_in_past``; both are strict,
    so an event exactly at its start or end instant is "upcoming".
    """
    start, end = _bound(event, "start"), _bound(event, "end")
    if is_event_happening(start, end, now):
        return "happening"
    if is_event_in_past(end, now):
        return "past"
    return "upcoming"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def describe_events(
    events: Sequence[DisplayEvent],
    now: Optional[datetime] = None,
    tz: str = "UTC",
) -> str:
    """
    Short natural-language summary of a list_events result.

    Counts ongoing, upcoming and past events relative to ``now`` and names
    the soonest upcoming one.
    """
    if not events:
        return NO_EVENTS_SUMMARY

    current = ensure_utc(now or utc_now())
    ongoing, upcoming, past = [], [], []
    for event in events:
        interval = event_interval(event)
        if interval is None:
            continue
        status = event_time_status(event, current)
        if status == "happening":
            ongoing.append(event)
        elif status == "past":
            past.append(event)
        else:
            upcoming.append((interval[0], event))

    parts = []
    if ongoing:
        parts.append(f"Currently in {_plural(len(ongoing), 'event')}.")
    if upcoming:
        parts.append(f"{_plural(len(upcoming), 'upcoming event')}.")
    if past:
        parts.append(f"{_plural(len(past), 'past event')}.")
    if upcoming:
        _, soonest = min(upcoming, key=lambda item: item[0])
        parts.append(f'Next: "{soonest.title}" at {format_for_display(soonest.start, tz=tz)}.')

    return " ".join(parts)


def generate_events_summary(
    events: Sequence[DisplayEvent], now: Optional[datetime] = None
) -> dict[str, int]:
    """Status, feature and time counts over a list of events."""
    current = ensure_utc(now or utc_now())
    summary = {
        "total_events": len(events),
        "confirmed_events": 0,
        "tentative_events": 0,
        "cancelled_events": 0,
        "all_day_events": 0,
        "events_with_attendees": 0,
        "events_with_location": 0,
        "upcoming_events": 0,
        "past_events": 0,
    }

    for event in events:
        if event.status in {s.value for s in EventStatus}:
            summary[f"{event.status}_events"] += 1
        if event.is_all_day:
            summary["all_day_events"] += 1
        if event.attendees:
            summary["events_with_attendees"] += 1
        if event.location:
            summary["events_with_location"] += 1

        interval = event_interval(event)
        if interval is not None:
            if interval[1] > current:
                summary["upcoming_events"] += 1
            else:
                summary["past_events"] += 1

    return summary


def create_quick_event(
    text: str,
    now: Optional[datetime] = None,
    tz: str = "UTC",
    duration_minutes: int = DEFAULT_EVENT_DURATION_MINUTES,
) -> Optional[dict[str, str]]:
    """
    Build create_event parameters from a phrase like "Lunch tomorrow at 1pm".

    Only a clock time and the words "today"/"tomorrow" are understood.
    Returns None when no usable time is found.
    """
    if not isinstance(text, str):
        return None
    match = TIME_PATTERN.search(text)
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    ampm = (match.group(3) or "").lower()
    if ampm == "pm" and hour != 12:
        hour += 12
    elif ampm == "am" and hour == 12:
        hour = 0
    if hour > 23 or minute > 59:
        return None

    zone = pytz.timezone(tz)
    local_now = ensure_utc(now or utc_now()).astimezone(zone)
    day = local_now.date()
    if "tomorrow" in text.lower():
        day += timedelta(days=1)

    start = zone.localize(datetime(day.year, day.month, day.day, hour, minute))
    end = start + timedelta(minutes=duration_minutes)

    remainder = text[: match.start()] + " " + text[match.end():]
    words = [w for w in remainder.split() if w.lower() not in QUICK_EVENT_STOP_WORDS]

    return {
        "summary": " ".join(words).strip() or "Quick Event",
        "start_datetime": format_to_iso(start),
        "end_datetime": format_to_iso(end),
    }
