"""Plain-text rendering of events, tool responses and history."""

from typing import Any, Iterable, Optional

import pytz

from ..events.analysis import event_time_status
from ..models.event import DisplayEvent
from ..models.tool import ToolCallRecord, ToolResponse
from ..utils.date_utils import (
    DISPLAY_DATE,
    DISPLAY_DATETIME,
    DISPLAY_TIME,
    calculate_duration,
    format_for_display,
    parse_iso,
)
from ..utils.exceptions import InvalidDateFormat
from .state import Notification

EMPTY_EVENTS = "No events found for this time period."


def format_event_time(event: DisplayEvent, tz: str = "UTC") -> str:
    """
    Time span of an event, e.g. ``Jul 11, 2025 • 10:00 AM - 10:30 AM``.

    Multi-day spans print the full date on both ends.
    """
    if event.is_all_day:
        return f"{format_for_display(event.start, DISPLAY_DATE, tz)} (all day)"

    try:
        zone = pytz.timezone(tz)
        same_day = (
            parse_iso(event.start).astimezone(zone).date()
            == parse_iso(event.end).astimezone(zone).date()
        )
    except (InvalidDateFormat, pytz.UnknownTimeZoneError):
        same_day = False

    if same_day:
        return (
            f"{format_for_display(event.start, DISPLAY_DATE, tz)} • "
            f"{format_for_display(event.start, DISPLAY_TIME, tz)} - "
            f"{format_for_display(event.end, DISPLAY_TIME, tz)}"
        )
    return (
        f"{format_for_display(event.start, DISPLAY_DATETIME, tz)} - "
        f"{format_for_display(event.end, DISPLAY_DATETIME, tz)}"
    )


def render_event(event: DisplayEvent, tz: str = "UTC", status: Optional[str] = None) -> str:
    lines = [f"{event.title}  [{status or event_time_status(event)}]"]
    span = format_event_time(event, tz)
    if not event.is_all_day:
        span += f" ({calculate_duration(event.start, event.end)} min)"
    lines.append(f"  {span}")
    if event.location:
        lines.append(f"  Location: {event.location}")
    if event.attendees:
        lines.append(f"  Attendees: {', '.join(event.attendees)}")
    if event.description:
        lines.append(f"  {event.description}")
    lines.append(f"  id: {event.id}")
    return "\n".join(lines)


def render_events(events: Iterable[DisplayEvent], tz: str = "UTC") -> str:
    rendered = [render_event(e, tz) for e in events]
    return "\n\n".join(rendered) if rendered else EMPTY_EVENTS


def render_response(response: ToolResponse) -> str:
    prefix = "[OK]" if response.success else "[ERROR]"
    return f"{prefix} {response.message}"


def render_history(records: Iterable[ToolCallRecord]) -> str:
    lines = []
    for record in records:
        mark = "ok" if record.success else "failed"
        mock = " (mock)" if record.is_mock else ""
        lines.append(
            f"#{record.id} {record.timestamp} {record.tool_name}{mock}: {mark}. "
            f"{record.response.message}"
        )
    return "\n".join(lines) if lines else "No tool calls yet."


def render_stats(stats: dict[str, Any]) -> str:
    counts = ", ".join(f"{name}={n}" for name, n in sorted(stats["tool_counts"].items()))
    return (
        f"{stats['total']} calls, {stats['successful']} ok, {stats['failed']} failed "
        f"({stats['success_rate']}% success)" + (f". {counts}" if counts else "")
    )


def render_notifications(notifications: Iterable[Notification]) -> str:
    return "\n".join(f"[{n.level.upper()}] {n.message}" for n in notifications)
