"""Mapping between flat tool parameters and Google Calendar event resources."""

import copy
import logging
from typing import Any

from ..models.event import DEFAULT_REMINDERS, DisplayEvent, EventStatus
from ..utils.date_utils import create_google_datetime, parse_iso
from ..utils.exceptions import ValidationError
from .validator import is_valid_email, validate_event_data

logger = logging.getLogger(__name__)


def parse_attendees(attendees: Any) -> list[dict[str, str]]:
    """
    Parse a comma-separated attendee string into ``{"email": ...}`` objects.

    Entries failing the email check are dropped silently; order is kept.
    Non-string input yields an empty list.
    """
    if not attendees or not isinstance(attendees, str):
        return []

    parsed = []
    for entry in attendees.split(","):
        email = entry.strip()
        if is_valid_email(email):
            parsed.append({"email": email})
        elif email:
            logger.debug(f"Dropping malformed attendee: {email!r}")
    return parsed


def convert_to_google_event(params: dict[str, Any], time_zone: str = "UTC") -> dict[str, Any]:
    """
    Convert create_event parameters to a Google Calendar event resource.

    Args:
        params: Flat parameters (summary, start_datetime, end_datetime, ...)
        time_zone: Zone recorded alongside start and end

    Returns:
        Event resource ready for events.insert

    Raises:
        ValidationError: If the parameters fail validation
    """
    validation = validate_event_data(params)
    if not validation.is_valid:
        raise ValidationError(
            f"Validation failed: {', '.join(validation.errors)}", validation.errors
        )

    event: dict[str, Any] = {
        "summary": params["summary"],
        "start": create_google_datetime(params["start_datetime"], time_zone),
        "end": create_google_datetime(params["end_datetime"], time_zone),
        "status": EventStatus.CONFIRMED.value,
    }

    if params.get("description"):
        event["description"] = params["description"]
    if params.get("location"):
        event["location"] = params["location"]
    if params.get("attendees"):
        event["attendees"] = parse_attendees(params["attendees"])

    event["reminders"] = DEFAULT_REMINDERS.to_google()
    return event


def _event_bound(resource: dict[str, Any], key: str) -> Any:
    bound = resource.get(key) or {}
    return bound.get("dateTime") or bound.get("date")


def apply_event_update(
    existing: dict[str, Any], changes: dict[str, Any], time_zone: str = "UTC"
) -> dict[str, Any]:
    """
    Merge manage_event update fields into an existing event resource.

    Only the fields present in ``changes`` are touched; the rest of the
    resource is carried over as-is.

    Raises:
        ValidationError: If the merged event would end at or before its start
    """
    updated = copy.deepcopy(existing)

    for key in ("summary", "description", "location"):
        if changes.get(key):
            updated[key] = changes[key]

    if changes.get("start_datetime"):
        updated["start"] = create_google_datetime(changes["start_datetime"], time_zone)
    if changes.get("end_datetime"):
        updated["end"] = create_google_datetime(changes["end_datetime"], time_zone)
    if changes.get("attendees"):
        updated["attendees"] = parse_attendees(changes["attendees"])

    start = _event_bound(updated, "start")
    end = _event_bound(updated, "end")
    if start and end and parse_iso(end) <= parse_iso(start):
        raise ValidationError("End time must be after start time")

    return updated


def format_event_for_display(resource: dict[str, Any]) -> DisplayEvent:
    """Flatten an event resource for display and tool responses."""
    start = resource.get("start") or {}
    end = resource.get("end") or {}
    status = resource.get("status")

    return DisplayEvent(
        id=resource.get("id") or "unknown",
        title=resource.get("summary") or "Untitled Event",
        start=start.get("dateTime") or start.get("date"),
        end=end.get("dateTime") or end.get("date"),
        description=resource.get("description") or "",
        location=resource.get("location") or "",
        attendees=[a["email"] for a in resource.get("attendees", []) if a.get("email")],
        status=status if status in EventStatus._value2member_map_ else EventStatus.CONFIRMED,
        created=resource.get("created"),
        updated=resource.get("updated"),
        html_link=resource.get("htmlLink"),
        hangout_link=resource.get("hangoutLink"),
        is_all_day=not start.get("dateTime"),
        creator=(resource.get("creator") or {}).get("email", ""),
        organizer=(resource.get("organizer") or {}).get("email", ""),
    )
