"""Validation of event and tool-call parameters.

Validators never raise. Each rule that fails adds its own message to the
result; rules do not short-circuit each other.
"""

import re
from typing import Any

from ..models.tool import EventAction, ToolName, ValidationResult
from ..utils.date_utils import is_valid_iso_date, parse_iso

MISSING_REQUIRED_FIELD = "Missing required field: "

# Intentionally permissive: local part, an @, and a dotted domain
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

UPDATE_FIELDS = ("summary", "start_datetime", "end_datetime", "description", "location")


def is_valid_email(email: Any) -> bool:
    """Pragmatic email check, not RFC 5322 complete."""
    return isinstance(email, str) and EMAIL_PATTERN.match(email) is not None


def _check_interval(start: Any, end: Any, errors: list[str]) -> None:
    if is_valid_iso_date(start) and is_valid_iso_date(end):
        if parse_iso(end) <= parse_iso(start):
            errors.append("End time must be after start time")


def validate_event_data(params: Any) -> ValidationResult:
    """
    Validate parameters for a new event.

    Args:
        params: Flat parameter mapping from a tool call or form

    Returns:
        ValidationResult with every failing rule's message
    """
    if not isinstance(params, dict):
        return ValidationResult.from_errors(["Event data must be an object"])

    errors: list[str] = []

    summary = params.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        errors.append(f"{MISSING_REQUIRED_FIELD}summary")

    start = params.get("start_datetime")
    end = params.get("end_datetime")
    if not start or not is_valid_iso_date(start):
        errors.append(f"{MISSING_REQUIRED_FIELD}start_datetime (valid ISO format)")
    if not end or not is_valid_iso_date(end):
        errors.append(f"{MISSING_REQUIRED_FIELD}end_datetime (valid ISO format)")

    _check_interval(start, end, errors)

    attendees = params.get("attendees")
    if attendees is not None and not isinstance(attendees, str):
        errors.append("Attendees must be a comma-separated string of email addresses")

    return ValidationResult.from_errors(errors)


def _validate_list_events(params: dict[str, Any], errors: list[str]) -> None:
    # All parameters are optional; empty strings mean "use the default"
    for key in ("start_date", "end_date"):
        value = params.get(key)
        if value and not is_valid_iso_date(value):
            errors.append(f"Invalid {key} format")

    max_results = params.get("max_results")
    if max_results is not None:
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
            errors.append("max_results must be a positive integer")


def _validate_manage_event(params: dict[str, Any], errors: list[str]) -> None:
    if not params.get("event_id"):
        errors.append(f"{MISSING_REQUIRED_FIELD}event_id")

    action = params.get("action")
    if action not in (EventAction.UPDATE.value, EventAction.DELETE.value):
        errors.append(f"{MISSING_REQUIRED_FIELD}action (update or delete)")
        return

    if action == EventAction.UPDATE.value:
        if not any(params.get(field) for field in UPDATE_FIELDS):
            errors.append("At least one field must be provided for update")

        for key in ("start_datetime", "end_datetime"):
            value = params.get(key)
            if value and not is_valid_iso_date(value):
                errors.append(f"Invalid {key} format")

        _check_interval(params.get("start_datetime"), params.get("end_datetime"), errors)


def validate_tool_call(tool_name: Any, params: Any) -> ValidationResult:
    """
    Validate a tool call against the rules of the named tool.

    Unknown tool names are reported as a validation error.
    """
    tool = ToolName.resolve(tool_name)
    if tool is None:
        return ValidationResult.from_errors([f"Unknown tool: {tool_name}"])
    if not isinstance(params, dict):
        return ValidationResult.from_errors(["Tool parameters must be an object"])

    if tool is ToolName.CREATE_EVENT:
        return validate_event_data(params)

    errors: list[str] = []
    if tool is ToolName.LIST_EVENTS:
        _validate_list_events(params, errors)
    else:
        _validate_manage_event(params, errors)
    return ValidationResult.from_errors(errors)
