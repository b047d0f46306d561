"""Tool definitions published to the voice agent."""

from typing import Any

from ..models.tool import ToolName

_ISO_HINT = "ISO 8601 date/time, e.g. 2025-07-11T10:00:00Z"

TOOL_DEFINITIONS: dict[ToolName, dict[str, Any]] = {
    ToolName.CREATE_EVENT: {
        "description": "Create a new event in the user's Google Calendar.",
        "parameters": {
            "type": "object",
            "properties": {
                "summary": {"type": "string", "description": "Event title"},
                "start_datetime": {"type": "string", "description": f"Start, {_ISO_HINT}"},
                "end_datetime": {"type": "string", "description": f"End, {_ISO_HINT}"},
                "description": {"type": "string", "description": "Event details"},
                "location": {"type": "string", "description": "Where the event takes place"},
                "attendees": {
                    "type": "string",
                    "description": "Comma-separated attendee email addresses",
                },
            },
            "required": ["summary", "start_datetime", "end_datetime"],
        },
    },
    ToolName.LIST_EVENTS: {
        "description": "List events from the user's Google Calendar.",
        "parameters": {
            "type": "object",
            "properties": {
                "start_date": {"type": "string", "description": f"Range start, {_ISO_HINT}"},
                "end_date": {"type": "string", "description": f"Range end, {_ISO_HINT}"},
                "max_results": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Maximum number of events to return",
                },
                "calendar_id": {
                    "type": "string",
                    "description": "Calendar to read (defaults to primary)",
                },
            },
            "required": [],
        },
    },
    ToolName.MANAGE_EVENT: {
        "description": "Update or delete an existing event by id.",
        "parameters": {
            "type": "object",
            "properties": {
                "event_id": {"type": "string", "description": "Id of the event"},
                "action": {"type": "string", "enum": ["update", "delete"]},
                "summary": {"type": "string", "description": "New title"},
                "start_datetime": {"type": "string", "description": f"New start, {_ISO_HINT}"},
                "end_datetime": {"type": "string", "description": f"New end, {_ISO_HINT}"},
                "description": {"type": "string", "description": "New description"},
                "location": {"type": "string", "description": "New location"},
            },
            "required": ["event_id", "action"],
        },
    },
}


def agent_tool_definitions(prefixed: bool = True) -> list[dict[str, Any]]:
    """Tool definitions in the shape agent platforms register client tools."""
    return [
        {
            "name": tool.agent_name if prefixed else tool.value,
            "description": definition["description"],
            "parameters": definition["parameters"],
        }
        for tool, definition in TOOL_DEFINITIONS.items()
    ]
