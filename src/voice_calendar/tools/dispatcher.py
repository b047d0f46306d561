"""Routes voice-agent tool calls to calendar operations."""

import logging
from datetime import datetime
from typing import Any, Callable, Union

from ..events.analysis import describe_events
from ..events.transformer import (
    apply_event_update,
    convert_to_google_event,
    format_event_for_display,
)
from ..events.validator import validate_tool_call
from ..models.tool import EventAction, ToolCall, ToolName, ToolResponse
from ..readers.base import CalendarReader
from ..utils.date_utils import format_for_display, utc_now
from ..writers.base import CalendarWriter

logger = logging.getLogger(__name__)


class ToolCallDispatcher:
    """
    Validate a tool call, run the matching calendar operation and wrap the
    outcome in a ToolResponse.

    ``dispatch`` never raises: validation failures, calendar errors and
    unexpected exceptions all come back as ``success=False`` responses.
    """

    def __init__(
        self,
        reader: CalendarReader,
        writer: CalendarWriter,
        calendar_id: str = "primary",
        time_zone: str = "UTC",
        max_results: int = 10,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the dispatcher.

        Args:
            reader: Calendar reader
            writer: Calendar writer
            calendar_id: Calendar the tools operate on
            time_zone: Zone used for new event times and display
            max_results: Default list_events limit
            clock: Source of "now" for list summaries
        """
        self.reader = reader
        self.writer = writer
        self.calendar_id = calendar_id
        self.time_zone = time_zone
        self.max_results = max_results
        self.clock = clock

        self._handlers: dict[ToolName, Callable[[dict[str, Any]], ToolResponse]] = {
            ToolName.CREATE_EVENT: self._create_event,
            ToolName.LIST_EVENTS: self._list_events,
            ToolName.MANAGE_EVENT: self._manage_event,
        }

    def dispatch(self, tool_call: Union[ToolCall, dict[str, Any]]) -> ToolResponse:
        """
        Handle one tool call.

        Args:
            tool_call: ToolCall or a raw ``{tool_name, parameters}`` mapping

        Returns:
            Response envelope for the agent
        """
        try:
            if not isinstance(tool_call, ToolCall):
                tool_call = ToolCall.model_validate(tool_call)

            logger.info(f"Processing tool call: {tool_call.tool_name}")
            validation = validate_tool_call(tool_call.tool_name, tool_call.parameters)
            if not validation.is_valid:
                logger.warning(f"Rejected {tool_call.tool_name}: {validation.errors}")
                return ToolResponse.error(f"Validation failed: {', '.join(validation.errors)}")

            tool = ToolName.resolve(tool_call.tool_name)
            return self._handlers[tool](tool_call.parameters)

        except Exception as e:
            logger.exception(f"Error processing tool call: {e}")
            return ToolResponse.error(f"Error processing tool call: {e}")

    def _display(self, value: Any) -> str:
        return format_for_display(value, tz=self.time_zone)

    def _create_event(self, params: dict[str, Any]) -> ToolResponse:
        try:
            event = convert_to_google_event(params, self.time_zone)
            created = self.writer.create_event(event, self.calendar_id)
        except Exception as e:
            logger.error(f"Failed to create event: {e}")
            return ToolResponse.error(f"Failed to create event: {e}")

        display = format_event_for_display(created)
        return ToolResponse.ok(
            {
                "event": display.model_dump(),
                "event_id": display.id,
                "html_link": display.html_link,
            },
            f'Event created successfully! "{display.title}" scheduled for '
            f"{self._display(display.start)}",
        )

    def _list_events(self, params: dict[str, Any]) -> ToolResponse:
        try:
            resources = self.reader.list_events(
                calendar_id=params.get("calendar_id") or self.calendar_id,
                time_min=params.get("start_date"),
                time_max=params.get("end_date"),
                max_results=params.get("max_results") or self.max_results,
            )
        except Exception as e:
            logger.error(f"Failed to list events: {e}")
            return ToolResponse.error(f"Failed to list events: {e}")

        events = [format_event_for_display(r) for r in resources]
        summary = describe_events(events, now=self.clock(), tz=self.time_zone)
        return ToolResponse.ok(
            {
                "events": [e.model_dump() for e in events],
                "count": len(events),
                "summary": summary,
            },
            f"Found {len(events)} events. {summary}",
        )

    def _manage_event(self, params: dict[str, Any]) -> ToolResponse:
        if params["action"] == EventAction.DELETE.value:
            return self._delete_event(params["event_id"])
        return self._update_event(params["event_id"], params)

    def _update_event(self, event_id: str, changes: dict[str, Any]) -> ToolResponse:
        try:
            existing = self.reader.get_event(event_id, self.calendar_id)
            merged = apply_event_update(existing, changes, self.time_zone)
            updated = self.writer.update_event(event_id, merged, self.calendar_id)
        except Exception as e:
            logger.error(f"Failed to update event {event_id}: {e}")
            return ToolResponse.error(f"Failed to update event: {e}")

        display = format_event_for_display(updated)
        return ToolResponse.ok(
            {"event": display.model_dump(), "event_id": event_id},
            f'Event updated successfully! "{display.title}" has been updated',
        )

    def _delete_event(self, event_id: str) -> ToolResponse:
        try:
            existing = self.reader.get_event(event_id, self.calendar_id)
            self.writer.delete_event(event_id, self.calendar_id)
        except Exception as e:
            logger.error(f"Failed to delete event {event_id}: {e}")
            return ToolResponse.error(f"Failed to delete event: {e}")

        display = format_event_for_display(existing)
        return ToolResponse.ok(
            {"deleted_event": display.model_dump(), "event_id": event_id},
            f'Event deleted successfully! "{display.title}" has been cancelled',
        )
