"""In-memory calendar view: cached events plus user-facing notifications."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from ..events.analysis import event_time_status, find_event_conflicts
from ..events.transformer import (
    apply_event_update,
    convert_to_google_event,
    format_event_for_display,
)
from ..events.validator import validate_event_data
from ..models.event import DisplayEvent
from ..readers.base import CalendarReader
from ..utils.date_utils import utc_now
from ..utils.exceptions import CalendarToolError
from ..writers.base import CalendarWriter

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    level: str  # success | warning | error
    message: str
    created: datetime = field(default_factory=utc_now)


class CalendarViewState:
    """
    Event list and notifications behind an interactive calendar view.

    Every mutation refetches the list from the calendar. Failures are
    turned into error notifications and never raised.
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
        self.reader = reader
        self.writer = writer
        self.calendar_id = calendar_id
        self.time_zone = time_zone
        self.max_results = max_results
        self.clock = clock

        self.events: list[DisplayEvent] = []
        self.notifications: list[Notification] = []
        self._query: dict[str, Any] = {}

    def _notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message, self.clock()))

    def _fail(self, context: str, error: Exception) -> bool:
        logger.error(f"{context}: {error}")
        self._notify("error", f"{context}: {error}")
        return False

    def load_events(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> bool:
        """
        Fetch events into the cache and remember the query for refreshes.

        Returns:
            True if the list was loaded
        """
        self._query = {
            "time_min": start_date,
            "time_max": end_date,
            "max_results": max_results or self.max_results,
        }
        return self.refresh()

    def refresh(self) -> bool:
        try:
            resources = self.reader.list_events(calendar_id=self.calendar_id, **self._query)
        except CalendarToolError as e:
            return self._fail("Failed to load events", e)
        self.events = [format_event_for_display(r) for r in resources]
        logger.debug(f"Loaded {len(self.events)} events")
        return True

    def check_conflicts(self, params: dict[str, Any]) -> list[DisplayEvent]:
        """Cached events overlapping the proposed start/end."""
        return find_event_conflicts(self.events, params)

    def create_event(self, params: dict[str, Any]) -> bool:
        """
        Validate and create an event from form parameters.

        Conflicts with cached events are reported as a warning but do not
        block creation.
        """
        validation = validate_event_data(params)
        if not validation.is_valid:
            for error in validation.errors:
                self._notify("error", error)
            return False

        conflicts = self.check_conflicts(params)
        if conflicts:
            titles = ", ".join(f'"{e.title}"' for e in conflicts)
            self._notify("warning", f"This event overlaps with {titles}")

        try:
            created = self.writer.create_event(
                convert_to_google_event(params, self.time_zone), self.calendar_id
            )
        except CalendarToolError as e:
            return self._fail("Failed to create event", e)

        self._notify("success", f'Created "{created.get("summary", params["summary"])}"')
        self.refresh()
        return True

    def update_event(self, event_id: str, changes: dict[str, Any]) -> bool:
        try:
            existing = self.reader.get_event(event_id, self.calendar_id)
            merged = apply_event_update(existing, changes, self.time_zone)
            self.writer.update_event(event_id, merged, self.calendar_id)
        except CalendarToolError as e:
            return self._fail("Failed to update event", e)

        self._notify("success", f'Updated "{merged.get("summary", event_id)}"')
        self.refresh()
        return True

    def delete_event(self, event_id: str) -> bool:
        try:
            self.writer.delete_event(event_id, self.calendar_id)
        except CalendarToolError as e:
            return self._fail("Failed to delete event", e)

        self._notify("success", "Event deleted")
        self.refresh()
        return True

    def status_of(self, event: DisplayEvent) -> str:
        """happening, past or upcoming relative to the view clock."""
        return event_time_status(event, self.clock())

    def pop_notifications(self) -> list[Notification]:
        """Return and clear pending notifications."""
        pending, self.notifications = self.notifications, []
        return pending
