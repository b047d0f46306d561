"""Google Calendar reader using the Calendar REST API directly."""

import logging
from typing import Any, Optional

from ..auth.base import AuthProvider
from ..models.calendar import Calendar
from ..utils.date_utils import create_date_range
from ..utils.exceptions import CalendarToolError, ValidationError
from ..utils.google_api import INVALID_EVENT_ID, api_request, calendar_path
from .base import CalendarReader

logger = logging.getLogger(__name__)


class GoogleCalendarReader(CalendarReader):
    """Read calendars and events from Google Calendar."""

    def __init__(
        self,
        auth_provider: AuthProvider,
        calendar_id: str = "primary",
        max_results: int = 10,
    ):
        self.auth_provider = auth_provider
        self.calendar_id = calendar_id
        self.max_results = max_results

    def list_calendars(self) -> list[Calendar]:
        data = api_request(self.auth_provider, "GET", "users/me/calendarList") or {}
        calendars = [Calendar.from_google(item) for item in data.get("items", [])]
        logger.info(f"Found {len(calendars)} calendars")
        return calendars

    def get_calendar(self, calendar_id: Optional[str] = None) -> Calendar:
        """Get metadata for a single calendar."""
        cal_id = calendar_id or self.calendar_id
        data = api_request(self.auth_provider, "GET", calendar_path(cal_id)) or {}
        return Calendar.from_google(data)

    def list_events(
        self,
        calendar_id: Optional[str] = None,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        max_results: Optional[int] = None,
        query: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """
        List events in a time range, recurring events expanded.

        Missing bounds default to today through a week from today.
        """
        cal_id = calendar_id or self.calendar_id
        time_min, time_max = create_date_range(time_min, time_max)

        params: dict[str, Any] = {
            "timeMin": time_min,
            "timeMax": time_max,
            "maxResults": max_results or self.max_results,
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        if query:
            params["q"] = query

        logger.debug(f"Listing events in {cal_id} from {time_min} to {time_max}")
        data = api_request(
            self.auth_provider, "GET", calendar_path(cal_id, "events"), params=params
        ) or {}
        events = data.get("items", [])
        logger.info(f"Read {len(events)} events from {cal_id}")
        return events

    def search_events(
        self,
        query: str,
        calendar_id: Optional[str] = None,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Free-text search over the events in a range."""
        return self.list_events(calendar_id, time_min, time_max, max_results, query=query)

    def get_event(self, event_id: str, calendar_id: Optional[str] = None) -> dict[str, Any]:
        if not event_id:
            raise ValidationError(INVALID_EVENT_ID)
        cal_id = calendar_id or self.calendar_id
        return api_request(
            self.auth_provider, "GET", calendar_path(cal_id, "events", event_id)
        ) or {}

    def get_free_busy(
        self,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        calendar_ids: Optional[list[str]] = None,
    ) -> dict[str, list[dict[str, str]]]:
        """
        Query busy intervals for one or more calendars.

        Returns:
            Mapping of calendar ID to its list of ``{start, end}`` busy blocks
        """
        time_min, time_max = create_date_range(time_min, time_max)
        ids = calendar_ids or [self.calendar_id]
        body = {
            "timeMin": time_min,
            "timeMax": time_max,
            "items": [{"id": cal_id} for cal_id in ids],
        }
        data = api_request(self.auth_provider, "POST", "freeBusy", json=body) or {}
        return {
            cal_id: info.get("busy", [])
            for cal_id, info in data.get("calendars", {}).items()
        }

    def check_connection(self) -> bool:
        """Return True if the calendar list can be fetched."""
        try:
            api_request(
                self.auth_provider, "GET", "users/me/calendarList", params={"maxResults": 1}
            )
            return True
        except CalendarToolError as e:
            logger.warning(f"Calendar connection check failed: {e}")
            return False
