"""Abstract base class for calendar readers."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..models.calendar import Calendar


class CalendarReader(ABC):
    """Abstract base class for calendar readers."""

    @abstractmethod
    def list_calendars(self) -> list[Calendar]:
        """
        List all available calendars.

        Returns:
            List of Calendar objects
        """

    @abstractmethod
    def list_events(
        self,
        calendar_id: Optional[str] = None,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        max_results: Optional[int] = None,
        query: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """
        Read events from a calendar.

        Args:
            calendar_id: Calendar ID (None for the default calendar)
            time_min: Start of the range (ISO)
            time_max: End of the range (ISO)
            max_results: Maximum number of events
            query: Free-text search

        Returns:
            List of event resources, ordered by start time
        """

    @abstractmethod
    def get_event(self, event_id: str, calendar_id: Optional[str] = None) -> dict[str, Any]:
        """
        Get a specific event by ID.

        Raises:
            NotFound: If the event does not exist
        """
