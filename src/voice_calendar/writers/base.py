"""Abstract base class for calendar writers."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CalendarWriter(ABC):
    """Abstract base class for calendar writers."""

    @abstractmethod
    def create_event(
        self,
        event: dict[str, Any],
        calendar_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Create a new event.

        Args:
            event: Event resource to insert
            calendar_id: Calendar ID (None for default calendar)

        Returns:
            Created event resource, including its id
        """

    @abstractmethod
    def update_event(
        self,
        event_id: str,
        event: dict[str, Any],
        calendar_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Replace an existing event.

        Returns:
            Updated event resource
        """

    @abstractmethod
    def delete_event(
        self,
        event_id: str,
        calendar_id: Optional[str] = None,
    ) -> None:
        """
        Delete an event.

        Args:
            event_id: Event identifier
            calendar_id: Calendar ID (None for default calendar)
        """
