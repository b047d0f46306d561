"""Google Calendar writer using the Calendar REST API directly."""

import logging
from typing import Any, Optional

from ..auth.base import AuthProvider
from ..utils.exceptions import ValidationError
from ..utils.google_api import INVALID_EVENT_ID, api_request, calendar_path
from .base import CalendarWriter

logger = logging.getLogger(__name__)


class GoogleCalendarWriter(CalendarWriter):
    """Create, replace and delete events in Google Calendar."""

    def __init__(self, auth_provider: AuthProvider, calendar_id: str = "primary"):
        self.auth_provider = auth_provider
        self.calendar_id = calendar_id

    def create_event(
        self,
        event: dict[str, Any],
        calendar_id: Optional[str] = None,
    ) -> dict[str, Any]:
        cal_id = calendar_id or self.calendar_id
        # Attendees get invitation emails
        created = api_request(
            self.auth_provider,
            "POST",
            calendar_path(cal_id, "events"),
            params={"sendUpdates": "all"},
            json=event,
        ) or {}
        logger.info(f"Created event: {event.get('summary')} ({created.get('id')})")
        return created

    def update_event(
        self,
        event_id: str,
        event: dict[str, Any],
        calendar_id: Optional[str] = None,
    ) -> dict[str, Any]:
        if not event_id:
            raise ValidationError(INVALID_EVENT_ID)
        cal_id = calendar_id or self.calendar_id
        updated = api_request(
            self.auth_provider,
            "PUT",
            calendar_path(cal_id, "events", event_id),
            params={"sendUpdates": "all"},
            json=event,
        ) or {}
        logger.info(f"Updated event: {event.get('summary')} ({event_id})")
        return updated

    def delete_event(self, event_id: str, calendar_id: Optional[str] = None) -> None:
        if not event_id:
            raise ValidationError(INVALID_EVENT_ID)
        cal_id = calendar_id or self.calendar_id
        api_request(
            self.auth_provider,
            "DELETE",
            calendar_path(cal_id, "events", event_id),
            params={"sendUpdates": "all"},
        )
        logger.info(f"Deleted event: {event_id}")
