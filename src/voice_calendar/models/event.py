"""Calendar event data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventStatus(str, Enum):
    """Event status enumeration."""

    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class ReminderMethod(str, Enum):
    """Reminder delivery methods supported by Google Calendar."""

    EMAIL = "email"
    POPUP = "popup"


class Reminder(BaseModel):
    """A single reminder override."""

    method: ReminderMethod
    minutes: int

    model_config = {"frozen": True, "use_enum_values": True}


class ReminderPolicy(BaseModel):
    """Reminder block of an event resource."""

    use_default: bool = Field(default=False, serialization_alias="useDefault")
    overrides: list[Reminder] = Field(default_factory=list)

    def to_google(self) -> dict:
        return self.model_dump(by_alias=True)


# One popup 10 minutes before, one email 24 hours before
DEFAULT_REMINDERS = ReminderPolicy(
    use_default=False,
    overrides=[
        Reminder(method=ReminderMethod.POPUP, minutes=10),
        Reminder(method=ReminderMethod.EMAIL, minutes=1440),
    ],
)


class DisplayEvent(BaseModel):
    """Flattened view of a Google Calendar event resource."""

    id: str
    title: str = "Untitled Event"
    start: Optional[str] = None
    end: Optional[str] = None
    description: str = ""
    location: str = ""
    attendees: list[str] = Field(default_factory=list)
    status: EventStatus = EventStatus.CONFIRMED
    created: Optional[str] = None
    updated: Optional[str] = None
    html_link: Optional[str] = None
    hangout_link: Optional[str] = None
    is_all_day: bool = False
    creator: str = ""
    organizer: str = ""

    model_config = {"use_enum_values": True, "validate_default": True}
