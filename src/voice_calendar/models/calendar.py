"""Calendar metadata model."""

from typing import Optional

from pydantic import BaseModel


class Calendar(BaseModel):
    """Calendar list entry."""

    id: str
    name: str
    description: Optional[str] = None
    time_zone: Optional[str] = None
    is_primary: bool = False
    access_role: Optional[str] = None
    color: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def can_edit(self) -> bool:
        return self.access_role in ("owner", "writer")

    @classmethod
    def from_google(cls, entry: dict) -> "Calendar":
        """Build from a calendarList (or calendars.get) resource."""
        return cls(
            id=entry["id"],
            name=entry.get("summaryOverride") or entry.get("summary", entry["id"]),
            description=entry.get("description"),
            time_zone=entry.get("timeZone"),
            is_primary=entry.get("primary", False),
            access_role=entry.get("accessRole"),
            color=entry.get("backgroundColor"),
        )
