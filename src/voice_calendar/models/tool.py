"""Tool call data models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..utils.date_utils import format_to_iso, utc_now

# Prefix used by the tool names registered in ElevenLabs agent configs
AGENT_TOOL_PREFIX = "google_calendar_"


class ToolName(str, Enum):
    """The three operations the voice agent can invoke."""

    CREATE_EVENT = "create_event"
    LIST_EVENTS = "list_events"
    MANAGE_EVENT = "manage_event"

    @classmethod
    def resolve(cls, name: Any) -> Optional["ToolName"]:
        """Look up a tool by plain or agent-prefixed name. None if unknown."""
        if not isinstance(name, str):
            return None
        if name.startswith(AGENT_TOOL_PREFIX):
            name = name[len(AGENT_TOOL_PREFIX):]
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def agent_name(self) -> str:
        return f"{AGENT_TOOL_PREFIX}{self.value}"


class EventAction(str, Enum):
    """Actions accepted by manage_event."""

    UPDATE = "update"
    DELETE = "delete"


class ToolCall(BaseModel):
    """A tool invocation received from the voice agent."""

    tool_name: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


def _timestamp() -> str:
    return format_to_iso(utc_now())


class ToolResponse(BaseModel):
    """Uniform response envelope returned for every tool call."""

    success: bool
    data: Optional[dict[str, Any]] = None
    message: str = ""
    timestamp: str = Field(default_factory=_timestamp)

    @classmethod
    def ok(cls, data: Optional[dict[str, Any]], message: str) -> "ToolResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(success=False, data=None, message=message)


class ValidationResult(BaseModel):
    """Outcome of a validation pass."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


class ToolCallRecord(BaseModel):
    """One entry of the rolling tool-call history."""

    id: int
    timestamp: str = Field(default_factory=_timestamp)
    tool_name: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    response: ToolResponse
    success: bool
    is_mock: bool = False
