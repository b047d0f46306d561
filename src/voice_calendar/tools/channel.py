"""In-process channel between the voice agent widget and the tool handler."""

import logging
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from ..models.tool import ToolCall, ToolName, ToolResponse
from .history import ToolCallHistory

logger = logging.getLogger(__name__)

ToolHandler = Callable[[ToolCall], ToolResponse]
ResponseListener = Callable[[ToolCall, ToolResponse], None]

NO_HANDLER = "No tool handler registered."
HANDLER_FAILED = "Error processing tool call."
INVALID_CALL = "Invalid tool call."

MOCK_MESSAGES = {
    ToolName.CREATE_EVENT: "Mock event created successfully",
    ToolName.LIST_EVENTS: "Mock events listed successfully",
    ToolName.MANAGE_EVENT: "Mock event managed successfully",
}


def _raw_tool_name(raw: Any) -> str:
    name = raw.get("tool_name") if isinstance(raw, dict) else None
    return name if isinstance(name, str) else "unknown"


class ToolCallChannel:
    """
    Delivers tool calls to a single registered handler and fans the
    responses out to subscribers.

    Every response, including failures, is recorded in the history.
    """

    def __init__(self, history: Optional[ToolCallHistory] = None):
        self.history = history if history is not None else ToolCallHistory()
        self._handler: Optional[ToolHandler] = None
        self._listeners: list[ResponseListener] = []

    def register(self, handler: ToolHandler) -> None:
        """Install the handler, replacing any previous one."""
        self._handler = handler

    def subscribe(self, listener: ResponseListener) -> Callable[[], None]:
        """
        Be notified of every response.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def send(
        self,
        tool_call: Union[ToolCall, dict[str, Any]],
        callback: Optional[Callable[[ToolResponse], None]] = None,
    ) -> ToolResponse:
        """
        Pass a tool call to the handler and deliver its response.

        Args:
            tool_call: ToolCall or raw ``{tool_name, parameters}`` mapping
            callback: Receives the response for this call only

        Returns:
            The response, also given to ``callback`` and every subscriber
        """
        if not isinstance(tool_call, ToolCall):
            try:
                tool_call = ToolCall.model_validate(tool_call)
            except ValidationError as e:
                logger.error(f"{INVALID_CALL} {e}")
                placeholder = ToolCall(tool_name=_raw_tool_name(tool_call))
                response = ToolResponse.error(INVALID_CALL)
                self._deliver(placeholder, response, callback)
                return response

        if self._handler is None:
            logger.error(f"{NO_HANDLER} Dropping {tool_call.tool_name}")
            response = ToolResponse.error(NO_HANDLER)
        else:
            try:
                response = self._handler(tool_call)
            except Exception as e:
                logger.exception(f"Tool handler failed for {tool_call.tool_name}: {e}")
                response = ToolResponse.error(HANDLER_FAILED)

        self._deliver(tool_call, response, callback)
        return response

    def simulate(self, tool_name: str, parameters: Optional[dict[str, Any]] = None) -> ToolResponse:
        """
        Answer a tool call with a canned success without touching any
        calendar. Useful for checking the agent wiring.
        """
        tool_call = ToolCall(tool_name=tool_name, parameters=parameters or {})
        tool = ToolName.resolve(tool_name)
        if tool is None:
            response = ToolResponse.error(f"Unknown tool: {tool_name}")
        else:
            response = ToolResponse.ok(
                {"mock": True, "tool": tool.value, "parameters": tool_call.parameters},
                MOCK_MESSAGES[tool],
            )
        self._deliver(tool_call, response, None, is_mock=True)
        return response

    def _deliver(
        self,
        tool_call: ToolCall,
        response: ToolResponse,
        callback: Optional[Callable[[ToolResponse], None]],
        is_mock: bool = False,
    ) -> None:
        self.history.add(tool_call, response, is_mock=is_mock)
        if callback is not None:
            callback(response)
        for listener in list(self._listeners):
            listener(tool_call, response)
