"""Rolling in-memory history of tool calls."""

from collections import Counter, deque
from typing import Any, Optional

from ..models.tool import ToolCall, ToolCallRecord, ToolResponse

DEFAULT_HISTORY_LIMIT = 50


class ToolCallHistory:
    """Keeps the most recent tool calls, newest first.

    Once ``limit`` records are held, adding one evicts the oldest.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        self.limit = limit
        self._records: deque[ToolCallRecord] = deque(maxlen=limit)
        self._next_id = 1

    def add(self, call: ToolCall, response: ToolResponse, is_mock: bool = False) -> ToolCallRecord:
        record = ToolCallRecord(
            id=self._next_id,
            tool_name=call.tool_name,
            parameters=call.parameters,
            response=response,
            success=response.success,
            is_mock=is_mock,
        )
        self._next_id += 1
        self._records.appendleft(record)
        return record

    @property
    def records(self) -> list[ToolCallRecord]:
        return list(self._records)

    @property
    def last_response(self) -> Optional[ToolResponse]:
        return self._records[0].response if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def stats(self) -> dict[str, Any]:
        """Totals, success rate (percent) and per-tool counts."""
        total = len(self._records)
        successful = sum(1 for r in self._records if r.success)
        return {
            "total": total,
            "successful": successful,
            "failed": total - successful,
            "success_rate": round(successful / total * 100) if total else 0,
            "tool_counts": dict(Counter(r.tool_name for r in self._records)),
            "last_call": self._records[0].timestamp if self._records else None,
        }
