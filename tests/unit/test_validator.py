"""
Unit tests for event and tool-call validation.

Validators must never raise, and every failing rule reports its own message.
"""

import pytest

from voice_calendar.events.validator import (
    is_valid_email,
    validate_event_data,
    validate_tool_call,
)

VALID_EVENT = {
    "summary": "Standup",
    "start_datetime": "2025-07-11T10:00:00Z",
    "end_datetime": "2025-07-11T10:30:00Z",
}


class TestValidateEventData:
    def test_valid_event(self):
        result = validate_event_data(VALID_EVENT)
        assert result.is_valid is True
        assert result.errors == []

    def test_missing_summary(self):
        result = validate_event_data({**VALID_EVENT, "summary": "   "})
        assert result.errors == ["Missing required field: summary"]

    def test_missing_times_report_each_field(self):
        result = validate_event_data({"summary": "Standup"})
        assert result.errors == [
            "Missing required field: start_datetime (valid ISO format)",
            "Missing required field: end_datetime (valid ISO format)",
        ]

    def test_unparseable_time_counts_as_missing(self):
        result = validate_event_data({**VALID_EVENT, "start_datetime": "next tuesday"})
        assert result.errors == ["Missing required field: start_datetime (valid ISO format)"]

    @pytest.mark.parametrize("end", ["2025-07-11T10:00:00Z", "2025-07-11T09:00:00Z"])
    def test_end_must_be_after_start(self, end):
        result = validate_event_data({**VALID_EVENT, "end_datetime": end})
        assert result.errors == ["End time must be after start time"]

    def test_attendees_must_be_a_string(self):
        result = validate_event_data({**VALID_EVENT, "attendees": ["a@example.com"]})
        assert result.errors == ["Attendees must be a comma-separated string of email addresses"]

    def test_rules_do_not_short_circuit(self):
        result = validate_event_data({"attendees": 3})
        assert len(result.errors) == 4

    @pytest.mark.parametrize("params", [None, "summary", 42, ["a"]])
    def test_non_mapping_input_never_raises(self, params):
        result = validate_event_data(params)
        assert result.is_valid is False
        assert result.errors == ["Event data must be an object"]


class TestValidateToolCall:
    def test_unknown_tool(self):
        result = validate_tool_call("book_flight", {})
        assert result.is_valid is False
        assert result.errors == ["Unknown tool: book_flight"]

    def test_agent_prefixed_name_is_accepted(self):
        assert validate_tool_call("google_calendar_create_event", VALID_EVENT).is_valid

    def test_parameters_must_be_a_mapping(self):
        result = validate_tool_call("list_events", None)
        assert result.errors == ["Tool parameters must be an object"]

    def test_create_event_uses_event_rules(self):
        result = validate_tool_call("create_event", {"summary": "x"})
        assert "Missing required field: start_datetime (valid ISO format)" in result.errors

    def test_list_events_all_optional(self):
        assert validate_tool_call("list_events", {}).is_valid

    def test_list_events_invalid_dates(self):
        result = validate_tool_call(
            "list_events", {"start_date": "soon", "end_date": "later"}
        )
        assert result.errors == ["Invalid start_date format", "Invalid end_date format"]

    def test_list_events_empty_dates_mean_default(self):
        assert validate_tool_call("list_events", {"start_date": "", "end_date": ""}).is_valid

    @pytest.mark.parametrize("max_results", [0, -3, "10", 2.5, True])
    def test_list_events_max_results_positive_integer(self, max_results):
        result = validate_tool_call("list_events", {"max_results": max_results})
        assert result.errors == ["max_results must be a positive integer"]

    def test_manage_event_requires_id_and_action(self):
        result = validate_tool_call("manage_event", {})
        assert result.errors == [
            "Missing required field: event_id",
            "Missing required field: action (update or delete)",
        ]

    def test_manage_event_rejects_unknown_action(self):
        result = validate_tool_call("manage_event", {"event_id": "e1", "action": "archive"})
        assert result.errors == ["Missing required field: action (update or delete)"]

    def test_update_without_fields(self):
        result = validate_tool_call("manage_event", {"event_id": "e1", "action": "update"})
        assert result.errors == ["At least one field must be provided for update"]

    def test_update_with_one_field(self):
        params = {"event_id": "e1", "action": "update", "location": "Room 4"}
        assert validate_tool_call("manage_event", params).is_valid

    def test_update_with_inverted_times(self):
        params = {
            "event_id": "e1",
            "action": "update",
            "start_datetime": "2025-07-11T11:00:00Z",
            "end_datetime": "2025-07-11T10:00:00Z",
        }
        result = validate_tool_call("manage_event", params)
        assert result.errors == ["End time must be after start time"]

    def test_delete_needs_no_fields(self):
        assert validate_tool_call("manage_event", {"event_id": "e1", "action": "delete"}).is_valid


class TestEmail:
    @pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@example.org"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "a@b", "no-at.example.com", "a b@c.com", None])
    def test_invalid(self, email):
        assert not is_valid_email(email)
