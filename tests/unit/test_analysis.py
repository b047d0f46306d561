"""
Unit tests for conflict detection, list summaries and quick events.
"""

from datetime import datetime

import pytest
import pytz

from voice_calendar.events.analysis import (
    NO_EVENTS_SUMMARY,
    create_quick_event,
    describe_events,
    event_time_status,
    find_event_conflicts,
    generate_events_summary,
)
from voice_calendar.models.event import DisplayEvent
from voice_calendar.utils.date_utils import is_event_happening

NOW = datetime(2025, 7, 11, 9, 30, tzinfo=pytz.utc)


def _resource(event_id, start, end):
    return {"id": event_id, "start": {"dateTime": start}, "end": {"dateTime": end}}


def _display(title, start, end, **kwargs):
    return DisplayEvent(id=title.lower(), title=title, start=start, end=end, **kwargs)


MEETING = _resource("m1", "2025-07-11T10:00:00Z", "2025-07-11T11:00:00Z")


class TestFindEventConflicts:
    def test_overlapping_candidate(self):
        candidate = {
            "start_datetime": "2025-07-11T10:30:00Z",
            "end_datetime": "2025-07-11T11:30:00Z",
        }
        assert find_event_conflicts([MEETING], candidate) == [MEETING]

    def test_disjoint_candidate(self):
        candidate = {
            "start_datetime": "2025-07-11T12:00:00Z",
            "end_datetime": "2025-07-11T13:00:00Z",
        }
        assert find_event_conflicts([MEETING], candidate) == []

    def test_touching_intervals_do_not_conflict(self):
        candidate = {
            "start_datetime": "2025-07-11T11:00:00Z",
            "end_datetime": "2025-07-11T12:00:00Z",
        }
        assert find_event_conflicts([MEETING], candidate) == []

    @pytest.mark.parametrize(
        "a, b",
        [
            (("09:00", "10:00"), ("09:30", "10:30")),
            (("09:00", "12:00"), ("10:00", "11:00")),
            (("09:00", "10:00"), ("10:00", "11:00")),
            (("09:00", "10:00"), ("13:00", "14:00")),
        ],
    )
    def test_overlap_is_symmetric(self, a, b):
        def iso(t):
            return f"2025-07-11T{t}:00Z"

        first = _resource("a", iso(a[0]), iso(a[1]))
        second = _resource("b", iso(b[0]), iso(b[1]))
        a_vs_b = find_event_conflicts(
            [second], {"start_datetime": iso(a[0]), "end_datetime": iso(a[1])}
        )
        b_vs_a = find_event_conflicts(
            [first], {"start_datetime": iso(b[0]), "end_datetime": iso(b[1])}
        )
        assert bool(a_vs_b) == bool(b_vs_a)

    def test_unparseable_stored_events_are_ignored(self):
        broken = {"id": "x", "start": {"dateTime": "soon"}, "end": {}}
        candidate = {
            "start_datetime": "2025-07-11T10:30:00Z",
            "end_datetime": "2025-07-11T11:30:00Z",
        }
        assert find_event_conflicts([broken, MEETING], candidate) == [MEETING]

    def test_works_on_display_events(self):
        event = _display("Review", "2025-07-11T10:00:00Z", "2025-07-11T11:00:00Z")
        candidate = {
            "start_datetime": "2025-07-11T10:59:00Z",
            "end_datetime": "2025-07-11T11:30:00Z",
        }
        assert find_event_conflicts([event], candidate) == [event]


class TestTimeStatus:
    def test_labels(self):
        assert event_time_status(_display("A", "2025-07-11T09:00:00Z", "2025-07-11T10:00:00Z"), NOW) == "happening"
        assert event_time_status(_display("B", "2025-07-11T08:00:00Z", "2025-07-11T09:00:00Z"), NOW) == "past"
        assert event_time_status(_display("C", "2025-07-11T11:00:00Z", "2025-07-11T12:00:00Z"), NOW) == "upcoming"

    def test_label_agrees_with_happening_predicate_at_start(self):
        starting = _display("D", "2025-07-11T09:30:00Z", "2025-07-11T10:30:00Z")
        assert is_event_happening(starting.start, starting.end, NOW) is False
        assert event_time_status(starting, NOW) == "upcoming"
        assert describe_events([starting], NOW).startswith("1 upcoming event.")


class TestDescribeEvents:
    def test_empty(self):
        assert describe_events([], NOW) == NO_EVENTS_SUMMARY

    def test_counts_and_next_event(self):
        events = [
            _display("Later", "2025-07-11T15:00:00Z", "2025-07-11T16:00:00Z"),
            _display("Ongoing", "2025-07-11T09:00:00Z", "2025-07-11T10:00:00Z"),
            _display("Lunch", "2025-07-11T12:00:00Z", "2025-07-11T13:00:00Z"),
            _display("Breakfast", "2025-07-11T07:00:00Z", "2025-07-11T08:00:00Z"),
        ]
        assert describe_events(events, NOW) == (
            "Currently in 1 event. 2 upcoming events. 1 past event. "
            'Next: "Lunch" at Jul 11, 2025 12:00 PM.'
        )

    def test_only_past_events(self):
        events = [_display("Done", "2025-07-10T07:00:00Z", "2025-07-10T08:00:00Z")]
        assert describe_events(events, NOW) == "1 past event."

    def test_summary_counts(self):
        events = [
            _display("A", "2025-07-11T11:00:00Z", "2025-07-11T12:00:00Z", location="Room 1"),
            _display("B", "2025-07-10", "2025-07-11", is_all_day=True, status="tentative"),
        ]
        summary = generate_events_summary(events, NOW)
        assert summary["total_events"] == 2
        assert summary["confirmed_events"] == 1
        assert summary["tentative_events"] == 1
        assert summary["all_day_events"] == 1
        assert summary["events_with_location"] == 1
        assert summary["upcoming_events"] == 1
        assert summary["past_events"] == 1


class TestQuickEvent:
    def test_tomorrow_at_time(self):
        params = create_quick_event("Lunch with Sam tomorrow at 1pm", NOW)
        assert params == {
            "summary": "Lunch with Sam",
            "start_datetime": "2025-07-12T13:00:00.000Z",
            "end_datetime": "2025-07-12T14:00:00.000Z",
        }

    def test_local_zone_and_duration(self):
        params = create_quick_event(
            "Call 9:15am", NOW, tz="Europe/Paris", duration_minutes=30
        )
        assert params["start_datetime"] == "2025-07-11T07:15:00.000Z"
        assert params["end_datetime"] == "2025-07-11T07:45:00.000Z"
        assert params["summary"] == "Call"

    def test_default_summary(self):
        assert create_quick_event("today at 8pm", NOW)["summary"] == "Quick Event"

    def test_no_time_found(self):
        assert create_quick_event("Dentist sometime", NOW) is None
