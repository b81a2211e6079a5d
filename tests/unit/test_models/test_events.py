"""
Unit tests for CalendarEvent and ViewRange models.

Tests:
- Caller-owned extra fields are kept
- Recurrence rule parsing from stored JSON
- Derived properties (is_recurring, duration, event_id)
- ViewRange widening of plain dates
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from academy_calendar.models.events import CalendarEvent, ViewRange
from academy_calendar.models.identifiers import BaseEventId, InstanceEventId
from academy_calendar.models.recurrence import Frequency


class TestCalendarEvent:
    """Test CalendarEvent model functionality."""

    def test_extra_fields_kept(self):
        """Fields the engine does not know about are preserved."""
        event = CalendarEvent(
            id="evt_1",
            start_time=datetime(2026, 1, 5, 15),
            end_time=datetime(2026, 1, 5, 16),
            title="Math class",
            location="Room 3",
            event_type="class",
        )

        assert event.location == "Room 3"
        assert event.model_dump()["event_type"] == "class"

    def test_mixed_naive_and_aware_times_rejected(self):
        with pytest.raises(ValidationError, match="both be naive"):
            CalendarEvent(
                id="evt_1",
                start_time=datetime(2026, 1, 5, 15),
                end_time=datetime(2026, 1, 5, 16, tzinfo=timezone.utc),
            )

    def test_aware_times_accepted(self):
        event = CalendarEvent(
            id="evt_1",
            start_time="2026-01-05T15:00:00+09:00",
            end_time="2026-01-05T16:00:00+09:00",
        )
        assert event.duration == timedelta(hours=1)

    def test_rule_from_stored_json(self):
        """Recurrence rules load from their stored JSON shape."""
        event = CalendarEvent.model_validate(
            {
                "id": "evt_1",
                "start_time": "2026-01-05T15:00:00",
                "end_time": "2026-01-05T16:00:00",
                "recurrence_rule": {"freq": "weekly", "byDay": ["MO", "WE"]},
            }
        )

        assert event.is_recurring is True
        assert event.recurrence_rule.frequency == Frequency.WEEKLY
        assert event.start_time == datetime(2026, 1, 5, 15, 0)

    def test_one_time_event(self):
        event = CalendarEvent(
            id="evt_1",
            start_time=datetime(2026, 1, 5, 15),
            end_time=datetime(2026, 1, 5, 16, 30),
        )

        assert event.is_recurring is False
        assert event.duration == timedelta(hours=1, minutes=30)

    def test_event_id_tagging(self):
        """event_id distinguishes base events from generated instances."""
        base = CalendarEvent(
            id="evt_1",
            start_time=datetime(2026, 1, 5, 15),
            end_time=datetime(2026, 1, 5, 16),
        )
        instance = base.model_copy(update={"id": "evt_1_2026-01-12"})

        assert base.event_id == BaseEventId("evt_1")
        assert instance.event_id == InstanceEventId("evt_1", date(2026, 1, 12))

    def test_event_is_frozen(self):
        event = CalendarEvent(
            id="evt_1",
            start_time=datetime(2026, 1, 5, 15),
            end_time=datetime(2026, 1, 5, 16),
        )
        with pytest.raises(ValidationError):
            event.id = "other"

    def test_invalid_rule_rejected(self):
        """An unknown frequency in stored JSON fails validation."""
        with pytest.raises(ValidationError):
            CalendarEvent.model_validate(
                {
                    "id": "evt_1",
                    "start_time": "2026-01-05T15:00:00",
                    "end_time": "2026-01-05T16:00:00",
                    "recurrence_rule": {"freq": "fortnightly"},
                }
            )


class TestViewRange:
    """Test ViewRange model."""

    def test_dates_cover_whole_days(self):
        view = ViewRange(start=date(2026, 1, 1), end=date(2026, 1, 31))

        assert view.start == datetime(2026, 1, 1, 0, 0, 0)
        assert view.end == datetime(2026, 1, 31, 23, 59, 59, 999999)

    def test_date_strings_cover_whole_days(self):
        view = ViewRange.model_validate({"start": "2026-04-01", "end": "2026-04-30"})

        assert view.start == datetime(2026, 4, 1)
        assert view.end.date() == date(2026, 4, 30)
        assert view.end.hour == 23

    def test_datetimes_kept(self):
        view = ViewRange(start=datetime(2026, 1, 1, 9), end=datetime(2026, 1, 1, 18))

        assert view.start == datetime(2026, 1, 1, 9)
        assert view.end == datetime(2026, 1, 1, 18)

    def test_datetime_strings_parsed(self):
        view = ViewRange.model_validate(
            {"start": "2026-01-01T09:00:00", "end": "2026-01-02T09:00:00"}
        )
        assert view.start == datetime(2026, 1, 1, 9)

    def test_single_day(self):
        """Start and end on the same date is a one-day window."""
        view = ViewRange(start=date(2026, 1, 5), end=date(2026, 1, 5))
        assert view.end - view.start < timedelta(days=1)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            ViewRange(start=date(2026, 2, 1), end=date(2026, 1, 1))
