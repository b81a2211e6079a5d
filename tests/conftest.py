"""
Pytest configuration and fixtures for Academy Calendar tests.

Provides event factories and commonly used recurrence rules.
"""

from datetime import date, datetime
from typing import Callable, Optional

import pytest

from academy_calendar.config import get_settings
from academy_calendar.models.events import CalendarEvent, ViewRange
from academy_calendar.models.recurrence import RecurrenceRule


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test so env changes do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """
    Factory for CalendarEvent instances.

    Usage:
        event = make_event(datetime(2026, 1, 5, 15), datetime(2026, 1, 5, 16),
                           rule={"freq": "weekly", "byDay": ["MO"]})
    """

    def _make(
        start: datetime,
        end: datetime,
        rule: Optional[dict | RecurrenceRule] = None,
        event_id: str = "evt_math_101",
        **extra,
    ) -> CalendarEvent:
        return CalendarEvent(
            id=event_id,
            start_time=start,
            end_time=end,
            recurrence_rule=rule,
            **extra,
        )

    return _make


@pytest.fixture
def january_2026() -> ViewRange:
    """View range covering January 2026."""
    return ViewRange(start=date(2026, 1, 1), end=date(2026, 1, 31))


@pytest.fixture
def weekly_monday_class(make_event) -> CalendarEvent:
    """Monday 15:00-16:00 class starting Monday 2026-01-05."""
    return make_event(
        datetime(2026, 1, 5, 15, 0, 0),
        datetime(2026, 1, 5, 16, 0, 0),
        rule={"freq": "weekly", "byDay": ["MO"]},
        title="Math class",
        location="Room 3",
        event_type="class",
    )
