"""
Pydantic models for Academy Calendar.

This module exports the recurrence, event and identifier models for easy
importing.
"""

from academy_calendar.models.recurrence import (
    Frequency,
    RecurrenceRule,
    WeekdayCode,
    WEEKDAY_NUMBERS,
)
from academy_calendar.models.identifiers import (
    BaseEventId,
    InstanceEventId,
    EventId,
    date_key,
    parse_date_key,
    encode_instance_id,
    decode_instance_id,
    parse_event_id,
)
from academy_calendar.models.events import CalendarEvent, ViewRange

__all__ = [
    # Recurrence rule
    "Frequency",
    "RecurrenceRule",
    "WeekdayCode",
    "WEEKDAY_NUMBERS",
    # Identifiers
    "BaseEventId",
    "InstanceEventId",
    "EventId",
    "date_key",
    "parse_date_key",
    "encode_instance_id",
    "decode_instance_id",
    "parse_event_id",
    # Events
    "CalendarEvent",
    "ViewRange",
]
