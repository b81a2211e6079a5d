"""
Calendar event and view range models.

Entities:
- CalendarEvent: A scheduled event, optionally carrying a recurrence rule
- ViewRange: The window of the calendar a caller wants to display
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from academy_calendar.models.identifiers import DATE_KEY_PATTERN, EventId, parse_event_id
from academy_calendar.models.recurrence import RecurrenceRule


class CalendarEvent(BaseModel):
    """
    Event representation consumed and produced by the expansion engine.

    Only id, start_time, end_time and recurrence_rule are interpreted.
    Any other field (title, description, location, event_type, ...) belongs
    to the caller and is copied verbatim onto generated instances.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(..., description="Event ID (base id or instance composite id)")
    start_time: datetime = Field(..., description="Event start time")
    end_time: datetime = Field(..., description="Event end time")
    title: Optional[str] = Field(None, description="Event title")
    recurrence_rule: Optional[RecurrenceRule] = Field(
        None,
        description="Repetition rule; None for one-time events",
    )

    @model_validator(mode="after")
    def check_timezones_match(self) -> "CalendarEvent":
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("start_time and end_time must both be naive or both carry a timezone")
        return self

    @property
    def is_recurring(self) -> bool:
        """Check if the event carries a recurrence rule."""
        return self.recurrence_rule is not None

    @property
    def duration(self) -> timedelta:
        """Event duration (end_time - start_time)."""
        return self.end_time - self.start_time

    @property
    def event_id(self) -> EventId:
        """Tagged form of the id (base event or generated instance)."""
        return parse_event_id(self.id)


def _widen_date(value, boundary: time):
    """Turn a plain date (or YYYY-MM-DD string) into a datetime at boundary."""
    if isinstance(value, str) and DATE_KEY_PATTERN.match(value):
        value = date.fromisoformat(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, boundary)
    return value


class ViewRange(BaseModel):
    """
    Calendar window requested by a caller.

    Occurrences whose start falls between start and end (both inclusive)
    are generated. Plain dates cover whole days: start is widened to
    00:00:00 and end to the last instant of that day.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Window start")
    end: datetime = Field(..., description="Window end")

    @field_validator("start", mode="before")
    @classmethod
    def widen_start(cls, v):
        return _widen_date(v, time.min)

    @field_validator("end", mode="before")
    @classmethod
    def widen_end(cls, v):
        return _widen_date(v, time.max)

    @model_validator(mode="after")
    def check_order(self) -> "ViewRange":
        if (self.start.tzinfo is None) == (self.end.tzinfo is None) and self.end < self.start:
            raise ValueError("View range end must not be before its start")
        return self
