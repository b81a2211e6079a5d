"""
Recurrence rule model.

A rule is stored on the parent event as a small JSON object
(e.g. {"freq": "weekly", "byDay": ["MO", "WE"], "until": "2026-06-30"})
and can be converted to and from an iCalendar RRULE string.
"""

from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Frequency(str, Enum):
    """Supported repetition frequencies."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


WeekdayCode = Literal["MO", "TU", "WE", "TH", "FR", "SA", "SU"]

# Sunday-based week: SU=0 ... SA=6
WEEKDAY_NUMBERS: dict[str, int] = {
    "SU": 0,
    "MO": 1,
    "TU": 2,
    "WE": 3,
    "TH": 4,
    "FR": 5,
    "SA": 6,
}


class RecurrenceRule(BaseModel):
    """
    Repetition pattern of a recurring event.

    Fields:
    - frequency: daily, weekly, monthly or yearly
    - interval: repeat every N periods (default 1)
    - by_day: weekday codes, used by weekly rules only
    - by_day_of_month: 1-31, used by monthly rules only
    - until: last date (inclusive) on which an occurrence may fall
    - count: total number of occurrences in the series

    If both until and count are set, whichever ends the series first wins.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    frequency: Frequency = Field(..., alias="freq", description="Repetition frequency")
    interval: int = Field(default=1, ge=1, description="Repeat every N periods")
    by_day: Optional[list[WeekdayCode]] = Field(
        None,
        alias="byDay",
        description="Weekday codes for weekly rules (e.g., ['MO', 'WE', 'FR'])",
    )
    by_day_of_month: Optional[int] = Field(
        None,
        alias="byDayOfMonth",
        ge=1,
        le=31,
        description="Day of month for monthly rules (clamped to month end)",
    )
    until: Optional[date] = Field(None, description="Inclusive end date of the series")
    count: Optional[int] = Field(None, ge=1, description="Maximum number of occurrences")

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("by_day", mode="before")
    @classmethod
    def normalize_by_day(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            return [d.strip().upper() if isinstance(d, str) else d for d in v]
        return v

    @field_validator("until", mode="before")
    @classmethod
    def until_as_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v

    @property
    def weekday_numbers(self) -> list[int]:
        """Sorted Sunday-based weekday numbers of by_day (empty if unset)."""
        return sorted({WEEKDAY_NUMBERS[code] for code in self.by_day or []})

    def to_rrule_string(self) -> str:
        """
        Format this rule as an iCalendar RRULE value.

        Returns:
            String such as 'FREQ=WEEKLY;BYDAY=MO,WE,FR;COUNT=10'
        """
        parts = [f"FREQ={self.frequency.value.upper()}"]
        if self.interval != 1:
            parts.append(f"INTERVAL={self.interval}")
        if self.by_day:
            parts.append(f"BYDAY={','.join(self.by_day)}")
        if self.by_day_of_month is not None:
            parts.append(f"BYMONTHDAY={self.by_day_of_month}")
        if self.until is not None:
            parts.append(f"UNTIL={self.until.isoformat().replace('-', '')}")
        if self.count is not None:
            parts.append(f"COUNT={self.count}")
        return ";".join(parts)
