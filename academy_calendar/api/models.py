"""
Pydantic request and response models for the Academy Calendar API.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from academy_calendar.models.events import CalendarEvent, ViewRange
from academy_calendar.models.identifiers import parse_date_key
from academy_calendar.models.recurrence import RecurrenceRule


# =============================================================================
# Request Models
# =============================================================================


class ExpandRequest(BaseModel):
    """Events to expand over a calendar window."""

    events: list[CalendarEvent] = Field(
        ...,
        description="Events as stored (recurring and one-time)",
    )
    view_range: ViewRange = Field(
        ...,
        alias="range",
        description="Calendar window; plain dates cover whole days",
    )
    exceptions: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Event ID -> YYYY-MM-DD dates of individually edited/cancelled occurrences",
    )
    max_occurrences: Optional[int] = Field(
        None,
        ge=1,
        le=5000,
        description="Per-event limit for rules without COUNT (defaults to server setting)",
    )

    @field_validator("exceptions")
    @classmethod
    def validate_date_keys(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        for event_id, keys in v.items():
            for key in keys:
                if parse_date_key(key) is None:
                    raise ValueError(f"Invalid date key {key!r} for event {event_id}")
        return v

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "events": [
                    {
                        "id": "evt_math_101",
                        "title": "Math class",
                        "start_time": "2026-01-05T15:00:00",
                        "end_time": "2026-01-05T16:00:00",
                        "recurrence_rule": {"freq": "weekly", "byDay": ["MO"]},
                    }
                ],
                "range": {"start": "2026-01-01", "end": "2026-01-31"},
                "exceptions": {"evt_math_101": ["2026-01-19"]},
            }
        },
    )


class RruleValidationRequest(BaseModel):
    """RRULE string to check."""

    rrule: str = Field(
        ...,
        max_length=500,
        description="iCalendar RRULE value",
        examples=["FREQ=WEEKLY;BYDAY=MO,WE,FR;COUNT=10"],
    )


# =============================================================================
# Response Models
# =============================================================================


class ExpandResponse(BaseModel):
    """Expanded calendar entries."""

    instances: list[CalendarEvent] = Field(
        ...,
        description="Instances and one-time events, in input event order",
    )
    total: int = Field(..., description="Number of entries returned")


class RruleValidationResponse(BaseModel):
    """Result of RRULE validation."""

    valid: bool = Field(..., description="Whether the RRULE can be used")
    error: Optional[str] = Field(None, description="Why the RRULE was rejected")
    rule: Optional[RecurrenceRule] = Field(None, description="Parsed rule when valid")


class ErrorResponse(BaseModel):
    """Error information for failed requests."""

    error_type: Literal[
        "validation_error",
        "http_error",
        "internal_error",
    ] = Field(..., description="Type of error")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(None, description="Additional error details")
    retryable: bool = Field(default=False, description="Whether request can be retried")


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    max_occurrences: int = Field(..., description="Configured per-event expansion limit")
