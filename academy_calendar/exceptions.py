"""
Custom exceptions for Academy Calendar.

The expansion engine itself never raises on well-formed models; these
cover the boundaries where raw input is turned into models.
"""


class AcademyCalendarError(Exception):
    """Base exception for Academy Calendar."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidRecurrenceRuleError(AcademyCalendarError):
    """
    An RRULE string could not be turned into a RecurrenceRule.

    Causes:
    - Empty or blank string
    - Missing or unsupported FREQ
    - Rejected by dateutil (unknown parameters, malformed values)
    - Valid RRULE components the engine does not honor (BYHOUR, WKST, ...)
    - Values rejected by model validation (e.g., INTERVAL=0, BYMONTHDAY=32)
    """
