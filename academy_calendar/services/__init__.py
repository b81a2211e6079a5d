"""
Service layer for Academy Calendar.

Provides:
- Occurrence generation and RRULE interop (recurrence)
- Window expansion of recurring events (expansion)
"""

from academy_calendar.services.recurrence import (
    next_occurrence,
    parse_rrule,
    validate_rrule,
)

from academy_calendar.services.expansion import (
    materialize_instance,
    expand_event,
    expand_all_events,
    get_next_instance,
)

__all__ = [
    # Recurrence
    "next_occurrence",
    "parse_rrule",
    "validate_rrule",
    # Expansion
    "materialize_instance",
    "expand_event",
    "expand_all_events",
    "get_next_instance",
]
