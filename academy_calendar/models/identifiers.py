"""
Event identifiers for base events and generated instances.

A generated instance is identified by its parent event and the calendar date
it falls on. In memory this is a tagged value (BaseEventId | InstanceEventId);
the "{parent_id}_{YYYY-MM-DD}" string form is only used at the boundary
(API payloads, storage keys, calendar widgets).
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

INSTANCE_ID_SEPARATOR = "_"

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def date_key(value: date) -> str:
    """
    Format a date as its canonical YYYY-MM-DD key.

    Datetimes are reduced to their (local) calendar date first.

    Args:
        value: Date or datetime to format

    Returns:
        String in YYYY-MM-DD format
    """
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date_key(key: str) -> Optional[date]:
    """
    Parse a YYYY-MM-DD key back to a date.

    Returns:
        Date or None if the key is not a real calendar date
    """
    if not key or not DATE_KEY_PATTERN.match(key):
        return None
    try:
        return date.fromisoformat(key)
    except ValueError:
        return None


@dataclass(frozen=True)
class BaseEventId:
    """Identifier of a stored (non-generated) event."""

    id: str

    def encode(self) -> str:
        return self.id


@dataclass(frozen=True)
class InstanceEventId:
    """Identifier of one generated occurrence of a recurring event."""

    parent_id: str
    occurrence_date: date

    def encode(self) -> str:
        return encode_instance_id(self.parent_id, self.occurrence_date)


EventId = Union[BaseEventId, InstanceEventId]


def encode_instance_id(parent_id: str, occurrence_date: date) -> str:
    """
    Build the composite id of a generated instance.

    Example:
        >>> encode_instance_id("evt_42", date(2026, 1, 5))
        'evt_42_2026-01-05'
    """
    return f"{parent_id}{INSTANCE_ID_SEPARATOR}{date_key(occurrence_date)}"


def decode_instance_id(composite_id: str) -> tuple[str, Optional[date]]:
    """
    Split a composite id into (parent_id, occurrence_date).

    Only the trailing segment is inspected, so parent ids that contain the
    separator themselves decode correctly. Ids whose trailing segment is not
    a date key are base event ids and come back as (id, None).

    Args:
        composite_id: Event id as found in payloads or storage

    Returns:
        Tuple of (parent_id, occurrence_date or None)
    """
    parent_id, separator, tail = composite_id.rpartition(INSTANCE_ID_SEPARATOR)
    if not separator or not parent_id:
        return composite_id, None

    occurrence_date = parse_date_key(tail)
    if occurrence_date is None:
        return composite_id, None

    return parent_id, occurrence_date


def parse_event_id(raw_id: str) -> EventId:
    """Turn a string id into its tagged form."""
    parent_id, occurrence_date = decode_instance_id(raw_id)
    if occurrence_date is None:
        return BaseEventId(raw_id)
    return InstanceEventId(parent_id, occurrence_date)
