"""
Recurring event expansion service.

Turns events that carry a recurrence rule into the concrete instances that
fall inside a calendar window:
- materialize_instance: one occurrence date -> one instance event
- expand_event: one event -> its instances in a window
- expand_all_events: many events -> flattened render-ready list
- get_next_instance: first upcoming instance after a point in time

Instances are built fresh on every call and keep the parent's time of day
and duration. Individually edited or cancelled occurrences are suppressed
through per-event exception sets of YYYY-MM-DD date keys.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Mapping, Optional, Sequence, Union

from academy_calendar.config import get_settings
from academy_calendar.models.events import CalendarEvent, ViewRange
from academy_calendar.models.identifiers import date_key, encode_instance_id
from academy_calendar.models.recurrence import RecurrenceRule
from academy_calendar.services.recurrence import next_occurrence

logger = logging.getLogger(__name__)

ExceptionDates = Iterable[Union[str, date]]


def _exception_keys(exceptions: Optional[ExceptionDates]) -> frozenset[str]:
    """Normalize an exception set to date keys."""
    if not exceptions:
        return frozenset()
    return frozenset(
        date_key(item) if isinstance(item, date) else str(item)
        for item in exceptions
    )


def _align(bound: datetime, reference: datetime) -> datetime:
    """
    Make a window bound comparable with an event timestamp.

    A naive bound is read in the event's timezone; an aware bound used with a
    naive event is converted to the configured default timezone.
    """
    if reference.tzinfo is not None and bound.tzinfo is None:
        return bound.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and bound.tzinfo is not None:
        return bound.astimezone(get_settings().tzinfo).replace(tzinfo=None)
    return bound


def _until_end(event: CalendarEvent) -> Optional[datetime]:
    """Last instant an occurrence may start at under the rule's UNTIL."""
    rule = event.recurrence_rule
    if rule is None or rule.until is None:
        return None
    return datetime.combine(rule.until, time.max, tzinfo=event.start_time.tzinfo)


def _max_count(rule: RecurrenceRule, max_occurrences: Optional[int]) -> int:
    """In-window occurrence budget: the rule's COUNT, else the safety limit."""
    if rule.count is not None:
        return rule.count
    return max_occurrences or get_settings().max_occurrences


def materialize_instance(parent: CalendarEvent, occurrence_date: date) -> CalendarEvent:
    """
    Build the instance of `parent` that falls on `occurrence_date`.

    Args:
        parent: Recurring (or one-time) event to copy
        occurrence_date: Calendar date of the instance

    Returns:
        Shallow copy of the parent with a composite id and start/end moved to
        the occurrence date at the parent's original time of day
    """
    start = datetime.combine(occurrence_date, parent.start_time.timetz())
    end = start + parent.duration

    if end < start:
        # Overnight events stored as end-time-of-day earlier than start
        end = datetime.combine(occurrence_date, parent.end_time.timetz())
        if end < start:
            end += timedelta(days=1)

    return parent.model_copy(
        update={
            "id": encode_instance_id(parent.id, occurrence_date),
            "start_time": start,
            "end_time": end,
        }
    )


def expand_event(
    event: CalendarEvent,
    view_range: ViewRange,
    exceptions: Optional[ExceptionDates] = None,
    max_occurrences: Optional[int] = None,
) -> list[CalendarEvent]:
    """
    Expand a recurring event into instances within a view range.

    Generation stops after COUNT occurrences inside the window (suppressed
    ones included), or after `max_occurrences` when the rule has no COUNT.
    Occurrences before the window do not use up COUNT.

    Args:
        event: Event to expand
        view_range: Window of the calendar being displayed
        exceptions: Date keys (or dates) of occurrences to suppress
        max_occurrences: Safety limit (default: Settings.max_occurrences)

    Returns:
        Instances in chronological order; [event] if it is not recurring
    """
    rule = event.recurrence_rule
    if rule is None:
        return [event]

    excluded = _exception_keys(exceptions)
    limit = _max_count(rule, max_occurrences)

    start = event.start_time
    anchor = start.date()
    window_start = _align(view_range.start, start)
    effective_end = _align(view_range.end, start)
    until_end = _until_end(event)
    if until_end is not None and until_end < effective_end:
        effective_end = until_end

    instances: list[CalendarEvent] = []
    current = anchor
    occurrence_start = start
    in_window = 0

    while occurrence_start <= effective_end:
        if occurrence_start >= window_start:
            in_window += 1
            if date_key(current) not in excluded:
                instances.append(materialize_instance(event, current))
            if in_window >= limit:
                logger.debug(f"Event {event.id}: reached limit of {limit} occurrences")
                break

        next_date = next_occurrence(current, rule, anchor)
        if next_date is None:
            break

        current = next_date
        occurrence_start = datetime.combine(current, start.timetz())

    logger.debug(
        f"Expanded event {event.id} into {len(instances)} instances "
        f"({in_window - len(instances)} suppressed)"
    )
    return instances


def expand_all_events(
    events: Sequence[CalendarEvent],
    view_range: ViewRange,
    exceptions_by_event_id: Optional[Mapping[str, ExceptionDates]] = None,
    max_occurrences: Optional[int] = None,
) -> list[CalendarEvent]:
    """
    Expand every recurring event in `events` and flatten the result.

    Output follows input order (each event's instances are contiguous); it is
    not re-sorted by date.

    Args:
        events: Events as loaded by the caller
        view_range: Window of the calendar being displayed
        exceptions_by_event_id: Event id -> date keys of suppressed occurrences
        max_occurrences: Safety limit per event

    Returns:
        Flattened list of instances and one-time events
    """
    exceptions_by_event_id = exceptions_by_event_id or {}
    expanded: list[CalendarEvent] = []

    for event in events:
        if event.is_recurring:
            expanded.extend(
                expand_event(
                    event,
                    view_range,
                    exceptions_by_event_id.get(event.id),
                    max_occurrences=max_occurrences,
                )
            )
        else:
            expanded.append(event)

    logger.debug(f"Expanded {len(events)} events into {len(expanded)} calendar entries")
    return expanded


def get_next_instance(
    event: CalendarEvent,
    after: datetime,
    exceptions: Optional[ExceptionDates] = None,
    max_occurrences: Optional[int] = None,
) -> Optional[CalendarEvent]:
    """
    Get the first instance of an event starting strictly after `after`.

    Candidates are counted the same way expand_event counts a window that
    opens at `after`: at most COUNT (or `max_occurrences` without COUNT)
    candidates are considered, suppressed ones included.

    Args:
        event: Event to look up
        after: Point in time to search from
        exceptions: Date keys (or dates) of occurrences to skip
        max_occurrences: Safety limit (default: Settings.max_occurrences)

    Returns:
        Next instance, the event itself if it is one-time and still upcoming,
        or None
    """
    start = event.start_time
    after = _align(after, start)

    rule = event.recurrence_rule
    if rule is None:
        return event if start > after else None

    excluded = _exception_keys(exceptions)
    limit = _max_count(rule, max_occurrences)
    until_end = _until_end(event)

    anchor = start.date()
    current = anchor
    occurrence_start = start
    considered = 0

    while until_end is None or occurrence_start <= until_end:
        if occurrence_start > after:
            if date_key(current) not in excluded:
                return materialize_instance(event, current)
            considered += 1
            if considered >= limit:
                break

        next_date = next_occurrence(current, rule, anchor)
        if next_date is None:
            break

        current = next_date
        occurrence_start = datetime.combine(current, start.timetz())

    return None
