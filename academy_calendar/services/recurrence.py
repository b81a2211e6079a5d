"""
Occurrence generation for recurrence rules.

Provides:
- next_occurrence: the single next occurrence date after a given one
- parse_rrule / validate_rrule: iCalendar RRULE string interop

The generator is a pure function of (current, rule, anchor); expansion over
a window lives in academy_calendar.services.expansion.

Uses python-dateutil for month/year arithmetic and RRULE parsing.
"""

import logging
import warnings
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import tz
from dateutil.parser import parse as parse_datetime
from dateutil.relativedelta import relativedelta
from dateutil.rrule import rrulestr
from pydantic import ValidationError

from academy_calendar.exceptions import InvalidRecurrenceRuleError
from academy_calendar.models.recurrence import Frequency, RecurrenceRule

logger = logging.getLogger(__name__)

# Only used to let dateutil check a rule string
VALIDATION_DTSTART = datetime(2020, 1, 1, 12, 0, 0)


def next_occurrence(current: date, rule: RecurrenceRule, anchor: date) -> Optional[date]:
    """
    Compute the occurrence that follows `current`.

    Args:
        current: Date of the current occurrence
        rule: Recurrence rule of the event
        anchor: Date of the first occurrence (keeps day-of-month continuity)

    Returns:
        Next occurrence date (always after `current`), or None if the rule's
        frequency is not supported or the next date is past date.max
    """
    try:
        return _advance(current, rule, anchor)
    except (OverflowError, ValueError):
        logger.debug(f"Next occurrence after {current} is out of the representable date range")
        return None


def _advance(current: date, rule: RecurrenceRule, anchor: date) -> Optional[date]:
    interval = rule.interval

    if rule.frequency == Frequency.DAILY:
        return current + timedelta(days=interval)

    if rule.frequency == Frequency.WEEKLY:
        weekdays = rule.weekday_numbers
        if not weekdays:
            return current + timedelta(weeks=interval)

        current_weekday = current.isoweekday() % 7
        for weekday in weekdays:
            if weekday > current_weekday:
                return current + timedelta(days=weekday - current_weekday)

        # Wrap to the first listed weekday of the next active week
        return current + timedelta(days=7 * interval - current_weekday + weekdays[0])

    if rule.frequency == Frequency.MONTHLY:
        # relativedelta clamps an absolute day to the last day of the month
        target_day = rule.by_day_of_month or anchor.day
        return current + relativedelta(months=interval, day=target_day)

    if rule.frequency == Frequency.YEARLY:
        # Feb 29 anchors fall on Feb 28 in non-leap years
        return current + relativedelta(years=interval, month=anchor.month, day=anchor.day)

    logger.warning(f"Unsupported recurrence frequency {rule.frequency!r}; stopping generation")
    return None


# Components the engine can honor; dateutil accepts more (BYHOUR, BYSETPOS, ...)
SUPPORTED_COMPONENTS = frozenset({"FREQ", "INTERVAL", "BYDAY", "BYMONTHDAY", "UNTIL", "COUNT"})


def parse_rrule(rrule_string: str) -> RecurrenceRule:
    """
    Parse an iCalendar RRULE string into a RecurrenceRule.

    The string is first checked by dateutil's rrulestr, then its FREQ,
    INTERVAL, BYDAY, BYMONTHDAY, UNTIL and COUNT components are mapped onto
    the model.

    Args:
        rrule_string: RRULE value, with or without an 'RRULE:' prefix
            (e.g., 'FREQ=WEEKLY;BYDAY=MO,WE,FR')

    Returns:
        Parsed RecurrenceRule

    Raises:
        InvalidRecurrenceRuleError: If the string is empty, lacks a supported
            FREQ, is rejected by dateutil, uses components the engine does not
            support, or carries values the model rejects
    """
    if not rrule_string or not rrule_string.strip():
        raise InvalidRecurrenceRuleError("RRULE string is empty")

    value = rrule_string.strip()
    if value.upper().startswith("RRULE:"):
        value = value[len("RRULE:"):]

    if "FREQ=" not in value.upper():
        raise InvalidRecurrenceRuleError("RRULE must contain FREQ component")

    components: dict[str, str] = {}
    for part in value.split(";"):
        key, separator, raw = part.partition("=")
        if not separator:
            raise InvalidRecurrenceRuleError(f"Malformed RRULE component: {part!r}")
        components[key.strip().upper()] = raw.strip()

    until = None
    if "UNTIL" in components:
        try:
            until = parse_datetime(components["UNTIL"])
        except (ValueError, OverflowError) as e:
            raise InvalidRecurrenceRuleError(f"Invalid UNTIL: {components['UNTIL']}", e)

    # dateutil requires DTSTART and UNTIL to agree on having a timezone
    dtstart = VALIDATION_DTSTART
    if until is not None and until.tzinfo is not None:
        dtstart = dtstart.replace(tzinfo=tz.UTC)

    try:
        with warnings.catch_warnings():
            # COUNT together with UNTIL is deprecated in dateutil but honored here
            warnings.simplefilter("ignore", DeprecationWarning)
            rrulestr(value, dtstart=dtstart)
    except (ValueError, TypeError, KeyError) as e:
        raise InvalidRecurrenceRuleError(f"Invalid RRULE: {e}", e)

    unsupported = sorted(set(components) - SUPPORTED_COMPONENTS)
    if unsupported:
        raise InvalidRecurrenceRuleError(f"Unsupported RRULE components: {', '.join(unsupported)}")

    frequency = components["FREQ"].lower()
    if frequency not in {f.value for f in Frequency}:
        raise InvalidRecurrenceRuleError(f"Unsupported FREQ: {components['FREQ']}")

    data: dict = {"frequency": frequency}
    if "INTERVAL" in components:
        data["interval"] = components["INTERVAL"]
    if "BYDAY" in components:
        data["by_day"] = components["BYDAY"]
    if "BYMONTHDAY" in components:
        data["by_day_of_month"] = components["BYMONTHDAY"]
    if "COUNT" in components:
        data["count"] = components["COUNT"]
    if until is not None:
        data["until"] = until.date()

    try:
        return RecurrenceRule.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(loc) for loc in first["loc"])
        raise InvalidRecurrenceRuleError(f"Invalid RRULE ({location}): {first['msg']}", e)


def validate_rrule(rrule_string: str) -> tuple[bool, Optional[str]]:
    """
    Validate an RRULE string.

    Args:
        rrule_string: iCalendar RRULE string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        parse_rrule(rrule_string)
    except InvalidRecurrenceRuleError as e:
        return False, e.message
    return True, None
