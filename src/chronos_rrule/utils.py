"""
Utility functions for chronos-rrule
"""

from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser
from icalendar.prop import vRecur

from .calendar import CalendarContext
from .codec import RRuleCodec
from .logging_config import setup_logging
from .models import RecurrenceRule, Termination

logger = setup_logging()


def parse_datetime(dt_str: Union[str, datetime]) -> datetime:
    """Parse datetime string or return datetime object"""
    if isinstance(dt_str, datetime):
        return dt_str

    try:
        dt = parser.parse(dt_str)
    except (ValueError, OverflowError, TypeError) as e:
        logger.error(f"Error parsing datetime '{dt_str}': {e}")
        raise ValueError(f"Invalid datetime format: {dt_str}") from e

    # Ensure timezone awareness
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=pytz.utc)
    return dt


def ical_to_datetime(ical_dt, calendar: Optional[CalendarContext] = None) -> datetime:
    """Convert iCalendar datetime to an aware Python datetime

    Dates (all-day values) become midnight and naive values are taken as
    wall-clock times of ``calendar`` (UTC by default).
    """
    dt = ical_dt.dt if hasattr(ical_dt, "dt") else ical_dt

    if not isinstance(dt, datetime):
        if not isinstance(dt, date):
            raise ValueError(f"Not a date or datetime: {dt!r}")
        dt = datetime.combine(dt, datetime.min.time())

    if dt.tzinfo is None:
        dt = (calendar or CalendarContext()).localize(dt)
    return dt


def rule_from_ical(component, calendar: Optional[CalendarContext] = None) -> Optional[RecurrenceRule]:
    """Read the RRULE property of an icalendar component

    Returns None when the component has no RRULE. Only the first rule is
    read when several are present.

    Raises:
        RuleParseError: if the property value is not a valid rule
    """
    recur = component.get("RRULE")
    if recur is None:
        return None
    if isinstance(recur, list):
        if len(recur) > 1:
            logger.warning(f"Component has {len(recur)} RRULE properties, reading the first")
        recur = recur[0]

    text = recur.to_ical()
    if isinstance(text, bytes):
        text = text.decode("ascii")
    return RRuleCodec(calendar).parse(text)


def rule_to_ical(rule: RecurrenceRule, calendar: Optional[CalendarContext] = None) -> vRecur:
    """Convert a rule to an icalendar vRecur property value

    UNTIL is written in UTC, the only timed form iCalendar allows for it.
    """
    calendar = calendar or CalendarContext()
    if rule.end.until is not None:
        until = calendar.localize(rule.end.until).astimezone(pytz.utc)
        rule = rule.model_copy(update={"end": Termination.after_date(until)})
    return vRecur.from_ical(RRuleCodec(calendar).format(rule))
