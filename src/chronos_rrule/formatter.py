"""RRULE text formatter.

Output is ``FREQ`` first, then the termination, ``INTERVAL`` (only when
greater than 1) and the non-empty BY* parts in canonical order. Text is
emitted byte by byte into a bytearray, whose storage grows geometrically.
"""

from datetime import datetime
from typing import Iterable, Optional

import pytz

from .calendar import CalendarContext, wall_time_is_unique, zone_name
from .models import BY_RULE_PARTS, DayOfWeek, RecurrenceRule

_MINUS = ord("-")
_ZERO = ord("0")


def append_int(buffer: bytearray, value: int, width: int = 0) -> None:
    """Sign, then digits, zero-padded to ``width``"""
    if value < 0:
        buffer.append(_MINUS)
        value = -value

    digits = bytearray()
    while True:
        value, digit = divmod(value, 10)
        digits.append(_ZERO + digit)
        if value == 0:
            break
    for _ in range(width - len(digits)):
        buffer.append(_ZERO)
    digits.reverse()
    buffer += digits


def append_text(buffer: bytearray, text: str) -> None:
    buffer += text.encode("ascii")


def append_weekday(buffer: bytearray, day: DayOfWeek) -> None:
    if day.ordinal is not None:
        append_int(buffer, day.ordinal)
    append_text(buffer, day.weekday.value)


def append_list(buffer: bytearray, values: Iterable, append_element=append_int) -> None:
    """Comma separated list"""
    for position, value in enumerate(values):
        if position:
            buffer.append(ord(","))
        append_element(buffer, value)


class RuleFormatter:
    """Format a RecurrenceRule as RRULE text; total over valid rules."""

    def __init__(self, calendar: Optional[CalendarContext] = None):
        self.calendar = calendar or CalendarContext()

    def format(self, rule: RecurrenceRule) -> str:
        buffer = bytearray(b"FREQ=")
        append_text(buffer, rule.frequency.value)

        if rule.end.count is not None:
            append_text(buffer, ";COUNT=")
            append_int(buffer, rule.end.count)
        elif rule.end.until is not None:
            append_text(buffer, ";UNTIL=")
            self.append_date(buffer, rule.end.until)

        if rule.interval > 1:
            append_text(buffer, ";INTERVAL=")
            append_int(buffer, rule.interval)

        for key, field in BY_RULE_PARTS:
            values = getattr(rule, field)
            if not values:
                continue
            buffer.append(ord(";"))
            append_text(buffer, key)
            buffer.append(ord("="))
            if field == "weekdays":
                append_list(buffer, values, append_weekday)
            else:
                append_list(buffer, (int(value) for value in values))

        return buffer.decode("ascii")

    def append_date(self, buffer: bytearray, date: datetime) -> None:
        """Emit an aware UNTIL date so that the calendar parses it back to
        the same instant.

        - DATE when the time of day is midnight at the calendar's own offset
        - DATE-TIME with ``Z`` for UTC
        - ``TZID=<zone>:`` DATE-TIME for named zones
        - bare local DATE-TIME for unnamed zones at the calendar's offset
        - anything else is converted to UTC

        Local forms are only used when the wall-clock time is not repeated or
        skipped by a DST change, since the text cannot say which instant was
        meant.
        """
        offset = date.utcoffset()
        local = self.calendar.localize(date)
        calendar_offset = local.utcoffset()
        calendar_local = offset == calendar_offset and wall_time_is_unique(
            self.calendar.tz, local.replace(tzinfo=None)
        )
        midnight = (date.hour, date.minute, date.second) == (0, 0, 0)

        if midnight and calendar_local:
            self._append_components(buffer, date, with_time=False)
        elif not offset:
            self._append_components(buffer, date, with_time=True)
            buffer.append(ord("Z"))
        elif zone_name(date.tzinfo) and wall_time_is_unique(
            date.tzinfo, date.replace(tzinfo=None)
        ):
            append_text(buffer, f"TZID={zone_name(date.tzinfo)}:")
            self._append_components(buffer, date, with_time=True)
        elif calendar_local:
            self._append_components(buffer, date, with_time=True)
        else:
            self._append_components(buffer, date.astimezone(pytz.utc), with_time=True)
            buffer.append(ord("Z"))

    def _append_components(self, buffer: bytearray, date: datetime, with_time: bool) -> None:
        append_int(buffer, date.year, 4)
        append_int(buffer, date.month, 2)
        append_int(buffer, date.day, 2)
        if with_time:
            buffer.append(ord("T"))
            append_int(buffer, date.hour, 2)
            append_int(buffer, date.minute, 2)
            append_int(buffer, date.second, 2)
