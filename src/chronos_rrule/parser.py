"""RRULE text parser.

Grammar: semicolon separated ``KEY=VALUE`` rule parts, ``FREQ`` first and
mandatory, every other key optional and unique. List values are comma
separated and every element is validated on its own; one bad element fails
the whole rule.

The scan is a single left-to-right pass. Rule parts and list elements are
handled as ``(start, end)`` index pairs into the input string, so nothing is
split or copied until a value has been recognized.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytz
from pydantic import ValidationError as PydanticValidationError

from .calendar import CalendarContext, resolve_timezone
from .exceptions import (
    InvalidDateError,
    RuleGrammarError,
    RuleParseError,
    RuleValueError,
    UnknownTimeZoneError,
    UnsupportedRuleError,
)
from .logging_config import setup_logging
from .models import (
    BY_RULE_PARTS,
    FIELD_DOMAINS,
    ORDINAL_DOMAIN,
    DayOfWeek,
    Frequency,
    Month,
    RecurrenceRule,
    Termination,
    Weekday,
    in_domain,
)
from .validation import DEFAULT_MAX_RULE_LENGTH, InputValidator

logger = setup_logging()

FREQUENCY_LITERALS = {frequency.value: frequency for frequency in Frequency}
UNSUPPORTED_FREQUENCIES = {"SECONDLY"}
WEEKDAY_CODES = {weekday.value: weekday for weekday in Weekday}
LINE_TERMINATORS = "\r\n"

_BY_PART_FIELDS = dict(BY_RULE_PARTS)


def scan_unsigned(text: str, start: int, end: int) -> Optional[int]:
    """Accumulate ASCII digits in ``text[start:end]``; None on any other byte"""
    if start >= end:
        return None
    result = 0
    for index in range(start, end):
        ch = text[index]
        if not "0" <= ch <= "9":
            return None
        result = result * 10 + (ord(ch) - 48)
    return result


def scan_int(text: str, start: int, end: int) -> Optional[int]:
    """Integer with an optional leading '-'"""
    if start < end and text[start] == "-":
        value = scan_unsigned(text, start + 1, end)
        return None if value is None else -value
    return scan_unsigned(text, start, end)


def scan_bounded(
    text: str, start: int, end: int, minimum: int, maximum: int, allow_zero: bool = True
) -> Optional[int]:
    value = scan_int(text, start, end)
    if value is None or not in_domain(value, minimum, maximum, allow_zero):
        return None
    return value


def scan_weekday(text: str, start: int, end: int) -> Optional[DayOfWeek]:
    """``[+|-]N`` ordinal (optional) followed by a two-letter weekday code"""
    code_start = end - 2
    if code_start < start:
        return None
    weekday = WEEKDAY_CODES.get(text[code_start:end])
    if weekday is None:
        return None
    if code_start == start:
        return DayOfWeek.every(weekday)

    if text[start] == "+":
        ordinal = scan_unsigned(text, start + 1, code_start)
    else:
        ordinal = scan_int(text, start, code_start)
    if ordinal is None or not in_domain(ordinal, *ORDINAL_DOMAIN, allow_zero=False):
        return None
    return DayOfWeek.nth(ordinal, weekday)


def scan_month(text: str, start: int, end: int) -> Optional[Month]:
    value = scan_bounded(text, start, end, 1, 12)
    return None if value is None else Month(value)


class RuleParser:
    """Parse RRULE text into a RecurrenceRule.

    Dates in ``UNTIL`` without an explicit zone (no ``Z`` suffix, no
    ``TZID=`` prefix) are interpreted in the parser's calendar.
    """

    def __init__(
        self,
        calendar: Optional[CalendarContext] = None,
        max_length: int = DEFAULT_MAX_RULE_LENGTH,
    ):
        self.calendar = calendar or CalendarContext()
        self.max_length = max_length
        self._handlers: Dict[str, Callable[[str, str, int, int, Dict[str, Any]], None]] = {
            "UNTIL": self._parse_until,
            "COUNT": self._parse_count,
            "INTERVAL": self._parse_interval,
            "BYDAY": self._parse_by_day,
            "BYMONTH": self._parse_by_month,
        }
        for key, field in BY_RULE_PARTS:
            if field in FIELD_DOMAINS:
                self._handlers[key] = self._parse_by_integers

    def parse(self, text: str) -> RecurrenceRule:
        """Parse a complete rule string.

        Raises:
            RuleGrammarError: malformed structure
            RuleValueError: a value outside its domain
            UnsupportedRuleError: a recognized but unsupported value
        """
        try:
            InputValidator.validate_rule_text(text, self.max_length)
            _, rule = self.parse_partial(text)
        except RuleParseError as e:
            logger.debug(f"Rejected rule: {e} | Details: {e.details}")
            raise
        return rule

    def parse_partial(
        self, text: str, start: int = 0, end: Optional[int] = None
    ) -> Tuple[int, RecurrenceRule]:
        """Parse the rule found in ``text[start:end]``.

        The rule stops at ``end`` or at the first line break, whichever comes
        first, so a rule can be read out of a larger document. Returns the
        index where parsing stopped together with the rule.
        """
        end = len(text) if end is None else min(end, len(text))
        for terminator in LINE_TERMINATORS:
            position = text.find(terminator, start, end)
            if position != -1:
                end = position

        if start >= end:
            raise RuleGrammarError(text, "rule cannot be empty", position=start)

        index, key_start, key_end, value_start, value_end = self._next_part(text, start, end)
        if text[key_start:key_end] != "FREQ":
            raise RuleGrammarError(
                text,
                "rule must start with FREQ",
                position=key_start,
                key=text[key_start:key_end],
            )

        values: Dict[str, Any] = {"frequency": self._parse_frequency(text, value_start, value_end)}
        seen = {"FREQ"}

        while index < end:
            index, key_start, key_end, value_start, value_end = self._next_part(text, index, end)
            key = text[key_start:key_end]

            if key in seen:
                raise RuleGrammarError(
                    text, f"duplicate rule part '{key}'", position=key_start, key=key
                )
            handler = self._handlers.get(key)
            if handler is None:
                raise RuleGrammarError(
                    text, f"unknown rule part '{key}'", position=key_start, key=key
                )
            seen.add(key)
            handler(text, key, value_start, value_end, values)

        try:
            rule = RecurrenceRule(**values)
        except PydanticValidationError as e:
            raise RuleValueError(text, str(e)) from e
        return index, rule

    def _next_part(self, text: str, index: int, end: int) -> Tuple[int, int, int, int, int]:
        """Locate the next KEY=VALUE part starting at ``index``.

        Returns the index after the part (past its ';') and the key and value
        bounds.
        """
        semicolon = text.find(";", index, end)
        part_end = end if semicolon == -1 else semicolon
        equals = text.find("=", index, part_end)
        if equals == -1:
            raise RuleGrammarError(
                text,
                "rule part is missing '='",
                position=index,
                fragment=text[index:part_end],
            )
        next_index = part_end + 1 if semicolon != -1 else end
        return next_index, index, equals, equals + 1, part_end

    def _parse_frequency(self, text: str, start: int, end: int) -> Frequency:
        value = text[start:end]
        frequency = FREQUENCY_LITERALS.get(value)
        if frequency is not None:
            return frequency
        if value in UNSUPPORTED_FREQUENCIES:
            raise UnsupportedRuleError(
                text, f"frequency {value} is not supported", position=start, key="FREQ", fragment=value
            )
        raise RuleValueError(
            text, f"invalid frequency '{value}'", position=start, key="FREQ", fragment=value
        )

    def _invalid(self, text: str, key: str, start: int, end: int, reason: Optional[str] = None):
        fragment = text[start:end]
        return RuleValueError(
            text,
            reason or f"invalid {key} value '{fragment}'",
            position=start,
            key=key,
            fragment=fragment,
        )

    def _scan_list(
        self,
        text: str,
        key: str,
        start: int,
        end: int,
        element: Callable[[str, int, int], Any],
    ) -> List[Any]:
        results = []
        element_start = start
        while True:
            comma = text.find(",", element_start, end)
            element_end = end if comma == -1 else comma
            value = element(text, element_start, element_end)
            if value is None:
                raise self._invalid(text, key, element_start, element_end)
            results.append(value)
            if comma == -1:
                break
            element_start = comma + 1

        return results

    def _check_termination(self, text: str, key: str, start: int, values: Dict[str, Any]):
        if "end" in values:
            raise RuleGrammarError(
                text, "COUNT and UNTIL are mutually exclusive", position=start, key=key
            )

    def _parse_count(self, text, key, start, end, values):
        self._check_termination(text, key, start, values)
        count = scan_unsigned(text, start, end)
        if count is None or count < 1:
            raise self._invalid(text, key, start, end)
        values["end"] = Termination.after_occurrences(count)

    def _parse_until(self, text, key, start, end, values):
        self._check_termination(text, key, start, values)
        values["end"] = Termination.after_date(self._parse_date(text, start, end))

    def _parse_interval(self, text, key, start, end, values):
        interval = scan_unsigned(text, start, end)
        if interval is None or interval < 1:
            raise self._invalid(text, key, start, end)
        values["interval"] = interval

    def _parse_by_integers(self, text, key, start, end, values):
        field = _BY_PART_FIELDS[key]
        minimum, maximum, allow_zero = FIELD_DOMAINS[field]
        values[field] = self._scan_list(
            text,
            key,
            start,
            end,
            lambda t, s, e: scan_bounded(t, s, e, minimum, maximum, allow_zero),
        )

    def _parse_by_day(self, text, key, start, end, values):
        values["weekdays"] = self._scan_list(text, key, start, end, scan_weekday)

    def _parse_by_month(self, text, key, start, end, values):
        values["months"] = self._scan_list(text, key, start, end, scan_month)

    def _parse_date(self, text: str, start: int, end: int) -> datetime:
        """UNTIL value: DATE, local DATE-TIME, UTC DATE-TIME (``Z``), or a
        ``TZID=<zone>:`` prefixed local DATE-TIME"""
        value_start = start
        tz = None

        if text.startswith("TZID=", start, end):
            colon = text.find(":", start, end)
            if colon == -1:
                raise self._invalid(text, "UNTIL", value_start, end, "TZID is missing ':'")
            try:
                tz = resolve_timezone(text[start + 5 : colon])
            except UnknownTimeZoneError as e:
                raise self._invalid(text, "UNTIL", value_start, end, e.message) from e
            start = colon + 1
        elif end - start == 16 and text[end - 1] == "Z":
            tz = pytz.utc
            end -= 1

        length = end - start
        if length == 8:
            time_fields = (0, 0, 0)
        elif length == 15 and text[start + 8] == "T":
            time_fields = (
                scan_bounded(text, start + 9, start + 11, 0, 23),
                scan_bounded(text, start + 11, start + 13, 0, 59),
                scan_bounded(text, start + 13, start + 15, 0, 60),
            )
        else:
            raise self._invalid(text, "UNTIL", value_start, end)

        year = scan_unsigned(text, start, start + 4)
        month = scan_bounded(text, start + 4, start + 6, 1, 12)
        day = scan_bounded(text, start + 6, start + 8, 1, 31)
        if None in (year, month, day) or None in time_fields:
            raise self._invalid(text, "UNTIL", value_start, end)

        try:
            return self.calendar.make_date(year, month, day, *time_fields, tz=tz)
        except InvalidDateError as e:
            raise self._invalid(text, "UNTIL", value_start, end, e.message) from e
