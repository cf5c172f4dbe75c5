"""
Rule codec: RRULE text <-> RecurrenceRule
"""

from typing import Optional, Tuple

from .calendar import CalendarContext
from .exceptions import RuleGrammarError
from .formatter import RuleFormatter
from .models import RecurrenceRule
from .parser import RuleParser
from .validation import DEFAULT_MAX_RULE_LENGTH

RRULE_PROPERTY_PREFIX = "RRULE:"


class RRuleCodec:
    """Parser and formatter bound to one calendar.

    Stateless apart from configuration, so one codec can be shared between
    threads.
    """

    def __init__(
        self,
        calendar: Optional[CalendarContext] = None,
        max_length: int = DEFAULT_MAX_RULE_LENGTH,
    ):
        self.calendar = calendar or CalendarContext()
        self.parser = RuleParser(self.calendar, max_length=max_length)
        self.formatter = RuleFormatter(self.calendar)

    def parse(self, text: str) -> RecurrenceRule:
        return self.parser.parse(text)

    def parse_partial(
        self, text: str, start: int = 0, end: Optional[int] = None
    ) -> Tuple[int, RecurrenceRule]:
        return self.parser.parse_partial(text, start, end)

    def format(self, rule: RecurrenceRule) -> str:
        return self.formatter.format(rule)

    def parse_line(self, line: str, start: int = 0) -> Tuple[int, RecurrenceRule]:
        """Parse an iCalendar ``RRULE:`` content line starting at ``start``.

        Returns the index just past the rule value (at the line break, if
        any) and the rule.
        """
        if not line.startswith(RRULE_PROPERTY_PREFIX, start):
            raise RuleGrammarError(
                line, "content line does not start with RRULE:", position=start
            )
        return self.parser.parse_partial(line, start + len(RRULE_PROPERTY_PREFIX))


def parse_rrule(text: str, calendar: Optional[CalendarContext] = None) -> RecurrenceRule:
    """Parse RRULE text such as ``FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE,FR``"""
    return RRuleCodec(calendar).parse(text)


def format_rrule(rule: RecurrenceRule, calendar: Optional[CalendarContext] = None) -> str:
    """Format a rule as RRULE text"""
    return RRuleCodec(calendar).format(rule)


def parse_rrule_line(line: str, calendar: Optional[CalendarContext] = None) -> RecurrenceRule:
    """Parse ``RRULE:FREQ=...`` as found in iCalendar data"""
    _, rule = RRuleCodec(calendar).parse_line(line)
    return rule
