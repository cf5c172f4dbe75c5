"""
chronos-rrule: RRULE codec and occurrence generation
"""

from .calendar import CalendarContext
from .codec import RRuleCodec, format_rrule, parse_rrule, parse_rrule_line
from .exceptions import (
    ChronosRRuleError,
    GeneratorConstructionError,
    RuleGrammarError,
    RuleParseError,
    RuleValueError,
    UnsupportedRuleError,
)
from .generators import create_generator, register_generator
from .models import DayOfWeek, Frequency, Month, RecurrenceRule, RRuleString, Termination, Weekday
from .occurrences import occurrences, occurrences_between

__version__ = "0.1.0"

__all__ = [
    "CalendarContext",
    "ChronosRRuleError",
    "DayOfWeek",
    "Frequency",
    "GeneratorConstructionError",
    "Month",
    "RRuleCodec",
    "RRuleString",
    "RecurrenceRule",
    "RuleGrammarError",
    "RuleParseError",
    "RuleValueError",
    "Termination",
    "UnsupportedRuleError",
    "Weekday",
    "create_generator",
    "format_rrule",
    "occurrences",
    "occurrences_between",
    "parse_rrule",
    "parse_rrule_line",
    "register_generator",
]
