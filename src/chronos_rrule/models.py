"""
Data models for chronos-rrule
"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationInfo,
    field_validator,
    model_validator,
)

# field name -> (minimum, maximum, zero allowed)
FIELD_DOMAINS: dict[str, tuple[int, int, bool]] = {
    "seconds": (0, 60, True),
    "minutes": (0, 59, True),
    "hours": (0, 23, True),
    "days_of_month": (-31, 31, False),
    "days_of_year": (-366, 366, False),
    "weeks_of_year": (-53, 53, False),
    "set_positions": (-366, 366, False),
}

ORDINAL_DOMAIN = (-5, 5)

# BY* rule part -> RecurrenceRule field, in canonical output order
BY_RULE_PARTS: tuple[tuple[str, str], ...] = (
    ("BYSECOND", "seconds"),
    ("BYMINUTE", "minutes"),
    ("BYHOUR", "hours"),
    ("BYDAY", "weekdays"),
    ("BYMONTHDAY", "days_of_month"),
    ("BYYEARDAY", "days_of_year"),
    ("BYWEEKNO", "weeks_of_year"),
    ("BYMONTH", "months"),
    ("BYSETPOS", "set_positions"),
)


def in_domain(value: int, minimum: int, maximum: int, allow_zero: bool) -> bool:
    """Check an integer against a closed range, optionally excluding zero"""
    if value == 0 and not allow_zero:
        return False
    return minimum <= value <= maximum


class Frequency(str, Enum):
    """Base repetition unit of a rule"""

    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Weekday(str, Enum):
    """Two-letter weekday codes"""

    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"
    SUNDAY = "SU"

    def to_int(self) -> int:
        """Monday is 0, as in datetime.weekday()"""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def from_int(cls, number: int) -> "Weekday":
        return _WEEKDAY_ORDER[number % 7]


_WEEKDAY_ORDER = tuple(Weekday)


class Month(IntEnum):
    """Months of the year"""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12


class DayOfWeek(BaseModel):
    """A weekday with an optional ordinal (e.g. ``-1SU`` is the last Sunday)"""

    model_config = ConfigDict(frozen=True)

    ordinal: int | None = Field(
        None, description="Nth occurrence in the enclosing period, negative from the end"
    )
    weekday: Weekday = Field(..., description="Weekday code")

    @field_validator("ordinal")
    @classmethod
    def validate_ordinal(cls, v: int | None) -> int | None:
        if v is not None and not in_domain(v, *ORDINAL_DOMAIN, allow_zero=False):
            raise ValueError(f"ordinal must be in [-5, 5] without 0, got {v}")
        return v

    @classmethod
    def every(cls, weekday: Weekday) -> "DayOfWeek":
        return cls(ordinal=None, weekday=weekday)

    @classmethod
    def first(cls, weekday: Weekday) -> "DayOfWeek":
        return cls(ordinal=1, weekday=weekday)

    @classmethod
    def last(cls, weekday: Weekday) -> "DayOfWeek":
        return cls(ordinal=-1, weekday=weekday)

    @classmethod
    def nth(cls, ordinal: int, weekday: Weekday) -> "DayOfWeek":
        return cls(ordinal=ordinal, weekday=weekday)

    def __str__(self) -> str:
        if self.ordinal is None:
            return self.weekday.value
        return f"{self.ordinal}{self.weekday.value}"


class Termination(BaseModel):
    """How a recurrence ends: never, after N occurrences, or after a date"""

    model_config = ConfigDict(frozen=True)

    count: int | None = Field(None, ge=1, description="Number of occurrences")
    until: datetime | None = Field(None, description="Last possible occurrence date")

    @field_validator("until")
    @classmethod
    def validate_until(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("until must be timezone-aware")
        # RRULE dates have second precision
        if v.microsecond:
            return v.replace(microsecond=0)
        return v

    @model_validator(mode="after")
    def check_exclusive(self) -> "Termination":
        if self.count is not None and self.until is not None:
            raise ValueError("a rule cannot end both after a count and after a date")
        return self

    @classmethod
    def never(cls) -> "Termination":
        return cls()

    @classmethod
    def after_occurrences(cls, count: int) -> "Termination":
        return cls(count=count)

    @classmethod
    def after_date(cls, until: datetime) -> "Termination":
        return cls(until=until)

    @property
    def is_never(self) -> bool:
        return self.count is None and self.until is None


class RecurrenceRule(BaseModel):
    """A structured recurrence rule.

    Empty sequences mean the constraint is not specified. Instances are
    immutable; use ``model_copy(update=...)`` to derive a modified rule.
    """

    model_config = ConfigDict(frozen=True)

    frequency: Frequency = Field(..., description="Base repetition unit")
    interval: int = Field(1, ge=1, description="Multiplier of the frequency step")
    end: Termination = Field(default_factory=Termination.never)
    seconds: tuple[int, ...] = Field((), description="BYSECOND values")
    minutes: tuple[int, ...] = Field((), description="BYMINUTE values")
    hours: tuple[int, ...] = Field((), description="BYHOUR values")
    weekdays: tuple[DayOfWeek, ...] = Field((), description="BYDAY values")
    days_of_month: tuple[int, ...] = Field((), description="BYMONTHDAY values")
    days_of_year: tuple[int, ...] = Field((), description="BYYEARDAY values")
    weeks_of_year: tuple[int, ...] = Field((), description="BYWEEKNO values")
    months: tuple[Month, ...] = Field((), description="BYMONTH values")
    set_positions: tuple[int, ...] = Field((), description="BYSETPOS values")

    @field_validator(*FIELD_DOMAINS)
    @classmethod
    def validate_domain(cls, v: tuple[int, ...], info: ValidationInfo) -> tuple[int, ...]:
        minimum, maximum, allow_zero = FIELD_DOMAINS[info.field_name]
        for value in v:
            if not in_domain(value, minimum, maximum, allow_zero):
                raise ValueError(
                    f"{info.field_name} value {value} outside [{minimum}, {maximum}]"
                    + ("" if allow_zero else " without 0")
                )
        return v

    @classmethod
    def from_string(cls, text: str, calendar=None) -> "RecurrenceRule":
        """Parse grammar text such as ``FREQ=WEEKLY;BYDAY=MO,WE``"""
        from .codec import parse_rrule

        return parse_rrule(text, calendar=calendar)

    def to_string(self, calendar=None) -> str:
        from .codec import format_rrule

        return format_rrule(self, calendar=calendar)

    def __str__(self) -> str:
        return self.to_string()

    def to_info(self) -> dict[str, Any]:
        """Plain dictionary summary of the rule"""
        return {
            "frequency": self.frequency.value,
            "interval": self.interval,
            "count": self.end.count,
            "until": self.end.until,
            "byday": [str(day) for day in self.weekdays] or None,
            "bymonthday": list(self.days_of_month) or None,
            "byyearday": list(self.days_of_year) or None,
            "byweekno": list(self.weeks_of_year) or None,
            "bymonth": [int(month) for month in self.months] or None,
            "bysetpos": list(self.set_positions) or None,
            "byhour": list(self.hours) or None,
            "byminute": list(self.minutes) or None,
            "bysecond": list(self.seconds) or None,
        }


def _coerce_rule(value: Any) -> Any:
    if isinstance(value, str):
        return RecurrenceRule.from_string(value)
    return value


# A rule field that is stored and transmitted as its grammar text
RRuleString = Annotated[
    RecurrenceRule,
    BeforeValidator(_coerce_rule),
    PlainSerializer(lambda rule: rule.to_string(), return_type=str),
]
