"""
Occurrence generators.

A generator turns a rule and a start date into a lazy sequence of
occurrence dates. Each generator owns its cursor (current candidate date and
number of occurrences produced), so it is restartable only by building a new
one, and it must not be advanced from several threads at once.

Generators are chosen per frequency through the GENERATORS registry; a
variant that cannot handle a rule raises GeneratorConstructionError and the
next registered variant is tried.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import ClassVar, Dict, FrozenSet, Optional, Tuple, Type

from dateutil.rrule import DAILY, HOURLY, MINUTELY, MONTHLY, WEEKLY, YEARLY, rrule
from dateutil.rrule import weekday as rrule_weekday

from .calendar import CalendarContext
from .exceptions import CalendarError, GeneratorConstructionError
from .filters import ByWeekdayFilter, Filter, matches_all
from .logging_config import setup_logging
from .models import BY_RULE_PARTS, DayOfWeek, Frequency, RecurrenceRule, Termination

logger = setup_logging()

DATEUTIL_FREQUENCIES = {
    Frequency.MINUTELY: MINUTELY,
    Frequency.HOURLY: HOURLY,
    Frequency.DAILY: DAILY,
    Frequency.WEEKLY: WEEKLY,
    Frequency.MONTHLY: MONTHLY,
    Frequency.YEARLY: YEARLY,
}


class OccurrenceGenerator(ABC):
    """Base class for per-frequency generators.

    Subclasses declare the frequencies they can generate and the BY* fields
    they honor, and implement ``advance``.
    """

    frequencies: ClassVar[FrozenSet[Frequency]] = frozenset()
    honored_fields: ClassVar[FrozenSet[str]] = frozenset(field for _, field in BY_RULE_PARTS)

    def __init__(
        self,
        rule: RecurrenceRule,
        start: datetime,
        calendar: Optional[CalendarContext] = None,
    ):
        if rule.frequency not in self.frequencies:
            raise GeneratorConstructionError(type(self).__name__, rule.frequency.value)

        self.calendar = calendar or CalendarContext()
        self.interval: int = rule.interval
        self.end: Termination = rule.end
        self.until: Optional[datetime] = (
            self.calendar.localize(rule.end.until) if rule.end.until is not None else None
        )
        self._current = self.calendar.localize(start)
        self._count = 0
        self._exhausted = False

    @classmethod
    def ignored_fields(cls, rule: RecurrenceRule) -> Tuple[str, ...]:
        """Non-empty BY* fields of ``rule`` this generator does not honor"""
        return tuple(
            field
            for _, field in BY_RULE_PARTS
            if getattr(rule, field) and field not in cls.honored_fields
        )

    @property
    def occurrence_count(self) -> int:
        return self._count

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self):
        return self

    def __next__(self) -> datetime:
        date = self.advance()
        if date is None:
            raise StopIteration
        return date

    @abstractmethod
    def advance(self) -> Optional[datetime]:
        """Next occurrence, or None once the sequence is exhausted"""

    def _reached_end(self) -> bool:
        if self.end.count is not None and self._count >= self.end.count:
            return True
        if self.until is not None and self._current > self.until:
            return True
        return False


class WeeklyGenerator(OccurrenceGenerator):
    """Day-stepping generator for WEEKLY rules.

    Walks forward one day at a time and accepts the days every filter
    matches. On the calendar's last weekday it jumps ``interval - 1`` extra
    weeks, which skips the weeks between two active ones.
    """

    frequencies = frozenset({Frequency.WEEKLY})
    honored_fields = frozenset({"weekdays"})

    def __init__(
        self,
        rule: RecurrenceRule,
        start: datetime,
        calendar: Optional[CalendarContext] = None,
    ):
        super().__init__(rule, start, calendar)

        # weekly matching ignores ordinals
        if rule.weekdays:
            days = rule.weekdays
        else:
            try:
                days = (DayOfWeek.every(self.calendar.weekday(self._current)),)
            except CalendarError as e:
                raise GeneratorConstructionError(
                    type(self).__name__, rule.frequency.value, e.message
                ) from e

        self.filters: Tuple[Filter, ...] = (ByWeekdayFilter(days, use_ordinal=False),)

    def advance(self) -> Optional[datetime]:
        while not self._exhausted:
            if self._reached_end():
                self._exhausted = True
                break

            candidate = self._current
            self._current = self._next_date(candidate)

            if matches_all(self.filters, candidate, self.calendar):
                self._count += 1
                return candidate

        return None

    def _next_date(self, date: datetime) -> datetime:
        step = 1 + (self.interval - 1) * 7 if self.calendar.is_last_weekday(date) else 1
        return self.calendar.add_days(date, step)


class RFC5545Generator(OccurrenceGenerator):
    """Generator for every frequency backed by ``dateutil.rrule``.

    Expansion runs on naive wall-clock times in the calendar's zone and each
    result is localized afterwards, so occurrences keep their local time
    across DST transitions.
    """

    frequencies = frozenset(Frequency)

    def __init__(
        self,
        rule: RecurrenceRule,
        start: datetime,
        calendar: Optional[CalendarContext] = None,
    ):
        super().__init__(rule, start, calendar)

        if 60 in rule.seconds:
            raise GeneratorConstructionError(
                type(self).__name__, rule.frequency.value, "leap seconds cannot be generated"
            )

        until = self.until.replace(tzinfo=None) if self.until is not None else None

        try:
            self._rrule = rrule(
                DATEUTIL_FREQUENCIES[rule.frequency],
                dtstart=self._current.replace(tzinfo=None),
                interval=rule.interval,
                wkst=self.calendar.first_weekday.to_int(),
                count=rule.end.count,
                until=until,
                bysetpos=_or_none(rule.set_positions),
                bymonth=_or_none([int(month) for month in rule.months]),
                bymonthday=_or_none(rule.days_of_month),
                byyearday=_or_none(rule.days_of_year),
                byweekno=_or_none(rule.weeks_of_year),
                byweekday=_or_none(
                    [rrule_weekday(day.weekday.to_int(), day.ordinal) for day in rule.weekdays]
                ),
                byhour=_or_none(rule.hours),
                byminute=_or_none(rule.minutes),
                bysecond=_or_none(rule.seconds),
                cache=False,
            )
        except ValueError as e:
            raise GeneratorConstructionError(
                type(self).__name__, rule.frequency.value, str(e)
            ) from e

        self._iterator = iter(self._rrule)

    def advance(self) -> Optional[datetime]:
        if self._exhausted:
            return None

        wall_time = next(self._iterator, None)
        if wall_time is None:
            self._exhausted = True
            return None

        self._count += 1
        self._current = self.calendar.localize(wall_time)
        return self._current


def _or_none(values):
    # dateutil derives defaults from dtstart only for parts passed as None
    return tuple(values) if values else None


GENERATORS: Dict[Frequency, Tuple[Type[OccurrenceGenerator], ...]] = {
    frequency: (RFC5545Generator,) for frequency in Frequency
}
GENERATORS[Frequency.WEEKLY] = (WeeklyGenerator, RFC5545Generator)


def register_generator(
    frequency: Frequency, generator: Type[OccurrenceGenerator], preferred: bool = True
) -> None:
    """Add a generator variant for ``frequency``, tried first when preferred"""
    variants = tuple(v for v in GENERATORS.get(frequency, ()) if v is not generator)
    GENERATORS[frequency] = (generator,) + variants if preferred else variants + (generator,)


def create_generator(
    rule: RecurrenceRule,
    start: datetime,
    calendar: Optional[CalendarContext] = None,
) -> OccurrenceGenerator:
    """Build the first registered generator able to handle ``rule``.

    Variants that would ignore one of the rule's BY* parts are skipped.

    Raises:
        GeneratorConstructionError: if no registered variant accepts the rule
    """
    error: Optional[GeneratorConstructionError] = None

    for generator in GENERATORS.get(rule.frequency, ()):
        ignored = generator.ignored_fields(rule)
        if ignored:
            logger.debug(f"Skipping {generator.__name__}: it ignores {', '.join(ignored)}")
            continue
        try:
            return generator(rule, start, calendar)
        except GeneratorConstructionError as e:
            logger.debug(f"{e} | Details: {e.details}")
            error = e

    raise error or GeneratorConstructionError(
        "create_generator", rule.frequency.value, "no registered generator accepts the rule"
    )
