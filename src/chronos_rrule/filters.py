"""
Date filters used by occurrence generators.

A filter answers one question: does this candidate date satisfy a
constraint? Generators hold an ordered list of filters and accept a candidate
only when every filter matches it. New constraint kinds are added by
implementing the Filter protocol.
"""

from datetime import datetime
from typing import Iterable, Protocol, Sequence, runtime_checkable

from .calendar import CalendarContext
from .models import DayOfWeek


@runtime_checkable
class Filter(Protocol):
    """Predicate over candidate dates"""

    def matches(self, date: datetime, calendar: CalendarContext) -> bool: ...


def matches_all(filters: Iterable[Filter], date: datetime, calendar: CalendarContext) -> bool:
    """AND-combination of filters"""
    return all(f.matches(date, calendar) for f in filters)


class ByWeekdayFilter:
    """Match dates falling on one of the configured weekdays.

    With ``use_ordinal`` enabled, an entry carrying an ordinal also requires
    the date's week of the month to equal it; negative ordinals count weeks
    from the end of the month. Entries are OR-combined.
    """

    def __init__(self, days_of_week: Sequence[DayOfWeek], use_ordinal: bool = True):
        self.days_of_week = tuple(days_of_week)
        self.use_ordinal = use_ordinal

    def matches(self, date: datetime, calendar: CalendarContext) -> bool:
        weekday = calendar.weekday(date)
        week_of_month = calendar.week_of_month(date)
        reversed_week_of_month = -(calendar.weeks_in_month(date) - week_of_month + 1)

        for day in self.days_of_week:
            if day.weekday != weekday:
                continue
            if day.ordinal is None or not self.use_ordinal:
                return True
            if day.ordinal > 0 and day.ordinal == week_of_month:
                return True
            if day.ordinal < 0 and day.ordinal == reversed_week_of_month:
                return True

        return False

    def __repr__(self) -> str:
        days = ",".join(str(day) for day in self.days_of_week)
        return f"ByWeekdayFilter({days}, use_ordinal={self.use_ordinal})"
