"""
Calendar service: date decomposition and arithmetic in a timezone.

All dates handed out by a CalendarContext are timezone-aware and expressed
in the context's zone. Naive datetimes passed in are taken as wall-clock
times of that zone.
"""

import calendar as _stdlib_calendar
from datetime import datetime, timedelta, tzinfo
from typing import NamedTuple, Optional, Union

import pytz

from .exceptions import InvalidDateError, UnknownTimeZoneError
from .models import Weekday


class DateComponents(NamedTuple):
    """Decomposed date in a calendar context"""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    weekday: Weekday
    week_of_month: int
    weeks_in_month: int
    days_in_month: int
    utc_offset: timedelta


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA timezone identifier"""
    if not name:
        raise UnknownTimeZoneError(str(name))
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise UnknownTimeZoneError(name) from None


def zone_name(tz: Optional[tzinfo]) -> Optional[str]:
    """Identifier of a named zone (pytz or zoneinfo), None for fixed offsets"""
    if tz is None:
        return None
    return getattr(tz, "zone", None) or getattr(tz, "key", None)


def wall_time_is_unique(tz: tzinfo, naive: datetime) -> bool:
    """Whether a wall-clock time maps to exactly one instant in ``tz``

    Times repeated or skipped by a DST change are not unique. Zones pytz
    cannot resolve by name are treated as not unique.
    """
    if not hasattr(tz, "localize"):
        name = zone_name(tz)
        if name is None:
            return True
        try:
            tz = resolve_timezone(name)
        except UnknownTimeZoneError:
            return False
    try:
        tz.localize(naive, is_dst=None)
    except (pytz.AmbiguousTimeError, pytz.NonExistentTimeError):
        return False
    return True


def _localize(tz: tzinfo, naive: datetime) -> datetime:
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


class CalendarContext:
    """Calendar arithmetic in one timezone with a configurable week start"""

    def __init__(
        self,
        timezone: Union[str, tzinfo] = "UTC",
        first_weekday: Union[Weekday, str] = Weekday.MONDAY,
    ):
        self.tz = resolve_timezone(timezone) if isinstance(timezone, str) else timezone
        self.first_weekday = Weekday(first_weekday)

    @classmethod
    def from_config(cls, config) -> "CalendarContext":
        return cls(timezone=config.timezone, first_weekday=config.first_weekday)

    @property
    def timezone_name(self) -> Optional[str]:
        return zone_name(self.tz)

    @property
    def last_weekday(self) -> Weekday:
        return Weekday.from_int(self.first_weekday.to_int() - 1)

    def localize(self, dt: datetime) -> datetime:
        """Express ``dt`` in this calendar's zone"""
        if dt.tzinfo is None:
            return _localize(self.tz, dt)
        converted = dt.astimezone(self.tz)
        if hasattr(self.tz, "normalize"):
            converted = self.tz.normalize(converted)
        return converted

    def make_date(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        tz: Optional[tzinfo] = None,
    ) -> datetime:
        """Build a date from components; raises InvalidDateError when impossible"""
        try:
            naive = datetime(year, month, day, hour, minute, second)
        except (ValueError, OverflowError) as e:
            components = {
                "year": year,
                "month": month,
                "day": day,
                "hour": hour,
                "minute": minute,
                "second": second,
            }
            raise InvalidDateError(components, str(e)) from e
        return _localize(tz or self.tz, naive)

    def add_days(self, dt: datetime, days: int) -> datetime:
        """Shift by whole days keeping the wall-clock time across DST changes"""
        local = self.localize(dt)
        return _localize(self.tz, local.replace(tzinfo=None) + timedelta(days=days))

    def weekday(self, dt: datetime) -> Weekday:
        return Weekday.from_int(self.localize(dt).weekday())

    def is_last_weekday(self, dt: datetime) -> bool:
        return self.weekday(dt) == self.last_weekday

    def _first_week_offset(self, local: datetime) -> int:
        first_of_month = local.replace(day=1).weekday()
        return (first_of_month - self.first_weekday.to_int()) % 7

    def week_of_month(self, dt: datetime) -> int:
        local = self.localize(dt)
        return (local.day - 1 + self._first_week_offset(local)) // 7 + 1

    def days_in_month(self, dt: datetime) -> int:
        local = self.localize(dt)
        return _stdlib_calendar.monthrange(local.year, local.month)[1]

    def weeks_in_month(self, dt: datetime) -> int:
        local = self.localize(dt)
        days = _stdlib_calendar.monthrange(local.year, local.month)[1]
        return (days - 1 + self._first_week_offset(local)) // 7 + 1

    def components(self, dt: datetime) -> DateComponents:
        local = self.localize(dt)
        return DateComponents(
            year=local.year,
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
            second=local.second,
            weekday=Weekday.from_int(local.weekday()),
            week_of_month=self.week_of_month(local),
            weeks_in_month=self.weeks_in_month(local),
            days_in_month=self.days_in_month(local),
            utc_offset=local.utcoffset(),
        )

    def __repr__(self) -> str:
        return (
            f"CalendarContext(timezone={self.timezone_name or self.tz!r}, "
            f"first_weekday={self.first_weekday.value})"
        )
