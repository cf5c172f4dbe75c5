"""
Unit tests for date filters
"""

from datetime import datetime

import pytz

from chronos_rrule.filters import ByWeekdayFilter, Filter, matches_all
from chronos_rrule.models import DayOfWeek, Weekday

# Wednesdays in January 2025
FIRST_WEDNESDAY = datetime(2025, 1, 1, tzinfo=pytz.UTC)
SECOND_WEDNESDAY = datetime(2025, 1, 8, tzinfo=pytz.UTC)
LAST_WEDNESDAY = datetime(2025, 1, 29, tzinfo=pytz.UTC)


class TestByWeekdayFilter:
    def test_is_a_filter(self):
        """Test the filter satisfies the Filter protocol"""
        assert isinstance(ByWeekdayFilter([]), Filter)

    def test_weekday_without_ordinal(self, utc_calendar):
        """Test plain weekdays match every occurrence"""
        f = ByWeekdayFilter([DayOfWeek.every(Weekday.WEDNESDAY)])
        assert f.matches(FIRST_WEDNESDAY, utc_calendar)
        assert f.matches(SECOND_WEDNESDAY, utc_calendar)
        assert not f.matches(datetime(2025, 1, 2, tzinfo=pytz.UTC), utc_calendar)

    def test_positive_ordinal(self, utc_calendar):
        """Test positive ordinals select the week of the month"""
        first = ByWeekdayFilter([DayOfWeek.first(Weekday.WEDNESDAY)])
        second = ByWeekdayFilter([DayOfWeek.nth(2, Weekday.WEDNESDAY)])
        assert first.matches(FIRST_WEDNESDAY, utc_calendar)
        assert not first.matches(SECOND_WEDNESDAY, utc_calendar)
        assert second.matches(SECOND_WEDNESDAY, utc_calendar)

    def test_negative_ordinal(self, utc_calendar):
        """Test negative ordinals count weeks from the end of the month"""
        last = ByWeekdayFilter([DayOfWeek.last(Weekday.WEDNESDAY)])
        assert last.matches(LAST_WEDNESDAY, utc_calendar)
        assert not last.matches(SECOND_WEDNESDAY, utc_calendar)
        assert ByWeekdayFilter([DayOfWeek.nth(-5, Weekday.WEDNESDAY)]).matches(
            FIRST_WEDNESDAY, utc_calendar
        )

    def test_ordinal_ignored_when_disabled(self, utc_calendar):
        """Test ordinals are ignored without ordinal matching"""
        f = ByWeekdayFilter([DayOfWeek.first(Weekday.WEDNESDAY)], use_ordinal=False)
        assert f.matches(SECOND_WEDNESDAY, utc_calendar)
        assert f.matches(LAST_WEDNESDAY, utc_calendar)

    def test_entries_are_or_combined(self, utc_calendar):
        """Test any matching entry accepts the date"""
        f = ByWeekdayFilter(
            [DayOfWeek.every(Weekday.MONDAY), DayOfWeek.last(Weekday.WEDNESDAY)]
        )
        assert f.matches(datetime(2025, 1, 6, tzinfo=pytz.UTC), utc_calendar)
        assert f.matches(LAST_WEDNESDAY, utc_calendar)
        assert not f.matches(FIRST_WEDNESDAY, utc_calendar)

    def test_wrong_weekday(self, utc_calendar):
        """Test a different weekday never matches"""
        f = ByWeekdayFilter([DayOfWeek.every(Weekday.MONDAY)])
        assert not f.matches(FIRST_WEDNESDAY, utc_calendar)

    def test_repr(self):
        """Test representation lists the configured days"""
        f = ByWeekdayFilter([DayOfWeek.every(Weekday.MONDAY), DayOfWeek.last(Weekday.FRIDAY)])
        assert repr(f) == "ByWeekdayFilter(MO,-1FR, use_ordinal=True)"


class TestMatchesAll:
    def test_filters_are_and_combined(self, utc_calendar):
        """Test every filter must accept the date"""
        wednesdays = ByWeekdayFilter([DayOfWeek.every(Weekday.WEDNESDAY)])
        first_week = ByWeekdayFilter([DayOfWeek.first(Weekday.WEDNESDAY)])
        assert matches_all([wednesdays, first_week], FIRST_WEDNESDAY, utc_calendar)
        assert not matches_all([wednesdays, first_week], SECOND_WEDNESDAY, utc_calendar)

    def test_no_filters(self, utc_calendar):
        """Test an empty filter list accepts everything"""
        assert matches_all([], FIRST_WEDNESDAY, utc_calendar)
