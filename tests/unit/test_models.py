"""
Unit tests for chronos-rrule models
"""

from datetime import datetime

import pytest
import pytz
from pydantic import BaseModel, ValidationError

from chronos_rrule.models import (
    DayOfWeek,
    Frequency,
    Month,
    RecurrenceRule,
    RRuleString,
    Termination,
    Weekday,
)


class TestWeekday:
    def test_to_int_matches_datetime_weekday(self):
        """Test Monday is 0 and Sunday is 6"""
        assert Weekday.MONDAY.to_int() == 0
        assert Weekday.SUNDAY.to_int() == 6
        # 2025-01-01 is a Wednesday
        assert Weekday.from_int(datetime(2025, 1, 1).weekday()) == Weekday.WEDNESDAY

    def test_from_int_wraps(self):
        """Test from_int wraps around the week"""
        assert Weekday.from_int(7) == Weekday.MONDAY
        assert Weekday.from_int(-1) == Weekday.SUNDAY


class TestDayOfWeek:
    def test_constructors(self):
        """Test every/first/last/nth constructors"""
        assert DayOfWeek.every(Weekday.MONDAY).ordinal is None
        assert DayOfWeek.first(Weekday.MONDAY).ordinal == 1
        assert DayOfWeek.last(Weekday.SUNDAY).ordinal == -1
        assert DayOfWeek.nth(3, Weekday.FRIDAY).ordinal == 3

    def test_structural_equality(self):
        """Test equal ordinal and weekday compare equal"""
        assert DayOfWeek.first(Weekday.MONDAY) == DayOfWeek(ordinal=1, weekday="MO")
        assert DayOfWeek.first(Weekday.MONDAY) != DayOfWeek.every(Weekday.MONDAY)
        assert len({DayOfWeek.last(Weekday.FRIDAY), DayOfWeek.nth(-1, Weekday.FRIDAY)}) == 1

    def test_str(self):
        """Test grammar representation"""
        assert str(DayOfWeek.every(Weekday.TUESDAY)) == "TU"
        assert str(DayOfWeek.last(Weekday.SUNDAY)) == "-1SU"
        assert str(DayOfWeek.nth(2, Weekday.WEDNESDAY)) == "2WE"

    @pytest.mark.parametrize("ordinal", [0, 6, -6])
    def test_ordinal_out_of_range(self, ordinal):
        """Test ordinals outside [-5, 5] or zero are rejected"""
        with pytest.raises(ValidationError):
            DayOfWeek(ordinal=ordinal, weekday=Weekday.MONDAY)


class TestTermination:
    def test_never(self):
        """Test the default termination never ends"""
        assert Termination.never().is_never
        assert not Termination.after_occurrences(3).is_never

    def test_count_and_until_exclusive(self):
        """Test count and until cannot both be set"""
        with pytest.raises(ValidationError):
            Termination(count=3, until=datetime(2025, 1, 1, tzinfo=pytz.UTC))

    def test_count_must_be_positive(self):
        """Test count of zero is rejected"""
        with pytest.raises(ValidationError):
            Termination.after_occurrences(0)

    def test_until_must_be_aware(self):
        """Test naive until dates are rejected"""
        with pytest.raises(ValidationError, match="timezone-aware"):
            Termination.after_date(datetime(2025, 1, 18, 10, 26))

    def test_until_truncated_to_seconds(self):
        """Test sub-second precision is dropped"""
        end = Termination.after_date(datetime(2025, 1, 1, 10, 0, 0, 123456, tzinfo=pytz.UTC))
        assert end.until == datetime(2025, 1, 1, 10, 0, 0, tzinfo=pytz.UTC)


class TestRecurrenceRule:
    def test_defaults(self):
        """Test a rule with only a frequency"""
        rule = RecurrenceRule(frequency=Frequency.DAILY)
        assert rule.interval == 1
        assert rule.end.is_never
        assert rule.weekdays == ()
        assert rule.months == ()

    def test_sequences_are_coerced(self):
        """Test lists become tuples and months become Month members"""
        rule = RecurrenceRule(frequency="YEARLY", months=[1, 12], hours=[9])
        assert rule.months == (Month.JANUARY, Month.DECEMBER)
        assert rule.hours == (9,)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("seconds", 61),
            ("minutes", 60),
            ("hours", 24),
            ("days_of_month", 0),
            ("days_of_month", 32),
            ("days_of_year", -367),
            ("weeks_of_year", 54),
            ("set_positions", 0),
        ],
    )
    def test_domain_violations(self, field, value):
        """Test out-of-range BY* values are rejected"""
        with pytest.raises(ValidationError):
            RecurrenceRule(frequency=Frequency.DAILY, **{field: [value]})

    def test_interval_must_be_positive(self):
        """Test interval of zero is rejected"""
        with pytest.raises(ValidationError):
            RecurrenceRule(frequency=Frequency.DAILY, interval=0)

    def test_immutable(self):
        """Test rules cannot be mutated"""
        rule = RecurrenceRule(frequency=Frequency.DAILY)
        with pytest.raises(ValidationError):
            rule.interval = 2
        assert rule.model_copy(update={"interval": 2}).interval == 2

    def test_string_conversion(self):
        """Test from_string and str"""
        rule = RecurrenceRule.from_string("FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE")
        assert rule.frequency == Frequency.WEEKLY
        assert rule.interval == 2
        assert str(rule) == "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE"

    def test_to_info(self):
        """Test dictionary summary"""
        info = RecurrenceRule.from_string("FREQ=MONTHLY;COUNT=3;BYDAY=-1FR").to_info()
        assert info["frequency"] == "MONTHLY"
        assert info["interval"] == 1
        assert info["count"] == 3
        assert info["until"] is None
        assert info["byday"] == ["-1FR"]
        assert info["bymonthday"] is None


class TestRRuleString:
    class Series(BaseModel):
        rrule: RRuleString

    def test_accepts_text(self):
        """Test a rule field can be populated from grammar text"""
        series = self.Series(rrule="FREQ=DAILY;COUNT=2")
        assert series.rrule.end.count == 2

    def test_accepts_rule(self):
        """Test a rule field accepts a RecurrenceRule"""
        rule = RecurrenceRule(frequency=Frequency.HOURLY)
        assert self.Series(rrule=rule).rrule == rule

    def test_serializes_as_text(self):
        """Test the rule is dumped as grammar text"""
        series = self.Series(rrule="FREQ=DAILY;BYHOUR=9;COUNT=2")
        assert series.model_dump() == {"rrule": "FREQ=DAILY;COUNT=2;BYHOUR=9"}

    def test_invalid_text(self):
        """Test invalid grammar text fails validation"""
        with pytest.raises(ValidationError):
            self.Series(rrule="COUNT=2")
