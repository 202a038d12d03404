"""Tests for reporting period keys."""

from datetime import date, datetime

import pytest

from bizledger.analyzers.periods import (
    Granularity,
    WeeklyPolicy,
    month_week_key,
    monday_week_key,
    monday_week_range,
    period_key,
    quarter_of,
    week_start,
    year_week_key,
    year_week_range,
)


class TestGranularityParse:
    def test_none_means_monthly(self) -> None:
        assert Granularity.parse(None) == Granularity.MONTHLY
        assert Granularity.parse("") == Granularity.MONTHLY

    def test_case_insensitive(self) -> None:
        assert Granularity.parse("Quarterly") == Granularity.QUARTERLY
        assert Granularity.parse(" ANNUAL ") == Granularity.ANNUAL

    def test_enum_passthrough(self) -> None:
        assert Granularity.parse(Granularity.WEEKLY) is Granularity.WEEKLY

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown granularity"):
            Granularity.parse("fortnightly")


class TestWeeklyPolicyParse:
    def test_default(self) -> None:
        assert WeeklyPolicy.parse(None) == WeeklyPolicy.MONTH_RELATIVE

    def test_hyphenated(self) -> None:
        assert WeeklyPolicy.parse("monday-aligned") == WeeklyPolicy.MONDAY_ALIGNED
        assert WeeklyPolicy.parse("Year_Relative") == WeeklyPolicy.YEAR_RELATIVE

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="weekly policy"):
            WeeklyPolicy.parse("iso")


class TestMonthRelativeWeeks:
    def test_month_end_and_next_day_split(self) -> None:
        """The 31st and the following 1st never share a week, even one day apart."""
        march_end = month_week_key(date(2024, 3, 31))
        april_start = month_week_key(date(2024, 4, 1))

        assert march_end == "2024-03-W6"
        assert april_start == "2024-04-W1"
        assert march_end != april_start

    def test_first_week_runs_to_saturday(self) -> None:
        # 2024-03-01 is a Friday: Fri + Sat are W1, Sunday starts W2
        assert month_week_key(date(2024, 3, 2)) == "2024-03-W1"
        assert month_week_key(date(2024, 3, 3)) == "2024-03-W2"

    def test_month_starting_sunday(self) -> None:
        # 2024-09-01 is a Sunday
        assert month_week_key(date(2024, 9, 1)) == "2024-09-W1"
        assert month_week_key(date(2024, 9, 7)) == "2024-09-W1"
        assert month_week_key(date(2024, 9, 8)) == "2024-09-W2"

    def test_datetime_input(self) -> None:
        assert month_week_key(datetime(2024, 4, 1, 23, 59)) == "2024-04-W1"


class TestMondayAlignedWeeks:
    def test_sunday_steps_back(self) -> None:
        """Sunday 2024-06-02 belongs to the week starting Monday 2024-05-27."""
        assert week_start(date(2024, 6, 2)) == date(2024, 5, 27)
        assert monday_week_key(date(2024, 6, 2)) == "2024-05-27"

    def test_monday_is_its_own_start(self) -> None:
        assert week_start(date(2024, 6, 3)) == date(2024, 6, 3)

    def test_datetime_time_dropped(self) -> None:
        assert week_start(datetime(2024, 6, 5, 18, 30)) == date(2024, 6, 3)

    def test_range(self) -> None:
        start, end = monday_week_range("2024-05-27")
        assert start == date(2024, 5, 27)
        assert end == date(2024, 6, 2)


class TestYearRelativeWeeks:
    def test_keys(self) -> None:
        # 2024-01-01 is a Monday; weeks are Sunday-first
        assert year_week_key(date(2024, 1, 1)) == "2024-W01"
        assert year_week_key(date(2024, 1, 6)) == "2024-W01"
        assert year_week_key(date(2024, 1, 7)) == "2024-W02"
        assert year_week_key(date(2024, 2, 29)) == "2024-W09"

    def test_range(self) -> None:
        start, end = year_week_range("2024-W02")
        assert start == date(2024, 1, 8)
        assert end == date(2024, 1, 14)

    def test_bad_range_id(self) -> None:
        with pytest.raises(ValueError, match="Invalid week id"):
            year_week_range("2024-02")


class TestPeriodKey:
    def test_monthly_default(self) -> None:
        assert period_key(date(2024, 1, 5)) == "2024-01"

    def test_quarterly(self) -> None:
        assert period_key(date(2024, 3, 31), "quarterly") == "2024-Q1"
        assert period_key(date(2024, 4, 1), Granularity.QUARTERLY) == "2024-Q2"
        assert quarter_of(date(2024, 12, 1)) == 4

    def test_annual(self) -> None:
        assert period_key(date(2024, 7, 4), Granularity.ANNUAL) == "2024"

    def test_weekly_policies(self) -> None:
        d = date(2024, 6, 2)
        assert period_key(d, "weekly") == "2024-06-W2"
        assert period_key(d, "weekly", weekly_policy="monday_aligned") == "2024-05-27"
        assert period_key(d, "weekly", weekly_policy=WeeklyPolicy.YEAR_RELATIVE) == "2024-W23"

    def test_keys_sort_chronologically(self) -> None:
        dates = [date(2023, 12, 31), date(2024, 1, 1), date(2024, 10, 2), date(2024, 2, 14)]
        for gran in Granularity:
            keys = [period_key(d, gran) for d in sorted(dates)]
            assert keys == sorted(keys)
