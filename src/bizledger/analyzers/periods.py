"""
Reporting periods — map a record date to the bucket it is summarised in.

Three weekly schemes exist side by side and are never merged:

- ``month_relative`` (``2024-03-W6``): week-of-month used by the financial
  summary. Weeks restart on the 1st, so the 31st and the following 1st
  always land in different weeks even when one day apart.
- ``monday_aligned`` (``2024-05-27``): the ISO date of the Monday that starts
  the week, used by the budget / cash-book weekly view.
- ``year_relative`` (``2024-W09``): week-of-year id stored on cash-book
  records.

Callers pick one explicitly through :class:`WeeklyPolicy`.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from enum import Enum


class Granularity(str, Enum):
    """How wide a summary bucket is."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @classmethod
    def parse(cls, value: Granularity | str | None) -> Granularity:
        """Coerce user input; ``None`` means monthly."""
        if value is None or value == "":
            return cls.MONTHLY
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(g.value for g in cls)
            raise ValueError(f"Unknown granularity {value!r}; expected one of: {choices}") from None


class WeeklyPolicy(str, Enum):
    """Which weekly bucketing scheme is active."""

    MONTH_RELATIVE = "month_relative"
    MONDAY_ALIGNED = "monday_aligned"
    YEAR_RELATIVE = "year_relative"

    @classmethod
    def parse(cls, value: WeeklyPolicy | str | None) -> WeeklyPolicy:
        """Coerce user input; ``None`` means month-relative."""
        if value is None or value == "":
            return cls.MONTH_RELATIVE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace("-", "_"))
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown weekly policy {value!r}; expected one of: {choices}") from None


def _as_date(value: date | datetime) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def _sunday_first_weekday(d: date) -> int:
    """Weekday counted Sunday = 0 … Saturday = 6."""
    return (d.weekday() + 1) % 7


def month_week_key(value: date | datetime) -> str:
    """Week-of-month key, ``YYYY-MM-W<n>``.

    ``n = ceil((day + weekday of the 1st) / 7)`` with Sunday-first weekdays.
    Never crosses a month boundary.
    """
    d = _as_date(value)
    offset = _sunday_first_weekday(d.replace(day=1))
    week = math.ceil((d.day + offset) / 7)
    return f"{d.year}-{d.month:02d}-W{week}"


def week_start(value: date | datetime) -> date:
    """Monday on or before ``value``. A Sunday steps back six days."""
    d = _as_date(value)
    return d - timedelta(days=d.weekday())


def monday_week_key(value: date | datetime) -> str:
    """ISO date of the Monday that starts the week."""
    return week_start(value).isoformat()


def monday_week_range(key: str) -> tuple[date, date]:
    """(Monday, Sunday) covered by a Monday-aligned key."""
    start = date.fromisoformat(key)
    return start, start + timedelta(days=6)


def year_week_key(value: date | datetime) -> str:
    """Week-of-year id, ``YYYY-Www``.

    ``n = ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7)`` with
    Sunday-first weekdays.
    """
    d = _as_date(value)
    jan1 = date(d.year, 1, 1)
    past_days = (d - jan1).days
    week = math.ceil((past_days + _sunday_first_weekday(jan1) + 1) / 7)
    return f"{d.year}-W{week:02d}"


def year_week_range(key: str) -> tuple[date, date]:
    """Seven-day span displayed for a year-relative week id.

    The span starts ``(n - 1) * 7`` days after January 1st, which is not
    always the same week the key was derived from when Jan 1 is not a Sunday.
    """
    try:
        year_part, week_part = key.split("-W")
        year, week = int(year_part), int(week_part)
    except ValueError:
        raise ValueError(f"Invalid week id {key!r}; expected YYYY-Www") from None
    start = date(year, 1, 1) + timedelta(days=(week - 1) * 7)
    return start, start + timedelta(days=6)


def quarter_of(value: date | datetime) -> int:
    return (_as_date(value).month - 1) // 3 + 1


def period_key(
    value: date | datetime,
    granularity: Granularity | str | None = Granularity.MONTHLY,
    *,
    weekly_policy: WeeklyPolicy | str | None = WeeklyPolicy.MONTH_RELATIVE,
) -> str:
    """Bucket key for ``value`` under ``granularity``.

    Keys sort lexicographically in chronological order within one
    granularity and policy.
    """
    d = _as_date(value)
    gran = Granularity.parse(granularity)

    if gran == Granularity.WEEKLY:
        policy = WeeklyPolicy.parse(weekly_policy)
        if policy == WeeklyPolicy.MONDAY_ALIGNED:
            return monday_week_key(d)
        if policy == WeeklyPolicy.YEAR_RELATIVE:
            return year_week_key(d)
        return month_week_key(d)
    if gran == Granularity.QUARTERLY:
        return f"{d.year}-Q{quarter_of(d)}"
    if gran == Granularity.ANNUAL:
        return f"{d.year}"
    return f"{d.year}-{d.month:02d}"
