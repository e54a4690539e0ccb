"""
Date utility functions for calendar-month reporting periods.

Notes:
- Periods are half-open: [start, next_start).
- Weekdays are reported in the stored schedule convention,
  0 = Sunday ... 6 = Saturday.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Tuple

from dateutil.relativedelta import relativedelta

UTC = timezone.utc


class DateUtilsError(ValueError):
    """Raised for invalid calendar input."""


def now_utc() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def month_range(year: int, month: int) -> Tuple[date, date]:
    """Return (first_day, last_day) of a given month."""
    if not (1 <= month <= 12):
        raise DateUtilsError("Month must be between 1 and 12")

    if not (1 <= year <= 9999):
        raise DateUtilsError("Year must be between 1 and 9999")

    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    return first, last


def daterange(start: date, end: date) -> Iterator[date]:
    """
    Yield all dates from start to end inclusive.
    If start > end, yields nothing.
    """
    if start > end:
        return

    for i in range((end - start).days + 1):
        yield start + timedelta(days=i)


def schedule_weekday(d: date) -> int:
    """Weekday of a date with Sunday as 0."""
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class MonthPeriod:
    """A calendar month addressed by (year, month)."""

    year: int
    month: int

    def __post_init__(self):
        month_range(self.year, self.month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def next_start(self) -> date:
        return self.start + relativedelta(months=1)

    @property
    def last_day(self) -> date:
        return month_range(self.year, self.month)[1]

    def days(self) -> Iterator[date]:
        return daterange(self.start, self.last_day)

    @classmethod
    def containing(cls, d: date) -> "MonthPeriod":
        return cls(d.year, d.month)

    def previous_month(self) -> "MonthPeriod":
        return MonthPeriod.containing(self.start - relativedelta(months=1))

    def previous_year(self) -> "MonthPeriod":
        return MonthPeriod.containing(self.start - relativedelta(years=1))

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
