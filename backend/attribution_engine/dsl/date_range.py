"""
Date Range Filter
=================

WHAT:
    Inclusive calendar-date range and the predicate every aggregation uses
    to decide whether a record's date falls inside it.

WHY:
    Records arrive with dates as `date`, `datetime` or ISO strings (some with
    a time component). Comparing only the calendar-date part keeps boundary
    days from being dropped because of a time-of-day suffix.

REFERENCES:
    - attribution_engine/dsl/periods.py: produces DateRange values
    - attribution_engine/services/*: filter records through in_range()
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional


@dataclass(frozen=True)
class DateRange:
    """Inclusive `[date_from, date_to]`; a missing bound is open on that side."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @property
    def is_unbounded(self) -> bool:
        return self.date_from is None and self.date_to is None

    def contains(self, value: Any) -> bool:
        return in_range(value, self)

    def __str__(self) -> str:
        start = self.date_from.isoformat() if self.date_from else "..."
        end = self.date_to.isoformat() if self.date_to else "..."
        return f"[{start}, {end}]"


ALL_TIME = DateRange()


def to_calendar_date(value: Any) -> Optional[date]:
    """Return the calendar-date part of a date, datetime or ISO string.

    Empty strings and None map to None. A string that does not start with a
    `YYYY-MM-DD` date is a caller contract violation and raises ValueError.
    """
    if value is None:
        return None
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    return date.fromisoformat(s.split("T")[0][:10])


def in_range(value: Any, date_range: DateRange) -> bool:
    """Test a record date against a resolved range.

    - Fully unbounded range: always True, even for records with no date.
    - Bounded range and no date: False.
    - Otherwise both present bounds must hold (inclusive).
    """
    if date_range.is_unbounded:
        return True

    day = to_calendar_date(value)
    if day is None:
        return False

    if date_range.date_from is not None and day < date_range.date_from:
        return False
    if date_range.date_to is not None and day > date_range.date_to:
        return False
    return True
