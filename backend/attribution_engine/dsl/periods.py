"""
Period Resolver
===============

WHAT:
    Maps a symbolic reporting period ("last 7 days", "this month", ...) plus a
    reference day into a concrete inclusive DateRange.

WHY:
    Every filter control on the marketing screens offers the same presets.
    Resolving them in one place keeps "last 7 days" meaning exactly seven
    calendar days ending on the reference day everywhere.

NOTES:
    - The reference day is the caller's local calendar day. Use local_today()
      rather than a UTC date, otherwise ranges shift by a day near midnight.
    - Custom ranges are returned as given. A custom range with from > to is
      not swapped; it simply matches nothing.

REFERENCES:
    - attribution_engine/dsl/date_range.py: DateRange and the in_range() predicate
    - attribution_engine/routers/marketing.py: /marketing/periods/resolve
"""

from __future__ import annotations

import enum
import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from attribution_engine.dsl.date_range import ALL_TIME, DateRange, to_calendar_date
from attribution_engine.errors import InvalidPeriodError


class PeriodTag(str, enum.Enum):
    """Named presets offered by the period filter."""

    today = "today"
    yesterday = "yesterday"
    tomorrow = "tomorrow"
    last_7_days = "last_7_days"
    last_30_days = "last_30_days"
    next_7_days = "next_7_days"
    next_30_days = "next_30_days"
    this_month = "this_month"
    last_month = "last_month"
    all_time = "all_time"
    custom = "custom"


# Generic relative windows: "last_14_days", "next_3_days", and the short "14d".
_RELATIVE_PATTERN = re.compile(r"^(last|next)_(\d+)_days?$")
_SHORT_PATTERN = re.compile(r"^(\d+)d$")


def _get_month_range(month: int, year: int) -> Tuple[date, date]:
    """Get the first and last day of a given month."""
    first_day = date(year, month, 1)
    last_day = date(year, month, monthrange(year, month)[1])
    return first_day, last_day


def _previous_month(reference_date: date) -> Tuple[int, int]:
    if reference_date.month == 1:
        return 12, reference_date.year - 1
    return reference_date.month - 1, reference_date.year


def local_today(timezone_name: Optional[str] = None) -> date:
    """Today's calendar day in the given IANA zone (process local time if None)."""
    if timezone_name:
        return datetime.now(ZoneInfo(timezone_name)).date()
    return date.today()


def _normalize_tag(tag: Union[str, PeriodTag]) -> str:
    if isinstance(tag, PeriodTag):
        return tag.value
    return str(tag).strip().lower().replace("-", "_").replace(" ", "_")


def last_n_days(n: int, reference_date: date) -> DateRange:
    """N calendar days ending on (and including) the reference day."""
    if n < 1:
        raise InvalidPeriodError(f"last_{n}_days", "window must cover at least one day")
    return DateRange(reference_date - timedelta(days=n - 1), reference_date)


def next_n_days(n: int, reference_date: date) -> DateRange:
    """N calendar days starting on (and including) the reference day."""
    if n < 1:
        raise InvalidPeriodError(f"next_{n}_days", "window must cover at least one day")
    return DateRange(reference_date, reference_date + timedelta(days=n - 1))


def resolve(
    tag: Union[str, PeriodTag],
    reference_date: Optional[date] = None,
    date_from: Any = None,
    date_to: Any = None,
) -> DateRange:
    """
    Resolve a period tag into an inclusive DateRange.

    Args:
        tag: A PeriodTag, its string value, or a generic relative tag
            (`last_<N>_days`, `next_<N>_days`, `<N>d`).
        reference_date: The caller's "today". Defaults to local_today().
        date_from: Lower bound for `custom` (date/datetime/ISO string or None).
        date_to: Upper bound for `custom` (date/datetime/ISO string or None).

    Returns:
        DateRange; ALL_TIME (both bounds None) for `all_time`.

    Raises:
        InvalidPeriodError: unknown tag or a relative window shorter than a day.

    Examples:
        >>> resolve("last_7_days", date(2024, 3, 15))
        DateRange(date_from=datetime.date(2024, 3, 9), date_to=datetime.date(2024, 3, 15))
        >>> resolve("all_time").is_unbounded
        True
    """
    key = _normalize_tag(tag)
    today = reference_date if reference_date is not None else local_today()

    if key == PeriodTag.custom.value:
        return DateRange(to_calendar_date(date_from), to_calendar_date(date_to))
    if key == PeriodTag.all_time.value:
        return ALL_TIME
    if key == PeriodTag.today.value:
        return DateRange(today, today)
    if key == PeriodTag.yesterday.value:
        day = today - timedelta(days=1)
        return DateRange(day, day)
    if key == PeriodTag.tomorrow.value:
        day = today + timedelta(days=1)
        return DateRange(day, day)
    if key == PeriodTag.this_month.value:
        start, end = _get_month_range(today.month, today.year)
        return DateRange(start, end)
    if key == PeriodTag.last_month.value:
        month, year = _previous_month(today)
        start, end = _get_month_range(month, year)
        return DateRange(start, end)

    match = _RELATIVE_PATTERN.match(key)
    if match:
        direction, n = match.group(1), int(match.group(2))
        if direction == "last":
            return last_n_days(n, today)
        return next_n_days(n, today)

    match = _SHORT_PATTERN.match(key)
    if match:
        return last_n_days(int(match.group(1)), today)

    raise InvalidPeriodError(str(tag))


@dataclass(frozen=True)
class PeriodSelection:
    """A tag as picked in the filter control, plus explicit bounds for `custom`.

    The caller owns the current selection and passes it on every call; the
    resolver keeps no state between calls.
    """

    tag: str = PeriodTag.this_month.value
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def resolve(self, reference_date: Optional[date] = None) -> DateRange:
        return resolve(self.tag, reference_date, self.date_from, self.date_to)
