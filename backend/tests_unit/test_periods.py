"""
Period Resolver Tests (Unit)
============================

WHAT: Unit tests for period tag → DateRange resolution.
WHY: Every filter control shares these presets; an off-by-one here shifts
     every ranking and summary card by a day.

NOTE:
These tests live outside `backend/attribution_engine/tests/` to avoid loading the
HTTP-level `conftest.py`.

REFERENCES:
- backend/attribution_engine/dsl/periods.py
"""

from datetime import date, datetime

import pytest

from attribution_engine.dsl.date_range import ALL_TIME, DateRange
from attribution_engine.dsl.periods import (
    PeriodSelection,
    PeriodTag,
    last_n_days,
    local_today,
    next_n_days,
    resolve,
)
from attribution_engine.errors import AttributionEngineError, InvalidPeriodError


REFERENCE = date(2024, 3, 15)


def test_last_7_days_includes_reference_day() -> None:
    """Seven calendar days ending on the reference day, both ends inclusive."""
    result = resolve("last_7_days", REFERENCE)

    assert result == DateRange(date(2024, 3, 9), date(2024, 3, 15))


def test_today_yesterday_tomorrow() -> None:
    assert resolve(PeriodTag.today, REFERENCE) == DateRange(REFERENCE, REFERENCE)
    assert resolve("yesterday", REFERENCE) == DateRange(date(2024, 3, 14), date(2024, 3, 14))
    assert resolve("tomorrow", REFERENCE) == DateRange(date(2024, 3, 16), date(2024, 3, 16))


def test_last_and_next_30_days() -> None:
    assert resolve("last_30_days", REFERENCE) == DateRange(date(2024, 2, 15), REFERENCE)
    assert resolve("next_30_days", REFERENCE) == DateRange(REFERENCE, date(2024, 4, 13))


def test_this_month_covers_leap_february() -> None:
    result = resolve("this_month", date(2024, 2, 10))

    assert result == DateRange(date(2024, 2, 1), date(2024, 2, 29))


def test_last_month_in_january_wraps_to_december() -> None:
    result = resolve("last_month", date(2024, 1, 20))

    assert result == DateRange(date(2023, 12, 1), date(2023, 12, 31))


def test_last_month_on_march_31_is_full_february() -> None:
    result = resolve("last_month", date(2023, 3, 31))

    assert result == DateRange(date(2023, 2, 1), date(2023, 2, 28))


def test_all_time_is_unbounded() -> None:
    result = resolve("all_time", REFERENCE)

    assert result == ALL_TIME
    assert result.is_unbounded


def test_custom_with_open_bounds_passes_them_through() -> None:
    assert resolve("custom", REFERENCE, date(2024, 1, 1), None) == DateRange(date(2024, 1, 1), None)
    assert resolve("custom", REFERENCE, None, "2024-02-01T23:59:00") == DateRange(None, date(2024, 2, 1))


def test_custom_without_bounds_equals_all_time() -> None:
    assert resolve("custom", REFERENCE) == resolve("all_time", REFERENCE)


def test_custom_inverted_range_is_not_swapped() -> None:
    result = resolve("custom", REFERENCE, date(2024, 3, 10), date(2024, 3, 1))

    assert result.date_from == date(2024, 3, 10)
    assert result.date_to == date(2024, 3, 1)
    assert not result.contains(date(2024, 3, 5))


def test_generic_relative_windows() -> None:
    assert resolve("last_14_days", REFERENCE) == DateRange(date(2024, 3, 2), REFERENCE)
    assert resolve("next_3_days", REFERENCE) == DateRange(REFERENCE, date(2024, 3, 17))
    assert resolve("14d", REFERENCE) == DateRange(date(2024, 3, 2), REFERENCE)
    assert resolve("last_1_day", REFERENCE) == DateRange(REFERENCE, REFERENCE)


def test_tags_are_normalized() -> None:
    assert resolve("Last-7-Days", REFERENCE) == resolve("last_7_days", REFERENCE)
    assert resolve(" this month ", REFERENCE) == resolve("this_month", REFERENCE)


@pytest.mark.parametrize("tag", ["fortnight", "last_0_days", "0d", ""])
def test_invalid_tags_raise(tag: str) -> None:
    with pytest.raises(InvalidPeriodError):
        resolve(tag, REFERENCE)


def test_invalid_period_error_is_engine_and_value_error() -> None:
    with pytest.raises(AttributionEngineError) as exc_info:
        resolve("quarter", REFERENCE)

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.tag == "quarter"
    assert "quarter" in str(exc_info.value)


def test_window_helpers_reject_empty_windows() -> None:
    with pytest.raises(InvalidPeriodError):
        last_n_days(0, REFERENCE)
    with pytest.raises(InvalidPeriodError):
        next_n_days(-2, REFERENCE)


def test_period_selection_resolves_with_reference() -> None:
    selection = PeriodSelection(tag="custom", date_from=date(2024, 3, 1), date_to=date(2024, 3, 2))

    assert selection.resolve(REFERENCE) == DateRange(date(2024, 3, 1), date(2024, 3, 2))
    assert PeriodSelection().resolve(REFERENCE) == DateRange(date(2024, 3, 1), date(2024, 3, 31))


def test_local_today_honours_timezone() -> None:
    """Zones on either side of the date line can disagree by at most one day."""
    east = local_today("Pacific/Kiritimati")
    west = local_today("Pacific/Pago_Pago")

    assert isinstance(east, date) and not isinstance(east, datetime)
    assert 0 <= (east - west).days <= 2


def test_resolution_is_deterministic() -> None:
    assert resolve("last_month", REFERENCE) == resolve("last_month", REFERENCE)
