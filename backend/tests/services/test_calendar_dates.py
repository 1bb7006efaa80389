"""Tests for calendar-day parsing and request normalization."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from guidebook.schemas.booking import DateRange, ExplicitDates, SingleDate
from guidebook.services.calendar_dates import (
    expand_range,
    iter_window,
    js_day_of_week,
    normalize_request,
    parse_calendar_date,
    provider_today,
    require_calendar_date,
    resolve_timezone,
)
from guidebook.services.errors import NoDatesRequestedError, ValidationError


@pytest.mark.parametrize(
    "value",
    [
        "2025-02-30",
        "2025-13-01",
        "2025/03/01",
        "2025-03",
        "2025-03-01-02",
        "abc",
        "",
        "2025-0a-01",
        "2025-01-²",
        "٢025-01-01",
    ],
)
def test_parse_calendar_date_rejects_malformed_values(value: str) -> None:
    assert parse_calendar_date(value) is None


def test_parse_calendar_date_accepts_dates_and_strings() -> None:
    assert parse_calendar_date("2025-03-01") == date(2025, 3, 1)
    assert parse_calendar_date(date(2025, 3, 1)) == date(2025, 3, 1)
    assert parse_calendar_date(None) is None


def test_require_calendar_date_reports_field() -> None:
    with pytest.raises(ValidationError) as excinfo:
        require_calendar_date("2025-02-30", "start_date")
    assert excinfo.value.field == "start_date"


def test_expand_range_is_inclusive() -> None:
    assert expand_range("2025-01-10", "2025-01-12") == [
        date(2025, 1, 10),
        date(2025, 1, 11),
        date(2025, 1, 12),
    ]
    assert expand_range("2025-01-10", "2025-01-10") == [date(2025, 1, 10)]


def test_expand_range_reversed_is_empty() -> None:
    assert expand_range("2025-01-12", "2025-01-10") == []


def test_expand_range_reaches_the_last_representable_day() -> None:
    assert expand_range("9999-12-30", "9999-12-31") == [date(9999, 12, 30), date.max]
    assert list(iter_window(date.max, date.max)) == [date.max]


def test_expand_range_crosses_month_and_leap_day() -> None:
    days = expand_range("2024-02-28", "2024-03-01")
    assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_normalize_single_and_range() -> None:
    assert normalize_request(SingleDate(date="2025-03-01")) == [date(2025, 3, 1)]
    assert normalize_request(DateRange(start="2025-03-01", end="2025-03-03")) == [
        date(2025, 3, 1),
        date(2025, 3, 2),
        date(2025, 3, 3),
    ]


def test_normalize_explicit_dates_are_not_expanded() -> None:
    days = normalize_request(
        ExplicitDates(dates=["2025-03-05", "2025-03-01", "2025-03-05"])
    )
    assert days == [date(2025, 3, 1), date(2025, 3, 5)]


def test_normalize_reversed_range_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        normalize_request(DateRange(start="2025-03-05", end="2025-03-01"))
    assert excinfo.value.field == "dates.end"


def test_normalize_empty_explicit_list() -> None:
    with pytest.raises(NoDatesRequestedError):
        normalize_request(ExplicitDates(dates=[]))


def test_normalize_reports_bad_explicit_entry() -> None:
    with pytest.raises(ValidationError) as excinfo:
        normalize_request(ExplicitDates(dates=["2025-03-01", "not-a-day"]))
    assert excinfo.value.field == "dates.dates[1]"


def test_js_day_of_week_starts_on_sunday() -> None:
    assert js_day_of_week(date(2025, 3, 2)) == 0  # Sunday
    assert js_day_of_week(date(2025, 3, 3)) == 1
    assert js_day_of_week(date(2025, 3, 8)) == 6


def test_provider_today_uses_provider_timezone() -> None:
    moment = datetime(2025, 3, 1, 18, 30, tzinfo=UTC)
    assert provider_today("Asia/Jakarta", now=moment) == date(2025, 3, 2)
    assert provider_today("UTC", now=moment) == date(2025, 3, 1)


def test_resolve_timezone_rejects_unknown_zone() -> None:
    with pytest.raises(ValidationError) as excinfo:
        resolve_timezone("Mars/Olympus_Mons")
    assert excinfo.value.field == "timezone"
