from datetime import date, datetime, timezone, timedelta

from household_analytics.dates import (
    add_months,
    calendar_month_diff,
    month_key,
    month_label,
    months_between,
    parse_date,
    previous_month,
)


def test_parse_date_plain_string():
    assert parse_date("2026-10-05") == date(2026, 10, 5)


def test_parse_date_converts_offsets_to_utc():
    assert parse_date("2026-10-05T23:30:00-02:00") == date(2026, 10, 6)
    assert parse_date("2026-10-31T23:30:00Z") == date(2026, 10, 31)


def test_parse_date_aware_datetime_is_normalised():
    tz = timezone(timedelta(hours=5))
    assert parse_date(datetime(2026, 11, 1, 2, 0, tzinfo=tz)) == date(2026, 10, 31)


def test_parse_date_malformed_returns_none():
    assert parse_date("not-a-date") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date("2026-13-45") is None


def test_add_months_clamps_day():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)
    assert add_months(date(2026, 3, 31), -1) == date(2026, 2, 28)


def test_months_between_counts_whole_months():
    assert months_between(date(2026, 1, 15), date(2026, 2, 14)) == 0
    assert months_between(date(2026, 1, 15), date(2026, 2, 15)) == 1
    assert months_between(date(2026, 1, 31), date(2026, 2, 28)) == 1
    assert months_between(date(2026, 1, 1), date(2028, 1, 1)) == 24


def test_months_between_negative_when_reversed():
    assert months_between(date(2026, 3, 1), date(2026, 1, 1)) == -2


def test_calendar_month_diff_ignores_day():
    assert calendar_month_diff(date(2026, 10, 31), date(2026, 11, 1)) == 1


def test_month_key_label_and_previous():
    d = date(2026, 11, 3)
    assert month_key(d) == "2026-11"
    assert month_label(d) == "Nov 2026"
    assert previous_month(date(2026, 1, 20)) == date(2025, 12, 1)
