from datetime import date, timedelta

import pytest

from household_analytics.domain import VestingSchedule
from household_analytics.vesting import compute_vesting, vesting_delta, vesting_summary


def make_schedule(**kw):
    defaults = dict(
        id="v1",
        start_date="2026-01-01",
        end_date="2028-01-01",
        monthly_amount=1000.0,
        cliff_amount=5000.0,
        cliff_period=6,
    )
    defaults.update(kw)
    return VestingSchedule(**defaults)


def test_cliff_released_at_cliff_month():
    status = compute_vesting(make_schedule(), date(2026, 7, 1))
    assert status.months_elapsed == 6
    assert status.cliff_released is True
    assert status.vested == 11000
    assert status.unvested == 18000


def test_cliff_not_released_one_month_earlier():
    status = compute_vesting(make_schedule(), date(2026, 6, 1))
    assert status.vested == 5000
    assert status.cliff_released is False
    assert status.months_until_cliff == 1
    assert status.unvested == 19000 + 5000


def test_before_start_nothing_is_vested():
    status = compute_vesting(make_schedule(), date(2025, 12, 1))
    assert status.vested == 0
    assert status.unvested == 24 * 1000 + 5000
    assert status.progress_pct == 0


def test_after_end_everything_is_vested():
    status = compute_vesting(make_schedule(), date(2030, 1, 1))
    assert status.vested == 29000
    assert status.unvested == 0
    assert status.progress_pct == pytest.approx(100.0)


def test_vested_never_decreases():
    schedule = make_schedule(start_date="2026-01-31", end_date="2027-08-15")
    day = date(2025, 11, 1)
    previous = 0.0
    while day < date(2028, 6, 1):
        vested = compute_vesting(schedule, day).vested
        assert vested >= previous
        previous = vested
        day += timedelta(days=9)


def test_cliff_after_schedule_end():
    schedule = make_schedule(start_date="2026-01-01", end_date="2026-04-01", cliff_period=12)
    early = compute_vesting(schedule, date(2026, 7, 1))
    assert early.vested == 3000
    assert early.months_until_cliff == 6
    late = compute_vesting(schedule, date(2027, 1, 1))
    assert late.vested == 8000


def test_malformed_dates_yield_empty_status():
    status = compute_vesting(make_schedule(start_date="whenever"), date(2026, 7, 1))
    assert status.has_data is False
    assert status.vested == 0


def test_vesting_delta_splits_cliff():
    monthly, cliff = vesting_delta(make_schedule(), date(2026, 6, 1), date(2026, 7, 1))
    assert monthly == 1000
    assert cliff == 5000

    monthly, cliff = vesting_delta(make_schedule(), date(2026, 8, 1), date(2026, 9, 1))
    assert (monthly, cliff) == (1000, 0)


def test_vesting_summary():
    schedules = (make_schedule(), make_schedule(id="v2", end_date="2026-03-01", cliff_amount=0.0, cliff_period=0))
    summary = vesting_summary(schedules, date(2026, 7, 1))
    assert summary.total_vested == 11000 + 2000
    assert summary.monthly_vesting == 1000
    assert summary.has_data is True


def test_summary_monthly_vesting_skips_schedules_not_started():
    schedules = (
        make_schedule(),
        make_schedule(id="v2", start_date="2027-01-01", end_date="2029-01-01", monthly_amount=400.0),
    )
    summary = vesting_summary(schedules, date(2026, 7, 1))
    assert summary.monthly_vesting == 1000
    assert summary.total_unvested == 18000 + 24 * 400 + 5000

    later = vesting_summary(schedules, date(2027, 1, 1))
    assert later.monthly_vesting == 1400
