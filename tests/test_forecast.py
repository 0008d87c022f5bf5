from datetime import date

import pytest

from household_analytics.aggregator import Totals
from household_analytics.domain import Goal, VestingSchedule
from household_analytics.forecast import classify_risk, forecast, goal_monthly_outflow
from household_analytics.history import Trend

AS_OF = date(2026, 10, 19)


def make_totals(income=5000.0, spending=3500.0, balance=10000.0):
    return Totals(
        month="2026-10",
        income=income,
        declared_income=income,
        observed_income=income,
        spending=spending,
        total_account_balance=balance,
        total_asset_value=0.0,
        net_worth=balance,
        savings_rate=0.0,
        monthly_savings=income - spending,
        has_data=True,
    )


def test_steady_surplus_six_months():
    report = forecast(make_totals(), (), (), 6, as_of=AS_OF)

    assert len(report.months) == 6
    assert report.negative_months == 0
    assert report.final_balance == pytest.approx(19000)
    assert report.risk == "low"
    assert report.months[0].label == "Nov 2026"
    assert report.months[0].month == "2026-11"
    assert report.months[-1].month == "2027-04"


def test_displayed_balance_is_floored():
    report = forecast(make_totals(income=1000, spending=3000, balance=3000), (), (), 6, as_of=AS_OF)

    assert report.months[0].balance == 1000
    assert report.months[1].balance == 0
    assert report.months[1].is_negative is True
    assert report.negative_months == 5
    assert report.lowest_balance == -9000
    assert report.risk == "high"
    assert all(m.balance >= 0 for m in report.months)


def test_medium_risk_when_half_or_fewer_months_negative():
    report = forecast(make_totals(income=1000, spending=3000, balance=7000), (), (), 6, as_of=AS_OF)
    assert report.negative_months == 3
    assert report.risk == "medium"


def test_floor_does_not_feed_back_into_running_balance():
    cliff_only = VestingSchedule(
        "v1", "2026-10-19", "2027-10-19", monthly_amount=0.0, cliff_amount=5000.0, cliff_period=2
    )
    report = forecast(make_totals(income=2000, spending=3000, balance=500), (cliff_only,), (), 3, as_of=AS_OF)

    first, second = report.months[0], report.months[1]
    assert first.is_negative is True
    assert first.balance == 0
    assert second.cliff_inflow == 5000
    # -500 - 1000 + 5000, not 0 - 1000 + 5000
    assert second.balance == 3500
    assert second.is_negative is False


def test_vesting_inflow_stops_at_schedule_end():
    schedule = VestingSchedule("v1", "2026-01-01", "2026-12-01", monthly_amount=1000.0)
    report = forecast(make_totals(), (schedule,), (), 3, as_of=AS_OF)

    assert [m.vesting_inflow for m in report.months] == [1000, 1000, 0]
    assert report.total_vesting_inflow == 2000


def test_goal_outflow_runs_until_target_month():
    goal = Goal("g1", "Trip", 7000.0, 1000.0, "2027-04-01")
    report = forecast(make_totals(), (), (goal,), 12, as_of=AS_OF)

    outflows = [m.goal_outflow for m in report.months]
    assert outflows[:6] == [pytest.approx(1000)] * 6
    assert outflows[6:] == [0] * 6
    assert report.total_goal_outflow == pytest.approx(6000)


def test_closed_or_due_goals_have_no_outflow():
    done = Goal("g1", "Done", 1000.0, 1500.0, "2027-04-01")
    due = Goal("g2", "Due", 1000.0, 0.0, "2026-10-30")
    broken = Goal("g3", "Broken", 1000.0, 0.0, "n/a")
    for goal in (done, due, broken):
        assert goal_monthly_outflow(goal, AS_OF) == (0.0, 0)


def test_trend_shifts_income_and_expenses():
    report = forecast(make_totals(), (), (), 3, as_of=AS_OF, trend=Trend(100.0, 50.0, 3))
    assert report.months[0].income == 5100
    assert report.months[0].expenses == 3550
    assert report.months[2].income == 5300
    assert report.trend_applied is True


def test_trend_never_drives_income_below_zero():
    report = forecast(make_totals(income=100), (), (), 3, as_of=AS_OF, trend=Trend(-80.0, 0.0, 3))
    assert report.months[2].income == 0


def test_classify_risk():
    assert classify_risk(0, 6) == "low"
    assert classify_risk(3, 6) == "medium"
    assert classify_risk(4, 6) == "high"
