from datetime import date

import pytest

from household_analytics import alerts
from household_analytics.aggregator import Totals, savings_rate
from household_analytics.alerts import Recommendation, evaluate, is_stalled
from household_analytics.domain import Budget, Goal, Transaction
from household_analytics.forecast import forecast

AS_OF = date(2026, 10, 19)


def make_totals(income=5000.0, spending=3000.0, balance=0.0):
    return Totals(
        month="2026-10",
        income=income,
        declared_income=income,
        observed_income=income,
        spending=spending,
        total_account_balance=balance,
        total_asset_value=0.0,
        net_worth=balance,
        savings_rate=savings_rate(income, spending),
        monthly_savings=income - spending,
        has_data=True,
    )


def alert_ids(report):
    return [a.id for a in report.alerts]


def rec_ids(report):
    return [r.id for r in report.recommendations]


def test_negative_cash_flow_is_critical():
    report = evaluate(make_totals(income=3000, spending=4000, balance=20000), as_of=AS_OF)
    assert alert_ids(report) == ["negative-cashflow"]
    assert report.alerts[0].type == "critical"
    assert "€1,000" in report.alerts[0].description


def test_low_emergency_fund():
    report = evaluate(make_totals(income=5000, spending=4000, balance=6000), as_of=AS_OF)
    assert "low-emergency-fund" in alert_ids(report)


def test_no_emergency_alert_without_spending():
    report = evaluate(make_totals(income=5000, spending=0, balance=0), as_of=AS_OF)
    assert "low-emergency-fund" not in alert_ids(report)


def test_budget_exceeded():
    budgets = (Budget("b1", "2026-10", 3000.0),)
    report = evaluate(make_totals(income=5000, spending=3500, balance=50000), budgets=budgets, as_of=AS_OF)
    assert alert_ids(report) == ["budget-exceeded"]


def test_projected_shortfall_names_first_negative_month():
    totals = make_totals(income=1000, spending=3000, balance=3000)
    outlook = forecast(totals, (), (), 6, as_of=AS_OF)
    report = evaluate(totals, forecast=outlook, as_of=AS_OF)

    assert alert_ids(report)[0] == "negative-cashflow"
    shortfall = next(a for a in report.alerts if a.id == "projected-shortfall")
    assert "Dec 2026" in shortfall.description


def test_stalled_goals():
    old_and_slow = Goal("g1", "Trip", 1000.0, 100.0, "2027-06-01", created_at="2026-01-15")
    young = Goal("g2", "Bike", 1000.0, 0.0, "2027-06-01", created_at="2026-09-01")
    undated = Goal("g3", "Sofa", 1000.0, 0.0, "2027-06-01")

    assert is_stalled(old_and_slow, AS_OF) is True
    assert is_stalled(young, AS_OF) is False
    assert is_stalled(undated, AS_OF) is False


def test_alerts_sorted_by_priority():
    goals = (Goal("g1", "Trip", 1000.0, 100.0, "2027-06-01", created_at="2026-01-15"),)
    report = evaluate(make_totals(income=3000, spending=4000, balance=20000), goals=goals, as_of=AS_OF)
    assert alert_ids(report) == ["negative-cashflow", "stalled-goals"]
    assert [a.priority for a in report.alerts] == [1, 3]


def test_boost_savings():
    report = evaluate(make_totals(income=5000, spending=4250), as_of=AS_OF)
    assert rec_ids(report) == ["increase-savings"]
    assert report.recommendations[0].potential_benefit == pytest.approx(3000)


def test_optimize_idle_cash():
    report = evaluate(make_totals(income=5000, spending=4000, balance=16000), as_of=AS_OF)
    assert rec_ids(report) == ["optimize-emergency-fund"]
    assert report.recommendations[0].potential_benefit == pytest.approx(480)


def test_reduce_top_category():
    trans = (
        Transaction("t1", "a1", None, "2026-10-02", -1500.0, category="Housing"),
        Transaction("t2", "a1", None, "2026-10-03", -500.0, category="Dining"),
    )
    report = evaluate(make_totals(income=5000, spending=2000), transactions=trans, as_of=AS_OF)
    rec = next(r for r in report.recommendations if r.id == "reduce-top-expense")
    assert rec.title == "Reduce Housing Spending"
    assert rec.potential_benefit == pytest.approx(1800)


def test_invest_surplus():
    report = evaluate(make_totals(income=6000, spending=2000, balance=20000), as_of=AS_OF)
    assert rec_ids(report) == ["invest-surplus"]
    assert report.recommendations[0].potential_benefit == pytest.approx(4000 * 12 * 10 * 1.07 ** 10)


def test_recommendations_are_capped(monkeypatch):
    def always(ctx):
        return Recommendation("r", "tip", "Tip", "", 1.0, "", "")

    monkeypatch.setattr(alerts, "RECOMMENDATION_RULES", (always,) * 6)
    report = evaluate(make_totals(), as_of=AS_OF)
    assert len(report.recommendations) == 4


def test_healthy_household_has_no_alerts():
    report = evaluate(make_totals(income=6000, spending=2000, balance=20000), as_of=AS_OF)
    assert report.alerts == ()
