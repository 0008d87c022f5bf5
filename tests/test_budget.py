from datetime import date

import pytest

from household_analytics.budget import (
    ON_TRACK,
    OVER_BUDGET,
    WARNING,
    category_status,
    current_budget,
    top_spending,
    track,
)
from household_analytics.domain import Budget, BudgetCategory, Transaction

AS_OF = date(2026, 10, 19)


def make_tx(id, amount, category, d="2026-10-05"):
    return Transaction(id, "a1", None, d, amount, category=category)


def test_estimated_budgets_when_none_configured():
    trans = (
        make_tx("t1", -600, "Housing"),
        make_tx("t2", -300, "Groceries"),
        make_tx("t3", -100, "Transport"),
        make_tx("t4", 5000, "Income"),
    )
    report = track((), (), trans, as_of=AS_OF)

    assert report.estimated is True
    assert report.budget_total is None
    assert [c.category for c in report.categories] == ["Housing", "Groceries", "Transport"]
    assert [c.allocated for c in report.categories] == [pytest.approx(720), pytest.approx(360), pytest.approx(120)]
    assert all(c.status == WARNING for c in report.categories)
    assert all(c.estimated for c in report.categories)


def test_estimated_budgets_limited_to_top_categories():
    trans = tuple(make_tx(f"t{i}", -(i + 1) * 10, f"Cat{i}") for i in range(8))
    report = track(None, None, trans, as_of=AS_OF)
    assert len(report.categories) == 6
    assert report.categories[0].category == "Cat7"


def test_configured_budget_statuses():
    budgets = (Budget("b1", "2026-10", 2000.0),)
    categories = (
        BudgetCategory("c1", "b1", "Housing", 1000.0),
        BudgetCategory("c2", "b1", "Groceries", 500.0),
        BudgetCategory("c3", "b1", "Dining", 200.0),
    )
    trans = (
        make_tx("t1", -1200, "Housing"),
        make_tx("t2", -450, "Groceries"),
        make_tx("t3", -100, "Dining"),
        make_tx("t4", -700, "Housing", "2026-09-10"),
    )
    report = track(budgets, categories, trans, as_of=AS_OF)
    rows = {c.category: c for c in report.categories}

    assert report.estimated is False
    assert report.budget_total == 2000.0
    assert rows["Housing"].status == OVER_BUDGET
    assert rows["Housing"].over_amount == rows["Housing"].spent - rows["Housing"].allocated == 200
    assert rows["Housing"].usage_pct == pytest.approx(120)
    assert rows["Housing"].display_pct == 100
    assert rows["Housing"].remaining == 0
    assert rows["Groceries"].status == WARNING
    assert rows["Dining"].status == ON_TRACK
    assert report.over_budget_count == 1
    assert report.total_spent == 1750


def test_zero_allocation_with_spend_is_over_budget():
    status = category_status("Misc", 0.0, 50.0)
    assert status.status == OVER_BUDGET
    assert status.usage_pct == 0.0
    assert status.over_amount == 50.0


def test_exactly_on_allocation_is_not_over():
    status = category_status("Housing", 1450.0, 1450.0)
    assert status.status == WARNING
    assert status.over_amount == 0


def test_budget_for_another_month_falls_back_to_estimates():
    budgets = (Budget("b1", "2026-09", 2000.0),)
    categories = (BudgetCategory("c1", "b1", "Housing", 1000.0),)
    report = track(budgets, categories, (make_tx("t1", -100, "Housing"),), as_of=AS_OF)
    assert report.estimated is True
    assert current_budget(budgets, AS_OF) is None


def test_no_spending_no_rows():
    report = track((), (), (), as_of=AS_OF)
    assert report.categories == ()
    assert report.has_data is False


def test_top_spending_shares_cover_all_spending():
    trans = (
        make_tx("t1", -600, "Housing"),
        make_tx("t2", -300, "Groceries"),
        make_tx("t3", -100, "Transport"),
        make_tx("t4", -999, "Housing", "2026-09-01"),
    )
    top = top_spending(trans, AS_OF, k=2)

    assert [(c.category, c.spent) for c in top] == [("Housing", 600), ("Groceries", 300)]
    assert top[0].share_pct == pytest.approx(60)
    assert top[1].share_pct == pytest.approx(30)
    assert track((), (), trans, as_of=AS_OF).top_categories[0].category == "Housing"
    assert top_spending((), AS_OF) == ()
