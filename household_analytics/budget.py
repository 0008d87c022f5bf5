"""Budget utilisation per spending category for the current month.

When no budget is configured for the month, budgets are synthesized from
the top spending categories with a buffer on top of observed spend, and
every row is flagged ``estimated`` so callers can tell the two apart.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.config import DEFAULT_BUDGET_BUFFER, DEFAULT_ESTIMATED_CATEGORIES
from household_analytics.dates import month_key, today_utc
from household_analytics.domain import Budget, BudgetCategory, Transaction
from household_analytics.lazy import category_spend, lazy_top_categories
from household_analytics.log import get_logger
from household_analytics.transforms import transactions_in_month

logger = get_logger(__name__)

OVER_BUDGET = "over-budget"
WARNING = "warning"
ON_TRACK = "on-track"
WARNING_THRESHOLD = 80.0
TOP_SPENDING_COUNT = 8


@dataclass(frozen=True)
class CategoryStatus:
    category: str
    allocated: float
    spent: float
    remaining: float
    usage_pct: float          # raw, may exceed 100
    display_pct: float        # clamped to [0, 100]
    over_amount: float        # spent - allocated when over, else 0
    status: str
    estimated: bool


@dataclass(frozen=True)
class CategorySpend:
    category: str
    spent: float
    share_pct: float          # of all spending this month


@dataclass(frozen=True)
class BudgetReport:
    month: str
    categories: tuple[CategoryStatus, ...]
    total_allocated: float
    total_spent: float
    budget_total: Optional[float]   # configured monthly total, None when estimated
    over_budget_count: int
    estimated: bool
    top_categories: tuple[CategorySpend, ...]
    has_data: bool


def category_status(category: str, allocated: float, spent: float, estimated: bool = False) -> CategoryStatus:
    usage = spent / allocated * 100 if allocated > 0 else 0.0
    over = spent - allocated if spent > allocated else 0.0
    if over > 0:
        status = OVER_BUDGET
    elif usage > WARNING_THRESHOLD:
        status = WARNING
    else:
        status = ON_TRACK
    return CategoryStatus(
        category=category,
        allocated=allocated,
        spent=spent,
        remaining=max(0.0, allocated - spent),
        usage_pct=usage,
        display_pct=min(100.0, usage),
        over_amount=over,
        status=status,
        estimated=estimated,
    )


def top_spending(
    transactions: tuple[Transaction, ...], as_of: date, k: int = TOP_SPENDING_COUNT
) -> tuple[CategorySpend, ...]:
    current = transactions_in_month(transactions, as_of)
    total = sum(category_spend(current).values())
    return tuple(
        CategorySpend(name, spent, spent / total * 100 if total > 0 else 0.0)
        for name, spent in lazy_top_categories(current, k)
    )


def current_budget(budgets: tuple[Budget, ...], as_of: date) -> Optional[Budget]:
    key = month_key(as_of)
    return next((b for b in budgets if b.month == key), None)


def track(
    budgets: Optional[tuple[Budget, ...]],
    categories: Optional[tuple[BudgetCategory, ...]],
    transactions: tuple[Transaction, ...],
    as_of: Optional[date] = None,
    buffer: float = DEFAULT_BUDGET_BUFFER,
    estimated_limit: int = DEFAULT_ESTIMATED_CATEGORIES,
) -> BudgetReport:
    as_of = as_of or today_utc()
    current = transactions_in_month(transactions, as_of)
    spend = category_spend(current)

    budget = current_budget(budgets or (), as_of)
    allocations = [c for c in (categories or ()) if budget is not None and c.budget_id == budget.id]

    if allocations:
        rows = tuple(
            category_status(c.category, c.allocated_amount, spend.get(c.category, 0.0))
            for c in allocations
        )
        estimated = False
    else:
        rows = tuple(
            category_status(name, spent * buffer, spent, estimated=True)
            for name, spent in lazy_top_categories(current, estimated_limit)
        )
        estimated = True
        logger.debug("budget.estimated", month=month_key(as_of), categories=len(rows))

    return BudgetReport(
        month=month_key(as_of),
        categories=rows,
        total_allocated=sum(r.allocated for r in rows),
        total_spent=sum(r.spent for r in rows),
        budget_total=None if estimated or budget is None else budget.total_budget,
        over_budget_count=sum(1 for r in rows if r.status == OVER_BUDGET),
        estimated=estimated,
        top_categories=top_spending(transactions, as_of),
        has_data=bool(rows),
    )
