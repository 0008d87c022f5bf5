"""Composite financial-health score.

Five independently capped sub-scores are summed into a 0-100 total:
savings rate (25), emergency fund (20), net worth vs annual income (20),
goal progress (15) and spending consistency (20). Every tier table below
is ordered from the highest threshold down; the first match wins.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.aggregator import Totals, month_spending
from household_analytics.dates import previous_month, today_utc
from household_analytics.domain import Goal, Transaction
from household_analytics.emergency import coverage_months
from household_analytics.goals import goal_progress

SAVINGS_TIERS = ((20, 25), (15, 20), (10, 15), (5, 10), (0, 5))
EMERGENCY_TIERS = ((6, 20), (3, 15), (1, 10), (0.5, 5))
NET_WORTH_TIERS = ((2, 20), (1, 15), (0.5, 10), (0.1, 5))
GOAL_TIERS = ((80, 15), (60, 12), (40, 9), (20, 6))
# upper bounds on month-over-month spending variance, in percent
CONSISTENCY_TIERS = ((5, 20), (10, 15), (20, 10), (30, 5))

STATUS_BANDS = ((80, "excellent"), (65, "good"), (45, "fair"))


@dataclass(frozen=True)
class SubScore:
    name: str
    score: int
    max_score: int
    value: float
    status: str


@dataclass(frozen=True)
class HealthReport:
    total_score: int
    status: str
    metrics: tuple[SubScore, ...]
    savings_rate: float
    emergency_months: float
    net_worth_ratio: float
    average_goal_progress: Optional[float]
    spending_variance: float
    has_data: bool


def tier_at_least(value: float, tiers) -> int:
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


def tier_at_most(value: float, tiers) -> int:
    for threshold, points in tiers:
        if value <= threshold:
            return points
    return 0


def metric_status(score: int, max_score: int) -> str:
    ratio = score / max_score if max_score else 0
    if ratio >= 0.75:
        return "excellent"
    if ratio >= 0.5:
        return "good"
    if ratio >= 0.25:
        return "fair"
    return "poor"


def overall_status(total: int) -> str:
    for threshold, label in STATUS_BANDS:
        if total >= threshold:
            return label
    return "poor"


def spending_variance(transactions: tuple[Transaction, ...], as_of: date) -> float:
    """Absolute percent change of this month's spending against last month's; 0 without history."""
    current = month_spending(transactions, as_of)
    prior = month_spending(transactions, previous_month(as_of))
    if prior <= 0:
        return 0.0
    return abs(current - prior) / prior * 100


def score(
    totals: Totals,
    goals: tuple[Goal, ...],
    transactions: tuple[Transaction, ...],
    as_of: Optional[date] = None,
) -> HealthReport:
    as_of = as_of or today_utc()

    rate = totals.savings_rate
    savings_points = tier_at_least(rate, SAVINGS_TIERS)

    months = coverage_months(totals)
    emergency_points = tier_at_least(months, EMERGENCY_TIERS)

    annual_income = totals.income * 12
    ratio = totals.net_worth / annual_income if annual_income > 0 else 0.0
    net_worth_points = tier_at_least(ratio, NET_WORTH_TIERS)

    avg_progress: Optional[float] = None
    goal_points = 0
    if goals:
        avg_progress = sum(goal_progress(g) for g in goals) / len(goals)
        goal_points = tier_at_least(avg_progress, GOAL_TIERS)
        if goal_points == 0 and avg_progress > 0:
            goal_points = 3

    variance = spending_variance(transactions, as_of)
    consistency_points = tier_at_most(variance, CONSISTENCY_TIERS)

    metrics = (
        SubScore("Savings Rate", savings_points, 25, rate, metric_status(savings_points, 25)),
        SubScore("Emergency Fund", emergency_points, 20, months, metric_status(emergency_points, 20)),
        SubScore("Net Worth", net_worth_points, 20, ratio, metric_status(net_worth_points, 20)),
        SubScore("Goal Progress", goal_points, 15, avg_progress or 0.0, metric_status(goal_points, 15)),
        SubScore("Spending Control", consistency_points, 20, variance, metric_status(consistency_points, 20)),
    )
    total = sum(m.score for m in metrics)

    return HealthReport(
        total_score=total,
        status=overall_status(total),
        # highest score first, name breaks ties
        metrics=tuple(sorted(metrics, key=lambda m: (-m.score, m.name))),
        savings_rate=rate,
        emergency_months=months,
        net_worth_ratio=ratio,
        average_goal_progress=avg_progress,
        spending_variance=variance,
        has_data=totals.has_data,
    )
