"""Rule-based alerts and recommendations.

Every rule is a plain function of a ``RuleContext`` that returns one item
or None, so rules can be evaluated, reordered or tested on their own.
Alerts come back sorted by priority (1 = most urgent); recommendations keep
rule order and are capped at ``MAX_RECOMMENDATIONS``.
"""
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from household_analytics.aggregator import Totals
from household_analytics.budget import current_budget
from household_analytics.dates import parse_date, today_utc
from household_analytics.domain import Budget, Goal, Transaction
from household_analytics.emergency import coverage_months
from household_analytics.forecast import ForecastReport
from household_analytics.goals import goal_progress
from household_analytics.lazy import lazy_top_categories
from household_analytics.transforms import transactions_in_month

MAX_RECOMMENDATIONS = 4
TARGET_SAVINGS_RATE = 20.0
HIGH_YIELD_RATE = 0.03
CATEGORY_SHARE_LIMIT = 0.3
CATEGORY_REDUCTION = 0.1
INVEST_RETURN = 0.07
INVEST_YEARS = 10
# stalled-goal heuristic: 5% expected per month of age, capped at 50%
STALL_PROGRESS_PER_MONTH = 5.0
STALL_PROGRESS_CAP = 50.0
STALL_MIN_AGE_MONTHS = 2


@dataclass(frozen=True)
class Alert:
    id: str
    type: str          # critical / warning / info
    title: str
    description: str
    action: str
    priority: int


@dataclass(frozen=True)
class Recommendation:
    id: str
    type: str
    title: str
    description: str
    potential_benefit: float   # euro per year unless stated otherwise
    benefit_text: str
    action: str


@dataclass(frozen=True)
class AlertsReport:
    alerts: tuple[Alert, ...]
    recommendations: tuple[Recommendation, ...]
    has_data: bool


@dataclass(frozen=True)
class RuleContext:
    totals: Totals
    budgets: tuple[Budget, ...]
    goals: tuple[Goal, ...]
    transactions: tuple[Transaction, ...]
    forecast: Optional[ForecastReport]
    as_of: date

    @property
    def net_flow(self) -> float:
        return self.totals.income - self.totals.spending

    @property
    def emergency_months(self) -> float:
        return coverage_months(self.totals)


def _eur(amount: float) -> str:
    return f"€{round(amount):,}"


def negative_cash_flow(ctx: RuleContext) -> Optional[Alert]:
    if ctx.net_flow >= 0:
        return None
    return Alert(
        id="negative-cashflow",
        type="critical",
        title="Negative Cash Flow",
        description=f"You're spending {_eur(abs(ctx.net_flow))} more than you earn monthly.",
        action="Review expenses and create a budget",
        priority=1,
    )


def low_emergency_fund(ctx: RuleContext) -> Optional[Alert]:
    # without spending there is no baseline to measure coverage against
    if ctx.totals.spending <= 0 or ctx.emergency_months >= 3:
        return None
    return Alert(
        id="low-emergency-fund",
        type="warning",
        title="Low Emergency Fund",
        description=f"Your emergency fund covers only {ctx.emergency_months:.1f} months of expenses.",
        action="Build emergency fund to 3-6 months of expenses",
        priority=2,
    )


def budget_exceeded(ctx: RuleContext) -> Optional[Alert]:
    budget = current_budget(ctx.budgets, ctx.as_of)
    if budget is None or ctx.totals.spending <= budget.total_budget:
        return None
    return Alert(
        id="budget-exceeded",
        type="warning",
        title="Budget Exceeded",
        description=(
            f"Monthly spending ({_eur(ctx.totals.spending)}) exceeds budget ({_eur(budget.total_budget)})."
        ),
        action="Review spending categories and adjust budget",
        priority=2,
    )


def projected_shortfall(ctx: RuleContext) -> Optional[Alert]:
    if ctx.forecast is None or ctx.forecast.negative_months == 0:
        return None
    first = next(m for m in ctx.forecast.months if m.is_negative)
    return Alert(
        id="projected-shortfall",
        type="warning",
        title="Projected Balance Shortfall",
        description=(
            f"Your balance is projected to go negative in {first.label} "
            f"({ctx.forecast.negative_months} of {ctx.forecast.horizon_months} months)."
        ),
        action="Reduce goal contributions or expenses before the shortfall",
        priority=2,
    )


def is_stalled(goal: Goal, as_of: date) -> bool:
    created = parse_date(goal.created_at) if goal.created_at else None
    if created is None:
        return False
    age_months = (as_of - created).days / 30
    if age_months <= STALL_MIN_AGE_MONTHS:
        return False
    expected = min(STALL_PROGRESS_CAP, age_months * STALL_PROGRESS_PER_MONTH)
    return goal_progress(goal) < expected


def stalled_goals(ctx: RuleContext) -> Optional[Alert]:
    stalled = [g for g in ctx.goals if is_stalled(g, ctx.as_of)]
    if not stalled:
        return None
    n = len(stalled)
    return Alert(
        id="stalled-goals",
        type="info",
        title="Goals Behind Schedule",
        description=f"{n} goal{'s are' if n > 1 else ' is'} behind expected progress.",
        action="Increase monthly contributions or adjust target dates",
        priority=3,
    )


def boost_savings(ctx: RuleContext) -> Optional[Recommendation]:
    rate = ctx.totals.savings_rate
    if not 10 <= rate < TARGET_SAVINGS_RATE:
        return None
    income = ctx.totals.income
    monthly_gap = income * TARGET_SAVINGS_RATE / 100 - income * rate / 100
    annual = monthly_gap * 12
    return Recommendation(
        id="increase-savings",
        type="opportunity",
        title="Boost Your Savings Rate",
        description=f"Your {rate:.1f}% savings rate is good. Aim for 20% to accelerate wealth building.",
        potential_benefit=annual,
        benefit_text=f"Could save an additional {_eur(annual)} annually",
        action=f"Find ways to save an extra {_eur(monthly_gap)} monthly",
    )


def optimize_idle_cash(ctx: RuleContext) -> Optional[Recommendation]:
    if not 3 <= ctx.emergency_months < 6:
        return None
    earn = ctx.totals.total_account_balance * HIGH_YIELD_RATE
    return Recommendation(
        id="optimize-emergency-fund",
        type="optimization",
        title="Optimize Emergency Fund",
        description="Your emergency fund is adequate. Consider high-yield savings for better returns.",
        potential_benefit=earn,
        benefit_text=f"Could earn {_eur(earn)} more annually at 3% APY",
        action="Move emergency fund to high-yield savings account",
    )


def reduce_top_category(ctx: RuleContext) -> Optional[Recommendation]:
    current = transactions_in_month(ctx.transactions, ctx.as_of)
    top = next(lazy_top_categories(current, 1), None)
    if top is None or ctx.totals.spending <= 0:
        return None
    name, spent = top
    if spent <= ctx.totals.spending * CATEGORY_SHARE_LIMIT:
        return None
    saving = spent * CATEGORY_REDUCTION * 12
    return Recommendation(
        id="reduce-top-expense",
        type="savings",
        title=f"Reduce {name} Spending",
        description=f"{name} accounts for {spent / ctx.totals.spending * 100:.1f}% of your spending.",
        potential_benefit=saving,
        benefit_text=f"Could save {_eur(saving)} annually with 10% reduction",
        action=f"Review {name} expenses for optimization opportunities",
    )


def invest_surplus(ctx: RuleContext) -> Optional[Recommendation]:
    if ctx.net_flow <= 0 or ctx.emergency_months < 6:
        return None
    grown = ctx.net_flow * 12 * INVEST_YEARS * (1 + INVEST_RETURN) ** INVEST_YEARS
    return Recommendation(
        id="invest-surplus",
        type="growth",
        title="Invest Your Surplus",
        description=f"You have {_eur(ctx.net_flow)} monthly surplus after a fully funded emergency fund.",
        potential_benefit=grown,
        benefit_text=f"Could grow to {_eur(grown)} in 10 years at 7% returns",
        action="Consider index fund investing for long-term growth",
    )


ALERT_RULES: tuple[Callable[[RuleContext], Optional[Alert]], ...] = (
    negative_cash_flow,
    low_emergency_fund,
    budget_exceeded,
    projected_shortfall,
    stalled_goals,
)

RECOMMENDATION_RULES: tuple[Callable[[RuleContext], Optional[Recommendation]], ...] = (
    boost_savings,
    optimize_idle_cash,
    reduce_top_category,
    invest_surplus,
)


def evaluate(
    totals: Totals,
    budgets: tuple[Budget, ...] = (),
    goals: tuple[Goal, ...] = (),
    transactions: tuple[Transaction, ...] = (),
    forecast: Optional[ForecastReport] = None,
    as_of: Optional[date] = None,
) -> AlertsReport:
    ctx = RuleContext(totals, budgets, goals, transactions, forecast, as_of or today_utc())
    alerts = [a for a in (rule(ctx) for rule in ALERT_RULES) if a is not None]
    recs = [r for r in (rule(ctx) for rule in RECOMMENDATION_RULES) if r is not None]
    return AlertsReport(
        # equal priorities keep rule order
        alerts=tuple(sorted(alerts, key=lambda a: a.priority)),
        recommendations=tuple(recs[:MAX_RECOMMENDATIONS]),
        has_data=totals.has_data,
    )
