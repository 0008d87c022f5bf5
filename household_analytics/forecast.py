"""Month-by-month cash-flow forecast.

Each projected month combines the base income and spending from the
aggregator (shifted by the monthly-summary trend when one exists), vesting
that lands in the month, and the outflow needed to keep every open goal on
schedule. The displayed balance is floored at zero; the running balance
that decides ``is_negative`` is kept unfloored.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.aggregator import Totals
from household_analytics.dates import add_months, calendar_month_diff, month_key, month_label, parse_date, today_utc
from household_analytics.domain import Goal, VestingSchedule
from household_analytics.history import FLAT, Trend
from household_analytics.log import get_logger
from household_analytics.vesting import vesting_delta

logger = get_logger(__name__)

RISK_LOW = "low"
RISK_MEDIUM = "medium"
RISK_HIGH = "high"


@dataclass(frozen=True)
class MonthlyProjection:
    month: str
    label: str
    income: float
    expenses: float
    net_cash_flow: float
    vesting_inflow: float
    cliff_inflow: float
    goal_outflow: float
    balance: float         # floored at zero for display
    is_negative: bool


@dataclass(frozen=True)
class ForecastReport:
    months: tuple[MonthlyProjection, ...]
    horizon_months: int
    starting_balance: float
    final_balance: float
    lowest_balance: float   # unfloored
    negative_months: int
    risk: str
    total_vesting_inflow: float
    total_goal_outflow: float
    trend_applied: bool
    has_data: bool


def goal_monthly_outflow(goal: Goal, as_of: date) -> tuple[float, int]:
    """Monthly amount a goal needs and for how many months, (0, 0) when closed or due."""
    target = parse_date(goal.target_date)
    remaining = goal.target_amount - goal.current_amount
    if target is None or remaining <= 0:
        return 0.0, 0
    months_left = calendar_month_diff(as_of, target)
    if months_left < 1:
        return 0.0, 0
    return remaining / max(1, months_left), months_left


def classify_risk(negative_months: int, horizon: int) -> str:
    if negative_months > horizon / 2:
        return RISK_HIGH
    if negative_months > 0:
        return RISK_MEDIUM
    return RISK_LOW


def forecast(
    totals: Totals,
    vesting_schedules: tuple[VestingSchedule, ...],
    goals: tuple[Goal, ...],
    horizon_months: int,
    as_of: Optional[date] = None,
    trend: Trend = FLAT,
) -> ForecastReport:
    as_of = as_of or today_utc()
    horizon = max(0, int(horizon_months))

    outflows = [goal_monthly_outflow(g, as_of) for g in goals]

    running = totals.total_account_balance
    lowest = running
    months = []
    negative = 0
    total_vesting = 0.0
    total_goals = 0.0

    for step in range(1, horizon + 1):
        period_start = add_months(as_of, step - 1)
        period_end = add_months(as_of, step)

        income = max(0.0, totals.income + trend.income_per_month * step)
        expenses = max(0.0, totals.spending + trend.spending_per_month * step)

        monthly_vest = 0.0
        cliff_vest = 0.0
        for s in vesting_schedules:
            m, c = vesting_delta(s, period_start, period_end)
            monthly_vest += m
            cliff_vest += c
        vest_in = monthly_vest + cliff_vest

        goal_out = sum(amount for amount, months_left in outflows if step <= months_left)

        net = (income + vest_in) - (expenses + goal_out)
        running += net
        lowest = min(lowest, running)
        if running < 0:
            negative += 1
        total_vesting += vest_in
        total_goals += goal_out

        months.append(
            MonthlyProjection(
                month=month_key(period_end),
                label=month_label(period_end),
                income=income,
                expenses=expenses,
                net_cash_flow=net,
                vesting_inflow=vest_in,
                cliff_inflow=cliff_vest,
                goal_outflow=goal_out,
                balance=max(0.0, running),
                is_negative=running < 0,
            )
        )

    risk = classify_risk(negative, horizon)
    logger.debug("forecast.computed", horizon=horizon, negative_months=negative, risk=risk)

    return ForecastReport(
        months=tuple(months),
        horizon_months=horizon,
        starting_balance=totals.total_account_balance,
        final_balance=months[-1].balance if months else max(0.0, totals.total_account_balance),
        lowest_balance=lowest,
        negative_months=negative,
        risk=risk,
        total_vesting_inflow=total_vesting,
        total_goal_outflow=total_goals,
        trend_applied=not trend.is_flat,
        has_data=totals.has_data or bool(vesting_schedules) or bool(goals),
    )
