"""Year-by-year net-worth projection under a growth scenario.

Accounts and assets are grouped into ``AccountCategory`` buckets. For year
``y > 0`` each bucket grows as ``value * (1 + rate) ** y`` and receives its
weighted share of ``monthly_savings * 12 * y``; vesting released after the
as-of date flows into the retirement bucket. Year 0 is the current
snapshot, untouched.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.aggregator import Totals
from household_analytics.dates import add_months, parse_date, today_utc
from household_analytics.domain import (
    ACCOUNT_TYPE_CATEGORY,
    CATEGORY_COLORS,
    CONTRIBUTION_WEIGHTS,
    GROWTH_RATES,
    Account,
    AccountCategory,
    Asset,
    Goal,
    Scenario,
    VestingSchedule,
)
from household_analytics.log import get_logger
from household_analytics.vesting import compute_vesting

logger = get_logger(__name__)

MILLIONAIRE_THRESHOLD = 1_000_000
TOP_CATEGORY_COUNT = 4
REAL_ESTATE_MARKERS = ("property", "real estate", "real_estate", "realestate", "house", "apartment")


@dataclass(frozen=True)
class YearlyProjection:
    year: int
    label: str
    date: date
    categories: tuple[tuple[AccountCategory, float], ...]   # in AccountCategory order
    total_net_worth: float
    is_current_year: bool

    def value(self, category: AccountCategory) -> float:
        return dict(self.categories)[category]


@dataclass(frozen=True)
class CategoryShare:
    category: AccountCategory
    value: float
    percentage: float
    color: str


@dataclass(frozen=True)
class GoalAchievability:
    goal_id: str
    name: str
    target_amount: float
    target_year: int
    projected_net_worth: float
    achievable: bool


@dataclass(frozen=True)
class ProjectionReport:
    scenario: Scenario
    years: tuple[YearlyProjection, ...]
    current_net_worth: float
    final_net_worth: float
    total_growth: float
    annualized_growth_rate: float     # fraction, 0.05 == 5%/year
    millionaire_year: Optional[int]
    double_net_worth_year: Optional[int]
    top_categories: tuple[CategoryShare, ...]
    goals: tuple[GoalAchievability, ...]
    monthly_contribution: float
    has_data: bool


def asset_category(asset: Asset) -> AccountCategory:
    label = (asset.category or "").lower()
    if any(marker in label for marker in REAL_ESTATE_MARKERS):
        return AccountCategory.REAL_ESTATE
    return AccountCategory.OTHER


def current_by_category(accounts: tuple[Account, ...], assets: tuple[Asset, ...]) -> dict[AccountCategory, float]:
    values = {c: 0.0 for c in AccountCategory}
    for a in accounts:
        values[ACCOUNT_TYPE_CATEGORY[a.type]] += a.balance
    for a in assets:
        values[asset_category(a)] += a.value
    return values


def annualized_growth(current: float, final: float, years: int) -> float:
    if years <= 0 or current <= 0 or final <= 0:
        return 0.0
    return (final / current) ** (1 / years) - 1


def _vested_since(schedules: tuple[VestingSchedule, ...], as_of: date, years: int) -> float:
    later = add_months(as_of, 12 * years)
    return sum(
        max(0.0, compute_vesting(s, later).vested - compute_vesting(s, as_of).vested)
        for s in schedules
    )


def project(
    accounts: tuple[Account, ...],
    assets: tuple[Asset, ...],
    totals: Totals,
    scenario: Scenario,
    years: int,
    goals: tuple[Goal, ...] = (),
    vesting_schedules: tuple[VestingSchedule, ...] = (),
    as_of: Optional[date] = None,
) -> ProjectionReport:
    as_of = as_of or today_utc()
    years = max(0, int(years))
    rates = GROWTH_RATES[scenario]
    current = current_by_category(accounts, assets)
    # summed the same way as the aggregator so year 0 matches net worth exactly
    current_total = sum(a.balance for a in accounts) + sum(a.value for a in assets)
    yearly_savings = totals.monthly_savings * 12

    rows = []
    for y in range(years + 1):
        if y == 0:
            values = dict(current)
        else:
            values = {}
            for category, value in current.items():
                grown = value * (1 + rates[category]) ** y
                grown += yearly_savings * y * CONTRIBUTION_WEIGHTS[category]
                values[category] = grown
            values[AccountCategory.RETIREMENT] += _vested_since(vesting_schedules, as_of, y)
            values = {c: max(v, 0.0) for c, v in values.items()}
        rows.append(
            YearlyProjection(
                year=y,
                label="Current" if y == 0 else f"Y{y}",
                date=add_months(as_of.replace(day=1), 12 * y),
                categories=tuple(values.items()),
                total_net_worth=current_total if y == 0 else sum(values.values()),
                is_current_year=y == 0,
            )
        )

    final = rows[-1].total_net_worth
    millionaire = next((r.year for r in rows if r.total_net_worth >= MILLIONAIRE_THRESHOLD), None)
    doubled = (
        next((r.year for r in rows if r.total_net_worth >= current_total * 2), None)
        if current_total > 0
        else None
    )

    top: tuple[CategoryShare, ...] = ()
    if final > 0:
        ranked = sorted(rows[-1].categories, key=lambda item: (-item[1], item[0].value))
        top = tuple(
            CategoryShare(category=c, value=v, percentage=v / final * 100, color=CATEGORY_COLORS[c])
            for c, v in ranked[:TOP_CATEGORY_COUNT]
            if v > 0
        )

    goal_rows = []
    for g in goals:
        target = parse_date(g.target_date)
        if target is None:
            continue
        index = min(max(0, target.year - as_of.year), years)
        projected = rows[index].total_net_worth
        goal_rows.append(
            GoalAchievability(
                goal_id=g.id,
                name=g.name,
                target_amount=g.target_amount,
                target_year=target.year,
                projected_net_worth=projected,
                achievable=projected >= g.target_amount,
            )
        )

    logger.debug("projection.computed", scenario=scenario.value, years=years)

    return ProjectionReport(
        scenario=scenario,
        years=tuple(rows),
        current_net_worth=current_total,
        final_net_worth=final,
        total_growth=final - current_total,
        annualized_growth_rate=annualized_growth(current_total, final, years),
        millionaire_year=millionaire,
        double_net_worth_year=doubled,
        top_categories=top,
        goals=tuple(goal_rows),
        monthly_contribution=totals.monthly_savings,
        has_data=bool(accounts or assets),
    )
