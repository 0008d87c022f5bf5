"""Variable income: bonuses, commissions, dividends, freelance work and vesting.

Positive transactions are picked up when their description matches one of
``BONUS_PATTERNS`` or when they are large ``Income`` entries. Schedules that
are vesting on the as-of date add one recurring entry of their monthly
amount. The report covers the as-of calendar year: a year-to-date total,
a month-by-month trend and a forecast for the months still ahead.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.dates import add_months, parse_date, today_utc
from household_analytics.domain import Transaction, VestingSchedule
from household_analytics.filters import is_income
from household_analytics.lazy import iter_transactions
from household_analytics.log import get_logger
from household_analytics.vesting import vesting_delta

logger = get_logger(__name__)

BONUS_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"bonus", r"commission", r"incentive", r"award", r"prize",
        r"dividend", r"royalty", r"freelance", r"consulting", r"contract",
        r"performance", r"quarterly", r"annual", r"overtime",
    )
)
LARGE_INCOME_THRESHOLD = 1000.0
INCOME_CATEGORY = "Income"

# first match wins
TYPE_RULES = (
    (re.compile(r"bonus", re.IGNORECASE), "Bonus"),
    (re.compile(r"commission", re.IGNORECASE), "Commission"),
    (re.compile(r"dividend", re.IGNORECASE), "Dividend"),
    (re.compile(r"freelance|consulting", re.IGNORECASE), "Freelance"),
    (re.compile(r"vesting|equity", re.IGNORECASE), "Equity"),
    (re.compile(r"overtime", re.IGNORECASE), "Overtime"),
)


@dataclass(frozen=True)
class VariableIncome:
    id: str
    description: str
    amount: float
    date: date
    type: str
    quarter: int
    recurring: bool


@dataclass(frozen=True)
class BonusMonth:
    month: int
    label: str
    amount: float
    count: int
    is_past: bool


@dataclass(frozen=True)
class BonusForecastMonth:
    month: int
    label: str
    expected_amount: float
    vesting_amount: float


@dataclass(frozen=True)
class BonusTypeTotal:
    type: str
    total: float
    count: int


@dataclass(frozen=True)
class BonusReport:
    year: int
    items: tuple[VariableIncome, ...]     # newest first
    total_ytd: float
    average_monthly: float                # from years before ``year``
    monthly_trend: tuple[BonusMonth, ...]
    forecast: tuple[BonusForecastMonth, ...]
    by_type: tuple[BonusTypeTotal, ...]
    has_data: bool


def is_variable_income(t: Transaction) -> bool:
    if not is_income(t):
        return False
    if any(p.search(t.description) for p in BONUS_PATTERNS):
        return True
    return t.amount > LARGE_INCOME_THRESHOLD and t.category == INCOME_CATEGORY


def income_type(description: str) -> str:
    for pattern, label in TYPE_RULES:
        if pattern.search(description):
            return label
    return "Other"


def _quarter(d: date) -> int:
    return (d.month - 1) // 3 + 1


def _from_transactions(transactions: tuple[Transaction, ...]) -> list[VariableIncome]:
    items = []
    for t in iter_transactions(transactions, is_variable_income):
        d = parse_date(t.date)
        if d is None:
            continue
        items.append(VariableIncome(t.id, t.description, t.amount, d, income_type(t.description), _quarter(d), False))
    return items


def _from_vesting(schedules: tuple[VestingSchedule, ...], as_of: date) -> list[VariableIncome]:
    items = []
    for s in schedules:
        start, end = parse_date(s.start_date), parse_date(s.end_date)
        if start is None or end is None or not start <= as_of <= end:
            continue
        items.append(
            VariableIncome(
                id=f"vesting-{s.id}",
                description=s.description or "Equity Vesting",
                amount=s.monthly_amount,
                date=as_of,
                type="Vesting",
                quarter=_quarter(as_of),
                recurring=True,
            )
        )
    return items


def track_bonuses(
    transactions: tuple[Transaction, ...],
    vesting_schedules: tuple[VestingSchedule, ...] = (),
    as_of: Optional[date] = None,
) -> BonusReport:
    as_of = as_of or today_utc()
    year = as_of.year

    observed = _from_transactions(transactions)
    items = observed + _from_vesting(vesting_schedules, as_of)
    this_year = [i for i in items if i.date.year == year]

    total_ytd = sum(i.amount for i in this_year)
    average_monthly = sum(i.amount for i in observed if i.date.year < year) / 12

    trend = []
    for m in range(1, 13):
        in_month = [i for i in this_year if i.date.month == m]
        trend.append(
            BonusMonth(
                month=m,
                label=date(year, m, 1).strftime("%b"),
                amount=sum(i.amount for i in in_month),
                count=len(in_month),
                is_past=m <= as_of.month,
            )
        )

    per_month = total_ytd / as_of.month or average_monthly
    forecast = []
    for m in range(as_of.month + 1, 13):
        first = date(year, m, 1)
        vesting = sum(sum(vesting_delta(s, first, add_months(first, 1))) for s in vesting_schedules)
        forecast.append(
            BonusForecastMonth(
                month=m,
                label=first.strftime("%b"),
                expected_amount=per_month + vesting,
                vesting_amount=vesting,
            )
        )

    totals: dict[str, list[float]] = {}
    for i in items:
        totals.setdefault(i.type, []).append(i.amount)
    by_type = sorted(
        (BonusTypeTotal(t, sum(amounts), len(amounts)) for t, amounts in totals.items()),
        key=lambda row: (-row.total, row.type),
    )

    logger.debug("bonus.computed", items=len(items), year=year)

    return BonusReport(
        year=year,
        items=tuple(sorted(items, key=lambda i: (i.date, i.id), reverse=True)),
        total_ytd=total_ytd,
        average_monthly=average_monthly,
        monthly_trend=tuple(trend),
        forecast=tuple(forecast),
        by_type=tuple(by_type),
        has_data=bool(items),
    )
