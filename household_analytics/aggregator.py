"""Base totals every other calculator builds on.

Income follows a heuristic kept from the dashboard: declared salaries and
income actually observed in this month's transactions can disagree, and by
default the larger of the two is used so income is never understated.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.config import IncomePolicy
from household_analytics.dates import month_key, parse_date, today_utc
from household_analytics.domain import Account, Asset, HouseholdMember, Transaction
from household_analytics.functional import pipe
from household_analytics.log import get_logger
from household_analytics.transforms import (
    expense_transactions,
    income_transactions,
    transaction_amounts,
    transactions_in_month,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Totals:
    month: str
    income: float
    declared_income: float
    observed_income: float
    spending: float
    total_account_balance: float
    total_asset_value: float
    net_worth: float
    savings_rate: float   # percent
    monthly_savings: float
    has_data: bool


@dataclass(frozen=True)
class AssetPerformance:
    asset_id: str
    name: str
    value: float
    purchase_value: Optional[float]
    gain: Optional[float]
    gain_pct: Optional[float]


@dataclass(frozen=True)
class AssetSummary:
    assets: tuple[AssetPerformance, ...]
    total_value: float
    total_cost: float
    total_gain: float
    total_gain_pct: float
    has_data: bool


def savings_rate(income: float, spending: float) -> float:
    if income == 0:
        return 0.0
    return (income - spending) / income * 100


def resolve_income(declared: float, observed: float, policy: IncomePolicy = IncomePolicy.MAX) -> float:
    if policy is IncomePolicy.DECLARED:
        return declared
    if policy is IncomePolicy.OBSERVED:
        return observed
    return max(declared, observed)


def _total_outflow(amounts: tuple[float, ...]) -> float:
    return sum(abs(a) for a in amounts)


def month_spending(transactions: tuple[Transaction, ...], month: date) -> float:
    return pipe(transactions_in_month(transactions, month), expense_transactions, transaction_amounts, _total_outflow)


def aggregate(
    members: tuple[HouseholdMember, ...],
    accounts: tuple[Account, ...],
    transactions: tuple[Transaction, ...],
    assets: tuple[Asset, ...],
    as_of: Optional[date] = None,
    income_policy: IncomePolicy = IncomePolicy.MAX,
) -> Totals:
    as_of = as_of or today_utc()
    current = transactions_in_month(transactions, as_of)

    malformed = sum(1 for t in transactions if parse_date(t.date) is None)
    if malformed:
        logger.debug("aggregate.malformed_dates_excluded", count=malformed)

    declared = sum(m.monthly_income for m in members)
    observed = sum(transaction_amounts(income_transactions(current)))
    income = resolve_income(declared, observed, income_policy)
    spending = pipe(current, expense_transactions, transaction_amounts, _total_outflow)

    account_total = sum(a.balance for a in accounts)
    asset_total = sum(a.value for a in assets)

    return Totals(
        month=month_key(as_of),
        income=income,
        declared_income=declared,
        observed_income=observed,
        spending=spending,
        total_account_balance=account_total,
        total_asset_value=asset_total,
        net_worth=account_total + asset_total,
        savings_rate=savings_rate(income, spending),
        monthly_savings=income - spending,
        has_data=bool(members or accounts or transactions or assets),
    )


def asset_performance(assets: tuple[Asset, ...]) -> AssetSummary:
    rows = []
    for a in assets:
        if a.purchase_value is None:
            rows.append(AssetPerformance(a.id, a.name, a.value, None, None, None))
            continue
        gain = a.value - a.purchase_value
        pct = gain / a.purchase_value * 100 if a.purchase_value else 0.0
        rows.append(AssetPerformance(a.id, a.name, a.value, a.purchase_value, gain, pct))

    priced = [r for r in rows if r.purchase_value is not None]
    cost = sum(r.purchase_value for r in priced)
    gain = sum(r.gain for r in priced)
    return AssetSummary(
        assets=tuple(rows),
        total_value=sum(a.value for a in assets),
        total_cost=cost,
        total_gain=gain,
        total_gain_pct=gain / cost * 100 if cost else 0.0,
        has_data=bool(assets),
    )
