from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.aggregator import savings_rate
from household_analytics.dates import today_utc
from household_analytics.domain import Account, Asset, HouseholdMember, Transaction
from household_analytics.filters import by_member, is_expense, is_income
from household_analytics.lazy import iter_transactions
from household_analytics.transforms import transactions_in_month


@dataclass(frozen=True)
class MemberContribution:
    member_id: str
    name: str
    color: str
    income: float
    spending: float
    account_balance: float
    asset_value: float
    wealth: float
    savings_rate: float
    transaction_count: int
    income_share: float
    spending_share: float
    wealth_share: float


@dataclass(frozen=True)
class HouseholdReport:
    members: tuple[MemberContribution, ...]
    shared_account_balance: float
    shared_asset_value: float
    total_income: float
    total_spending: float
    total_wealth: float
    has_data: bool


def _share(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def contributions(
    members: tuple[HouseholdMember, ...],
    accounts: tuple[Account, ...],
    transactions: tuple[Transaction, ...],
    assets: tuple[Asset, ...],
    as_of: Optional[date] = None,
) -> HouseholdReport:
    """Per-member income, spending and wealth for the current month."""
    as_of = as_of or today_utc()
    current = transactions_in_month(transactions, as_of)

    raw = []
    for m in members:
        mine = tuple(iter_transactions(current, by_member(m.id)))
        observed = sum(t.amount for t in mine if is_income(t))
        income = observed if observed > 0 else m.monthly_income
        spending = sum(-t.amount for t in mine if is_expense(t))
        balance = sum(a.balance for a in accounts if a.member_id == m.id)
        owned = sum(a.value for a in assets if a.member_id == m.id)
        raw.append((m, income, spending, balance, owned, len(mine)))

    total_income = sum(r[1] for r in raw)
    total_spending = sum(r[2] for r in raw)
    total_wealth = sum(r[3] + r[4] for r in raw)

    rows = tuple(
        MemberContribution(
            member_id=m.id,
            name=m.name,
            color=m.color,
            income=income,
            spending=spending,
            account_balance=balance,
            asset_value=owned,
            wealth=balance + owned,
            savings_rate=savings_rate(income, spending),
            transaction_count=count,
            income_share=_share(income, total_income),
            spending_share=_share(spending, total_spending),
            wealth_share=_share(balance + owned, total_wealth),
        )
        for m, income, spending, balance, owned, count in raw
    )

    return HouseholdReport(
        members=rows,
        shared_account_balance=sum(a.balance for a in accounts if a.member_id is None),
        shared_asset_value=sum(a.value for a in assets if a.member_id is None),
        total_income=total_income,
        total_spending=total_spending,
        total_wealth=total_wealth,
        has_data=bool(members),
    )
