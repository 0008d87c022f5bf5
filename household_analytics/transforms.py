import json
from collections.abc import Mapping
from datetime import date
from typing import Any, Callable, Optional, Tuple, TypeVar

from household_analytics.domain import (
    Account,
    AccountType,
    Asset,
    Budget,
    BudgetCategory,
    Goal,
    HouseholdMember,
    MonthlySummary,
    Snapshot,
    Transaction,
    VestingSchedule,
)
from household_analytics.errors import SnapshotValidationError
from household_analytics.filters import by_month
from household_analytics.lazy import iter_transactions

R = TypeVar("R")


def _field(row: Mapping, *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in row and row[k] is not None:
            return row[k]
    return default


def _number(row: Mapping, kind: str, *keys: str, default: Any = None) -> float:
    value = _field(row, *keys, default=default)
    if value is None:
        raise SnapshotValidationError(
            f"{kind} is missing '{keys[0]}'",
            [{"error": "missing_field", "kind": kind, "field": keys[0], "id": row.get("id")}],
        )
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise SnapshotValidationError(
            f"{kind}.{keys[0]} must be a number",
            [{"error": "not_a_number", "kind": kind, "field": keys[0], "id": row.get("id")}],
        )
    try:
        return float(value)
    except ValueError:
        raise SnapshotValidationError(
            f"{kind}.{keys[0]} must be a number",
            [{"error": "not_a_number", "kind": kind, "field": keys[0], "id": row.get("id")}],
        ) from None


def _id(row: Any, kind: str) -> str:
    if not isinstance(row, Mapping):
        raise SnapshotValidationError(
            f"{kind} record must be an object",
            [{"error": "not_an_object", "kind": kind}],
        )
    value = row.get("id")
    if value is None or str(value).strip() == "":
        raise SnapshotValidationError(
            f"{kind} record has no id",
            [{"error": "missing_id", "kind": kind}],
        )
    return str(value)


def _ref(row: Mapping, *keys: str) -> Optional[str]:
    # ids are stored as strings, so references must be too
    value = _field(row, *keys)
    return None if value is None else str(value)


def _account_type(row: Mapping) -> AccountType:
    raw = str(_field(row, "type", default="other")).strip().lower()
    # the dashboard historically called the everyday account "main"
    if raw == "main":
        raw = "checking"
    try:
        return AccountType(raw)
    except ValueError:
        raise SnapshotValidationError(
            f"unknown account type '{raw}'",
            [{"error": "unknown_account_type", "id": row.get("id"), "type": raw}],
        ) from None


def member_from_dict(row: Mapping) -> HouseholdMember:
    return HouseholdMember(
        id=_id(row, "member"),
        name=str(_field(row, "name", default="")),
        monthly_income=_number(row, "member", "monthly_income", "monthlyIncome", default=0),
        color=str(_field(row, "color", default="#6B7280")),
    )


def account_from_dict(row: Mapping) -> Account:
    return Account(
        id=_id(row, "account"),
        name=str(_field(row, "name", default="")),
        type=_account_type(row),
        balance=_number(row, "account", "balance", default=0),
        member_id=_ref(row, "member_id", "userId", "user_id"),
        color=str(_field(row, "color", default="#6B7280")),
        last_updated=_field(row, "last_updated", "lastUpdated"),
    )


def transaction_from_dict(row: Mapping) -> Transaction:
    return Transaction(
        id=_id(row, "transaction"),
        account_id=_ref(row, "account_id", "accountId"),
        member_id=_ref(row, "member_id", "userId", "user_id"),
        date=_field(row, "date", default=""),
        amount=_number(row, "transaction", "amount"),
        description=str(_field(row, "description", default="")),
        category=str(_field(row, "category", default="Other")),
    )


def asset_from_dict(row: Mapping) -> Asset:
    purchase = _field(row, "purchase_value", "purchaseValue")
    return Asset(
        id=_id(row, "asset"),
        name=str(_field(row, "name", default="")),
        category=str(_field(row, "category", default="other")),
        value=_number(row, "asset", "value", default=0),
        member_id=_ref(row, "member_id", "userId", "user_id"),
        purchase_value=None if purchase is None else _number(row, "asset", "purchase_value", "purchaseValue"),
    )


def goal_from_dict(row: Mapping) -> Goal:
    return Goal(
        id=_id(row, "goal"),
        name=str(_field(row, "name", default="")),
        target_amount=_number(row, "goal", "target_amount", "targetAmount"),
        current_amount=_number(row, "goal", "current_amount", "currentAmount", default=0),
        target_date=_field(row, "target_date", "targetDate", default=""),
        description=str(_field(row, "description", default="")),
        category=_field(row, "category"),
        created_at=_field(row, "created_at", "createdAt"),
    )


def vesting_from_dict(row: Mapping) -> VestingSchedule:
    return VestingSchedule(
        id=_id(row, "vesting_schedule"),
        start_date=_field(row, "start_date", "startDate", default=""),
        end_date=_field(row, "end_date", "endDate", default=""),
        monthly_amount=_number(row, "vesting_schedule", "monthly_amount", "monthlyAmount"),
        cliff_amount=_number(row, "vesting_schedule", "cliff_amount", "cliffAmount", default=0),
        cliff_period=int(_number(row, "vesting_schedule", "cliff_period", "cliffPeriod", default=0)),
        member_id=_ref(row, "member_id", "userId", "user_id"),
        description=str(_field(row, "description", default="")),
    )


def budget_from_dict(row: Mapping) -> Budget:
    return Budget(
        id=_id(row, "budget"),
        month=str(_field(row, "month", default="")),
        total_budget=_number(row, "budget", "total_budget", "totalBudget", default=0),
    )


def budget_category_from_dict(row: Mapping) -> BudgetCategory:
    return BudgetCategory(
        id=_id(row, "budget_category"),
        budget_id=str(_field(row, "budget_id", "budgetId", default="")),
        category=str(_field(row, "category", default="Other")),
        allocated_amount=_number(row, "budget_category", "allocated_amount", "allocatedAmount", default=0),
    )


def summary_from_dict(row: Mapping) -> MonthlySummary:
    if not isinstance(row, Mapping):
        raise SnapshotValidationError(
            "monthly_summary record must be an object",
            [{"error": "not_an_object", "kind": "monthly_summary"}],
        )
    return MonthlySummary(
        month=str(_field(row, "month", default="")),
        total_income=_number(row, "monthly_summary", "total_income", "totalIncome", default=0),
        total_spending=_number(row, "monthly_summary", "total_spending", "totalSpending", default=0),
        total_savings=_number(row, "monthly_summary", "total_savings", "totalSavings", default=0),
        net_worth=_number(row, "monthly_summary", "net_worth", "netWorth", default=0),
    )


def _rows(data: Mapping, build: Callable[[Mapping], R], *keys: str) -> Tuple[R, ...]:
    raw = _field(data, *keys, default=())
    if not isinstance(raw, (list, tuple)):
        raise SnapshotValidationError(
            f"'{keys[0]}' must be a list",
            [{"error": "not_a_list", "field": keys[0]}],
        )
    return tuple(build(row) for row in raw)


def snapshot_from_dict(data: Any) -> Snapshot:
    """Build an immutable snapshot from JSON-like data, failing fast on bad shapes."""
    if not isinstance(data, Mapping):
        raise SnapshotValidationError(
            "snapshot must be an object",
            [{"error": "not_an_object", "kind": "snapshot"}],
        )
    return Snapshot(
        members=_rows(data, member_from_dict, "members", "users"),
        accounts=_rows(data, account_from_dict, "accounts"),
        transactions=_rows(data, transaction_from_dict, "transactions"),
        assets=_rows(data, asset_from_dict, "assets"),
        goals=_rows(data, goal_from_dict, "goals"),
        vesting_schedules=_rows(data, vesting_from_dict, "vesting_schedules", "vestingSchedules"),
        budgets=_rows(data, budget_from_dict, "budgets"),
        budget_categories=_rows(data, budget_category_from_dict, "budget_categories", "budgetCategories"),
        monthly_summaries=_rows(data, summary_from_dict, "monthly_summaries", "monthlySummaries"),
    )


def load_snapshot(path: str) -> Snapshot:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return snapshot_from_dict(data)


def income_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.amount > 0, trans))


def expense_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.amount < 0, trans))


def transaction_amounts(trans: Tuple[Transaction, ...]) -> Tuple[float, ...]:
    return tuple(map(lambda t: t.amount, trans))


def transactions_in_month(trans: Tuple[Transaction, ...], month: date) -> Tuple[Transaction, ...]:
    """Transactions dated in the calendar month of ``month``; malformed dates are dropped."""
    return tuple(iter_transactions(trans, by_month(month)))
