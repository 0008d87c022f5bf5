from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union

DateLike = Union[date, str]


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    RETIREMENT = "retirement"
    VESTING = "vesting"
    OTHER = "other"


class AccountCategory(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    RETIREMENT = "retirement"
    REAL_ESTATE = "real_estate"
    OTHER = "other"


class Scenario(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


# vesting equity is treated as long-horizon retirement-like wealth
ACCOUNT_TYPE_CATEGORY: dict[AccountType, AccountCategory] = {
    AccountType.CHECKING: AccountCategory.CHECKING,
    AccountType.SAVINGS: AccountCategory.SAVINGS,
    AccountType.INVESTMENT: AccountCategory.INVESTMENT,
    AccountType.RETIREMENT: AccountCategory.RETIREMENT,
    AccountType.VESTING: AccountCategory.RETIREMENT,
    AccountType.OTHER: AccountCategory.OTHER,
}

# annual growth rates per scenario
GROWTH_RATES: dict[Scenario, dict[AccountCategory, float]] = {
    Scenario.CONSERVATIVE: {
        AccountCategory.CHECKING: 0.01,
        AccountCategory.SAVINGS: 0.02,
        AccountCategory.INVESTMENT: 0.06,
        AccountCategory.RETIREMENT: 0.07,
        AccountCategory.REAL_ESTATE: 0.03,
        AccountCategory.OTHER: 0.02,
    },
    Scenario.MODERATE: {
        AccountCategory.CHECKING: 0.015,
        AccountCategory.SAVINGS: 0.025,
        AccountCategory.INVESTMENT: 0.08,
        AccountCategory.RETIREMENT: 0.085,
        AccountCategory.REAL_ESTATE: 0.04,
        AccountCategory.OTHER: 0.03,
    },
    Scenario.AGGRESSIVE: {
        AccountCategory.CHECKING: 0.02,
        AccountCategory.SAVINGS: 0.03,
        AccountCategory.INVESTMENT: 0.10,
        AccountCategory.RETIREMENT: 0.10,
        AccountCategory.REAL_ESTATE: 0.05,
        AccountCategory.OTHER: 0.04,
    },
}

# share of yearly savings routed to each category; sums to 1
CONTRIBUTION_WEIGHTS: dict[AccountCategory, float] = {
    AccountCategory.CHECKING: 0.0,
    AccountCategory.SAVINGS: 0.2,
    AccountCategory.INVESTMENT: 0.4,
    AccountCategory.RETIREMENT: 0.3,
    AccountCategory.REAL_ESTATE: 0.0,
    AccountCategory.OTHER: 0.1,
}

CATEGORY_COLORS: dict[AccountCategory, str] = {
    AccountCategory.CHECKING: "#3B82F6",
    AccountCategory.SAVINGS: "#10B981",
    AccountCategory.INVESTMENT: "#8B5CF6",
    AccountCategory.RETIREMENT: "#F59E0B",
    AccountCategory.REAL_ESTATE: "#EF4444",
    AccountCategory.OTHER: "#6B7280",
}


@dataclass(frozen=True)
class HouseholdMember:
    id: str
    name: str
    monthly_income: float
    color: str = "#6B7280"


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    type: AccountType
    balance: float
    member_id: Optional[str] = None  # None = shared by the household
    color: str = "#6B7280"
    last_updated: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    id: str
    account_id: Optional[str]
    member_id: Optional[str]
    date: DateLike
    amount: float        # + inflow, - outflow
    description: str = ""
    category: str = "Other"


@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    category: str
    value: float
    member_id: Optional[str] = None
    purchase_value: Optional[float] = None


@dataclass(frozen=True)
class Goal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: DateLike
    description: str = ""
    category: Optional[str] = None
    created_at: Optional[DateLike] = None


@dataclass(frozen=True)
class VestingSchedule:
    id: str
    start_date: DateLike
    end_date: DateLike
    monthly_amount: float
    cliff_amount: float = 0.0
    cliff_period: int = 0  # months from start
    member_id: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class Budget:
    id: str
    month: str           # "YYYY-MM"
    total_budget: float


@dataclass(frozen=True)
class BudgetCategory:
    id: str
    budget_id: str
    category: str
    allocated_amount: float


@dataclass(frozen=True)
class MonthlySummary:
    month: str           # "YYYY-MM"
    total_income: float
    total_spending: float
    total_savings: float
    net_worth: float


@dataclass(frozen=True)
class Snapshot:
    members: tuple[HouseholdMember, ...] = ()
    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    assets: tuple[Asset, ...] = ()
    goals: tuple[Goal, ...] = ()
    vesting_schedules: tuple[VestingSchedule, ...] = ()
    budgets: tuple[Budget, ...] = ()
    budget_categories: tuple[BudgetCategory, ...] = ()
    monthly_summaries: tuple[MonthlySummary, ...] = field(default=())
