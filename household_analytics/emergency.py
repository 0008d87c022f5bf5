from dataclasses import dataclass

from household_analytics.aggregator import Totals


@dataclass(frozen=True)
class EmergencyFund:
    balance: float
    monthly_expenses: float
    coverage_months: float
    three_month_target: float
    six_month_target: float
    progress_to_three_months: float
    progress_to_six_months: float
    status: str
    has_data: bool


def coverage_months(totals: Totals) -> float:
    """Months of spending covered by account balances; 0 when there is no spending."""
    if totals.spending <= 0:
        return 0.0
    return totals.total_account_balance / totals.spending


def emergency_fund(totals: Totals) -> EmergencyFund:
    expenses = totals.spending
    balance = totals.total_account_balance
    three = expenses * 3
    six = expenses * 6
    to_three = balance / three * 100 if three > 0 else 0.0
    to_six = balance / six * 100 if six > 0 else 0.0

    if to_three < 50:
        status = "critical"
    elif to_three < 100:
        status = "low"
    elif to_six < 100:
        status = "good"
    else:
        status = "excellent"

    return EmergencyFund(
        balance=balance,
        monthly_expenses=expenses,
        coverage_months=coverage_months(totals),
        three_month_target=three,
        six_month_target=six,
        progress_to_three_months=to_three,
        progress_to_six_months=to_six,
        status=status,
        has_data=expenses > 0,
    )
