from dataclasses import dataclass

import pandas as pd

from household_analytics.dates import month_key, parse_date
from household_analytics.domain import MonthlySummary, Transaction


@dataclass(frozen=True)
class MonthlyPoint:
    month: str
    income: float
    spending: float
    savings: float


@dataclass(frozen=True)
class Trend:
    income_per_month: float
    spending_per_month: float
    months_observed: int

    @property
    def is_flat(self) -> bool:
        return self.income_per_month == 0 and self.spending_per_month == 0


FLAT = Trend(0.0, 0.0, 0)


def transactions_frame(trans: tuple[Transaction, ...]) -> pd.DataFrame:
    rows = []
    for t in trans:
        d = parse_date(t.date)
        if d is None:
            continue
        rows.append({
            "month": month_key(d),
            "category": t.category,
            "member_id": t.member_id,
            "income": t.amount if t.amount > 0 else 0.0,
            "spending": -t.amount if t.amount < 0 else 0.0,
        })
    return pd.DataFrame(rows, columns=["month", "category", "member_id", "income", "spending"])


def monthly_history(trans: tuple[Transaction, ...]) -> tuple[MonthlyPoint, ...]:
    """Observed income and spending per calendar month, oldest first."""
    df = transactions_frame(trans)
    if df.empty:
        return ()
    grouped = df.groupby("month", sort=True)[["income", "spending"]].sum()
    return tuple(
        MonthlyPoint(
            month=str(month),
            income=float(row["income"]),
            spending=float(row["spending"]),
            savings=float(row["income"] - row["spending"]),
        )
        for month, row in grouped.iterrows()
    )


def summaries_frame(summaries: tuple[MonthlySummary, ...]) -> pd.DataFrame:
    rows = [
        {"month": s.month, "income": s.total_income, "spending": s.total_spending}
        for s in summaries
        if parse_date(f"{s.month}-01") is not None
    ]
    df = pd.DataFrame(rows, columns=["month", "income", "spending"])
    return df.drop_duplicates(subset="month", keep="last").sort_values("month").reset_index(drop=True)


def summary_trend(summaries: tuple[MonthlySummary, ...]) -> Trend:
    """Mean month-over-month change in income and spending.

    Needs at least two distinct months; otherwise the trend is flat and the
    forecaster holds current totals constant.
    """
    df = summaries_frame(summaries)
    if len(df) < 2:
        return FLAT
    return Trend(
        income_per_month=float(df["income"].diff().mean()),
        spending_per_month=float(df["spending"].diff().mean()),
        months_observed=len(df),
    )
