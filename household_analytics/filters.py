from datetime import date

from household_analytics.dates import month_key, parse_date
from household_analytics.domain import Transaction


def by_member(member_id: str):
    def _filter(t: Transaction) -> bool:
        return t.member_id == member_id

    return _filter


def by_month(month: date):
    key = month_key(month)

    def _filter(t: Transaction) -> bool:
        d = parse_date(t.date)
        return d is not None and month_key(d) == key

    return _filter


def is_expense(t: Transaction) -> bool:
    return t.amount < 0


def is_income(t: Transaction) -> bool:
    return t.amount > 0
