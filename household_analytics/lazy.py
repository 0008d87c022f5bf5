from collections import defaultdict
from typing import Callable, Iterable, Iterator, Tuple

from household_analytics.domain import Transaction


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def category_spend(trans: Iterable[Transaction]) -> dict[str, float]:
    """Absolute outflow per category label."""
    totals_by_category: dict[str, float] = defaultdict(float)
    for t in trans:
        if t.amount < 0:
            totals_by_category[t.category] += -t.amount
    return dict(totals_by_category)


def lazy_top_categories(trans: Iterable[Transaction], k: int) -> Iterator[Tuple[str, float]]:
    # ties broken by name so output order never depends on input order
    ordered: list[Tuple[str, float]] = sorted(
        category_spend(trans).items(),
        key=lambda item: (-item[1], item[0]),
    )

    for name, total in ordered[: max(0, k)]:
        yield name, total
