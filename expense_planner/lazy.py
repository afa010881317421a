from collections import defaultdict
from typing import Callable, Iterable, Iterator, Tuple

from expense_planner.domain import Expense


def iter_expenses(
    expenses: Iterable[Expense], pred: Callable[[Expense], bool]
) -> Iterator[Expense]:
    for e in expenses:
        if pred(e):
            yield e


def lazy_top_categories(
    expenses: Iterable[Expense], month: str, k: int
) -> Iterator[Tuple[str, float]]:
    """Yield the ``k`` categories with the largest paid total in ``month``."""
    totals_by_category: dict[str, float] = defaultdict(float)

    for e in expenses:
        if e.is_paid(month):
            totals_by_category[e.category] += e.amount

    ordered: list[Tuple[str, float]] = sorted(
        totals_by_category.items(),
        key=lambda item: item[1],
        reverse=True,
    )

    for name, total in ordered[: max(0, k)]:
        yield name, total
