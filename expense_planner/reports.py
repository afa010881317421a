"""Month-scoped aggregation over an expense snapshot.

Every function here is pure: it reads the expenses and budget map it is given
and returns plain values, so callers can recompute on every render.
"""

from datetime import date
from enum import Enum
from typing import Dict, Iterable, NamedTuple, Optional, Sequence, Tuple, Union

from expense_planner.domain import DEFAULT_BUDGET, Expense
from expense_planner.lazy import iter_expenses
from expense_planner.months import month_key_of, months_of_year, trailing_months
from expense_planner.transforms import active_in


class MonthSummary(NamedTuple):
    planned: float
    budget: float


class WindowPoint(NamedTuple):
    month: str
    planned: float
    budget: float


class MonthTotals(NamedTuple):
    budget: float
    planned: float
    paid: float
    remaining: float


class MonthStatus(str, Enum):
    SELECTED = "selected"
    EMPTY = "empty"
    OVER_BUDGET = "over_budget"
    WITHIN_BUDGET = "within_budget"


PAID_STATUSES = ("all", "paid", "unpaid")


def total_planned(active: Iterable[Expense]) -> float:
    return sum((e.amount for e in active), 0.0)


def total_paid(active: Iterable[Expense], month: str) -> float:
    return sum((e.amount for e in iter_expenses(active, lambda e: e.is_paid(month))), 0.0)


def remaining(budget: float, paid: float) -> float:
    # measured against what was actually paid, not against planned spend
    return budget - paid


def effective_budget(budgets: Dict[str, float], month: str) -> float:
    return budgets[month] if month in budgets else DEFAULT_BUDGET


def month_totals(expenses: Iterable[Expense], budgets: Dict[str, float], month: str) -> MonthTotals:
    active = active_in(expenses, month)
    budget = effective_budget(budgets, month)
    paid = total_paid(active, month)
    return MonthTotals(
        budget=budget,
        planned=total_planned(active),
        paid=paid,
        remaining=remaining(budget, paid),
    )


def _summarize(expenses: Sequence[Expense], budgets: Dict[str, float], month: str) -> MonthSummary:
    return MonthSummary(
        planned=total_planned(active_in(expenses, month)),
        budget=effective_budget(budgets, month),
    )


def year_summary(
    expenses: Iterable[Expense], budgets: Dict[str, float], year: int
) -> Dict[str, MonthSummary]:
    expenses = tuple(expenses)
    return {m: _summarize(expenses, budgets, m) for m in months_of_year(year)}


def trailing_window(
    expenses: Iterable[Expense],
    budgets: Dict[str, float],
    anchor: Union[date, str],
    count: int = 6,
) -> Tuple[WindowPoint, ...]:
    """Planned spend vs budget for the ``count`` months ending at ``anchor``, oldest first."""
    expenses = tuple(expenses)
    anchor_key = anchor if isinstance(anchor, str) else month_key_of(anchor)
    points = []
    for m in trailing_months(anchor_key, count):
        summary = _summarize(expenses, budgets, m)
        points.append(WindowPoint(month=m, planned=summary.planned, budget=summary.budget))
    return tuple(points)


def month_status(summary: Optional[MonthSummary], selected: bool = False) -> MonthStatus:
    if selected:
        return MonthStatus.SELECTED
    if summary is None or summary.planned == 0:
        return MonthStatus.EMPTY
    if summary.planned > summary.budget:
        return MonthStatus.OVER_BUDGET
    return MonthStatus.WITHIN_BUDGET


def paid_by_category(active: Iterable[Expense], month: str) -> Tuple[Tuple[str, float], ...]:
    totals: Dict[str, float] = {}
    for e in iter_expenses(active, lambda e: e.is_paid(month)):
        totals[e.category] = totals.get(e.category, 0.0) + e.amount
    return tuple(totals.items())


def upcoming_expenses(
    active: Iterable[Expense], month: str, today: date, limit: int = 5
) -> Tuple[Expense, ...]:
    # only meaningful while looking at the current calendar month
    if month != month_key_of(today):
        return ()
    pending = iter_expenses(active, lambda e: e.due_day >= today.day and not e.is_paid(month))
    return tuple(sorted(pending, key=lambda e: e.due_day)[: max(0, limit)])


def by_paid_status(expenses: Iterable[Expense], month: str, status: str = "all") -> Tuple[Expense, ...]:
    if status not in PAID_STATUSES:
        raise ValueError(f"Unknown paid status filter: {status!r}")
    if status == "all":
        selected = expenses
    else:
        want_paid = status == "paid"
        selected = iter_expenses(expenses, lambda e: e.is_paid(month) == want_paid)
    return tuple(sorted(selected, key=lambda e: e.due_day))
