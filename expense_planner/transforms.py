from dataclasses import replace
from typing import Dict, Iterable, Tuple

from expense_planner.domain import Expense, Snapshot, UserSettings


def is_active(e: Expense, month: str) -> bool:
    return e.start_month <= month <= e.end_month


def active_in(expenses: Iterable[Expense], month: str) -> Tuple[Expense, ...]:
    return tuple(filter(lambda e: is_active(e, month), expenses))


def toggle_month(paid_months: Tuple[str, ...], month: str) -> Tuple[str, ...]:
    if month in paid_months:
        return tuple(m for m in paid_months if m != month)
    return tuple(paid_months) + (month,)


def toggle_paid(e: Expense, month: str) -> Expense:
    return e.with_paid_months(toggle_month(e.paid_months, month))


def merge_budget(budgets: Dict[str, float], month: str, amount: float) -> Dict[str, float]:
    # negative input is clamped, never rejected
    return {**budgets, month: amount if amount >= 0 else 0.0}


# Snapshot reducers: the local copy is only ever replaced wholesale by a store
# notification, never patched by the code issuing a write.

def replace_expenses(snapshot: Snapshot, expenses: Iterable[Expense]) -> Snapshot:
    return replace(snapshot, expenses=tuple(expenses))


def replace_settings(snapshot: Snapshot, settings: UserSettings) -> Snapshot:
    return replace(
        snapshot,
        budgets=dict(settings.budgets),
        categories=tuple(settings.categories),
    )
