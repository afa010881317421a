from typing import Any, Callable, Dict, Iterable, Sequence

from expense_planner.lazy import lazy_top_categories
from expense_planner.reports import effective_budget, paid_by_category, remaining, total_paid, total_planned
from expense_planner.transforms import active_in


class BudgetService:
    """Facade for the monthly budget report using injected validators and calculators.

    validators: sequence of functions taking (month, expenses, budgets, categories) -> Sequence[str]
    calculators: sequence of functions taking (month, expenses, budgets, categories, acc) -> dict (partial results)
    """

    def __init__(self, validators: Sequence[Callable[..., Sequence[str]]], calculators: Sequence[Callable[..., Dict[str, Any]]]):
        self.validators = validators
        self.calculators = calculators

    def monthly_report(self, month: str, expenses: Iterable, budgets: Dict[str, float], categories: Iterable[str]) -> Dict[str, Any]:
        """Run validators and calculators and return an aggregated report with intermediate steps."""
        expenses = tuple(expenses)
        categories = tuple(categories)
        report = {
            "month": month,
            "validation": [],
            "steps": [],
            "result": {}
        }

        for v in self.validators:
            msgs = v(month, expenses, budgets, categories)
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": list(msgs)})

        # each calculator sees what the previous ones produced
        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(month, expenses, budgets, categories, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


def validate_ranges(month, expenses, budgets, categories) -> Sequence[str]:
    return [
        f"{e.name}: start month {e.start_month} is after end month {e.end_month}"
        for e in expenses
        if e.start_month > e.end_month
    ]


def validate_known_categories(month, expenses, budgets, categories) -> Sequence[str]:
    known = {c.lower() for c in categories}
    unknown = sorted({e.category for e in expenses if e.category.lower() not in known})
    return [f"Unknown category: {name}" for name in unknown]


def calc_planned(month, expenses, budgets, categories, acc=None) -> Dict[str, Any]:
    active = active_in(expenses, month)
    return {"active_count": len(active), "planned": total_planned(active)}


def calc_paid(month, expenses, budgets, categories, acc=None) -> Dict[str, Any]:
    return {"paid": total_paid(active_in(expenses, month), month)}


def calc_budget(month, expenses, budgets, categories, acc=None) -> Dict[str, Any]:
    return {"budget": effective_budget(budgets, month)}


def calc_remaining(month, expenses, budgets, categories, acc=None) -> Dict[str, Any]:
    acc = acc or {}
    budget = acc.get("budget", effective_budget(budgets, month))
    paid = acc.get("paid", total_paid(active_in(expenses, month), month))
    return {"remaining": remaining(budget, paid)}


def calc_by_category(month, expenses, budgets, categories, acc=None) -> Dict[str, Any]:
    return {"paid_by_category": dict(paid_by_category(active_in(expenses, month), month))}


def calc_top_category(month, expenses, budgets, categories, acc=None) -> Dict[str, Any]:
    top = next(lazy_top_categories(active_in(expenses, month), month, 1), None)
    return {"top_category": top[0] if top else None}


def default_budget_service() -> BudgetService:
    return BudgetService(
        validators=[validate_ranges, validate_known_categories],
        calculators=[calc_planned, calc_paid, calc_budget, calc_remaining, calc_by_category, calc_top_category],
    )
