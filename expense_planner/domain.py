from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

DEFAULT_BUDGET = 5000.0

DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Moradia",
    "Transporte",
    "Alimentação",
    "Saúde",
    "Educação",
    "Lazer",
    "Contas Fixas",
    "Investimentos",
    "Outros",
)


@dataclass(frozen=True)
class User:
    uid: str
    email: Optional[str] = None


@dataclass(frozen=True)
class ExpenseDraft:
    name: str
    amount: float
    category: str
    due_day: int
    start_month: str  # "YYYY-MM", inclusive
    end_month: str    # "YYYY-MM", inclusive

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "amount": self.amount,
            "category": self.category,
            "dueDay": self.due_day,
            "startMonth": self.start_month,
            "endMonth": self.end_month,
        }


@dataclass(frozen=True)
class Expense:
    id: str
    name: str
    amount: float
    category: str
    due_day: int
    start_month: str
    end_month: str
    paid_months: Tuple[str, ...] = ()

    def is_paid(self, month: str) -> bool:
        return month in self.paid_months

    def with_paid_months(self, paid_months: Tuple[str, ...]) -> "Expense":
        return replace(self, paid_months=tuple(paid_months))

    def to_document(self) -> dict:
        """Document form stored under the expense id (the id itself is the key)."""
        return {
            "name": self.name,
            "amount": self.amount,
            "category": self.category,
            "dueDay": self.due_day,
            "startMonth": self.start_month,
            "endMonth": self.end_month,
            "paidMonths": list(self.paid_months),
        }

    @classmethod
    def from_document(cls, id: str, data: dict) -> "Expense":
        return cls(
            id=id,
            name=data.get("name", ""),
            amount=float(data.get("amount", 0) or 0),
            category=data.get("category", ""),
            due_day=int(data.get("dueDay", 1) or 1),
            start_month=data.get("startMonth", ""),
            end_month=data.get("endMonth", ""),
            paid_months=tuple(dict.fromkeys(data.get("paidMonths") or ())),
        )

    @classmethod
    def from_draft(cls, id: str, draft: ExpenseDraft) -> "Expense":
        return cls(
            id=id,
            name=draft.name,
            amount=draft.amount,
            category=draft.category,
            due_day=draft.due_day,
            start_month=draft.start_month,
            end_month=draft.end_month,
        )


@dataclass(frozen=True)
class UserSettings:
    budgets: Dict[str, float] = field(default_factory=dict)
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES

    def to_document(self) -> dict:
        return {"budgets": dict(self.budgets), "categories": list(self.categories)}

    @classmethod
    def from_document(cls, data: Optional[dict]) -> "UserSettings":
        # missing fields fall back the same way a brand new user starts out
        data = data or {}
        budgets = {k: float(v) for k, v in (data.get("budgets") or {}).items()}
        categories = tuple(data.get("categories") or DEFAULT_CATEGORIES)
        return cls(budgets=budgets, categories=categories)


@dataclass(frozen=True)
class Snapshot:
    expenses: Tuple[Expense, ...] = ()
    budgets: Dict[str, float] = field(default_factory=dict)
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES


EMPTY_SNAPSHOT = Snapshot()
