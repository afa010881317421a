from itertools import islice
from typing import Iterable

from expense_planner.domain import Expense
from expense_planner.lazy import iter_expenses, lazy_top_categories


def make_sample():
    return (
        Expense("e1", "Mercado", 300.0, "Alimentação", 5, "2024-01", "2024-12", ("2024-01",)),
        Expense("e2", "Ônibus", 200.0, "Transporte", 6, "2024-01", "2024-12", ("2024-01",)),
        Expense("e3", "Cinema", 50.0, "Lazer", 7, "2024-01", "2024-12"),
        Expense("e4", "Restaurante", 700.0, "Alimentação", 8, "2024-01", "2024-12", ("2024-01",)),
        Expense("e5", "Táxi", 100.0, "Transporte", 9, "2024-01", "2024-12", ("2024-02",)),
    )


def test_iter_expenses_is_lazy_stop_early():
    expenses = make_sample()
    calls = {"n": 0}

    def pred(e: Expense) -> bool:
        calls["n"] += 1
        return e.amount > 100

    first_two = list(islice(iter_expenses(expenses, pred), 2))

    assert [e.id for e in first_two] == ["e1", "e2"]
    assert calls["n"] < len(expenses)


def test_lazy_top_categories_paid_only_and_ordered():
    result = list(lazy_top_categories(make_sample(), "2024-01", k=5))
    assert result == [("Alimentação", 1000.0), ("Transporte", 200.0)]


def test_lazy_top_categories_accepts_generator_input():
    def stream() -> Iterable[Expense]:
        for e in make_sample():
            yield e

    assert list(lazy_top_categories(stream(), "2024-01", k=1)) == [("Alimentação", 1000.0)]


def test_lazy_top_categories_non_positive_k():
    assert list(lazy_top_categories(make_sample(), "2024-01", k=0)) == []
