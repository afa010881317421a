from datetime import date

import pytest

from expense_planner.domain import DEFAULT_BUDGET, Expense
from expense_planner.reports import (
    MonthStatus,
    MonthSummary,
    by_paid_status,
    effective_budget,
    month_status,
    month_totals,
    paid_by_category,
    remaining,
    total_paid,
    total_planned,
    trailing_window,
    upcoming_expenses,
    year_summary,
)
from expense_planner.transforms import active_in, toggle_paid


def make_expense(id, amount, start="2024-01", end="2024-12", paid=(), category="Moradia", due_day=10):
    return Expense(id, f"Expense {id}", amount, category, due_day, start, end, tuple(paid))


def test_single_expense_contributions():
    e = make_expense("e1", 1200.0)
    active = active_in((e,), "2024-06")
    assert active == (e,)
    assert total_planned(active) == 1200.0
    assert total_paid(active, "2024-06") == 0.0


def test_paid_after_toggle_and_remaining():
    e = toggle_paid(make_expense("e1", 1200.0), "2024-06")
    active = active_in((e,), "2024-06")
    paid = total_paid(active, "2024-06")
    assert paid == 1200.0
    assert remaining(effective_budget({}, "2024-06"), paid) == 5000.0 - 1200.0


def test_remaining_can_go_negative():
    assert remaining(1000.0, 1500.0) == -500.0


def test_effective_budget_fallback():
    assert effective_budget({}, "2024-03") == 5000
    assert effective_budget({"2024-03": 1234.0}, "2024-03") == 1234.0
    assert effective_budget({"2024-03": 0.0}, "2024-03") == 0.0
    assert effective_budget({"2024-04": 10.0}, "2024-03") == DEFAULT_BUDGET


def test_paid_never_exceeds_planned():
    expenses = (
        make_expense("e1", 100.0, paid=("2024-02", "2024-05")),
        make_expense("e2", 250.0, start="2024-03", end="2024-08", paid=("2024-04",)),
        # paid outside its range: must not count
        make_expense("e3", 80.0, start="2024-06", end="2024-06", paid=("2024-01",)),
    )
    for month in range(1, 13):
        m = f"2024-{month:02d}"
        active = active_in(expenses, m)
        assert total_paid(active, m) <= total_planned(active)
    assert total_paid(active_in(expenses, "2024-01"), "2024-01") == 0.0


def test_month_totals():
    expenses = (
        make_expense("e1", 100.0, paid=("2024-02",)),
        make_expense("e2", 50.0),
    )
    totals = month_totals(expenses, {"2024-02": 120.0}, "2024-02")
    assert totals.budget == 120.0
    assert totals.planned == 150.0
    assert totals.paid == 100.0
    assert totals.remaining == 20.0


def test_year_summary_covers_twelve_months():
    expenses = (make_expense("e1", 300.0, start="2023-11", end="2024-03"),)
    summary = year_summary(expenses, {"2024-02": 200.0}, 2024)
    assert list(summary) == [f"2024-{m:02d}" for m in range(1, 13)]
    assert summary["2024-01"] == MonthSummary(planned=300.0, budget=5000.0)
    assert summary["2024-02"] == MonthSummary(planned=300.0, budget=200.0)
    assert summary["2024-04"].planned == 0.0


def test_trailing_window_crosses_year_boundary():
    expenses = (make_expense("e1", 40.0, start="2023-12", end="2024-01"),)
    window = trailing_window(expenses, {"2023-10": 10.0}, date(2024, 2, 15))
    assert [p.month for p in window] == ["2023-09", "2023-10", "2023-11", "2023-12", "2024-01", "2024-02"]
    assert [p.planned for p in window] == [0.0, 0.0, 0.0, 40.0, 40.0, 0.0]
    assert window[1].budget == 10.0
    assert window[0].budget == 5000.0


def test_trailing_window_accepts_month_key_and_count():
    window = trailing_window((), {}, "2024-06", count=3)
    assert [p.month for p in window] == ["2024-04", "2024-05", "2024-06"]


def test_month_status():
    assert month_status(MonthSummary(9000.0, 5000.0), selected=True) is MonthStatus.SELECTED
    assert month_status(None) is MonthStatus.EMPTY
    assert month_status(MonthSummary(0.0, 5000.0)) is MonthStatus.EMPTY
    assert month_status(MonthSummary(6000.0, 5000.0)) is MonthStatus.OVER_BUDGET
    assert month_status(MonthSummary(5000.0, 5000.0)) is MonthStatus.WITHIN_BUDGET


def test_paid_by_category_first_seen_order():
    expenses = (
        make_expense("e1", 10.0, category="Lazer", paid=("2024-05",)),
        make_expense("e2", 20.0, category="Moradia", paid=("2024-05",)),
        make_expense("e3", 5.0, category="Lazer", paid=("2024-05",)),
        make_expense("e4", 99.0, category="Saúde"),
    )
    assert paid_by_category(expenses, "2024-05") == (("Lazer", 15.0), ("Moradia", 20.0))


def test_upcoming_only_for_current_month():
    expenses = (
        make_expense("late", 1.0, due_day=3),
        make_expense("soon", 1.0, due_day=20),
        make_expense("today", 1.0, due_day=12),
        make_expense("paid", 1.0, due_day=25, paid=("2024-06",)),
    )
    today = date(2024, 6, 12)
    assert [e.id for e in upcoming_expenses(expenses, "2024-06", today)] == ["today", "soon"]
    assert upcoming_expenses(expenses, "2024-07", today) == ()


def test_upcoming_limit():
    expenses = tuple(make_expense(f"e{d}", 1.0, due_day=d) for d in range(10, 20))
    upcoming = upcoming_expenses(expenses, "2024-06", date(2024, 6, 1))
    assert [e.due_day for e in upcoming] == [10, 11, 12, 13, 14]


def test_by_paid_status_sorted_by_due_day():
    expenses = (
        make_expense("b", 1.0, due_day=20, paid=("2024-06",)),
        make_expense("a", 1.0, due_day=5),
        make_expense("c", 1.0, due_day=1),
    )
    assert [e.id for e in by_paid_status(expenses, "2024-06")] == ["c", "a", "b"]
    assert [e.id for e in by_paid_status(expenses, "2024-06", "paid")] == ["b"]
    assert [e.id for e in by_paid_status(expenses, "2024-06", "unpaid")] == ["c", "a"]
    with pytest.raises(ValueError):
        by_paid_status(expenses, "2024-06", "overdue")
