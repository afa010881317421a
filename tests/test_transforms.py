from expense_planner.domain import EMPTY_SNAPSHOT, DEFAULT_CATEGORIES, Expense, UserSettings
from expense_planner.transforms import (
    active_in,
    is_active,
    merge_budget,
    replace_expenses,
    replace_settings,
    toggle_month,
    toggle_paid,
)


def make_expense(id, amount=100.0, start="2024-01", end="2024-12", paid=(), category="Moradia", due_day=10):
    return Expense(
        id=id,
        name=f"Expense {id}",
        amount=amount,
        category=category,
        due_day=due_day,
        start_month=start,
        end_month=end,
        paid_months=tuple(paid),
    )


def test_active_in_inclusive_bounds():
    e = make_expense("e1", start="2024-03", end="2024-05")
    assert not is_active(e, "2024-02")
    assert is_active(e, "2024-03")
    assert is_active(e, "2024-04")
    assert is_active(e, "2024-05")
    assert not is_active(e, "2024-06")


def test_active_in_matches_range_for_every_month():
    expenses = (
        make_expense("e1", start="2023-11", end="2024-02"),
        make_expense("e2", start="2024-01", end="2024-01"),
        make_expense("e3", start="2024-06", end="2025-06"),
    )
    for year in (2023, 2024, 2025):
        for month in range(1, 13):
            m = f"{year}-{month:02d}"
            active = active_in(expenses, m)
            for e in expenses:
                assert (e in active) == (e.start_month <= m <= e.end_month)


def test_active_in_preserves_order():
    expenses = tuple(make_expense(f"e{i}") for i in range(5))
    assert [e.id for e in active_in(expenses, "2024-06")] == ["e0", "e1", "e2", "e3", "e4"]


def test_inverted_range_is_never_active():
    e = make_expense("e1", start="2024-06", end="2024-01")
    assert active_in((e,), "2024-03") == ()


def test_zero_amount_expense_is_active():
    e = make_expense("e1", amount=0.0)
    assert active_in((e,), "2024-06") == (e,)


def test_toggle_month_is_involutive():
    original = ("2024-01", "2024-03")
    once = toggle_month(original, "2024-06")
    assert "2024-06" in once
    assert toggle_month(once, "2024-06") == original


def test_toggle_month_only_touches_given_month():
    assert toggle_month(("2024-01", "2024-02"), "2024-01") == ("2024-02",)


def test_toggle_paid_returns_new_expense():
    e = make_expense("e1")
    paid = toggle_paid(e, "2024-06")
    assert paid.paid_months == ("2024-06",)
    assert e.paid_months == ()


def test_merge_budget_clamps_negative():
    budgets = {"2024-01": 3000.0}
    updated = merge_budget(budgets, "2024-02", -50)
    assert updated == {"2024-01": 3000.0, "2024-02": 0.0}
    assert budgets == {"2024-01": 3000.0}


def test_snapshot_reducers_replace_wholesale():
    snap = replace_expenses(EMPTY_SNAPSHOT, [make_expense("e1")])
    assert [e.id for e in snap.expenses] == ["e1"]
    snap = replace_expenses(snap, [])
    assert snap.expenses == ()

    snap = replace_settings(snap, UserSettings(budgets={"2024-01": 10.0}, categories=("A", "B")))
    assert snap.budgets == {"2024-01": 10.0}
    assert snap.categories == ("A", "B")
    assert EMPTY_SNAPSHOT.categories == DEFAULT_CATEGORIES
