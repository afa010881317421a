from expense_planner.categories import (
    IN_USE_MESSAGE,
    PROTECTED_MESSAGE,
    add_category,
    custom_categories,
    delete_category,
)
from expense_planner.domain import DEFAULT_CATEGORIES, Expense


def make_expense(id, category):
    return Expense(id, f"Expense {id}", 10.0, category, 1, "2024-01", "2024-12")


def test_add_category_trims_and_sorts():
    result = add_category(DEFAULT_CATEGORIES, "  Pets ")
    assert result.is_right()
    updated = result.get_or_else(())
    assert "Pets" in updated
    assert list(updated) == sorted(updated)
    assert len(updated) == len(DEFAULT_CATEGORIES) + 1


def test_add_category_rejects_empty():
    assert add_category(DEFAULT_CATEGORIES, "   ").get_error()["error"] == "empty_name"


def test_add_category_case_insensitive_duplicates():
    first = add_category(DEFAULT_CATEGORIES, "Pets").get_or_else(DEFAULT_CATEGORIES)
    second = add_category(first, "pets")
    assert second.is_left()
    assert second.get_error()["error"] == "duplicate_category"
    assert add_category(DEFAULT_CATEGORIES, "saúde").is_left()


def test_every_default_is_protected():
    for name in DEFAULT_CATEGORIES:
        for variant in (name, name.upper(), name.lower()):
            result = delete_category(DEFAULT_CATEGORIES, (), variant)
            assert result.get_error()["message"] == PROTECTED_MESSAGE


def test_delete_in_use_category_fails_case_insensitively():
    categories = DEFAULT_CATEGORIES + ("Pets", "Viagem")
    expenses = (make_expense("e1", "pets"),)
    result = delete_category(categories, expenses, "Pets")
    assert result.get_error()["error"] == "category_in_use"
    assert result.get_error()["message"] == IN_USE_MESSAGE


def test_delete_unused_category():
    categories = DEFAULT_CATEGORIES + ("Pets", "Viagem")
    result = delete_category(categories, (make_expense("e1", "Pets"),), "viagem")
    assert result.get_or_else(()) == DEFAULT_CATEGORIES + ("Pets",)


def test_custom_categories():
    assert custom_categories(("Moradia", "Pets", "lazer")) == ("Pets",)
