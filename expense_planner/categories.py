"""Category set rules.

Categories are plain strings compared case-insensitively. The rules are checked
against the local snapshot before anything is written, so an invalid add or
delete never reaches the document store.
"""

from typing import Iterable, NamedTuple, Tuple

from expense_planner.domain import DEFAULT_CATEGORIES, Expense
from expense_planner.functional import Either, Left, Right

PROTECTED_MESSAGE = "Não é possível excluir categorias padrão."
IN_USE_MESSAGE = "Categoria em uso por uma despesa. Não pode ser excluída."
DELETED_MESSAGE = "Categoria excluída com sucesso."


class CategoryResult(NamedTuple):
    success: bool
    message: str


def _same(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def is_default_category(name: str) -> bool:
    return any(_same(name, d) for d in DEFAULT_CATEGORIES)


def is_category_in_use(expenses: Iterable[Expense], name: str) -> bool:
    return any(_same(e.category, name) for e in expenses)


def custom_categories(categories: Iterable[str]) -> Tuple[str, ...]:
    return tuple(c for c in categories if not is_default_category(c))


def add_category(categories: Tuple[str, ...], name: str) -> Either[dict, Tuple[str, ...]]:
    trimmed = name.strip()
    if not trimmed:
        return Left({"error": "empty_name", "message": "Category name must not be empty"})
    if any(_same(c, trimmed) for c in categories):
        return Left({
            "error": "duplicate_category",
            "message": f"Category {trimmed!r} already exists",
            "category": trimmed,
        })
    # plain ordinal sort, no locale collation
    return Right(tuple(sorted(tuple(categories) + (trimmed,))))


def delete_category(
    categories: Tuple[str, ...], expenses: Iterable[Expense], name: str
) -> Either[dict, Tuple[str, ...]]:
    if is_default_category(name):
        return Left({"error": "protected_category", "message": PROTECTED_MESSAGE, "category": name})
    if is_category_in_use(expenses, name):
        return Left({"error": "category_in_use", "message": IN_USE_MESSAGE, "category": name})
    return Right(tuple(c for c in categories if not _same(c, name)))
