"""The signed-in user's live view of their data, and the writes they can issue.

``ExpenseStore`` holds the current ``Snapshot``. It never edits the snapshot
after a write; the document store pushes the new state back through the two
subscriptions owned by ``UserSession``, and only then does the snapshot change.
Two writes against the same record are not ordered relative to each other: the
last one to reach the store wins (e.g. two sessions toggling the same month).
"""

import logging
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

from expense_planner import categories as category_rules
from expense_planner.categories import DELETED_MESSAGE, CategoryResult
from expense_planner.domain import (
    DEFAULT_CATEGORIES,
    EMPTY_SNAPSHOT,
    Expense,
    ExpenseDraft,
    Snapshot,
    User,
    UserSettings,
)
from expense_planner.errors import InvalidExpense, RemoteWriteFailed
from expense_planner.functional import safe_expense, validate_expense
from expense_planner.identity import Identity
from expense_planner.months import is_month_key
from expense_planner.store import DocumentStore
from expense_planner.transforms import merge_budget, replace_expenses, replace_settings, toggle_month

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UserSession:
    """Owns the expenses and settings subscriptions for one signed-in user."""

    def __init__(
        self,
        store: DocumentStore,
        user: User,
        on_expenses: Callable[[Tuple[Expense, ...]], None],
        on_settings: Callable[[Optional[UserSettings]], None],
    ) -> None:
        self.store = store
        self.user = user
        self._on_expenses = on_expenses
        self._on_settings = on_settings
        self._unsubscribers: list = []

    @property
    def is_open(self) -> bool:
        return bool(self._unsubscribers)

    async def open(self) -> None:
        self._unsubscribers.append(self.store.subscribe_expenses(self.user.uid, self._on_expenses))
        self._unsubscribers.append(self.store.subscribe_settings(self.user.uid, self._on_settings))
        await self._ensure_settings()

    async def _ensure_settings(self) -> None:
        # check-then-create: two sessions initialising at once may both try,
        # create_settings keeps whichever document landed first
        if await self.store.settings_exists(self.user.uid):
            return
        initial = UserSettings(budgets={}, categories=DEFAULT_CATEGORIES)
        await self.store.create_settings(self.user.uid, initial.to_document())

    def close(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()


class ExpenseStore:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._session: Optional[UserSession] = None
        self.snapshot: Snapshot = EMPTY_SNAPSHOT

    @property
    def user(self) -> Optional[User]:
        return self._session.user if self._session is not None else None

    @property
    def expenses(self) -> Tuple[Expense, ...]:
        return self.snapshot.expenses

    @property
    def budgets(self) -> dict:
        return self.snapshot.budgets

    @property
    def categories(self) -> Tuple[str, ...]:
        return self.snapshot.categories

    async def bind(self, identity: Identity) -> Callable[[], None]:
        """Follow the identity's auth state; returns the unsubscribe function."""
        return await identity.on_auth_change(self.set_user)

    async def set_user(self, user: Optional[User]) -> None:
        if self._session is not None:
            if user is not None and user.uid == self._session.user.uid:
                return
            self._session.close()
            self._session = None
        self.snapshot = EMPTY_SNAPSHOT
        if user is None:
            return
        session = UserSession(self._store, user, self._receive_expenses, self._receive_settings)
        self._session = session
        try:
            await self._write("open_session", session.open())
        except RemoteWriteFailed:
            session.close()
            self._session = None
            self.snapshot = EMPTY_SNAPSHOT
            raise

    def _receive_expenses(self, expenses: Tuple[Expense, ...]) -> None:
        self.snapshot = replace_expenses(self.snapshot, expenses)

    def _receive_settings(self, settings: Optional[UserSettings]) -> None:
        if settings is None:
            return  # not created yet, keep the defaults
        self.snapshot = replace_settings(self.snapshot, settings)

    def _uid(self, action: str) -> Optional[str]:
        if self._session is None:
            logger.debug("Ignoring %s: no user signed in", action)
            return None
        return self._session.user.uid

    async def _write(self, action: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except Exception as exc:
            logger.exception("Store write failed during %s", action)
            raise RemoteWriteFailed(f"{action} failed: {exc}") from exc

    async def add_expense(self, draft: ExpenseDraft) -> Optional[str]:
        uid = self._uid("add_expense")
        if uid is None:
            return None
        checked = validate_expense(draft)
        if checked.is_left():
            raise InvalidExpense(checked.get_error())
        data = {**draft.to_document(), "paidMonths": []}
        return await self._write("add_expense", self._store.add_expense(uid, data))

    async def update_expense(self, expense: Expense) -> None:
        uid = self._uid("update_expense")
        if uid is None:
            return
        checked = validate_expense(expense)
        if checked.is_left():
            raise InvalidExpense(checked.get_error())
        await self._write("update_expense", self._store.set_expense(uid, expense.id, expense.to_document()))

    async def delete_expense(self, expense_id: str) -> None:
        uid = self._uid("delete_expense")
        if uid is None:
            return
        await self._write("delete_expense", self._store.delete_expense(uid, expense_id))

    async def set_budget(self, month: str, amount: float) -> None:
        uid = self._uid("set_budget")
        if uid is None:
            return
        if not is_month_key(month):
            raise ValueError(f"Invalid month key: {month!r}")
        budgets = merge_budget(self.snapshot.budgets, month, float(amount))
        await self._write("set_budget", self._store.merge_settings(uid, {"budgets": budgets}))

    async def add_category(self, name: str) -> bool:
        uid = self._uid("add_category")
        if uid is None:
            return False
        result = category_rules.add_category(self.snapshot.categories, name)
        if result.is_left():
            logger.info("Category not added: %s", result.get_error()["message"])
            return False
        updated = result.get_or_else(self.snapshot.categories)
        await self._write("add_category", self._store.merge_settings(uid, {"categories": list(updated)}))
        return True

    async def delete_category(self, name: str) -> Optional[CategoryResult]:
        uid = self._uid("delete_category")
        if uid is None:
            return None
        result = category_rules.delete_category(self.snapshot.categories, self.snapshot.expenses, name)
        if result.is_left():
            return CategoryResult(success=False, message=result.get_error()["message"])
        updated = result.get_or_else(self.snapshot.categories)
        await self._write("delete_category", self._store.merge_settings(uid, {"categories": list(updated)}))
        return CategoryResult(success=True, message=DELETED_MESSAGE)

    async def toggle_paid(self, expense_id: str, month: str) -> None:
        uid = self._uid("toggle_paid")
        if uid is None:
            return
        found = safe_expense(self.snapshot.expenses, expense_id)
        if found.is_none():
            return
        expense = found.get_or_else(None)
        paid_months = toggle_month(expense.paid_months, month)
        await self._write(
            "toggle_paid",
            self._store.update_expense(uid, expense_id, {"paidMonths": list(paid_months)}),
        )


async def sign_out(identity: Identity) -> bool:
    """Sign out, reporting failure instead of raising it."""
    try:
        await identity.sign_out()
    except Exception:
        logger.exception("Error signing out")
        return False
    return True
