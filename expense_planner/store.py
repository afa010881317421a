"""Document store used to persist and sync a user's expenses and settings.

Data is scoped per user id. Each user owns an ``expenses`` collection (one
document per expense, keyed by a generated id) and a single settings document
(``userData/main``) holding ``{"budgets": {...}, "categories": [...]}``.

Readers never query the store directly: they subscribe and receive the full
current state once at subscribe time and again after every write.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple
from uuid import uuid4

from expense_planner.domain import Expense, UserSettings
from expense_planner.errors import DocumentNotFound, StoreError
from expense_planner.events import EXPENSES_CHANGED, SETTINGS_CHANGED, EventBus, scoped

logger = logging.getLogger(__name__)

ExpensesCallback = Callable[[Tuple[Expense, ...]], None]
SettingsCallback = Callable[[Optional[UserSettings]], None]
Unsubscribe = Callable[[], None]

SETTINGS_DOC = "main"


class DocumentStore(ABC):

    @abstractmethod
    def subscribe_expenses(self, uid: str, callback: ExpensesCallback) -> Unsubscribe:
        ...

    @abstractmethod
    def subscribe_settings(self, uid: str, callback: SettingsCallback) -> Unsubscribe:
        """``callback`` receives ``None`` while the settings document does not exist."""

    @abstractmethod
    async def add_expense(self, uid: str, data: dict) -> str:
        ...

    @abstractmethod
    async def set_expense(self, uid: str, expense_id: str, data: dict) -> None:
        ...

    @abstractmethod
    async def update_expense(self, uid: str, expense_id: str, fields: dict) -> None:
        ...

    @abstractmethod
    async def delete_expense(self, uid: str, expense_id: str) -> None:
        ...

    @abstractmethod
    async def settings_exists(self, uid: str) -> bool:
        ...

    @abstractmethod
    async def create_settings(self, uid: str, data: dict) -> bool:
        """Create the settings document unless it exists; True when it was created."""

    @abstractmethod
    async def merge_settings(self, uid: str, fields: dict) -> None:
        ...


class LocalDocumentStore(DocumentStore):
    """In-process store, optionally mirrored to a JSON file after every write."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else None
        self._bus = EventBus()
        self._users: Dict[str, dict] = self._load()

    def _load(self) -> Dict[str, dict]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            with self._path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            raise StoreError(f"Cannot read store file {self._path}: {exc}") from exc
        users = data.get('users') if isinstance(data, dict) else None
        return users if isinstance(users, dict) else {}

    def _save(self, users: Dict[str, dict]) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open('w', encoding='utf-8') as handle:
                json.dump({'users': users}, handle, indent=2, sort_keys=True, ensure_ascii=False)
        except OSError as exc:
            raise StoreError(f"Cannot write store file {self._path}: {exc}") from exc

    def _staged(self) -> Dict[str, dict]:
        # writes edit a copy; _commit swaps it in only once it has been saved
        return copy.deepcopy(self._users)

    def _commit(self, users: Dict[str, dict]) -> None:
        self._save(users)
        self._users = users

    @staticmethod
    def _user(users: Dict[str, dict], uid: str) -> dict:
        return users.setdefault(uid, {'expenses': {}, 'userData': {}})

    def _expenses(self, uid: str) -> Tuple[Expense, ...]:
        docs = self._users.get(uid, {}).get('expenses', {})
        return tuple(Expense.from_document(i, d) for i, d in docs.items())

    def _settings(self, uid: str) -> Optional[UserSettings]:
        doc = self._users.get(uid, {}).get('userData', {}).get(SETTINGS_DOC)
        return None if doc is None else UserSettings.from_document(doc)

    def _notify_expenses(self, uid: str) -> None:
        self._bus.publish(scoped(EXPENSES_CHANGED, uid), {'expenses': self._expenses(uid)})

    def _notify_settings(self, uid: str) -> None:
        self._bus.publish(scoped(SETTINGS_CHANGED, uid), {'settings': self._settings(uid)})

    def subscribe_expenses(self, uid: str, callback: ExpensesCallback) -> Unsubscribe:
        unsubscribe = self._bus.subscribe(
            scoped(EXPENSES_CHANGED, uid), lambda event, payload: callback(payload['expenses'])
        )
        callback(self._expenses(uid))
        return unsubscribe

    def subscribe_settings(self, uid: str, callback: SettingsCallback) -> Unsubscribe:
        unsubscribe = self._bus.subscribe(
            scoped(SETTINGS_CHANGED, uid), lambda event, payload: callback(payload['settings'])
        )
        callback(self._settings(uid))
        return unsubscribe

    async def add_expense(self, uid: str, data: dict) -> str:
        expense_id = uuid4().hex
        users = self._staged()
        self._user(users, uid)['expenses'][expense_id] = copy.deepcopy(data)
        self._commit(users)
        logger.debug("Created expense %s for %s", expense_id, uid)
        self._notify_expenses(uid)
        return expense_id

    async def set_expense(self, uid: str, expense_id: str, data: dict) -> None:
        users = self._staged()
        self._user(users, uid)['expenses'][expense_id] = copy.deepcopy(data)
        self._commit(users)
        self._notify_expenses(uid)

    async def update_expense(self, uid: str, expense_id: str, fields: dict) -> None:
        users = self._staged()
        docs = self._user(users, uid)['expenses']
        if expense_id not in docs:
            raise DocumentNotFound(f"Expense {expense_id} not found for user {uid}")
        docs[expense_id].update(copy.deepcopy(fields))
        self._commit(users)
        self._notify_expenses(uid)

    async def delete_expense(self, uid: str, expense_id: str) -> None:
        users = self._staged()
        # deleting a missing document is not an error
        if self._user(users, uid)['expenses'].pop(expense_id, None) is None:
            return
        self._commit(users)
        self._notify_expenses(uid)

    async def settings_exists(self, uid: str) -> bool:
        return self._settings(uid) is not None

    async def create_settings(self, uid: str, data: dict) -> bool:
        users = self._staged()
        user_data = self._user(users, uid)['userData']
        if SETTINGS_DOC in user_data:
            return False
        user_data[SETTINGS_DOC] = copy.deepcopy(data)
        self._commit(users)
        logger.info("Initialised settings for %s", uid)
        self._notify_settings(uid)
        return True

    async def merge_settings(self, uid: str, fields: dict) -> None:
        users = self._staged()
        doc = self._user(users, uid)['userData'].get(SETTINGS_DOC)
        if doc is None:
            raise DocumentNotFound(f"Settings document not found for user {uid}")
        doc.update(copy.deepcopy(fields))
        self._commit(users)
        self._notify_settings(uid)
