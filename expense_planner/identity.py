"""Identity provider: email/password accounts and the signed-in user.

The user id (``uid``) is the only key used to isolate one user's data from
another's in the document store.
"""

import inspect
import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from expense_planner.domain import User
from expense_planner.errors import AuthError, StoreError
from expense_planner.events import AUTH_CHANGED, EventBus

logger = logging.getLogger(__name__)

AuthCallback = Callable[[Optional[User]], Any]

MIN_PASSWORD_LENGTH = 6
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

AUTH_MESSAGES: Dict[str, str] = {
    "user-not-found": "E-mail ou senha inválidos.",
    "wrong-password": "E-mail ou senha inválidos.",
    "email-already-in-use": "Este e-mail já está em uso.",
    "weak-password": "A senha deve ter pelo menos 6 caracteres.",
}
GENERIC_AUTH_MESSAGE = "Ocorreu um erro. Tente novamente."


def auth_error_message(error: Exception) -> str:
    """User-facing text for a failed sign-in or sign-up."""
    code = getattr(error, "code", None)
    return AUTH_MESSAGES.get(code, GENERIC_AUTH_MESSAGE)


class Identity(ABC):

    @abstractmethod
    def current_user(self) -> Optional[User]:
        ...

    @abstractmethod
    async def on_auth_change(self, callback: AuthCallback) -> Callable[[], None]:
        """Call ``callback`` with the current user now and after every change.

        Coroutine callbacks are awaited. Returns an unsubscribe function.
        """

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> User:
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> User:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...


class LocalIdentity(Identity):
    """Accounts kept in memory, optionally mirrored to a JSON file.

    Several instances may share one file (one per app session), so the file is
    re-read before every sign-in and sign-up.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else None
        self._bus = EventBus()
        self._accounts: Dict[str, dict] = self._load()
        self._current: Optional[User] = None

    def _load(self) -> Dict[str, dict]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            raise StoreError(f"Cannot read accounts file {self._path}: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def _refresh(self) -> None:
        if self._path is not None:
            self._accounts = self._load()

    def _save(self, accounts: Dict[str, dict]) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._path.open("w", encoding="utf-8") as handle:
                json.dump(accounts, handle, indent=2, sort_keys=True)
        except OSError as exc:
            raise StoreError(f"Cannot write accounts file {self._path}: {exc}") from exc

    def current_user(self) -> Optional[User]:
        return self._current

    async def on_auth_change(self, callback: AuthCallback) -> Callable[[], None]:
        unsubscribe = self._bus.subscribe(AUTH_CHANGED, lambda event, payload: callback(payload["user"]))
        result = callback(self._current)
        if inspect.isawaitable(result):
            await result
        return unsubscribe

    async def _set_current(self, user: Optional[User]) -> None:
        self._current = user
        await self._bus.apublish(AUTH_CHANGED, {"user": user})

    async def sign_in(self, email: str, password: str) -> User:
        self._refresh()
        account = self._accounts.get(email.strip().lower())
        if account is None:
            raise AuthError("user-not-found")
        if not check_password_hash(account["password_hash"], password):
            raise AuthError("wrong-password")
        user = User(uid=account["uid"], email=account["email"])
        logger.info("Signed in %s", user.email)
        await self._set_current(user)
        return user

    async def sign_up(self, email: str, password: str) -> User:
        email = email.strip()
        if not EMAIL_RE.match(email):
            raise AuthError("invalid-email")
        self._refresh()
        key = email.lower()
        if key in self._accounts:
            raise AuthError("email-already-in-use")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError("weak-password")
        account = {
            "uid": uuid4().hex,
            "email": email,
            "password_hash": generate_password_hash(password),
        }
        accounts = {**self._accounts, key: account}
        self._save(accounts)
        self._accounts = accounts
        user = User(uid=account["uid"], email=email)
        logger.info("Registered %s", email)
        # a new account starts signed in
        await self._set_current(user)
        return user

    async def sign_out(self) -> None:
        if self._current is not None:
            logger.info("Signed out %s", self._current.email)
        await self._set_current(None)
