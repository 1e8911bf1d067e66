"""Local identity provider.

A small in-process stand-in for a hosted auth service: accounts live in
memory with PBKDF2-hashed passwords.  It exposes the same observable
contract as a hosted provider, a current user plus a loading flag, and
listeners notified exactly once per login/logout transition.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
from dataclasses import dataclass
from typing import Callable

from trading_journal.core.errors import AuthenticationError, RegistrationError
from trading_journal.core.interfaces import UserListener

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PBKDF2_ROUNDS = 120_000
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class _Account:
    user_id: str
    salt: bytes
    password_hash: bytes


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, _PBKDF2_ROUNDS)


class LocalIdentityProvider:
    """In-memory ``IIdentityProvider``."""

    def __init__(self) -> None:
        self._accounts: dict[str, _Account] = {}
        self._current: str | None = None
        self._loading = False
        self._listeners: list[UserListener] = []

    @property
    def current_user(self) -> str | None:
        return self._current

    @property
    def loading(self) -> bool:
        return self._loading

    def signup(self, email: str, password: str) -> str:
        """Create an account and sign it in.  Returns the new user id."""
        email = email.strip().lower()
        if not _EMAIL_RE.match(email):
            raise RegistrationError(f"Invalid email address: {email!r}")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise RegistrationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if email in self._accounts:
            raise RegistrationError(f"Account already exists: {email}")

        salt = os.urandom(16)
        user_id = hashlib.sha256(email.encode()).hexdigest()[:28]
        self._accounts[email] = _Account(user_id, salt, _hash_password(password, salt))
        logger.info("Registered user %s", user_id)
        self._transition(user_id)
        return user_id

    def login(self, email: str, password: str) -> str:
        self._loading = True
        try:
            account = self._accounts.get(email.strip().lower())
            if account is None or not hmac.compare_digest(
                account.password_hash, _hash_password(password, account.salt)
            ):
                raise AuthenticationError("Invalid email or password")
        finally:
            self._loading = False
        self._transition(account.user_id)
        return account.user_id

    def logout(self) -> None:
        self._transition(None)

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _transition(self, user_id: str | None) -> None:
        if user_id == self._current:
            return
        self._current = user_id
        for listener in list(self._listeners):
            listener(user_id)
