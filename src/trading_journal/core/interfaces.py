"""Protocol interfaces for the journal's external collaborators.

The trade store and identity provider live outside the analytics core.
Implementations can be swapped (in-memory, SQL, hosted) without changing
callers.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from .models import Trade


# ---------------------------------------------------------------------------
# Trade store
# ---------------------------------------------------------------------------

@runtime_checkable
class ITradeStore(Protocol):
    """Per-user trade persistence.

    Every method may raise a ``StoreError`` subclass on connectivity or
    permission failures.
    """

    def list(self, user_id: str) -> list[Trade]:
        """All trades owned by *user_id*, newest date first."""
        ...

    def create(self, user_id: str, trade: Trade) -> str:
        """Persist a new trade and return its assigned id."""
        ...

    def update(self, trade_id: str, trade: Trade) -> None: ...

    def delete(self, trade_id: str) -> None: ...

    def get_one(self, trade_id: str) -> Trade | None: ...


# ---------------------------------------------------------------------------
# Identity provider
# ---------------------------------------------------------------------------

UserListener = Callable[["str | None"], None]


@runtime_checkable
class IIdentityProvider(Protocol):
    """Login state observable.

    ``subscribe`` listeners receive the new user id (or ``None`` after
    logout) exactly once per state transition.
    """

    @property
    def current_user(self) -> str | None: ...

    @property
    def loading(self) -> bool: ...

    def login(self, email: str, password: str) -> str: ...

    def signup(self, email: str, password: str) -> str: ...

    def logout(self) -> None: ...

    def subscribe(self, listener: UserListener) -> Callable[[], None]: ...
