"""Shared fixtures for journal application tests."""

import pytest

from trading_journal.core.errors import StorePermissionError, StoreUnavailableError
from trading_journal.journal.identity import LocalIdentityProvider
from trading_journal.journal.journal import TradeJournal
from trading_journal.storage.memory import InMemoryTradeStore


class FlakyTradeStore(InMemoryTradeStore):
    """In-memory store that fails every write while ``failing`` is set."""

    def __init__(self, error: Exception | None = None) -> None:
        super().__init__()
        self.failing = False
        self.error = error or StoreUnavailableError("store offline")

    def _check(self) -> None:
        if self.failing:
            raise self.error

    def list(self, user_id):
        self._check()
        return super().list(user_id)

    def create(self, user_id, trade):
        self._check()
        return super().create(user_id, trade)

    def update(self, trade_id, trade):
        self._check()
        return super().update(trade_id, trade)

    def delete(self, trade_id):
        self._check()
        return super().delete(trade_id)


@pytest.fixture
def flaky_store():
    return FlakyTradeStore()


@pytest.fixture
def forbidden_store():
    return FlakyTradeStore(StorePermissionError("permission denied"))


@pytest.fixture
def journal(store, settings, clock):
    j = TradeJournal(store, settings=settings, clock=clock)
    j.load("user-1")
    return j


@pytest.fixture
def identity():
    return LocalIdentityProvider()
