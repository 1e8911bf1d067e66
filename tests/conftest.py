"""Shared fixtures for the trading-journal test suite."""

from __future__ import annotations

import datetime as dt
import logging
from datetime import datetime, timezone

import pytest

from trading_journal.core.clock import FixedClock
from trading_journal.core.config import Settings
from trading_journal.core.enums import Direction
from trading_journal.core.models import Trade, ViolationRule
from trading_journal.storage.memory import InMemoryTradeStore


def make_trade(
    profit: float | None = None,
    day: int | dt.date = 1,
    symbol: str = "EURUSD",
    direction: Direction = Direction.LONG,
    entry_price: float = 1.1000,
    exit_price: float = 1.1050,
    lot_size: float = 1.0,
    fees: float = 0.0,
    stop_loss: float | None = None,
    take_profit: float | None = None,
    violations: list[str] | None = None,
    **kwargs,
) -> Trade:
    """Helper to create a Trade.  ``day`` is a day of January 2024."""
    date = day if isinstance(day, dt.date) else dt.date(2024, 1, day)
    return Trade(
        date=date,
        symbol=symbol,
        direction=direction,
        entry_price=entry_price,
        exit_price=exit_price,
        lot_size=lot_size,
        fees=fees,
        stop_loss=stop_loss,
        take_profit=take_profit,
        profit=profit,
        violations=[ViolationRule(id=v, label=v.replace("-", " ").title()) for v in violations or []],
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# Settings / storage
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def store() -> InMemoryTradeStore:
    return InMemoryTradeStore()


@pytest.fixture
def sample_trades() -> list[Trade]:
    """Mixed wins and losses across two symbols, unordered."""
    return [
        make_trade(profit=120.0, day=3, symbol="EURUSD"),
        make_trade(profit=-40.0, day=5, symbol="USDJPY", violations=["entered-early"]),
        make_trade(profit=60.0, day=2, symbol="EURUSD"),
        make_trade(profit=-20.0, day=8, symbol="EURUSD", violations=["overtraded"]),
        make_trade(profit=0.0, day=9, symbol="USDJPY"),
    ]


@pytest.fixture
def restore_root_logging():
    """Put the root logger back after code that calls ``setup_logging``."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
