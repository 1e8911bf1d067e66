"""Typed channel for trades produced by the replay simulator.

The simulator and whichever components want its trades share a
``SimulatedTradeChannel`` instance passed to both; there is no global
registry.  Delivery is synchronous in subscription order, and a failing
subscriber is logged without stopping delivery to the rest.

Usage::

    channel = SimulatedTradeChannel()
    unsubscribe = channel.subscribe(journal.ingest_simulated)
    channel.publish(SimulatedTrade(symbol="EURUSD", ...))
    unsubscribe()
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable

from trading_journal.core.clock import IClock
from trading_journal.core.enums import Direction
from trading_journal.core.ids import simulated_trade_id
from trading_journal.core.models import Trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulatedTrade:
    """An entry/exit pair recorded while stepping through a price series."""

    symbol: str
    direction: Direction
    entry_price: float
    exit_price: float
    profit: float
    timestamp: dt.datetime

    def to_trade(self, clock: IClock | None = None) -> Trade:
        """Journal representation, flagged as simulated."""
        return Trade(
            id=simulated_trade_id(clock),
            date=self.timestamp,
            symbol=self.symbol,
            direction=self.direction,
            entry_price=self.entry_price,
            exit_price=self.exit_price,
            profit=self.profit,
            is_simulated=True,
        )


SimulatedTradeHandler = Callable[[SimulatedTrade], None]


class SimulatedTradeChannel:
    """Synchronous publish/subscribe for ``SimulatedTrade`` events."""

    def __init__(self) -> None:
        self._handlers: list[SimulatedTradeHandler] = []
        self._published = 0

    def subscribe(self, handler: SimulatedTradeHandler) -> Callable[[], None]:
        """Register *handler*; returns a callable that unregisters it."""
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, trade: SimulatedTrade) -> None:
        """Deliver *trade* to every current subscriber."""
        self._published += 1
        for handler in list(self._handlers):
            try:
                handler(trade)
            except Exception:
                logger.exception(
                    "Simulated trade handler failed for %s", trade.symbol
                )

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    @property
    def published_count(self) -> int:
        return self._published
