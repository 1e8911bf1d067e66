"""In-memory trade store for tests and ephemeral sessions.

No external dependencies.  Stores deep copies so callers can never
mutate persisted state through a returned object.
"""

from __future__ import annotations

import logging

from trading_journal.core.errors import TradeNotFoundError
from trading_journal.core.ids import new_trade_id
from trading_journal.core.models import Trade

logger = logging.getLogger(__name__)


def _recency(trade: Trade) -> tuple:
    created = trade.created_at.timestamp() if trade.created_at else float("-inf")
    return trade.date, created


class InMemoryTradeStore:
    """Dict-backed ``ITradeStore``."""

    def __init__(self) -> None:
        self._trades: dict[str, Trade] = {}

    def list(self, user_id: str) -> list[Trade]:
        # Newest insert first so exact ties also come back newest first
        owned = [t for t in reversed(self._trades.values()) if t.user_id == user_id]
        owned.sort(key=_recency, reverse=True)
        return [t.model_copy(deep=True) for t in owned]

    def create(self, user_id: str, trade: Trade) -> str:
        trade_id = new_trade_id()
        self._trades[trade_id] = trade.model_copy(
            update={"id": trade_id, "user_id": user_id}, deep=True
        )
        logger.debug("Created trade %s for user %s", trade_id, user_id)
        return trade_id

    def update(self, trade_id: str, trade: Trade) -> None:
        existing = self._trades.get(trade_id)
        if existing is None:
            raise TradeNotFoundError(trade_id)
        self._trades[trade_id] = trade.model_copy(
            update={"id": trade_id, "user_id": existing.user_id}, deep=True
        )

    def delete(self, trade_id: str) -> None:
        if self._trades.pop(trade_id, None) is None:
            raise TradeNotFoundError(trade_id)

    def get_one(self, trade_id: str) -> Trade | None:
        trade = self._trades.get(trade_id)
        return trade.model_copy(deep=True) if trade else None

    def __len__(self) -> int:
        return len(self._trades)
