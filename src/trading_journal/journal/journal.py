"""Trade journal session: one user's trades, filters and rule catalog.

``TradeJournal`` owns the in-memory view of the signed-in user's trades
and keeps it in step with an ``ITradeStore``.  Every mutation goes to the
store first; the local snapshot is replaced only after the store call
succeeds, so a failing store leaves ``trades`` exactly as it was.

Readers always get immutable tuples.  Calculators receive those
snapshots directly.

Usage::

    journal = TradeJournal(store, settings=settings)
    journal.bind(identity)          # reload on login, clear on logout
    journal.add_trade(Trade(symbol="EURUSD", ...))
    journal.update_filters(FilterOptions(symbols=["EURUSD"]))
    view = journal.dashboard()
"""

from __future__ import annotations

import logging
from typing import Callable

from trading_journal.analytics.dashboard import Dashboard, build_dashboard
from trading_journal.analytics.filters import apply_filters
from trading_journal.analytics.profit import calculate_trade_profit
from trading_journal.analytics.violations import ViolationCatalog
from trading_journal.core.clock import IClock, WallClock
from trading_journal.core.config import Settings
from trading_journal.core.errors import NotAuthenticatedError, StoreError
from trading_journal.core.interfaces import IIdentityProvider, ITradeStore
from trading_journal.core.models import FilterOptions, Trade
from trading_journal.observability.logger import new_session

from .channel import SimulatedTrade

logger = logging.getLogger(__name__)


class TradeJournal:
    """Per-user trade collection backed by a trade store.

    Parameters
    ----------
    store : ITradeStore
        Persistence backend.
    settings : Settings | None
        Analytics policy (profit formula, tilt threshold, ...).
    clock : IClock | None
        Source of audit timestamps and generated ids.
    catalog : ViolationCatalog | None
        Rule catalog to share across sessions.  A fresh one by default.
    """

    def __init__(
        self,
        store: ITradeStore,
        *,
        settings: Settings | None = None,
        clock: IClock | None = None,
        catalog: ViolationCatalog | None = None,
    ) -> None:
        self._store = store
        self._settings = settings if settings is not None else Settings()
        self._clock = clock if clock is not None else WallClock()
        self._user_id: str | None = None
        self._trades: tuple[Trade, ...] = ()
        self._filters = FilterOptions()
        self._filtered: tuple[Trade, ...] = ()
        self._simulated: tuple[Trade, ...] = ()
        self._catalog = (
            catalog if catalog is not None else ViolationCatalog(clock=self._clock)
        )
        self._unbind: Callable[[], None] | None = None

    # ------------------------------------------------------------------ #
    # Session                                                              #
    # ------------------------------------------------------------------ #

    @property
    def user_id(self) -> str | None:
        return self._user_id

    def load(self, user_id: str) -> None:
        """Load *user_id*'s trades from the store, replacing local state."""
        try:
            trades = self._store.list(user_id)
        except StoreError:
            logger.exception("Failed to load trades for user %s", user_id)
            raise
        new_session(user_id)
        self._user_id = user_id
        self._set_trades(tuple(trades))
        logger.debug("Loaded %d trades for user %s", len(trades), user_id)

    def clear(self) -> None:
        """Drop the signed-in user and all local state."""
        self._user_id = None
        self._filters = FilterOptions()
        self._simulated = ()
        self._set_trades(())

    def bind(self, identity: IIdentityProvider) -> Callable[[], None]:
        """Follow *identity*: reload on login, clear on logout.

        Returns a callable that stops following it.
        """
        if self._unbind is not None:
            self._unbind()

        def _on_user(user_id: str | None) -> None:
            if user_id is None:
                self.clear()
            else:
                self.load(user_id)

        self._unbind = identity.subscribe(_on_user)
        if identity.current_user is not None:
            self.load(identity.current_user)
        return self._unbind

    # ------------------------------------------------------------------ #
    # Trades                                                               #
    # ------------------------------------------------------------------ #

    @property
    def trades(self) -> tuple[Trade, ...]:
        return self._trades

    @property
    def filtered_trades(self) -> tuple[Trade, ...]:
        return self._filtered

    @property
    def simulated_trades(self) -> tuple[Trade, ...]:
        return self._simulated

    def get_trade(self, trade_id: str) -> Trade | None:
        return next((t for t in self._trades if t.id == trade_id), None)

    def add_trade(self, trade: Trade) -> Trade:
        """Compute derived profit, persist, and append the new trade."""
        user_id = self._require_user()
        now = self._clock.now()
        prepared = self._with_profit(trade).model_copy(
            update={"user_id": user_id, "created_at": now, "updated_at": now}
        )
        try:
            trade_id = self._store.create(user_id, prepared)
        except StoreError:
            logger.exception("Failed to add %s trade", prepared.symbol)
            raise
        created = prepared.model_copy(update={"id": trade_id})
        self._set_trades((created, *self._trades))
        return created

    def update_trade(self, trade: Trade) -> Trade:
        """Recompute derived profit and persist changes to an existing trade."""
        user_id = self._require_user()
        prepared = self._with_profit(trade).model_copy(
            update={"user_id": user_id, "updated_at": self._clock.now()}
        )
        try:
            self._store.update(prepared.id, prepared)
        except StoreError:
            logger.exception("Failed to update trade %s", prepared.id)
            raise
        self._set_trades(
            tuple(prepared if t.id == prepared.id else t for t in self._trades)
        )
        return prepared

    def delete_trade(self, trade_id: str) -> None:
        self._require_user()
        try:
            self._store.delete(trade_id)
        except StoreError:
            logger.exception("Failed to delete trade %s", trade_id)
            raise
        self._set_trades(tuple(t for t in self._trades if t.id != trade_id))

    def import_trades(self, trades: list[Trade]) -> list[Trade]:
        """Add every trade in *trades*; stops at the first store failure."""
        return [self.add_trade(t.model_copy(update={"id": ""})) for t in trades]

    # ------------------------------------------------------------------ #
    # Simulated trades                                                     #
    # ------------------------------------------------------------------ #

    def ingest_simulated(self, trade: SimulatedTrade) -> Trade:
        """Keep a replay trade in the non-persisted simulated list."""
        converted = trade.to_trade(self._clock)
        self._simulated = (*self._simulated, converted)
        logger.debug("Received simulated trade %s", converted.id)
        return converted

    # ------------------------------------------------------------------ #
    # Filters and analytics                                                #
    # ------------------------------------------------------------------ #

    @property
    def filters(self) -> FilterOptions:
        return self._filters

    def update_filters(self, options: FilterOptions) -> tuple[Trade, ...]:
        self._filters = options
        self._refilter()
        return self._filtered

    def clear_filters(self) -> tuple[Trade, ...]:
        return self.update_filters(FilterOptions())

    @property
    def catalog(self) -> ViolationCatalog:
        return self._catalog

    def dashboard(self) -> Dashboard:
        """All calculators over the currently filtered trades."""
        return build_dashboard(self._filtered, self._settings.analytics)

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    def _require_user(self) -> str:
        if self._user_id is None:
            raise NotAuthenticatedError("No user is signed in to the journal")
        return self._user_id

    def _with_profit(self, trade: Trade) -> Trade:
        analytics = self._settings.analytics
        calc = calculate_trade_profit(
            trade,
            formula=analytics.profit_formula,
            notional_multiplier=analytics.notional_multiplier,
        )
        return trade.model_copy(
            update={
                "profit": calc.profit,
                "profit_percentage": calc.profit_percentage.value_or(0.0),
            }
        )

    def _set_trades(self, trades: tuple[Trade, ...]) -> None:
        self._trades = trades
        self._refilter()

    def _refilter(self) -> None:
        self._filtered = tuple(
            apply_filters(
                self._trades,
                self._filters,
                formula=self._settings.analytics.profit_formula,
            )
        )
