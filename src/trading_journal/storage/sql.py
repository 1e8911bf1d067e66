"""SQLAlchemy persistence for journal trades.

Provides the ORM model and an ``ITradeStore`` implementation backed by
any SQLAlchemy URL.  SQLite is the default; list-valued fields (tags,
screenshots, violations) are stored as JSON columns.

Usage::

    store = SqlTradeStore.from_url("sqlite:///trading_journal.db")
    trade_id = store.create("user-1", trade)
    trades = store.list("user-1")
"""

from __future__ import annotations

import datetime as dt
import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    create_engine,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from trading_journal.core.errors import (
    StoreError,
    StoreUnavailableError,
    TradeNotFoundError,
)
from trading_journal.core.ids import new_trade_id
from trading_journal.core.models import Trade

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    pass


# ---------------------------------------------------------------------------
# ORM Model
# ---------------------------------------------------------------------------

class TradeRow(Base):
    """Persisted journal trade."""

    __tablename__ = "trades"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)

    # Instrument
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    direction: Mapped[str] = mapped_column(String(8), nullable=False)

    # Prices
    entry_price: Mapped[float] = mapped_column(Float, default=0.0)
    exit_price: Mapped[float] = mapped_column(Float, default=0.0)
    stop_loss: Mapped[float | None] = mapped_column(Float, nullable=True)
    take_profit: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Size and cost
    lot_size: Mapped[float] = mapped_column(Float, default=0.0)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    fees: Mapped[float] = mapped_column(Float, default=0.0)

    # Cached PnL
    profit: Mapped[float | None] = mapped_column(Float, nullable=True)
    profit_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Narrative
    strategy: Mapped[str] = mapped_column(String(128), default="")
    setup: Mapped[str] = mapped_column(String(128), default="")
    setup_description: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    emotions: Mapped[str] = mapped_column(Text, default="")
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    time_frame: Mapped[str] = mapped_column(String(32), default="")
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    screenshots: Mapped[list | None] = mapped_column(JSON, nullable=True)
    violations: Mapped[list | None] = mapped_column(JSON, nullable=True)

    # Audit
    created_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_simulated: Mapped[bool] = mapped_column(Boolean, default=False)

    __table_args__ = (
        Index("ix_trades_user_id", "user_id"),
        Index("ix_trades_user_date", "user_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<TradeRow(id={self.id!r}, symbol={self.symbol!r}, date={self.date!r})>"


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

_COLUMNS = [c.name for c in TradeRow.__table__.columns if c.name not in ("id", "user_id")]


def _trade_to_values(trade: Trade) -> dict[str, Any]:
    """Column values for a trade (everything but identity)."""
    data = trade.model_dump(mode="python")
    data["direction"] = trade.direction.value
    return {name: data[name] for name in _COLUMNS}


def _row_to_trade(row: TradeRow) -> Trade:
    values = {name: getattr(row, name) for name in _COLUMNS}
    return Trade.model_validate({"id": row.id, "user_id": row.user_id, **values})


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class SqlTradeStore:
    """``ITradeStore`` over a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False) -> SqlTradeStore:
        """Create the engine and schema for *url*."""
        engine = create_engine(url, echo=echo)
        Base.metadata.create_all(engine)
        logger.info("Trade store ready at %s", url.split("@")[-1])
        return cls(engine)

    def list(self, user_id: str) -> list[Trade]:
        stmt = (
            select(TradeRow)
            .where(TradeRow.user_id == user_id)
            .order_by(TradeRow.date.desc(), TradeRow.created_at.desc())
        )
        with self._session() as session:
            return [_row_to_trade(row) for row in session.scalars(stmt)]

    def create(self, user_id: str, trade: Trade) -> str:
        trade_id = new_trade_id()
        with self._session() as session, session.begin():
            session.add(TradeRow(id=trade_id, user_id=user_id, **_trade_to_values(trade)))
        logger.debug("Created trade %s for user %s", trade_id, user_id)
        return trade_id

    def update(self, trade_id: str, trade: Trade) -> None:
        with self._session() as session, session.begin():
            row = session.get(TradeRow, trade_id)
            if row is None:
                raise TradeNotFoundError(trade_id)
            for name, value in _trade_to_values(trade).items():
                setattr(row, name, value)

    def delete(self, trade_id: str) -> None:
        with self._session() as session, session.begin():
            row = session.get(TradeRow, trade_id)
            if row is None:
                raise TradeNotFoundError(trade_id)
            session.delete(row)

    def get_one(self, trade_id: str) -> Trade | None:
        with self._session() as session:
            row = session.get(TradeRow, trade_id)
            return _row_to_trade(row) if row else None

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Scoped session that re-raises driver failures as ``StoreError``."""
        try:
            with Session(self._engine) as session:
                yield session
        except OperationalError as exc:
            raise StoreUnavailableError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
