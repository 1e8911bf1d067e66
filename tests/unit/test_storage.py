"""Tests for the in-memory and SQLAlchemy trade stores."""

import datetime as dt

import pytest

from trading_journal.core.errors import StoreError, StoreUnavailableError, TradeNotFoundError
from trading_journal.core.interfaces import ITradeStore
from trading_journal.core.models import ViolationRule
from trading_journal.storage.memory import InMemoryTradeStore
from trading_journal.storage.sql import SqlTradeStore

from tests.conftest import make_trade


@pytest.fixture(params=["memory", "sql"])
def any_store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryTradeStore()
        return
    store = SqlTradeStore.from_url(f"sqlite:///{tmp_path / 'journal.db'}")
    yield store
    store.close()


class TestTradeStoreContract:
    def test_satisfies_protocol(self, any_store):
        assert isinstance(any_store, ITradeStore)

    def test_create_assigns_id(self, any_store):
        trade_id = any_store.create("u1", make_trade(profit=5.0))
        assert trade_id
        stored = any_store.get_one(trade_id)
        assert stored.id == trade_id
        assert stored.user_id == "u1"
        assert stored.profit == 5.0

    def test_list_is_per_user_newest_first(self, any_store):
        any_store.create("u1", make_trade(day=1))
        any_store.create("u1", make_trade(day=9))
        any_store.create("u2", make_trade(day=5))
        listed = any_store.list("u1")
        assert [t.date.day for t in listed] == [9, 1]
        assert any_store.list("nobody") == []

    def test_same_date_ties_come_back_newest_created_first(self, any_store):
        base = dt.datetime(2024, 3, 1, 9, 30, tzinfo=dt.timezone.utc)
        for minute, notes in [(0, "first"), (5, "third"), (1, "second")]:
            any_store.create(
                "u1",
                make_trade(day=5, notes=notes, created_at=base + dt.timedelta(minutes=minute)),
            )
        listed = any_store.list("u1")
        assert [t.notes for t in listed] == ["third", "second", "first"]

    def test_update(self, any_store):
        trade_id = any_store.create("u1", make_trade(profit=5.0))
        changed = any_store.get_one(trade_id).model_copy(update={"profit": 7.5, "notes": "moved"})
        any_store.update(trade_id, changed)
        stored = any_store.get_one(trade_id)
        assert stored.profit == 7.5
        assert stored.notes == "moved"
        assert stored.user_id == "u1"

    def test_update_unknown(self, any_store):
        with pytest.raises(TradeNotFoundError):
            any_store.update("missing", make_trade())

    def test_delete(self, any_store):
        trade_id = any_store.create("u1", make_trade())
        any_store.delete(trade_id)
        assert any_store.get_one(trade_id) is None
        with pytest.raises(TradeNotFoundError):
            any_store.delete(trade_id)

    def test_round_trips_lists_and_optionals(self, any_store):
        trade = make_trade(
            stop_loss=1.09,
            tags=["london"],
            screenshots=["https://example.com/a.png"],
            violations=["chased-price"],
            rating=4,
            created_at=dt.datetime(2024, 1, 1, 12, tzinfo=dt.timezone.utc),
        )
        stored = any_store.get_one(any_store.create("u1", trade))
        assert stored.stop_loss == pytest.approx(1.09)
        assert stored.take_profit is None
        assert stored.tags == ["london"]
        assert stored.screenshots == ["https://example.com/a.png"]
        assert stored.violations == [ViolationRule(id="chased-price", label="Chased Price")]
        assert stored.rating == 4
        assert stored.created_at is not None


class TestInMemoryIsolation:
    def test_returned_trades_are_copies(self):
        store = InMemoryTradeStore()
        trade_id = store.create("u1", make_trade(tags=["a"]))
        store.get_one(trade_id).tags.append("mutated")
        assert store.get_one(trade_id).tags == ["a"]
        assert len(store) == 1


class TestSqlFailures:
    def test_unreachable_database(self, tmp_path):
        store = SqlTradeStore.from_url(f"sqlite:///{tmp_path / 'gone.db'}")
        (tmp_path / "gone.db").unlink()
        (tmp_path / "gone.db").mkdir()
        store.close()
        with pytest.raises(StoreError):
            store.list("u1")

    def test_unavailable_is_store_error(self):
        assert issubclass(StoreUnavailableError, StoreError)
