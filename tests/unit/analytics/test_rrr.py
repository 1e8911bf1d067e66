"""Tests for risk-reward ratios."""

import pytest

from trading_journal.analytics.rrr import (
    RRRStats,
    TradeRRR,
    calculate_rrr,
    calculate_rrr_stats,
    has_stop_loss,
)
from trading_journal.core.enums import Direction
from trading_journal.core.ratio import UNDEFINED, Defined

from tests.conftest import make_trade


def _long(**kwargs):
    defaults = dict(entry_price=100.0, stop_loss=95.0, take_profit=115.0, exit_price=110.0)
    return make_trade(**{**defaults, **kwargs})


class TestCalculateRRR:
    def test_long_planned_and_achieved(self):
        rrr = calculate_rrr(_long())
        assert rrr.planned == Defined(3.0)
        assert rrr.achieved == Defined(2.0)

    def test_short(self):
        trade = make_trade(
            direction=Direction.SHORT,
            entry_price=100.0, stop_loss=105.0, take_profit=90.0, exit_price=95.0,
        )
        rrr = calculate_rrr(trade)
        assert rrr.planned.value == pytest.approx(2.0)
        assert rrr.achieved.value == pytest.approx(1.0)

    def test_no_stop_loss(self):
        assert calculate_rrr(_long(stop_loss=None)) == TradeRRR(UNDEFINED, UNDEFINED)

    def test_zero_stop_loss_treated_as_absent(self):
        trade = _long(stop_loss=0.0)
        assert not has_stop_loss(trade)
        assert calculate_rrr(trade).achieved is UNDEFINED

    def test_no_take_profit_leaves_planned_undefined(self):
        rrr = calculate_rrr(_long(take_profit=None))
        assert rrr.planned is UNDEFINED
        assert rrr.achieved == Defined(2.0)

    def test_stop_at_entry_is_undefined(self):
        rrr = calculate_rrr(_long(stop_loss=100.0))
        assert rrr.planned is UNDEFINED
        assert rrr.achieved is UNDEFINED

    def test_losing_trade_achieved_is_magnitude(self):
        rrr = calculate_rrr(_long(exit_price=95.0))
        assert rrr.achieved == Defined(1.0)

    def test_misplaced_stop_unvalidated_by_default(self):
        rrr = calculate_rrr(_long(stop_loss=105.0))
        assert rrr.achieved == Defined(2.0)

    def test_misplaced_stop_rejected_when_validating(self):
        rrr = calculate_rrr(_long(stop_loss=105.0), validate_placement=True)
        assert rrr == TradeRRR()


class TestRRRStats:
    def test_empty(self):
        stats = calculate_rrr_stats([])
        assert stats == RRRStats()
        assert stats.to_dict() == {
            "average_planned_rrr": None,
            "average_achieved_rrr": None,
            "trades_without_stop_loss": 0,
        }

    def test_averages_skip_trades_without_stop(self):
        trades = [
            _long(),
            _long(exit_price=105.0, take_profit=None),
            _long(stop_loss=None),
        ]
        stats = calculate_rrr_stats(trades)
        assert stats.average_planned_rrr.value == pytest.approx(3.0)
        assert stats.average_achieved_rrr.value == pytest.approx(1.5)
        assert stats.trades_without_stop_loss == 1

    def test_only_unprotected_trades(self):
        stats = calculate_rrr_stats([_long(stop_loss=None), _long(stop_loss=None)])
        assert stats.average_planned_rrr is UNDEFINED
        assert stats.average_achieved_rrr is UNDEFINED
        assert stats.trades_without_stop_loss == 2
