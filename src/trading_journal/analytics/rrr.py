"""Planned vs achieved risk-reward ratios.

Risk is always the distance from entry to the stop loss, for both ratios:
the stop fixes what was risked regardless of how the trade played out.

* achieved RRR = |exit reward / risk|
* planned RRR  = |take-profit reward / risk|

A trade without a stop loss (missing or zero) has neither ratio and is
counted in ``trades_without_stop_loss`` instead of dragging the averages
toward zero.  A zero risk distance, or a missing take profit for the
planned ratio, gives ``UNDEFINED`` for that ratio only.

Stop and target placement relative to direction is not validated unless
``validate_placement`` is set; an inverted stop then produces a ratio that
is numerically valid but meaningless.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from trading_journal.core.enums import Direction
from trading_journal.core.models import Trade
from trading_journal.core.ratio import UNDEFINED, Defined, Ratio, mean_of, safe_ratio


@dataclass(frozen=True)
class TradeRRR:
    planned: Ratio = UNDEFINED
    achieved: Ratio = UNDEFINED


@dataclass(frozen=True)
class RRRStats:
    average_planned_rrr: Ratio = UNDEFINED
    average_achieved_rrr: Ratio = UNDEFINED
    trades_without_stop_loss: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "average_planned_rrr": self.average_planned_rrr.value,
            "average_achieved_rrr": self.average_achieved_rrr.value,
            "trades_without_stop_loss": self.trades_without_stop_loss,
        }


def has_stop_loss(trade: Trade) -> bool:
    return bool(trade.stop_loss)


def _abs_ratio(numerator: float, denominator: float) -> Ratio:
    r = safe_ratio(numerator, denominator)
    return Defined(abs(r.value)) if r.is_defined else UNDEFINED


def calculate_rrr(trade: Trade, *, validate_placement: bool = False) -> TradeRRR:
    """Risk-reward ratios for one trade."""
    if not has_stop_loss(trade):
        return TradeRRR()

    if trade.direction == Direction.LONG:
        risk = trade.entry_price - trade.stop_loss
        reward = trade.exit_price - trade.entry_price
    else:
        risk = trade.stop_loss - trade.entry_price
        reward = trade.entry_price - trade.exit_price

    if validate_placement and risk < 0:
        return TradeRRR()

    achieved = _abs_ratio(reward, risk)

    planned: Ratio = UNDEFINED
    if trade.take_profit:
        if trade.direction == Direction.LONG:
            planned_reward = trade.take_profit - trade.entry_price
        else:
            planned_reward = trade.entry_price - trade.take_profit
        if not (validate_placement and planned_reward < 0):
            planned = _abs_ratio(planned_reward, risk)

    return TradeRRR(planned=planned, achieved=achieved)


def calculate_rrr_stats(
    trades: Iterable[Trade], *, validate_placement: bool = False
) -> RRRStats:
    """Average the defined ratios across trades."""
    planned: list[float] = []
    achieved: list[float] = []
    without_stop = 0

    for trade in trades:
        if not has_stop_loss(trade):
            without_stop += 1
            continue
        rrr = calculate_rrr(trade, validate_placement=validate_placement)
        if rrr.planned.is_defined:
            planned.append(rrr.planned.value)
        if rrr.achieved.is_defined:
            achieved.append(rrr.achieved.value)

    return RRRStats(
        average_planned_rrr=mean_of(planned),
        average_achieved_rrr=mean_of(achieved),
        trades_without_stop_loss=without_stop,
    )
