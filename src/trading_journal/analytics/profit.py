"""Profit/loss calculation for a single trade.

One calculator, two explicit formulas (see ``ProfitFormula``):

``PIP_DYNAMIC`` (canonical, used when a trade is entered)
    profit = signed_pips * pip_value - fees, where the pip value of JPY
    pairs is derived from the entry price.  Profit percentage is measured
    against an estimated margin of ``entry_price * lot_size * 1000``.

``FIXED_MULTIPLIER`` (legacy aggregate-reporting path)
    profit = signed_pips * lot_size * 10 - fees for every instrument class,
    percentage against ``entry_price * quantity``.

The two agree for non-JPY symbols and disagree for JPY pairs, because
the legacy path values a JPY pip at a flat 10 per lot.

Usage::

    result = calculate_pips_and_profit(
        symbol="EUR/USD", direction=Direction.LONG,
        entry_price=1.1000, exit_price=1.1050, lot_size=1.0, fees=2.0,
    )
    result.profit                     # 498.0
    result.profit_percentage.value    # ~45.27
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from trading_journal.core.enums import Direction, ProfitFormula
from trading_journal.core.models import Trade
from trading_journal.core.ratio import Ratio, safe_ratio

from .pips import FIXED_PIP_VALUE_PER_LOT, pip_info

logger = logging.getLogger(__name__)

DEFAULT_NOTIONAL_MULTIPLIER = 1000.0


@dataclass(frozen=True)
class ProfitCalculation:
    """Result of a profit computation."""

    pip_difference: float  # Always >= 0, for display
    pip_value: float  # Value of one pip for the full position
    profit: float
    profit_percentage: Ratio


@dataclass(frozen=True)
class ProfitDiscrepancy:
    """A stored profit that does not match a fresh recomputation."""

    trade_id: str
    stored: float
    recomputed: float

    @property
    def difference(self) -> float:
        return self.stored - self.recomputed


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def is_win(profit: float) -> bool:
    """Win predicate shared by every calculator.  Break-even is not a win."""
    return profit > 0


def calculate_pips_and_profit(
    symbol: str,
    direction: Direction,
    entry_price: float,
    exit_price: float,
    lot_size: float,
    fees: float,
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
    notional_multiplier: float = DEFAULT_NOTIONAL_MULTIPLIER,
    quantity: int = 1,
) -> ProfitCalculation:
    """Compute pips, profit and profit percentage for one trade.

    Never raises for numeric reasons: non-finite inputs count as zero and
    a zero margin denominator yields an ``UNDEFINED`` percentage.
    """
    entry_price = _finite(entry_price)
    exit_price = _finite(exit_price)
    lot_size = _finite(lot_size)
    fees = _finite(fees)

    info = pip_info(symbol)
    if direction == Direction.LONG:
        price_difference = exit_price - entry_price
    else:
        price_difference = entry_price - exit_price
    signed_pips = price_difference / info.pip_size

    if formula == ProfitFormula.FIXED_MULTIPLIER:
        pip_value = FIXED_PIP_VALUE_PER_LOT * lot_size
        profit = signed_pips * pip_value - fees
        margin = entry_price * quantity
    else:
        pip_value = info.pip_value(entry_price, lot_size)
        profit = signed_pips * pip_value - fees
        margin = entry_price * lot_size * notional_multiplier

    return ProfitCalculation(
        pip_difference=abs(signed_pips),
        pip_value=pip_value,
        profit=profit,
        profit_percentage=safe_ratio(profit * 100, margin),
    )


def calculate_trade_profit(
    trade: Trade,
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
    notional_multiplier: float = DEFAULT_NOTIONAL_MULTIPLIER,
) -> ProfitCalculation:
    """Run ``calculate_pips_and_profit`` over a trade's own fields."""
    return calculate_pips_and_profit(
        trade.symbol,
        trade.direction,
        trade.entry_price,
        trade.exit_price,
        trade.lot_size,
        trade.fees,
        formula=formula,
        notional_multiplier=notional_multiplier,
        quantity=trade.quantity,
    )


def resolve_profit(
    trade: Trade,
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> float:
    """The trade's stored profit, or a recomputation when none is stored."""
    if trade.profit is not None:
        return trade.profit
    return calculate_trade_profit(trade, formula=formula).profit


def find_profit_discrepancies(
    trades: Iterable[Trade],
    *,
    tolerance: float = 0.01,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> list[ProfitDiscrepancy]:
    """Cross-check stored profits against the calculator.

    Trades without a stored profit are skipped; there is nothing to
    compare against.
    """
    found: list[ProfitDiscrepancy] = []
    for trade in trades:
        if trade.profit is None:
            continue
        recomputed = calculate_trade_profit(trade, formula=formula).profit
        if abs(trade.profit - recomputed) > tolerance:
            found.append(ProfitDiscrepancy(trade.id, trade.profit, recomputed))

    if found:
        logger.warning(
            "Stored profit differs from %s recomputation on %d trade(s)",
            formula.value,
            len(found),
        )
    return found
