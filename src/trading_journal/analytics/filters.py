"""Filtered views of a trade collection.

Each non-empty criterion in ``FilterOptions`` narrows the view; empty
lists and ``None`` bounds impose nothing.  The input is never mutated and
the relative order of surviving trades is preserved.
"""

from __future__ import annotations

from typing import Iterable

from trading_journal.core.enums import ProfitFormula
from trading_journal.core.models import FilterOptions, Trade

from .profit import resolve_profit


def matches(
    trade: Trade,
    options: FilterOptions,
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> bool:
    """Whether a single trade passes every criterion."""
    if options.date_range is not None:
        if not options.date_range.start_date <= trade.date <= options.date_range.end_date:
            return False

    if options.symbols:
        wanted = {s.strip().upper() for s in options.symbols}
        if trade.symbol not in wanted:
            return False

    if options.direction is not None and trade.direction != options.direction:
        return False

    if options.strategies and trade.strategy not in options.strategies:
        return False

    if options.tags and not any(tag in options.tags for tag in trade.tags):
        return False

    bounds = options.profit_range
    if bounds.min is not None or bounds.max is not None:
        profit = resolve_profit(trade, formula=formula)
        if bounds.min is not None and profit < bounds.min:
            return False
        if bounds.max is not None and profit > bounds.max:
            return False

    return True


def apply_filters(
    trades: Iterable[Trade],
    options: FilterOptions,
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> list[Trade]:
    """Trades passing *options*, in their original order."""
    return [t for t in trades if matches(t, options, formula=formula)]
