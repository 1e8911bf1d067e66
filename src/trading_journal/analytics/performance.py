"""Profit breakdowns for charts and the trading calendar."""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable

from trading_journal.core.enums import ProfitFormula
from trading_journal.core.models import Trade

from .profit import resolve_profit


@dataclass(frozen=True)
class PerformanceSeries:
    labels: list[str] = field(default_factory=list)
    data: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"labels": list(self.labels), "data": list(self.data)}


def monthly_performance(
    trades: Iterable[Trade], *, formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC
) -> PerformanceSeries:
    """Summed profit per month, oldest first.  Labels are ``"M/YYYY"``."""
    months: dict[tuple[int, int], float] = defaultdict(float)
    for trade in trades:
        months[(trade.date.year, trade.date.month)] += resolve_profit(trade, formula=formula)

    keys = sorted(months)
    return PerformanceSeries(
        labels=[f"{month}/{year}" for year, month in keys],
        data=[months[k] for k in keys],
    )


def symbol_performance(
    trades: Iterable[Trade], *, formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC
) -> PerformanceSeries:
    """Summed profit per symbol, most profitable first."""
    symbols: dict[str, float] = defaultdict(float)
    for trade in trades:
        symbols[trade.symbol] += resolve_profit(trade, formula=formula)

    ranked = sorted(symbols.items(), key=lambda kv: kv[1], reverse=True)
    return PerformanceSeries(
        labels=[symbol for symbol, _ in ranked],
        data=[profit for _, profit in ranked],
    )


def trades_on_day(trades: Iterable[Trade], day: dt.date) -> list[Trade]:
    return [t for t in trades if t.date == day]


def daily_profit(
    trades: Iterable[Trade],
    year: int,
    month: int,
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> dict[dt.date, float]:
    """Summed profit for each day of a month that has at least one trade.

    A day whose trades net to exactly zero is still present, which is how
    the calendar tells "break-even day" apart from "no trades".
    """
    days: dict[dt.date, float] = {}
    for trade in sorted(trades, key=lambda t: t.date):
        if trade.date.year == year and trade.date.month == month:
            days[trade.date] = days.get(trade.date, 0.0) + resolve_profit(
                trade, formula=formula
            )
    return days
