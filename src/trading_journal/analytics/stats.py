"""Aggregate performance statistics over a trade collection.

A trade is a win iff its profit is strictly positive; break-even trades
count with the losses for win rate, averages and profit factor.  Every
division is guarded, so an empty collection yields an all-zero result
and no NaN reaches the caller.  The one non-finite value is a profit
factor of ``inf`` when there are winnings and no losses at all.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable

from trading_journal.core.enums import ProfitFormula
from trading_journal.core.models import Trade

from .profit import is_win, resolve_profit


@dataclass(frozen=True)
class DashboardStats:
    total_trades: int = 0
    win_rate: float = 0.0  # Percentage, 0-100
    total_profit: float = 0.0
    average_profit: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0  # Positive magnitude
    largest_win: float = 0.0
    largest_loss: float = 0.0  # <= 0
    profit_factor: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe view; an infinite profit factor becomes ``"Infinity"``."""
        data = asdict(self)
        if math.isinf(self.profit_factor):
            data["profit_factor"] = "Infinity"
        return data


def profit_factor(gross_wins: float, gross_losses: float) -> float:
    """Gross winnings over gross losses (both as positive magnitudes)."""
    if gross_losses > 0:
        return gross_wins / gross_losses
    return math.inf if gross_wins > 0 else 0.0


def format_profit_factor(value: float) -> str:
    """Two-decimal text, with an infinite factor shown as ``∞``."""
    return "∞" if math.isinf(value) else f"{value:.2f}"


def calculate_dashboard_stats(
    trades: Iterable[Trade | None],
    *,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> DashboardStats:
    """Fold trades into headline statistics."""
    profits = [
        resolve_profit(trade, formula=formula) for trade in trades if trade is not None
    ]
    if not profits:
        return DashboardStats()

    wins = [p for p in profits if is_win(p)]
    losses = [p for p in profits if not is_win(p)]
    total = len(profits)
    total_profit = sum(profits)
    gross_wins = sum(wins)
    gross_losses = abs(sum(losses))

    return DashboardStats(
        total_trades=total,
        win_rate=len(wins) / total * 100,
        total_profit=total_profit,
        average_profit=total_profit / total,
        average_win=gross_wins / len(wins) if wins else 0.0,
        average_loss=gross_losses / len(losses) if losses else 0.0,
        largest_win=max(wins, default=0.0),
        largest_loss=min(min(losses, default=0.0), 0.0),
        profit_factor=profit_factor(gross_wins, gross_losses),
    )
