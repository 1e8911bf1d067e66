"""Win/loss streak detection and tilt warning.

Trades are ordered newest first (a stable sort, so trades sharing a date
keep their input order) and split into runs of equal outcome.  The run
containing the most recent trade is the *current* streak; it is signed
positive for wins and negative for losses.  A current losing run of at
least ``tilt_threshold`` trades flags the trader as on tilt.

Example::

    info = calculate_streaks(trades)
    if info.is_on_tilt:
        print(f"{-info.current_streak} losses in a row")
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import Iterable

from trading_journal.core.enums import ProfitFormula
from trading_journal.core.models import Trade

from .profit import is_win, resolve_profit

DEFAULT_TILT_THRESHOLD = 3


@dataclass(frozen=True)
class StreakInfo:
    current_streak: int = 0  # +N wins / -N losses
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    is_on_tilt: bool = False
    tilt_threshold: int = DEFAULT_TILT_THRESHOLD


def newest_first(trades: Iterable[Trade]) -> list[Trade]:
    """Stable date-descending order."""
    return sorted(trades, key=lambda t: t.date, reverse=True)


def calculate_streaks(
    trades: Iterable[Trade],
    *,
    tilt_threshold: int = DEFAULT_TILT_THRESHOLD,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> StreakInfo:
    """Scan trades for consecutive win/loss runs."""
    outcomes = [
        is_win(resolve_profit(t, formula=formula)) for t in newest_first(trades)
    ]
    if not outcomes:
        return StreakInfo(tilt_threshold=tilt_threshold)

    runs = [(won, sum(1 for _ in group)) for won, group in groupby(outcomes)]
    current_won, current_length = runs[0]

    return StreakInfo(
        current_streak=current_length if current_won else -current_length,
        longest_win_streak=max((n for won, n in runs if won), default=0),
        longest_loss_streak=max((n for won, n in runs if not won), default=0),
        is_on_tilt=not current_won and current_length >= tilt_threshold,
        tilt_threshold=tilt_threshold,
    )
