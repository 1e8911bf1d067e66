"""Dashboard view model: every calculator over one snapshot.

The calculators are independent; this module only runs them over the same
immutable copy of the trade list and concatenates their outputs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from trading_journal.core.config import AnalyticsConfig
from trading_journal.core.models import Trade

from .rrr import RRRStats, calculate_rrr_stats
from .stats import DashboardStats, calculate_dashboard_stats
from .streaks import StreakInfo, calculate_streaks
from .violations import ViolationStats, calculate_violation_stats


@dataclass(frozen=True)
class Dashboard:
    stats: DashboardStats
    streaks: StreakInfo
    rrr: RRRStats
    violations: ViolationStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "streaks": asdict(self.streaks),
            "rrr": self.rrr.to_dict(),
            "violations": self.violations.to_dict(),
        }


def build_dashboard(
    trades: Iterable[Trade], config: AnalyticsConfig | None = None
) -> Dashboard:
    """Run all calculators over a snapshot of *trades*."""
    config = config or AnalyticsConfig()
    snapshot = tuple(trades)
    formula = config.profit_formula

    return Dashboard(
        stats=calculate_dashboard_stats(snapshot, formula=formula),
        streaks=calculate_streaks(
            snapshot, tilt_threshold=config.tilt_threshold, formula=formula
        ),
        rrr=calculate_rrr_stats(
            snapshot, validate_placement=config.validate_stop_placement
        ),
        violations=calculate_violation_stats(
            snapshot,
            dedupe_per_trade=config.dedupe_violations_per_trade,
            formula=formula,
        ),
    )
