"""Trade analytics engine: pure calculators over a trade collection.

Every function takes an iterable of ``Trade`` records, never mutates it,
and returns a plain derived-data structure.  None of them raise for
malformed numbers: bad inputs become zeros, ``UNDEFINED`` ratios, or an
explicit ``inf`` profit factor.

Key components
--------------
pip_info                   Instrument pip size and pip value convention
calculate_pips_and_profit  Profit / profit % for one trade
calculate_dashboard_stats  Win rate, profit factor, averages, extrema
calculate_streaks          Win/loss runs and tilt warning
calculate_rrr_stats        Planned vs achieved risk-reward
calculate_violation_stats  Broken-rule frequency and win-rate impact
apply_filters              Filtered view by date, symbol, tag, profit
build_dashboard            All of the above over one snapshot
"""

from .dashboard import Dashboard, build_dashboard
from .filters import apply_filters
from .performance import (
    PerformanceSeries,
    daily_profit,
    monthly_performance,
    symbol_performance,
    trades_on_day,
)
from .pips import PipInfo, pip_info
from .profit import (
    ProfitCalculation,
    ProfitDiscrepancy,
    calculate_pips_and_profit,
    calculate_trade_profit,
    find_profit_discrepancies,
    is_win,
    resolve_profit,
)
from .rrr import RRRStats, TradeRRR, calculate_rrr, calculate_rrr_stats
from .stats import DashboardStats, calculate_dashboard_stats, format_profit_factor
from .streaks import StreakInfo, calculate_streaks
from .violations import (
    DEFAULT_VIOLATION_RULES,
    ViolationCatalog,
    ViolationStats,
    calculate_violation_stats,
)

__all__ = [
    "Dashboard",
    "build_dashboard",
    "apply_filters",
    "PerformanceSeries",
    "daily_profit",
    "monthly_performance",
    "symbol_performance",
    "trades_on_day",
    "PipInfo",
    "pip_info",
    "ProfitCalculation",
    "ProfitDiscrepancy",
    "calculate_pips_and_profit",
    "calculate_trade_profit",
    "find_profit_discrepancies",
    "is_win",
    "resolve_profit",
    "RRRStats",
    "TradeRRR",
    "calculate_rrr",
    "calculate_rrr_stats",
    "DashboardStats",
    "calculate_dashboard_stats",
    "format_profit_factor",
    "StreakInfo",
    "calculate_streaks",
    "DEFAULT_VIOLATION_RULES",
    "ViolationCatalog",
    "ViolationStats",
    "calculate_violation_stats",
]
