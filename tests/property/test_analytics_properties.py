"""Property tests: aggregate statistics, streaks and filters.

Uses hypothesis to check the invariants that must hold for any trade
collection, not just the hand-picked fixtures.
"""

import datetime as dt
import math

from hypothesis import given, settings, strategies as st

from trading_journal.analytics.dashboard import build_dashboard
from trading_journal.analytics.filters import apply_filters
from trading_journal.analytics.profit import calculate_pips_and_profit
from trading_journal.analytics.stats import calculate_dashboard_stats
from trading_journal.analytics.streaks import calculate_streaks
from trading_journal.core.enums import Direction, ProfitFormula
from trading_journal.core.models import FilterOptions, ProfitRange, Trade

profits = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)

trades_strategy = st.lists(
    st.builds(
        Trade,
        profit=profits,
        date=st.dates(min_value=dt.date(2020, 1, 1), max_value=dt.date(2025, 12, 31)),
        symbol=st.sampled_from(["EURUSD", "USDJPY", "XAUUSD", "GBPUSD"]),
        direction=st.sampled_from(list(Direction)),
    ),
    max_size=40,
)


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_win_rate_bounded(trades):
    stats = calculate_dashboard_stats(trades)
    assert 0.0 <= stats.win_rate <= 100.0
    assert stats.total_trades == len(trades)
    assert not math.isnan(stats.profit_factor)


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_profit_factor_infinite_only_without_losses(trades):
    stats = calculate_dashboard_stats(trades)
    has_wins = any(t.profit > 0 for t in trades)
    loss_total = sum(t.profit for t in trades if t.profit <= 0)
    if math.isinf(stats.profit_factor):
        assert has_wins and loss_total == 0
    if not has_wins and loss_total == 0:
        assert stats.profit_factor == 0.0


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_extrema_bound_every_trade(trades):
    stats = calculate_dashboard_stats(trades)
    options = FilterOptions(
        profit_range=ProfitRange(min=stats.largest_loss, max=stats.largest_win)
    )
    assert len(apply_filters(trades, options)) == len(trades)


@given(trades=trades_strategy, symbols=st.lists(st.sampled_from(["EURUSD", "USDJPY"]), max_size=2))
@settings(max_examples=100)
def test_filter_never_mutates_or_reorders(trades, symbols):
    before = list(trades)
    result = apply_filters(trades, FilterOptions(symbols=symbols))
    assert trades == before
    positions = [next(i for i, t in enumerate(trades) if t is r) for r in result]
    assert positions == sorted(positions)


@given(trades=trades_strategy)
@settings(max_examples=100)
def test_streak_bounds(trades):
    info = calculate_streaks(trades)
    assert abs(info.current_streak) <= len(trades)
    assert info.longest_win_streak + info.longest_loss_streak <= len(trades)
    if info.current_streak > 0:
        assert info.longest_win_streak >= info.current_streak
    if info.current_streak < 0:
        assert info.longest_loss_streak >= -info.current_streak
    assert info.is_on_tilt == (info.current_streak <= -info.tilt_threshold)


@given(trades=trades_strategy)
@settings(max_examples=50)
def test_dashboard_idempotent(trades):
    assert build_dashboard(trades) == build_dashboard(trades)


@given(
    entry=st.floats(min_value=0.5, max_value=3.0),
    exit_=st.floats(min_value=0.5, max_value=3.0),
    lots=st.floats(min_value=0.01, max_value=50.0),
    fees=st.floats(min_value=0.0, max_value=100.0),
    symbol=st.sampled_from(["EURUSD", "GBPUSD", "XAUUSD", "AUDCAD"]),
)
@settings(max_examples=100)
def test_formulas_agree_for_non_jpy(entry, exit_, lots, fees, symbol):
    dynamic = calculate_pips_and_profit(symbol, Direction.LONG, entry, exit_, lots, fees)
    fixed = calculate_pips_and_profit(
        symbol, Direction.LONG, entry, exit_, lots, fees,
        formula=ProfitFormula.FIXED_MULTIPLIER,
    )
    assert math.isclose(dynamic.profit, fixed.profit, rel_tol=1e-9, abs_tol=1e-6)
    assert dynamic.pip_difference >= 0


@given(
    entry=st.floats(min_value=50.0, max_value=250.0),
    exit_=st.floats(min_value=50.0, max_value=250.0),
    direction=st.sampled_from(list(Direction)),
)
@settings(max_examples=100)
def test_long_and_short_are_mirror_images(entry, exit_, direction):
    other = Direction.SHORT if direction == Direction.LONG else Direction.LONG
    a = calculate_pips_and_profit("USDJPY", direction, entry, exit_, 1.0, 0.0)
    b = calculate_pips_and_profit("USDJPY", other, entry, exit_, 1.0, 0.0)
    assert math.isclose(a.profit, -b.profit, rel_tol=1e-9, abs_tol=1e-9)
