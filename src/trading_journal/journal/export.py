"""Trade export: CSV/JSON output, JSON import and the text report.

Exports journal trades in standard formats for external analysis and
archival, restores them from a JSON export, and renders the shareable
performance report.

Usage::

    exporter = TradeExporter()
    csv_str = exporter.to_csv(trades)
    json_str = exporter.to_json(trades)
    trades = exporter.from_json(json_str)
    report = exporter.text_report(trades)
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import json
import logging
from typing import Any

from pydantic import ValidationError

from trading_journal.analytics.profit import resolve_profit
from trading_journal.analytics.rrr import calculate_rrr_stats
from trading_journal.analytics.stats import calculate_dashboard_stats, format_profit_factor
from trading_journal.analytics.streaks import newest_first
from trading_journal.analytics.violations import calculate_violation_stats
from trading_journal.core.config import AnalyticsConfig
from trading_journal.core.errors import ImportValidationError
from trading_journal.core.models import Trade
from trading_journal.core.ratio import Ratio

logger = logging.getLogger(__name__)

# Default CSV columns
_CSV_COLUMNS = [
    "id",
    "date",
    "symbol",
    "direction",
    "entry_price",
    "exit_price",
    "stop_loss",
    "take_profit",
    "lot_size",
    "quantity",
    "fees",
    "profit",
    "profit_percentage",
    "strategy",
    "setup",
    "time_frame",
    "rating",
    "emotions",
    "notes",
    "tags",
    "violations",
]

_RULE = "=" * 48
RECENT_TRADES_LIMIT = 10


def report_filename(today: dt.date) -> str:
    return f"trading-journal-{today.isoformat()}.txt"


def export_filename(today: dt.date) -> str:
    return f"trader_journal_export_{today.isoformat()}.json"


def _fmt_ratio(ratio: Ratio) -> str:
    return f"{ratio.value:.2f}" if ratio.is_defined else "N/A"


class TradeExporter:
    """Export trades to CSV/JSON, import JSON, and render the text report.

    Parameters
    ----------
    decimal_places : int
        Rounding precision for numeric CSV fields.  Default 4.
    config : AnalyticsConfig | None
        Calculator settings used by the report.
    """

    def __init__(
        self,
        *,
        decimal_places: int = 4,
        config: AnalyticsConfig | None = None,
    ) -> None:
        self._dp = decimal_places
        self._config = config or AnalyticsConfig()

    # ------------------------------------------------------------------ #
    # CSV Export                                                           #
    # ------------------------------------------------------------------ #

    def to_csv(
        self,
        trades: list[Trade],
        *,
        columns: list[str] | None = None,
    ) -> str:
        """Export trades as a CSV string with a header row.

        List fields are joined with ``;``; violations are written as rule
        labels.
        """
        cols = columns or _CSV_COLUMNS
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()

        for trade in trades:
            row = self._trade_to_row(trade)
            writer.writerow({c: row.get(c, "") for c in cols})

        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # JSON Export / Import                                                 #
    # ------------------------------------------------------------------ #

    def to_json(
        self,
        trades: list[Trade],
        *,
        indent: int = 2,
    ) -> str:
        """Export trades as a JSON array of full trade objects."""
        rows = [t.model_dump(mode="json") for t in trades]
        return json.dumps(rows, indent=indent)

    def from_json(self, text: str) -> list[Trade]:
        """Parse a JSON export back into trades.

        Raises
        ------
        ImportValidationError
            If *text* is not a JSON array of trade objects.
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ImportValidationError(f"Import is not valid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise ImportValidationError(
                "Invalid file format. Expected an array of trades."
            )

        trades: list[Trade] = []
        for i, item in enumerate(payload):
            if not isinstance(item, dict):
                raise ImportValidationError(f"Entry {i} is not a trade object")
            try:
                trades.append(Trade.model_validate(item))
            except ValidationError as exc:
                raise ImportValidationError(f"Entry {i} is invalid: {exc}") from exc

        logger.debug("Parsed %d trades from import", len(trades))
        return trades

    # ------------------------------------------------------------------ #
    # Text Report                                                          #
    # ------------------------------------------------------------------ #

    def text_report(
        self,
        trades: list[Trade],
        *,
        generated_on: dt.date | None = None,
    ) -> str:
        """Render the plain-text performance report."""
        formula = self._config.profit_formula
        stats = calculate_dashboard_stats(trades, formula=formula)
        rrr = calculate_rrr_stats(
            trades, validate_placement=self._config.validate_stop_placement
        )
        violations = calculate_violation_stats(
            trades,
            dedupe_per_trade=self._config.dedupe_violations_per_trade,
            formula=formula,
        )
        day = generated_on or dt.datetime.now(dt.timezone.utc).date()

        lines = [
            "Trading Journal Report",
            f"Generated: {day.isoformat()}",
            "",
            "Performance Summary",
            _RULE,
            f"Total Trades: {stats.total_trades}",
            f"Win Rate: {stats.win_rate:.2f}%",
            f"Total Profit: ${stats.total_profit:.2f}",
            f"Average Profit: ${stats.average_profit:.2f}",
            f"Average Win: ${stats.average_win:.2f}",
            f"Average Loss: ${stats.average_loss:.2f}",
            f"Largest Win: ${stats.largest_win:.2f}",
            f"Largest Loss: ${stats.largest_loss:.2f}",
            f"Profit Factor: {format_profit_factor(stats.profit_factor)}",
            "",
            "Risk Management",
            _RULE,
            f"Average Planned RRR: {_fmt_ratio(rrr.average_planned_rrr)}",
            f"Average Achieved RRR: {_fmt_ratio(rrr.average_achieved_rrr)}",
            f"Trades Without Stop Loss: {rrr.trades_without_stop_loss}",
            "",
            "Rule Violations",
            _RULE,
            f"Total Violations: {violations.total_violations}",
        ]
        if violations.most_broken_rule.count:
            lines.append(
                f"Most Broken Rule: {violations.most_broken_rule.rule} "
                f"({violations.most_broken_rule.count} times)"
            )
        lines += [
            f"Win Rate With Violations: {violations.win_rate_with_violations:.2f}%",
            f"Win Rate Without Violations: {violations.win_rate_without_violations:.2f}%",
            "",
            "Recent Trades",
            _RULE,
        ]

        recent = newest_first(trades)[:RECENT_TRADES_LIMIT]
        if not recent:
            lines.append("No trades recorded yet")
        for trade in recent:
            profit = resolve_profit(trade, formula=formula)
            lines.append(
                f"{trade.date.isoformat()}  {trade.symbol:<8} "
                f"{trade.direction.value.upper():<5} "
                f"{trade.entry_price:.5f} -> {trade.exit_price:.5f}  "
                f"${profit:.2f}"
            )

        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    def _trade_to_row(self, trade: Trade) -> dict[str, Any]:
        """Flatten a trade into a CSV-friendly dict."""
        dp = self._dp

        def _r(value: float | None) -> float | str:
            return "" if value is None else round(value, dp)

        return {
            "id": trade.id,
            "date": trade.date.isoformat(),
            "symbol": trade.symbol,
            "direction": trade.direction.value,
            "entry_price": _r(trade.entry_price),
            "exit_price": _r(trade.exit_price),
            "stop_loss": _r(trade.stop_loss),
            "take_profit": _r(trade.take_profit),
            "lot_size": _r(trade.lot_size),
            "quantity": trade.quantity,
            "fees": _r(trade.fees),
            "profit": _r(trade.profit),
            "profit_percentage": _r(trade.profit_percentage),
            "strategy": trade.strategy,
            "setup": trade.setup,
            "time_frame": trade.time_frame,
            "rating": "" if trade.rating is None else trade.rating,
            "emotions": trade.emotions,
            "notes": trade.notes,
            "tags": ";".join(trade.tags),
            "violations": ";".join(v.label for v in trade.violations),
        }
