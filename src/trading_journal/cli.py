"""CLI entry point for the trading journal.

Every command reads a JSON export file produced by the journal.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from .core.config import Settings, load_settings
from .core.enums import ExportFormat
from .core.errors import ConfigError, ImportValidationError
from .core.models import Trade


def _settings(config: str | None) -> Settings:
    try:
        settings = load_settings(config_path=config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    from .observability.logger import setup_logging

    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return settings


def _load_trades(path: str) -> list[Trade]:
    from .journal.export import TradeExporter

    try:
        return TradeExporter().from_json(Path(path).read_text(encoding="utf-8"))
    except ImportValidationError as exc:
        raise click.ClickException(f"{path}: {exc}") from exc


@click.group()
def main() -> None:
    """Trading Journal analytics."""


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
@click.option("--output", "-o", default=None, help="Write the report to this file")
def report(file: str, config: str | None, output: str | None) -> None:
    """Print the text performance report."""
    from .journal.export import TradeExporter

    settings = _settings(config)
    text = TradeExporter(config=settings.analytics).text_report(_load_trades(file))
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Report written to {output}")
    else:
        click.echo(text, nl=False)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
@click.option("--json", "as_json", is_flag=True, help="Emit the dashboard as JSON")
def stats(file: str, config: str | None, as_json: bool) -> None:
    """Show dashboard statistics."""
    from .analytics.dashboard import build_dashboard
    from .analytics.stats import format_profit_factor

    settings = _settings(config)
    view = build_dashboard(_load_trades(file), settings.analytics)
    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        return

    s, streaks = view.stats, view.streaks
    click.echo(f"\n{'=' * 50}")
    click.echo("DASHBOARD")
    click.echo(f"{'=' * 50}")
    click.echo(f"  Total Trades:    {s.total_trades}")
    click.echo(f"  Win Rate:        {s.win_rate:.2f}%")
    click.echo(f"  Total Profit:    {s.total_profit:+.2f}")
    click.echo(f"  Profit Factor:   {format_profit_factor(s.profit_factor)}")
    click.echo(f"  Current Streak:  {streaks.current_streak:+d}")
    if streaks.is_on_tilt:
        click.echo(
            f"  WARNING: {-streaks.current_streak} losses in a row. Consider a break."
        )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.CSV.value,
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Write to this file instead of stdout")
def export(file: str, fmt: str, output: str | None) -> None:
    """Convert a JSON export to CSV or normalised JSON."""
    from .journal.export import TradeExporter

    trades = _load_trades(file)
    exporter = TradeExporter()
    if ExportFormat(fmt) == ExportFormat.CSV:
        text = exporter.to_csv(trades)
    else:
        text = exporter.to_json(trades)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Exported {len(trades)} trades to {output}")
    else:
        click.echo(text, nl=False)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
def check(file: str, config: str | None) -> None:
    """Cross-check stored profits against the calculator."""
    from .analytics.profit import find_profit_discrepancies

    settings = _settings(config)
    found = find_profit_discrepancies(
        _load_trades(file),
        tolerance=settings.analytics.discrepancy_tolerance,
        formula=settings.analytics.profit_formula,
    )
    if not found:
        click.echo("All stored profits match.")
        return

    for d in found:
        click.echo(
            f"  {d.trade_id or '<no id>'}: stored {d.stored:.2f}, "
            f"recomputed {d.recomputed:.2f} (diff {d.difference:+.2f})"
        )
    raise click.ClickException(f"{len(found)} trade(s) with mismatched profit")
