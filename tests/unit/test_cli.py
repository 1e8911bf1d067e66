"""Tests for the trading-journal CLI."""

import json

import pytest
from click.testing import CliRunner

from trading_journal.cli import main
from trading_journal.journal.export import TradeExporter

from tests.conftest import make_trade


@pytest.fixture(autouse=True)
def _logging(restore_root_logging):
    yield


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def export_file(tmp_path, sample_trades):
    path = tmp_path / "trades.json"
    path.write_text(TradeExporter().to_json(sample_trades))
    return path


class TestReport:
    def test_prints_report(self, runner, export_file):
        result = runner.invoke(main, ["report", str(export_file)])
        assert result.exit_code == 0, result.output
        assert "Performance Summary" in result.output
        assert "Total Trades: 5" in result.output

    def test_writes_file(self, runner, export_file, tmp_path):
        out = tmp_path / "report.txt"
        result = runner.invoke(main, ["report", str(export_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Rule Violations" in out.read_text(encoding="utf-8")

    def test_bad_import_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"not": "a list"}')
        result = runner.invoke(main, ["report", str(path)])
        assert result.exit_code != 0
        assert "Expected an array" in result.output

    def test_bad_config(self, runner, export_file, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("[analytics")
        result = runner.invoke(main, ["report", str(export_file), "--config", str(config)])
        assert result.exit_code != 0
        assert "Invalid config file" in result.output

    def test_invalid_config_value(self, runner, export_file, tmp_path):
        config = tmp_path / "zero.toml"
        config.write_text("[analytics]\ntilt_threshold = 0\n")
        result = runner.invoke(main, ["stats", str(export_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "Invalid config file" in result.output
        assert not isinstance(result.exception, ValueError)


class TestStats:
    def test_summary(self, runner, export_file):
        result = runner.invoke(main, ["stats", str(export_file)])
        assert result.exit_code == 0, result.output
        assert "Win Rate:        40.00%" in result.output
        assert "WARNING: 3 losses in a row" in result.output

    def test_all_wins_shows_infinite_profit_factor(self, runner, tmp_path):
        path = tmp_path / "wins.json"
        path.write_text(json.dumps([{"symbol": "EURUSD", "profit": 10.0}]))
        result = runner.invoke(main, ["stats", str(path)])
        assert result.exit_code == 0, result.output
        assert "Profit Factor:   ∞" in result.output

    def test_json(self, runner, export_file):
        result = runner.invoke(main, ["stats", str(export_file), "--json"])
        assert result.exit_code == 0, result.output
        start = result.output.index("{")
        data = json.loads(result.output[start:])
        assert data["stats"]["total_trades"] == 5
        assert data["streaks"]["is_on_tilt"] is True


class TestExport:
    def test_csv(self, runner, export_file):
        result = runner.invoke(main, ["export", str(export_file), "--format", "csv"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0].startswith("id,date,symbol")

    def test_json_to_file(self, runner, export_file, tmp_path):
        out = tmp_path / "copy.json"
        result = runner.invoke(main, ["export", str(export_file), "--format", "json", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "Exported 5 trades" in result.output
        assert len(json.loads(out.read_text())) == 5

    def test_unknown_format(self, runner, export_file):
        result = runner.invoke(main, ["export", str(export_file), "--format", "xml"])
        assert result.exit_code != 0


class TestCheck:
    def test_consistent_file(self, runner, tmp_path):
        path = tmp_path / "ok.json"
        path.write_text(TradeExporter().to_json([make_trade(profit=500.0)]))
        result = runner.invoke(main, ["check", str(path)])
        assert result.exit_code == 0, result.output
        assert "All stored profits match." in result.output

    def test_mismatch_fails(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(TradeExporter().to_json([make_trade(profit=10.0, id="t-9")]))
        result = runner.invoke(main, ["check", str(path)])
        assert result.exit_code == 1
        assert "t-9" in result.output
        assert "1 trade(s) with mismatched profit" in result.output
