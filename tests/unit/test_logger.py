"""Tests for structured logging setup."""

import json
import logging

from trading_journal.observability.logger import (
    get_logger,
    get_session_id,
    new_session,
    setup_logging,
)


class TestSessionContext:
    def test_new_session_changes_id(self):
        first = new_session("user-1")
        assert get_session_id() == first
        assert new_session() != first


class TestSetupLogging:
    def test_json_output_includes_session(self, capsys, restore_root_logging):
        setup_logging(level="INFO", format="json")
        sid = new_session("user-7")
        logging.getLogger("trading_journal.test").info("journal loaded")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "journal loaded"
        assert entry["session_id"] == sid
        assert entry["user_id"] == "user-7"
        assert entry["level"] == "info"
        assert entry["logger"] == "trading_journal.test"

    def test_level_filters(self, capsys, restore_root_logging):
        setup_logging(level="WARNING", format="console")
        logging.getLogger("trading_journal.test").info("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_get_logger(self):
        assert get_logger("trading_journal.x") is not None
