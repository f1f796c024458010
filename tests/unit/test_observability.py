"""Unit tests for structlog configuration."""

from __future__ import annotations

import json

import pytest
import structlog

from shopgen.observability import configure_logging, get_logger

pytestmark = pytest.mark.unit


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_lines_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON mode writes one object per event to stderr."""
        configure_logging("INFO", json=True)

        get_logger("shopgen.test", step="load").info("table_loaded", table="Orders", rows=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "table_loaded"
        assert event["step"] == "load"
        assert event["rows"] == 3
        assert event["level"] == "info"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Events below the level are dropped."""
        configure_logging("WARNING", json=True)

        structlog.get_logger("shopgen.test").info("quiet")

        assert capsys.readouterr().err == ""

    def test_level_case_insensitive(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Level names are matched case-insensitively."""
        configure_logging("debug", json=True)

        structlog.get_logger("shopgen.test").debug("loud")

        assert "loud" in capsys.readouterr().err

    def test_unknown_level(self) -> None:
        """Unknown levels are rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("CHATTY")
