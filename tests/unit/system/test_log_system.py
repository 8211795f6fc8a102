"""Tests for centralized logging configuration."""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from tradejournal.system import LoggerFactory, LoggingConfig
from tradejournal.system.log_system import _SystemLogFormatters


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before and after each test."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


def test_default_configuration():
    """Test logger factory with default configuration."""
    logger = LoggerFactory.get_logger()

    assert LoggerFactory.is_configured()
    assert hasattr(logger, "info")

    config = LoggerFactory.get_config()
    assert config.level == "INFO"
    assert config.format == "console"
    assert config.enable_file is False


def test_explicit_configuration():
    """Test configuring logger factory explicitly."""
    LoggerFactory.configure(LoggingConfig(level="DEBUG", format="json"))

    assert LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "DEBUG"
    assert LoggerFactory.get_config().format == "json"


def test_auto_configure_on_first_use():
    """Test that logger auto-configures with defaults on first use."""
    assert not LoggerFactory.is_configured()

    LoggerFactory.get_logger("tradejournal.test")

    assert LoggerFactory.is_configured()


def test_file_logging_writes_json_lines(tmp_path):
    """File outputs use JSON so they are easy to parse programmatically."""
    log_file = tmp_path / "journal.log"
    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=log_file, file_level="INFO", file_rotation=False))

    logger = LoggerFactory.get_logger()
    logger.info("journal.trade_recorded", trade_id="t-1", pnl="99")

    record = json.loads(log_file.read_text().strip())
    assert record["event"] == "journal.trade_recorded"
    assert record["trade_id"] == "t-1"
    assert record["pnl"] == "99"
    assert "log_timestamp" in record


def test_file_logging_without_path_uses_default(tmp_path, monkeypatch):
    """Test that enabling file logging without path uses default."""
    monkeypatch.chdir(tmp_path)

    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=None))

    assert str(LoggerFactory.get_config().file_path) == "logs/tradejournal.log"
    assert (tmp_path / "logs").is_dir()


def test_file_logging_creates_directory(tmp_path):
    """Test that file logging creates parent directories."""
    log_file = tmp_path / "logs" / "nested" / "journal.log"
    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=log_file, file_rotation=False))

    LoggerFactory.get_logger().warning("report.failed", error="boom")

    assert log_file.exists()


def test_rotating_file_handler(tmp_path):
    """Test rotating file handler configuration."""
    log_file = tmp_path / "rotating.log"
    LoggerFactory.configure(
        LoggingConfig(enable_file=True, file_path=log_file, max_file_size_mb=1, backup_count=2)
    )

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]

    assert len(handlers) == 1
    assert handlers[0].maxBytes == 1024 * 1024
    assert handlers[0].backupCount == 2


def test_file_level_independent_from_console_level(tmp_path):
    """Test that file log level can be different from console level."""
    log_file = tmp_path / "debug.log"
    LoggerFactory.configure(
        LoggingConfig(level="WARNING", enable_file=True, file_path=log_file, file_level="DEBUG", file_rotation=False)
    )

    logger = LoggerFactory.get_logger()
    logger.debug("debug message")
    logger.warning("warning message")

    events = [json.loads(line)["event"] for line in log_file.read_text().splitlines() if line.strip()]
    assert events == ["debug message", "warning message"]


def test_reset_clears_configuration():
    """Test that reset clears configuration."""
    LoggerFactory.configure(LoggingConfig(level="ERROR"))

    LoggerFactory.reset()

    assert not LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "INFO"


class TestConsoleFormatting:
    """Test the journal/report console formatters."""

    def test_journal_event_line(self):
        line = _SystemLogFormatters.format_system_log(
            "journal.trade_recorded",
            {"trade_id": "t-1", "ticker": "ES", "portfolio_id": "p-main", "pnl": "995.50"},
            "INFO",
            "250301-120000.00",
        )

        assert line is not None
        assert "Trade Recorded" in line
        assert "t-1" in line
        assert "ES" in line
        assert "995.50" in line

    def test_journal_event_without_pnl(self):
        line = _SystemLogFormatters.format_system_log(
            "journal.trade_recorded", {"trade_id": "t-2", "pnl": None}, "INFO", "ts"
        )

        assert line is not None
        assert "P&L" not in line

    def test_report_event_line(self):
        line = _SystemLogFormatters.format_system_log(
            "report.started", {"path": "journal.json", "trades": 3}, "INFO", "ts"
        )

        assert line is not None
        assert "Report" in line
        assert "journal.json" in line

    def test_other_events_use_fallback(self):
        assert _SystemLogFormatters.format_system_log("cache.miss", {}, "INFO", "ts") is None
