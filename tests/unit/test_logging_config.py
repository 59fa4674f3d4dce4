"""
Unit tests for logging configuration.

Only the dictConfig mapping is checked here; applying it would detach the
mcpscaffold logger from pytest's capture handler.
"""

import logging
from pathlib import Path

import pytest

from mcpscaffold.logging_config import (
    LEVELS,
    HealthCheckFilter,
    get_logging_config,
    log_file_path,
    stderr_handler,
)
from mcpscaffold.schema import LoggingSettings


def _record(name: str, message: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, message, None, None)


class TestGetLoggingConfig:
    """Tests for get_logging_config."""

    @pytest.mark.parametrize("level", ["error", "warn", "info", "debug"])
    def test_level_mapping(self, level: str) -> None:
        """Config level names map onto logging level names."""
        config = get_logging_config(LoggingSettings(level=level))
        assert config["loggers"]["mcpscaffold"]["level"] == LEVELS[level]
        assert isinstance(logging.getLevelName(LEVELS[level]), int)

    def test_file_handler(self, temp_dir: Path) -> None:
        """A log file gives a file handler writing to it."""
        log_file = temp_dir / "server.log"
        config = get_logging_config(LoggingSettings(), log_file=log_file)
        handler = config["handlers"]["file"]
        assert handler["class"] == "logging.FileHandler"
        assert handler["filename"] == str(log_file)
        assert "console" not in config["handlers"]

    def test_console_on_request(self) -> None:
        """enable_console adds the stderr handler."""
        config = get_logging_config(LoggingSettings(), enable_console=True)
        assert config["handlers"]["console"]["()"] is stderr_handler

    def test_console_from_settings(self) -> None:
        """enable_debug_console in settings also adds it."""
        config = get_logging_config(LoggingSettings(enable_debug_console=True))
        assert "console" in config["handlers"]

    def test_null_handler_when_nothing_enabled(self) -> None:
        """With no outputs, records go nowhere instead of to stderr."""
        config = get_logging_config(LoggingSettings())
        assert list(config["handlers"]) == ["null"]
        assert config["loggers"]["mcpscaffold"]["handlers"] == ["null"]

    def test_package_logger_does_not_propagate(self, temp_dir: Path) -> None:
        """Package records are handled once, not again by the root logger."""
        config = get_logging_config(LoggingSettings(), log_file=temp_dir / "x.log")
        assert config["loggers"]["mcpscaffold"]["propagate"] is False
        assert config["loggers"]["uvicorn.access"]["propagate"] is False

    def test_sdk_logger_routed(self, temp_dir: Path) -> None:
        """The mcp SDK logs warnings and up through the same handlers."""
        config = get_logging_config(LoggingSettings(), log_file=temp_dir / "x.log")
        sdk = config["loggers"]["mcp"]
        assert sdk["handlers"] == ["file"]
        assert sdk["level"] == "WARNING"
        assert sdk["propagate"] is False

    def test_no_stdout_handler(self, temp_dir: Path) -> None:
        """No handler writes to stdout."""
        config = get_logging_config(
            LoggingSettings(), log_file=temp_dir / "x.log", enable_console=True
        )
        for handler in config["handlers"].values():
            assert handler.get("class") != "logging.StreamHandler"

    def test_stderr_handler_targets_stderr(self) -> None:
        """The console handler is bound to stderr."""
        assert stderr_handler().console.stderr is True


class TestHealthCheckFilter:
    """Tests for HealthCheckFilter."""

    def test_drops_health_access_lines(self) -> None:
        """GET /health access lines are dropped."""
        record = _record("uvicorn.access", '127.0.0.1:5000 - "GET /health HTTP/1.1" 200')
        assert HealthCheckFilter().filter(record) is False

    def test_keeps_other_access_lines(self) -> None:
        """Other requests are kept."""
        record = _record("uvicorn.access", '127.0.0.1:5000 - "POST /mcp HTTP/1.1" 200')
        assert HealthCheckFilter().filter(record) is True

    def test_keeps_application_records(self) -> None:
        """Records from other loggers are never filtered."""
        record = _record("mcpscaffold.server", "GET /health mentioned in passing")
        assert HealthCheckFilter().filter(record) is True


class TestLogFilePath:
    """Tests for log_file_path."""

    def test_naming(self, temp_dir: Path) -> None:
        """Files are named mcp-server-<timestamp>.log under the log dir."""
        path = log_file_path(temp_dir)
        assert path.parent == temp_dir
        assert path.name.startswith("mcp-server-")
        assert path.suffix == ".log"
        assert ":" not in path.name

    def test_string_dir(self) -> None:
        """A string directory is accepted."""
        assert log_file_path("logs").parent == Path("logs")
