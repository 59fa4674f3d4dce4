"""
Logging configuration.

Log records always go to a timestamped file under the configured log
directory. A rich console handler on stderr is added for the http transport,
or when enable_debug_console is set. Nothing is ever logged to stdout: the
stdio transport owns it.
"""

import logging
import logging.config
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from mcpscaffold.schema import LoggingSettings

# Config levels are named after the CLI's vocabulary, not logging's.
LEVELS = {
    "error": "ERROR",
    "warn": "WARNING",
    "info": "INFO",
    "debug": "DEBUG",
}


class HealthCheckFilter(logging.Filter):
    """Suppress uvicorn access lines for the /health endpoint."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "/health" in message and "GET" in message:
                return False
        return True


def stderr_handler() -> RichHandler:
    """Rich console handler bound to stderr."""
    return RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )


def log_file_path(log_dir: str | Path) -> Path:
    """Return logs/mcp-server-<timestamp>.log under log_dir."""
    timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    return Path(log_dir) / f"mcp-server-{timestamp}.log"


def get_logging_config(
    settings: LoggingSettings,
    log_file: Path | None = None,
    enable_console: bool = False,
) -> dict[str, Any]:
    """
    Build a dictConfig mapping.

    Args:
        settings: Logging section of the server config
        log_file: File to write to; None disables file output
        enable_console: Add the stderr console handler
    """
    level = LEVELS[settings.level]
    handlers: dict[str, Any] = {}

    if log_file is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": str(log_file),
            "encoding": "utf-8",
            "filters": ["health_check_filter"],
        }

    if enable_console or settings.enable_debug_console:
        handlers["console"] = {
            "()": stderr_handler,
            "filters": ["health_check_filter"],
        }

    if not handlers:
        handlers["null"] = {"class": "logging.NullHandler"}

    names = list(handlers)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": HealthCheckFilter,
            },
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {
            "mcpscaffold": {
                "handlers": names,
                "level": level,
                "propagate": False,
            },
            "mcp": {
                "handlers": names,
                "level": "WARNING",
                "propagate": False,
            },
            "uvicorn": {
                "handlers": names,
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": names,
                "level": "INFO",
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": names,
        },
    }


def configure_logging(
    settings: LoggingSettings,
    enable_console: bool = False,
    log_to_file: bool = True,
) -> Path | None:
    """
    Apply the logging configuration.

    Returns:
        Path of the log file, or None if file output is disabled
    """
    log_file = None
    if log_to_file:
        log_file = log_file_path(settings.log_dir)
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_config(settings, log_file, enable_console))
    return log_file
