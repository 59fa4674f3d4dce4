"""
Schema definitions for mcp-scaffold.

This module defines the Pydantic models used throughout the server:
- ServerConfig and its sections: startup settings
- TransportConfig: which transport to open and where
- ToolDescriptor: what a tool advertises to remote callers

Design Decisions:
    - All models reject unknown fields (extra="forbid")
    - Models are immutable (frozen=True); settings are read once at startup
    - Invalid settings surface as ConfigurationError, never as a raw
      pydantic ValidationError
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mcpscaffold import __version__
from mcpscaffold.errors import ConfigurationError

VALID_LOG_LEVELS = ("error", "warn", "info", "debug")


# =============================================================================
# Enums
# =============================================================================


class TransportType(str, Enum):
    """Transport a server instance listens on."""

    STDIO = "stdio"
    HTTP = "http"


# =============================================================================
# Configuration Models
# =============================================================================


class ServerInfo(BaseModel):
    """Identity reported to clients during initialize."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="mcp-server", min_length=1)
    version: str = Field(default=__version__, min_length=1)


class McpSettings(BaseModel):
    """
    Protocol-level limits.

    Attributes:
        max_response_size: Largest serialized envelope, in bytes, a tool call may return
        default_page_size: Number of tools per tools/list page
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_response_size: int = Field(
        default=100_000,
        description="Largest serialized envelope in bytes",
        gt=0,
    )
    default_page_size: int = Field(
        default=50,
        description="Number of tools per tools/list page",
        gt=0,
    )


class LoggingSettings(BaseModel):
    """
    Logging settings.

    Attributes:
        level: One of error, warn, info, debug
        enable_debug_console: Mirror log records to stderr even on stdio
        log_dir: Directory for the per-process log file
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = Field(default="info", description="Log level")
    enable_debug_console: bool = Field(
        default=False,
        description="Mirror log records to stderr",
    )
    log_dir: str = Field(default="logs", description="Directory for log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept the levels the CLI documents."""
        v = v.lower()
        if v not in VALID_LOG_LEVELS:
            msg = f"Invalid log level: {v}"
            raise ValueError(msg)
        return v


class ServerConfig(BaseModel):
    """Complete server configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    server: ServerInfo = Field(default_factory=ServerInfo)
    mcp: McpSettings = Field(default_factory=McpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class TransportConfig(BaseModel):
    """
    Transport selection.

    Attributes:
        type: stdio or http
        host: Bind address for http
        port: Bind port for http (ignored for stdio)
        stateless: Serve http without MCP sessions (ignored for stdio)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: TransportType = TransportType.STDIO
    host: str = "127.0.0.1"
    port: int | None = Field(default=None, gt=0, le=65535)
    stateless: bool = False


# =============================================================================
# Tool Models
# =============================================================================


class ToolDescriptor(BaseModel):
    """
    What a tool advertises to callers.

    Created once per tool when the registry is initialized.

    Attributes:
        name: Unique tool name, used as the tools/call key
        description: Human-readable description
        input_schema: JSON Schema for the tool's arguments
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    input_schema: dict[str, Any] = Field(default_factory=dict)

    def to_listing(self) -> dict[str, Any]:
        """Render as an entry of a tools/list result."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


# =============================================================================
# Loading Helpers
# =============================================================================


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay LOG_LEVEL and DEBUG onto raw config data."""
    logging_data = dict(data.get("logging") or {})
    if os.getenv("LOG_LEVEL"):
        logging_data["level"] = os.environ["LOG_LEVEL"]
    if os.getenv("DEBUG") is not None:
        logging_data["enable_debug_console"] = os.environ["DEBUG"].lower() == "true"
    if logging_data:
        data = {**data, "logging": logging_data}
    return data


def parse_config(data: dict[str, Any] | None) -> ServerConfig:
    """
    Validate raw configuration data.

    Args:
        data: Mapping as read from YAML (None means all defaults)

    Returns:
        Validated ServerConfig

    Raises:
        ConfigurationError: If the data doesn't match the schema
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(message="Configuration must be a mapping")
    try:
        return ServerConfig.model_validate(_apply_env_overrides(data))
    except ValidationError as e:
        raise ConfigurationError(
            message=f"Invalid configuration: {e.error_count()} error(s)",
            suggestion=str(e),
        ) from e


def load_config(path: Path | str | None = None) -> ServerConfig:
    """
    Load configuration from defaults, an optional YAML file and the environment.

    Args:
        path: Optional path to a YAML file

    Returns:
        Validated ServerConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if path is None:
        return parse_config({})

    path = Path(path)
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(message=f"Cannot read config file: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(message=f"Config file is not valid YAML: {path}") from e

    return parse_config(data)


def load_config_from_string(content: str) -> ServerConfig:
    """Load configuration from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(message="Configuration is not valid YAML") from e
    return parse_config(data)
