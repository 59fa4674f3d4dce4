"""
Unit tests for configuration and descriptor schemas.

Tests cover:
- ServerConfig defaults and validation
- Environment overrides
- YAML loading helpers
- ToolDescriptor and TransportConfig
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mcpscaffold import __version__
from mcpscaffold.errors import ConfigurationError
from mcpscaffold.schema import (
    LoggingSettings,
    McpSettings,
    ServerConfig,
    ToolDescriptor,
    TransportConfig,
    TransportType,
    load_config,
    load_config_from_string,
    parse_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's LOG_LEVEL/DEBUG out of these tests."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


# =============================================================================
# ServerConfig Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig and its sections."""

    def test_defaults(self) -> None:
        """Defaults match the documented values."""
        config = ServerConfig()
        assert config.server.name == "mcp-server"
        assert config.server.version == __version__
        assert config.mcp.max_response_size == 100_000
        assert config.mcp.default_page_size == 50
        assert config.logging.level == "info"
        assert config.logging.enable_debug_console is False

    def test_is_frozen(self) -> None:
        """Config can't be changed after startup."""
        config = ServerConfig()
        with pytest.raises(ValidationError):
            config.mcp = McpSettings()  # type: ignore[misc]

    def test_rejects_unknown_fields(self) -> None:
        """Typos in config keys are errors."""
        with pytest.raises(ValidationError):
            ServerConfig.model_validate({"mcp": {"max_respnse_size": 10}})

    @pytest.mark.parametrize("field", ["max_response_size", "default_page_size"])
    def test_sizes_must_be_positive(self, field: str) -> None:
        """Non-positive sizes are rejected."""
        with pytest.raises(ValidationError):
            McpSettings.model_validate({field: 0})

    def test_log_level_normalized(self) -> None:
        """Log level is case-insensitive."""
        assert LoggingSettings(level="DEBUG").level == "debug"

    def test_invalid_log_level(self) -> None:
        """Unknown log levels are rejected."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingSettings(level="verbose")


# =============================================================================
# Loading Tests
# =============================================================================


class TestLoadConfig:
    """Tests for config loading helpers."""

    def test_no_path_gives_defaults(self) -> None:
        """Without a file, defaults are used."""
        assert load_config() == ServerConfig()

    def test_load_from_file(self, temp_dir: Path) -> None:
        """Values in the YAML file override defaults."""
        path = temp_dir / "config.yaml"
        path.write_text(
            """
server:
  name: test-server
mcp:
  default_page_size: 5
logging:
  level: debug
"""
        )
        config = load_config(path)
        assert config.server.name == "test-server"
        assert config.mcp.default_page_size == 5
        assert config.mcp.max_response_size == 100_000
        assert config.logging.level == "debug"

    def test_empty_file_gives_defaults(self, temp_dir: Path) -> None:
        """An empty YAML file is the same as no file."""
        path = temp_dir / "empty.yaml"
        path.write_text("")
        assert load_config(path) == ServerConfig()

    def test_missing_file(self, temp_dir: Path) -> None:
        """A missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(temp_dir / "nope.yaml")

    def test_invalid_yaml(self) -> None:
        """Broken YAML is a configuration error."""
        with pytest.raises(ConfigurationError, match="not valid YAML"):
            load_config_from_string("server: [unclosed")

    def test_not_a_mapping(self) -> None:
        """Top-level YAML must be a mapping."""
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config_from_string("- a\n- b\n")

    def test_invalid_values(self) -> None:
        """Schema violations become ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            parse_config({"mcp": {"max_response_size": -1}})

    def test_env_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LOG_LEVEL overrides the file."""
        monkeypatch.setenv("LOG_LEVEL", "warn")
        config = load_config_from_string("logging:\n  level: debug\n")
        assert config.logging.level == "warn"

    def test_env_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An invalid LOG_LEVEL is caught at startup."""
        monkeypatch.setenv("LOG_LEVEL", "loud")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_env_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """DEBUG=true enables the debug console."""
        monkeypatch.setenv("DEBUG", "true")
        assert load_config().logging.enable_debug_console is True

        monkeypatch.setenv("DEBUG", "no")
        assert load_config().logging.enable_debug_console is False


# =============================================================================
# Descriptor / Transport Tests
# =============================================================================


class TestToolDescriptor:
    """Tests for ToolDescriptor."""

    def test_to_listing(self) -> None:
        """Listing uses the wire field names."""
        descriptor = ToolDescriptor(
            name="echo",
            description="Echo",
            input_schema={"type": "object"},
        )
        assert descriptor.to_listing() == {
            "name": "echo",
            "description": "Echo",
            "inputSchema": {"type": "object"},
        }

    def test_name_required(self) -> None:
        """Empty names are rejected."""
        with pytest.raises(ValidationError):
            ToolDescriptor(name="", description="x")


class TestTransportConfig:
    """Tests for TransportConfig."""

    def test_defaults(self) -> None:
        """stdio is the default transport."""
        transport = TransportConfig()
        assert transport.type == TransportType.STDIO
        assert transport.port is None

    def test_http(self) -> None:
        """Transport type parses from its string value."""
        transport = TransportConfig(type="http", port=8080)
        assert transport.type == TransportType.HTTP
        assert transport.port == 8080

    def test_invalid_port(self) -> None:
        """Ports outside 1-65535 are rejected."""
        with pytest.raises(ValidationError):
            TransportConfig(type="http", port=70000)
