"""
Exception hierarchy for mcp-scaffold.

All mcp-scaffold exceptions inherit from McpScaffoldError, allowing callers to
catch every scaffold-specific exception with a single except clause.

Exception Categories:
    - ToolNotFoundError: No tool registered under the requested name
    - ToolInvalidArgsError: Arguments failed input-schema validation
    - ToolExecutionError: Tool logic raised during execute()
    - ConfigurationError: Invalid settings or tool list at startup (fatal)

Only ConfigurationError is meant to escape to the caller. Everything raised
below the dispatch boundary is turned into a ToolResponse envelope.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Tool errors: 2xxx
ERROR_TOOL_NOT_FOUND = 2001
ERROR_TOOL_INVALID_ARGS = 2002
ERROR_TOOL_EXECUTION_FAILED = 2003

# Configuration errors: 3xxx
ERROR_CONFIG_INVALID = 3001
ERROR_CONFIG_DUPLICATE_TOOL = 3002
ERROR_CONFIG_INVALID_TOOL = 3003


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class McpScaffoldError(Exception):
    """
    Base exception for all mcp-scaffold errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Tool Errors
# =============================================================================


@dataclass
class ToolError(McpScaffoldError):
    """
    Base class for per-invocation tool errors.

    These never stop the process. The dispatcher reports them to the caller
    as a failed ToolResponse.

    Attributes:
        tool: Name of the tool involved
    """

    tool: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context["tool"] = self.tool


@dataclass
class ToolNotFoundError(ToolError):
    """Raised when no tool is registered under the requested name."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"unknown capability: {self.tool}"
        if self.code == 0:
            self.code = ERROR_TOOL_NOT_FOUND
        if not self.suggestion:
            self.suggestion = "Call tools/list to see the available tools"
        super().__post_init__()


@dataclass
class ToolInvalidArgsError(ToolError):
    """Raised when arguments do not match the tool's input schema."""

    validation_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid arguments for {self.tool}: {self.validation_error}"
        if self.code == 0:
            self.code = ERROR_TOOL_INVALID_ARGS
        super().__post_init__()
        self.context["validation_error"] = self.validation_error


@dataclass
class ToolExecutionError(ToolError):
    """
    Describes a fault raised by a tool's execute().

    The invocation wrapper builds one of these for the server log only. Its
    underlying_error may hold internal detail and is never sent to callers.
    """

    underlying_error: str = ""
    error_type: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Tool {self.tool} failed: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_TOOL_EXECUTION_FAILED
        super().__post_init__()
        self.context.update({
            "underlying_error": self.underlying_error,
            "error_type": self.error_type,
        })


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class ConfigurationError(McpScaffoldError):
    """
    Raised at startup when settings or the tool list are invalid.

    This is the only fatal error class: the server refuses to start rather
    than run with an ambiguous registry or bad settings.
    """

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID


@dataclass
class DuplicateToolError(ConfigurationError):
    """Raised when two tools in the registration list share a name."""

    tool: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Duplicate tool name: {self.tool}"
        if self.code == 0:
            self.code = ERROR_CONFIG_DUPLICATE_TOOL
        if not self.suggestion:
            self.suggestion = "Give every tool in the registration list a unique name"
        super().__post_init__()
        self.context["tool"] = self.tool


@dataclass
class InvalidToolError(ConfigurationError):
    """Raised when a tool does not satisfy the tool contract."""

    tool: str = ""
    reason: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid tool {self.tool!r}: {self.reason}"
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID_TOOL
        super().__post_init__()
        self.context.update({
            "tool": self.tool,
            "reason": self.reason,
        })
