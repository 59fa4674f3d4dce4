"""
Base classes for the tool interface.

This module defines the core abstractions for tools:
- Tool: Abstract base class that all tools must implement
- ToolArgs: Base model for a tool's input schema
- ToolContext: Shared dependencies handed to every tool at construction
- ToolResponse: The {success, message, data} envelope every call returns

Design Principles:
    - Tools receive validated arguments - validation happens before execute()
    - Tools return ToolResponse for expected outcomes
    - Unexpected faults may be raised; the invocation wrapper normalizes them
    - Tools are registered by name - the registry handles lookup
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from mcpscaffold.schema import ServerConfig


class ToolArgs(BaseModel):
    """
    Base class for tool input schemas.

    Validation is strict: unknown fields are rejected and values are never
    coerced (a "1" is not an int, 1 is not a str).
    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


@dataclass(frozen=True)
class ToolResponse:
    """
    Normalized envelope returned by every tool invocation.

    When success is True, data holds the tool's documented output.
    When success is False, message is a caller-safe explanation and data is None.

    Attributes:
        success: Whether the invocation succeeded
        message: Human-readable summary
        data: Tool output (success only)
    """

    success: bool
    message: str
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ToolResponse":
        """Create a successful response."""
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "ToolResponse":
        """Create a failed response."""
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict; failures carry no data key."""
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.success:
            result["data"] = self.data
        return result


@dataclass(frozen=True)
class ToolContext:
    """
    Process-wide dependencies shared by all tools.

    Built once at startup and passed unchanged into every tool constructor.
    Tools must not reach it any other way.

    Attributes:
        config: The server configuration, if one was loaded
        resources: Shared clients or services keyed by name
    """

    config: "ServerConfig | None" = None
    resources: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "resources", MappingProxyType(dict(self.resources)))


class Tool(ABC):
    """
    Abstract base class for all tools.

    Each tool:
    - Has a unique name (e.g., "echo", "ping")
    - Has a description shown to callers
    - Declares its input schema as a ToolArgs subclass
    - Implements the async execute() method

    Subclasses must set:
    - name, description: class attributes
    - input_model: the ToolArgs subclass describing accepted arguments
    - execute(): the tool's logic

    Example:
        class ShoutArgs(ToolArgs):
            text: str = Field(description="Text to shout")

        class ShoutTool(Tool):
            name = "shout"
            description = "Upper-case the input"
            input_model = ShoutArgs

            async def execute(self, args: ShoutArgs) -> ToolResponse:
                return ToolResponse.ok("Shouted", {"text": args.text.upper()})
    """

    name: ClassVar[str]
    description: ClassVar[str]
    input_model: ClassVar[type[ToolArgs]]

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def get_input_schema(self) -> type[ToolArgs]:
        """Return the model arguments are validated against."""
        return self.input_model

    def input_json_schema(self) -> dict[str, Any]:
        """Return the JSON Schema advertised to callers."""
        return self.get_input_schema().model_json_schema()

    @abstractmethod
    async def execute(self, args: Any) -> ToolResponse:
        """
        Run the tool.

        Args:
            args: An instance of input_model, already validated

        Returns:
            ToolResponse with the outcome

        Note:
            - Use ToolResponse.fail() for expected failures
            - Anything raised is caught, logged and reported as a generic failure
        """
        ...

    def __repr__(self) -> str:
        """String representation of the tool."""
        return f"<Tool: {getattr(self, 'name', '?')}>"
