"""
Tool registry for mcp-scaffold.

The registry is the single owner of the name -> tool mapping. It is built
once at startup from an explicit, reviewed list of tool classes and is
read-only afterwards, so concurrent dispatches can share it without locks.

Usage:
    registry = ToolRegistry()
    registry.initialize(ToolContext())

    entry = registry.get_optional("echo")
    response = await entry.handler({"message": "hi"})
"""

import logging
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mcpscaffold.errors import (
    ConfigurationError,
    DuplicateToolError,
    InvalidToolError,
    ToolNotFoundError,
)
from mcpscaffold.schema import McpSettings, ToolDescriptor
from mcpscaffold.tools.base import Tool, ToolArgs, ToolContext
from mcpscaffold.tools.echo import EchoTool
from mcpscaffold.tools.ping import PingTool
from mcpscaffold.tools.wrapper import ToolHandler, bind

logger = logging.getLogger(__name__)

ToolFactory = Callable[[ToolContext], Tool]
TransportHook = Callable[[str, str, dict[str, Any], ToolHandler], None]

# Tools are registered by hand so every addition goes through review.
BUILTIN_TOOLS: tuple[ToolFactory, ...] = (
    EchoTool,
    PingTool,
)

_TOOL_NAME = re.compile(r"^\S+$")


@dataclass(frozen=True)
class RegisteredTool:
    """
    One row of the registry table.

    Attributes:
        tool: The tool instance
        descriptor: What the tool advertises to callers
        handler: Validating, fault-tolerant entry point for the tool
    """

    tool: Tool
    descriptor: ToolDescriptor
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


def _build_tool(factory: ToolFactory, context: ToolContext) -> Tool:
    """Construct one tool, reporting any failure as InvalidToolError."""
    label = getattr(factory, "__name__", repr(factory))
    if not callable(factory):
        raise InvalidToolError(tool=label, reason="not a tool class or factory")
    try:
        tool = factory(context)
    except Exception as e:
        raise InvalidToolError(
            tool=label,
            reason=f"construction failed: {type(e).__name__}: {e}",
        ) from e
    if not isinstance(tool, Tool):
        raise InvalidToolError(tool=label, reason="factory did not return a Tool")
    return tool


def _check_tool(tool: Tool) -> None:
    """Raise InvalidToolError if a tool doesn't satisfy the contract."""
    name = getattr(tool, "name", None)
    if not isinstance(name, str) or not _TOOL_NAME.match(name):
        raise InvalidToolError(
            tool=str(name),
            reason="name must be a non-empty string without whitespace",
        )

    description = getattr(tool, "description", None)
    if not isinstance(description, str) or not description.strip():
        raise InvalidToolError(tool=name, reason="description must be a non-empty string")

    schema = getattr(tool, "input_model", None)
    if not (isinstance(schema, type) and issubclass(schema, ToolArgs)):
        raise InvalidToolError(tool=name, reason="input_model must be a ToolArgs subclass")


class ToolRegistry:
    """
    Registry for looking up tools by name.

    Attributes:
        _tools: Read-only mapping of tool names to registry rows, in
            registration order (empty until initialize() runs)
        context: The shared context every tool was built with
    """

    def __init__(self) -> None:
        """Create an empty, uninitialized registry."""
        self._tools: Mapping[str, RegisteredTool] = MappingProxyType({})
        self.context: ToolContext | None = None

    @property
    def initialized(self) -> bool:
        return self.context is not None

    def initialize(
        self,
        context: ToolContext,
        factories: Sequence[ToolFactory] | None = None,
    ) -> None:
        """
        Build every tool and populate the table.

        Either all tools are registered or none are.

        Args:
            context: Shared dependencies passed to each tool constructor
            factories: Tool classes (or factories) to build; defaults to
                BUILTIN_TOOLS

        Raises:
            DuplicateToolError: If two tools share a name
            InvalidToolError: If a tool can't be built or doesn't satisfy the
                tool contract
            ConfigurationError: If the registry was already initialized
        """
        if self.initialized:
            raise ConfigurationError(message="Tool registry is already initialized")

        if factories is None:
            factories = BUILTIN_TOOLS

        max_size = (context.config.mcp if context.config else McpSettings()).max_response_size

        table: dict[str, RegisteredTool] = {}
        for factory in factories:
            tool = _build_tool(factory, context)
            _check_tool(tool)
            if tool.name in table:
                raise DuplicateToolError(tool=tool.name)

            try:
                input_schema = tool.input_json_schema()
            except Exception as e:
                raise InvalidToolError(
                    tool=tool.name,
                    reason=f"input schema can't be rendered: {e}",
                ) from e

            descriptor = ToolDescriptor(
                name=tool.name,
                description=tool.description,
                input_schema=input_schema,
            )
            table[tool.name] = RegisteredTool(
                tool=tool,
                descriptor=descriptor,
                handler=bind(tool, max_size),
            )

        self._tools = MappingProxyType(table)
        self.context = context
        logger.info(
            "ToolRegistry initialized with %d tools",
            len(table),
            extra={"tools": list(table)},
        )

    def get(self, name: str) -> RegisteredTool:
        """
        Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool with that name is registered
        """
        entry = self._tools.get(name)
        if entry is None:
            raise ToolNotFoundError(tool=name)
        return entry

    def get_optional(self, name: str) -> RegisteredTool | None:
        """Look up a tool by name, returning None if not found."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def list_tools(self) -> list[str]:
        """List tool names in registration order."""
        return list(self._tools)

    def list_all(self) -> list[ToolDescriptor]:
        """List tool descriptors in registration order."""
        return [entry.descriptor for entry in self._tools.values()]

    def register_with_transport(self, hook: TransportHook) -> None:
        """
        Hand every tool to a transport adapter.

        The hook is called once per tool, in registration order, with
        (name, description, input_schema, handler). The handler validates
        raw arguments itself and never raises.
        """
        for entry in self._tools.values():
            descriptor = entry.descriptor
            hook(
                descriptor.name,
                descriptor.description,
                descriptor.input_schema,
                entry.handler,
            )

    def __len__(self) -> int:
        """Return the number of registered tools."""
        return len(self._tools)

    def __iter__(self) -> Iterator[RegisteredTool]:
        """Iterate over registry rows in registration order."""
        return iter(self._tools.values())

    def __contains__(self, name: object) -> bool:
        """Check if a tool is registered using 'in' operator."""
        return name in self._tools

    def __repr__(self) -> str:
        """String representation of the registry."""
        tools = ", ".join(self.list_tools())
        return f"<ToolRegistry: [{tools}]>"
