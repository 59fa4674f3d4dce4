"""
Tools module for mcp-scaffold.

This module provides the tool interface, the invocation wrapper, the registry
and the built-in tools.

Built-in tools:
    - echo: Return the input message unchanged
    - ping: Report server status and the current time

Architecture:
    - Tool: Abstract base class defining the tool interface
    - ToolArgs: Base model for tool input schemas (strict)
    - ToolContext: Shared dependencies handed to every tool at construction
    - ToolResponse: The {success, message, data} envelope
    - ToolRegistry: Name -> tool table built once at startup

New tools are added to BUILTIN_TOOLS in registry.py. Nothing else needs to
change for dispatch or the transports to pick them up.
"""

from mcpscaffold.tools.base import Tool, ToolArgs, ToolContext, ToolResponse
from mcpscaffold.tools.echo import EchoArgs, EchoTool
from mcpscaffold.tools.ping import PingArgs, PingTool
from mcpscaffold.tools.registry import (
    BUILTIN_TOOLS,
    RegisteredTool,
    ToolRegistry,
)
from mcpscaffold.tools.wrapper import bind, guard

__all__ = [
    "Tool",
    "ToolArgs",
    "ToolContext",
    "ToolResponse",
    "ToolRegistry",
    "RegisteredTool",
    "BUILTIN_TOOLS",
    "EchoArgs",
    "EchoTool",
    "PingArgs",
    "PingTool",
    "bind",
    "guard",
]
