"""
Pytest configuration and fixtures for mcp-scaffold tests.

This module provides shared fixtures and test tools used across unit and
integration tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from pydantic import Field

from mcpscaffold.dispatch import Dispatcher
from mcpscaffold.protocol import McpProtocol
from mcpscaffold.schema import ServerConfig
from mcpscaffold.tools import Tool, ToolArgs, ToolContext, ToolRegistry, ToolResponse


# =============================================================================
# Test Tools
# =============================================================================


class CountArgs(ToolArgs):
    """Arguments for CountingTool."""

    value: int = Field(..., description="Any integer")
    note: str | None = Field(default=None, description="Optional note")


class CountingTool(Tool):
    """Records every execute() call so tests can check it was (not) invoked."""

    name = "counter"
    description = "Count invocations"
    input_model = CountArgs

    def __init__(self, context: ToolContext) -> None:
        super().__init__(context)
        self.calls: list[CountArgs] = []

    async def execute(self, args: CountArgs) -> ToolResponse:
        self.calls.append(args)
        return ToolResponse.ok("Counted", {"value": args.value, "calls": len(self.calls)})


class EmptyArgs(ToolArgs):
    """No arguments."""


class RaisingTool(Tool):
    """Raises an exception carrying internal-looking detail."""

    name = "explode"
    description = "Always raises"
    input_model = EmptyArgs

    secret = "/srv/app/secrets.py password=hunter2"

    async def execute(self, args: EmptyArgs) -> ToolResponse:
        raise RuntimeError(f"database unreachable at {self.secret}")


class MalformedTool(Tool):
    """Returns something that is not a ToolResponse."""

    name = "malformed"
    description = "Returns a bare dict"
    input_model = EmptyArgs

    async def execute(self, args: EmptyArgs) -> ToolResponse:
        return {"success": True}  # type: ignore[return-value]


class SoftFailTool(Tool):
    """Reports an expected failure through the envelope."""

    name = "softfail"
    description = "Returns a failed envelope"
    input_model = EmptyArgs

    async def execute(self, args: EmptyArgs) -> ToolResponse:
        return ToolResponse.fail("upstream said no")


class BigTool(Tool):
    """Returns more data than the default response size limit."""

    name = "big"
    description = "Returns a 200 KB payload"
    input_model = EmptyArgs

    async def execute(self, args: EmptyArgs) -> ToolResponse:
        return ToolResponse.ok("Big", {"blob": "x" * 200_000})


class OpaqueTool(Tool):
    """Returns data that has no JSON form."""

    name = "opaque"
    description = "Returns an arbitrary object"
    input_model = EmptyArgs

    async def execute(self, args: EmptyArgs) -> ToolResponse:
        return ToolResponse.ok("Opaque", {"handle": object()})


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config() -> ServerConfig:
    """Default server configuration."""
    return ServerConfig()


@pytest.fixture
def registry(config: ServerConfig) -> ToolRegistry:
    """Registry with the built-in tools."""
    reg = ToolRegistry()
    reg.initialize(ToolContext(config=config))
    return reg


@pytest.fixture
def test_registry() -> ToolRegistry:
    """Registry with the built-in tools plus the test tools above."""
    from mcpscaffold.tools import BUILTIN_TOOLS

    reg = ToolRegistry()
    reg.initialize(
        ToolContext(),
        [*BUILTIN_TOOLS, CountingTool, RaisingTool, MalformedTool, SoftFailTool],
    )
    return reg


@pytest.fixture
def dispatcher(test_registry: ToolRegistry) -> Dispatcher:
    """Dispatcher over the test registry."""
    return Dispatcher(test_registry)


@pytest.fixture
def counter(test_registry: ToolRegistry) -> CountingTool:
    """The CountingTool instance inside the test registry."""
    tool = test_registry.get("counter").tool
    assert isinstance(tool, CountingTool)
    return tool


@pytest.fixture
def protocol(dispatcher: Dispatcher, config: ServerConfig) -> McpProtocol:
    """Protocol handler over the test registry."""
    return McpProtocol(dispatcher, config)
