"""Ping tool: a no-argument health check."""

from datetime import UTC, datetime

from mcpscaffold.tools.base import Tool, ToolArgs, ToolResponse


class PingArgs(ToolArgs):
    """The ping tool takes no arguments."""


def utc_timestamp() -> str:
    """Current time as ISO 8601 with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PingTool(Tool):
    """Report that the server is up, with the current UTC time."""

    name = "ping"
    description = "Check if the server is responding"
    input_model = PingArgs

    async def execute(self, args: PingArgs) -> ToolResponse:
        return ToolResponse.ok(
            "Server is responding",
            {"status": "ok", "timestamp": utc_timestamp()},
        )
