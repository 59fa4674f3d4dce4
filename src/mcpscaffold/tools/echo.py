"""
Echo tool.

Returns the input message unchanged. Useful for checking that a client can
reach the server and that argument validation behaves as expected.
"""

from pydantic import Field

from mcpscaffold.tools.base import Tool, ToolArgs, ToolResponse


class EchoArgs(ToolArgs):
    """Arguments for the echo tool."""

    message: str = Field(..., description="The message to echo back")


class EchoTool(Tool):
    """
    Echo back the input message.

    Arguments:
        message (str): The message to echo back (required)

    Returns:
        {"message": <the same message>}
    """

    name = "echo"
    description = "Echo back the input message"
    input_model = EchoArgs

    async def execute(self, args: EchoArgs) -> ToolResponse:
        return ToolResponse.ok(
            "Message echoed successfully",
            {"message": args.message},
        )
