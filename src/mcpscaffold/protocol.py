"""
Model Context Protocol adapter.

McpProtocol puts the tool registry behind an mcp SDK low-level Server. The
SDK owns JSON-RPC framing, the initialize handshake, ping, notifications and
the transports' wire formats; this module only answers the two tool
requests:

    tools/list   Paginated listing collected through register_with_transport
    tools/call   Routed through Dispatcher.dispatch

Every tools/call result carries the envelope twice: as JSON text content for
clients that only read content, and as structuredContent.
"""

import json
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions
from mcp.shared.exceptions import McpError

from mcpscaffold.dispatch import Dispatcher
from mcpscaffold.schema import ServerConfig
from mcpscaffold.tools.base import ToolResponse
from mcpscaffold.tools.wrapper import ToolHandler

logger = logging.getLogger(__name__)


def tool_call_result(response: ToolResponse) -> types.CallToolResult:
    """Render an envelope as a tools/call result."""
    envelope = response.to_dict()
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(envelope))],
        structuredContent=envelope,
        isError=not response.success,
    )


def invalid_params(message: str) -> McpError:
    return McpError(types.ErrorData(code=types.INVALID_PARAMS, message=message))


class McpProtocol:
    """
    MCP request handling shared by all transports.

    Attributes:
        dispatcher: Routes tools/call requests
        config: Server identity and protocol limits
        tools: tools/list entries, collected from the registry at construction
        server: The SDK server the transports run
    """

    def __init__(self, dispatcher: Dispatcher, config: ServerConfig) -> None:
        self.dispatcher = dispatcher
        self.config = config
        self.tools: list[types.Tool] = []
        # Calls go through dispatch; only the listing is kept from registration.
        dispatcher.registry.register_with_transport(self._add_tool)

        self.server: Server = Server(config.server.name, version=config.server.version)
        # Registered directly so tools/list sees the cursor and tools/call
        # results pass through untouched.
        self.server.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    def _add_tool(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ) -> None:
        self.tools.append(
            types.Tool(name=name, description=description, inputSchema=input_schema)
        )

    def initialization_options(self) -> InitializationOptions:
        """Identity and capabilities sent in the initialize response."""
        return self.server.create_initialization_options()

    # -------------------------------------------------------------------------
    # Request handlers
    # -------------------------------------------------------------------------

    async def _handle_list_tools(self, request: types.ListToolsRequest) -> types.ServerResult:
        cursor = request.params.cursor if request.params else None
        return types.ServerResult(self.list_tools(cursor))

    async def _handle_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        params = request.params
        result = await self.call_tool(params.name, params.arguments)
        return types.ServerResult(result)

    # -------------------------------------------------------------------------
    # Methods
    # -------------------------------------------------------------------------

    def list_tools(self, cursor: str | None = None) -> types.ListToolsResult:
        """
        Return one page of the tool listing.

        The cursor is the decimal offset of the first tool on the page.

        Raises:
            McpError: INVALID_PARAMS for a cursor the server didn't issue
        """
        page_size = self.config.mcp.default_page_size
        start = 0
        if cursor is not None:
            if not (cursor.isascii() and cursor.isdigit()):
                raise invalid_params("Invalid cursor")
            start = int(cursor)

        end = start + page_size
        next_cursor = str(end) if end < len(self.tools) else None
        return types.ListToolsResult(tools=self.tools[start:end], nextCursor=next_cursor)

    async def call_tool(self, name: str, arguments: Any = None) -> types.CallToolResult:
        """
        Dispatch one tool call.

        Unknown tools, invalid arguments and tool faults all come back as an
        error result, never as a protocol error.
        """
        if not name:
            raise invalid_params("tools/call requires a tool name")
        response = await self.dispatcher.dispatch(name, arguments)
        return tool_call_result(response)
