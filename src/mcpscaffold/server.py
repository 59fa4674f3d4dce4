"""
Server assembly.

McpServer wires the pieces together in startup order:

    config -> ToolContext -> ToolRegistry -> Dispatcher -> McpProtocol -> transport

initialize() does all the work that can fail on bad configuration, so a
ConfigurationError surfaces before any transport is opened.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mcpscaffold.dispatch import Dispatcher
from mcpscaffold.errors import ConfigurationError
from mcpscaffold.protocol import McpProtocol
from mcpscaffold.schema import ServerConfig, TransportConfig, TransportType
from mcpscaffold.tools.base import ToolContext
from mcpscaffold.tools.registry import ToolFactory, ToolRegistry
from mcpscaffold.transports import DEFAULT_PORT, run_http, run_stdio

logger = logging.getLogger(__name__)


class McpServer:
    """
    A tool server instance.

    Usage:
        server = McpServer()
        server.initialize(load_config())
        await server.start(TransportConfig(type=TransportType.STDIO))

    Attributes:
        config: Configuration the server was initialized with
        registry: Tool registry
        dispatcher: Dispatch entry point used by every transport
        protocol: JSON-RPC handler shared by the transports
    """

    def __init__(self) -> None:
        self.config: ServerConfig | None = None
        self.registry = ToolRegistry()
        self.dispatcher = Dispatcher(self.registry)
        self.protocol: McpProtocol | None = None

    def initialize(
        self,
        config: ServerConfig,
        resources: Mapping[str, Any] | None = None,
        tools: Sequence[ToolFactory] | None = None,
    ) -> None:
        """
        Build the tool context, registry and protocol handler.

        Args:
            config: Validated server configuration
            resources: Shared clients to expose to tools through the context
            tools: Tool factories to register (defaults to the built-in list)

        Raises:
            ConfigurationError: If the tool list is invalid
        """
        context = ToolContext(config=config, resources=resources or {})
        self.registry.initialize(context, tools)
        self.config = config
        self.protocol = McpProtocol(self.dispatcher, config)
        logger.info(
            "Server %s %s initialized",
            config.server.name,
            config.server.version,
            extra={"tools": self.registry.list_tools()},
        )

    async def start(self, transport: TransportConfig) -> None:
        """
        Run the chosen transport until it stops.

        Raises:
            ConfigurationError: If initialize() hasn't been called
        """
        if self.protocol is None:
            raise ConfigurationError(message="Server must be initialized before start")

        logger.info("Starting %s transport", transport.type.value)
        if transport.type == TransportType.HTTP:
            await run_http(
                self.protocol,
                transport.host,
                transport.port or DEFAULT_PORT,
                stateless=transport.stateless,
            )
        else:
            await run_stdio(self.protocol)
