"""
Dispatch entry point.

Every inbound tool call, from any transport, goes through Dispatcher.dispatch:

    1. Look the tool up in the registry
    2. Unknown name: fail with "unknown capability: <name>", run nothing
    3. Validate the raw arguments against the tool's input schema
    4. Invalid input: fail with a field-level summary, run nothing
    5. Run the tool through the invocation wrapper and return its envelope

dispatch() never raises. The only errors that stop the process are
ConfigurationErrors from registry initialization, before any transport opens.
"""

import logging
import time
from typing import Any

from mcpscaffold.errors import ToolNotFoundError
from mcpscaffold.tools.base import ToolResponse
from mcpscaffold.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Routes tool calls by name.

    Usage:
        dispatcher = Dispatcher(registry)
        response = await dispatcher.dispatch("echo", {"message": "hello"})

    Attributes:
        registry: An initialized tool registry
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def dispatch(self, name: str, raw_args: Any = None) -> ToolResponse:
        """
        Resolve, validate and run a tool.

        Args:
            name: Tool name requested by the caller
            raw_args: Arguments as received from the transport

        Returns:
            The tool's ToolResponse, or a failed one for unknown tools and
            invalid input
        """
        entry = self.registry.get_optional(name)
        if entry is None:
            error = ToolNotFoundError(tool=name)
            logger.info("Rejected call: %s", error.message, extra={"tool": name})
            return ToolResponse.fail(error.message)

        start = time.perf_counter()
        response = await entry.handler(raw_args)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.debug(
            "Tool %s finished success=%s in %.1fms",
            name,
            response.success,
            duration_ms,
            extra={"tool": name, "success": response.success, "duration_ms": duration_ms},
        )
        return response
