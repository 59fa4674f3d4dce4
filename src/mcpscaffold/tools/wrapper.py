"""
Invocation wrapper for tools.

Every registered tool is wrapped here once, at registration time, so that no
individual tool has to remember to catch its own faults:

    guard(tool)  - execute() with faults turned into a failed ToolResponse
    bind(tool)   - input validation, then guard(tool), then the wire check;
                   this is the handler the registry stores and hands to
                   every transport

Fault detail (exception text, traceback) goes to the server log only. The
caller sees a fixed, generic message.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from mcpscaffold.errors import ToolExecutionError, ToolInvalidArgsError
from mcpscaffold.tools.base import Tool, ToolArgs, ToolResponse
from mcpscaffold.validation import validate_arguments

logger = logging.getLogger(__name__)

GuardedExecute = Callable[[ToolArgs], Awaitable[ToolResponse]]
ToolHandler = Callable[[Any], Awaitable[ToolResponse]]


def execution_failed_message(tool_name: str) -> str:
    """Caller-visible message for a tool that raised."""
    return f"Tool '{tool_name}' failed to execute"


def guard(tool: Tool) -> GuardedExecute:
    """
    Wrap a tool's execute() so it always returns exactly one ToolResponse.

    A ToolResponse returned by the tool passes through unchanged. An exception,
    or a return value that is not a ToolResponse, is logged once with its
    traceback and replaced by a generic failure.
    """
    name = tool.name

    async def guarded(args: ToolArgs) -> ToolResponse:
        try:
            result = await tool.execute(args)
        except Exception as e:
            fault = ToolExecutionError(
                tool=name,
                underlying_error=str(e),
                error_type=type(e).__name__,
            )
            logger.error(
                "Tool %s raised %s",
                name,
                type(e).__name__,
                exc_info=True,
                extra={"tool": name, "fault": fault.to_dict()},
            )
            return ToolResponse.fail(execution_failed_message(name))

        if not isinstance(result, ToolResponse):
            fault = ToolExecutionError(
                tool=name,
                underlying_error=f"returned {type(result).__name__} instead of ToolResponse",
                error_type="MalformedOutput",
            )
            logger.error(
                "Tool %s returned malformed output",
                name,
                extra={"tool": name, "fault": fault.to_dict()},
            )
            return ToolResponse.fail(execution_failed_message(name))

        return result

    return guarded


def wire_safe(
    tool_name: str,
    response: ToolResponse,
    max_size: int | None = None,
) -> ToolResponse:
    """
    Make sure an envelope can be sent as-is on any transport.

    Envelopes that can't be encoded as JSON become the generic execution
    failure. Envelopes whose encoded size exceeds max_size are replaced by a
    size failure. max_size None means no size limit.
    """
    try:
        encoded = json.dumps(response.to_dict())
    except (TypeError, ValueError, RecursionError) as e:
        fault = ToolExecutionError(
            tool=tool_name,
            underlying_error=f"response is not JSON serializable: {e}",
            error_type=type(e).__name__,
        )
        logger.error(
            "Response from %s is not JSON serializable",
            tool_name,
            extra={"tool": tool_name, "fault": fault.to_dict()},
        )
        return ToolResponse.fail(execution_failed_message(tool_name))

    if max_size is None:
        return response
    size = len(encoded.encode("utf-8"))
    if size <= max_size:
        return response

    logger.warning(
        "Response from %s dropped: %d bytes exceeds %d",
        tool_name,
        size,
        max_size,
        extra={"tool": tool_name, "size": size, "limit": max_size},
    )
    return ToolResponse.fail(f"response exceeds maximum size ({max_size} bytes)")


def bind(tool: Tool, max_response_size: int | None = None) -> ToolHandler:
    """
    Build the full handler for a tool: validate, run guarded, check the result.

    The returned coroutine function takes raw (unvalidated) arguments and never
    raises. Invalid input is reported with a field-level summary and the tool
    is not executed. The envelope it returns always passes wire_safe().
    """
    guarded = guard(tool)

    async def handler(raw_args: Any) -> ToolResponse:
        try:
            args = validate_arguments(tool, raw_args)
        except ToolInvalidArgsError as e:
            logger.debug("Rejected arguments for %s: %s", tool.name, e.validation_error)
            return ToolResponse.fail(e.message)
        return wire_safe(tool.name, await guarded(args), max_response_size)

    handler.__name__ = f"{tool.name}_handler"
    handler.__qualname__ = handler.__name__
    return handler
