"""
Input validation for tool calls.

Raw arguments arrive from the wire as untrusted JSON. They are checked against
the tool's ToolArgs model before execute() is ever called.

Policy:
    - Missing arguments (None) are treated as an empty object
    - Anything other than an object is rejected
    - Unknown fields are rejected
    - No implicit type coercion
"""

from typing import Any

from pydantic import ValidationError

from mcpscaffold.errors import ToolInvalidArgsError
from mcpscaffold.tools.base import Tool, ToolArgs


def format_validation_error(error: ValidationError) -> str:
    """
    Summarize a pydantic ValidationError one field at a time.

    Example:
        "message: Field required; extra: Extra inputs are not permitted"
    """
    parts = []
    for detail in error.errors(include_url=False):
        location = ".".join(str(part) for part in detail["loc"]) or "arguments"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def validate_arguments(tool: Tool, raw_args: Any) -> ToolArgs:
    """
    Validate raw arguments against a tool's input schema.

    Args:
        tool: The tool being called
        raw_args: Arguments as received from the transport

    Returns:
        An instance of the tool's input model

    Raises:
        ToolInvalidArgsError: If the arguments don't match the schema
    """
    if raw_args is None:
        raw_args = {}

    if not isinstance(raw_args, dict):
        raise ToolInvalidArgsError(
            tool=tool.name,
            validation_error=f"arguments: expected an object, got {type(raw_args).__name__}",
        )

    try:
        return tool.get_input_schema().model_validate(raw_args)
    except ValidationError as e:
        raise ToolInvalidArgsError(
            tool=tool.name,
            validation_error=format_validation_error(e),
        ) from e
