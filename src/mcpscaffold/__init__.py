"""
mcp-scaffold - A Model Context Protocol tool server scaffold.

Registered tools are served over stdio or HTTP through a single dispatch
path:
- Tools are listed explicitly in one reviewed registration list
- Arguments are validated strictly before a tool runs
- Every call returns the same {success, message, data} envelope
- Tool faults are logged server-side and never leak to callers

Example usage:
    $ mcp-scaffold serve --transport stdio
    $ mcp-scaffold serve --transport http --port 3000
    $ mcp-scaffold call echo --args '{"message": "hello"}'
"""

__version__ = "1.0.0"
__author__ = "mcp-scaffold Contributors"

__all__ = [
    "__version__",
    "__author__",
]
