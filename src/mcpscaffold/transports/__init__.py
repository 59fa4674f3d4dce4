"""
Transports for mcp-scaffold.

Both transports run the same McpProtocol server and differ only in how
messages arrive and leave:
    - stdio: newline-delimited JSON-RPC on stdin/stdout
    - http: FastAPI app served by uvicorn, MCP Streamable HTTP on /mcp
"""

from mcpscaffold.transports.http import DEFAULT_PORT, MCP_PATH, create_app, run_http
from mcpscaffold.transports.stdio import run_stdio

__all__ = [
    "DEFAULT_PORT",
    "MCP_PATH",
    "create_app",
    "run_http",
    "run_stdio",
]
