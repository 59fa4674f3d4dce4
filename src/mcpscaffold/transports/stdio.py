"""
Stdio transport.

Messages are newline-delimited JSON-RPC objects on stdin; responses are
written to stdout, one per line. The mcp SDK owns the framing. stdout carries
protocol traffic only, so nothing else in the process may print to it.

Lines that aren't valid JSON-RPC are reported by the SDK and skipped; the
session keeps running. Requests are handled concurrently, so responses may be
written out of order and the JSON-RPC id ties them back to their requests.
"""

import logging

from mcp.server.stdio import stdio_server

from mcpscaffold.protocol import McpProtocol

logger = logging.getLogger(__name__)


async def run_stdio(protocol: McpProtocol) -> None:
    """Attach to the process's stdin/stdout and serve until stdin closes."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("stdio transport ready")
        await protocol.server.run(
            read_stream,
            write_stream,
            protocol.initialization_options(),
        )
    logger.info("stdin closed, stdio transport stopped")
