"""
HTTP transport.

A FastAPI application exposing the server over HTTP:

    POST /mcp            MCP Streamable HTTP (mcp SDK session manager)
    GET  /health         Liveness check
    GET  /tools          Tool descriptors
    POST /tools/{name}   Call one tool with a JSON object body; returns the envelope

/mcp answers each request with a single JSON body rather than an SSE stream,
and issues an Mcp-Session-Id on initialize unless the app is stateless.

The per-tool routes are created from the registry's register_with_transport
hook, so they use the same validating, fault-tolerant handler as dispatch.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import mcp.types as types
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Message, Receive, Scope, Send

from mcpscaffold.protocol import McpProtocol
from mcpscaffold.tools.base import ToolResponse
from mcpscaffold.tools.wrapper import ToolHandler

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
MCP_PATH = "/mcp"


def _nested_too_deep(body: bytes) -> bool:
    """True if the body is JSON nested past the parser's recursion limit."""
    try:
        json.loads(body)
    except RecursionError:
        return True
    except ValueError:
        # Left to the session manager, which answers with a parse error.
        pass
    return False


def _replay(body: bytes, receive: Receive) -> Receive:
    """A receive callable that yields an already-read body once."""
    pending = True

    async def replayed() -> Message:
        nonlocal pending
        if pending:
            pending = False
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replayed


class StreamableHttpEndpoint:
    """
    ASGI endpoint handing /mcp requests to the SDK session manager.

    POST bodies are read first so that input nested too deeply to parse gets
    a JSON-RPC parse error here instead of an internal error downstream.
    """

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            body = await Request(scope, receive).body()
            if _nested_too_deep(body):
                logger.warning("Rejected /mcp body nested too deeply to parse")
                error = types.JSONRPCError(
                    jsonrpc="2.0",
                    id="server-error",
                    error=types.ErrorData(
                        code=types.PARSE_ERROR,
                        message="Parse error: input is nested too deeply",
                    ),
                )
                response = JSONResponse(
                    error.model_dump(by_alias=True, exclude_none=True),
                    status_code=400,
                )
                await response(scope, receive, send)
                return
            receive = _replay(body, receive)
        await self.session_manager.handle_request(scope, receive, send)


async def _read_json(request: Request) -> tuple[bool, Any]:
    """Return (ok, body); ok is False when the body is not valid JSON."""
    body = await request.body()
    if not body:
        return True, None
    try:
        return True, json.loads(body)
    except (ValueError, RecursionError):
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting
        # exhausts the parser's recursion limit.
        return False, None


def _tool_route(handler: ToolHandler):
    async def call(request: Request) -> JSONResponse:
        ok, body = await _read_json(request)
        if not ok:
            response = ToolResponse.fail("Request body is not valid JSON")
            return JSONResponse(response.to_dict(), status_code=400)
        response = await handler(body)
        return JSONResponse(response.to_dict())

    return call


def create_app(protocol: McpProtocol, stateless: bool = False) -> FastAPI:
    """
    Build the FastAPI application for a protocol handler.

    Args:
        protocol: The protocol handler (and, through it, the dispatcher)
        stateless: Serve /mcp without sessions; every request stands alone

    Returns:
        A FastAPI app ready to be served. The /mcp session manager runs in
        the app's lifespan, so the app must be started before it serves /mcp.
    """
    config = protocol.config
    registry = protocol.dispatcher.registry
    session_manager = StreamableHTTPSessionManager(
        app=protocol.server,
        json_response=True,
        stateless=stateless,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("MCP session manager started", extra={"stateless": stateless})
            yield
        logger.info("MCP session manager stopped")

    app = FastAPI(
        title=config.server.name,
        version=config.server.version,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_route(
        MCP_PATH,
        StreamableHttpEndpoint(session_manager),
        methods=["GET", "POST", "DELETE"],
        include_in_schema=False,
    )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "tools": len(registry)}

    @app.get("/tools")
    async def list_tools() -> dict[str, Any]:
        return {"tools": [d.to_listing() for d in registry.list_all()]}

    def add_tool_route(
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ) -> None:
        app.add_api_route(
            f"/tools/{name}",
            _tool_route(handler),
            methods=["POST"],
            name=name,
            summary=description,
            openapi_extra={
                "requestBody": {
                    "content": {"application/json": {"schema": input_schema}},
                },
            },
        )

    registry.register_with_transport(add_tool_route)
    return app


async def run_http(
    protocol: McpProtocol,
    host: str,
    port: int,
    stateless: bool = False,
) -> None:
    """
    Serve the app with uvicorn until interrupted.

    uvicorn is told to leave logging alone; its loggers are already routed by
    configure_logging().
    """
    app = create_app(protocol, stateless=stateless)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_config=None))
    logger.info("HTTP transport listening on http://%s:%d%s", host, port, MCP_PATH)
    await server.serve()
