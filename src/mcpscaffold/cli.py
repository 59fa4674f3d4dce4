"""
CLI entry point for mcp-scaffold.

This module provides the Typer-based command-line interface.

Commands:
    serve   Start the server on the stdio or http transport
    tools   List the registered tools
    call    Invoke one tool locally through the dispatcher

Architecture Note:
    The CLI is intentionally thin - it parses arguments, loads configuration
    and delegates to McpServer. In stdio mode stdout belongs to the protocol,
    so everything the CLI prints for serve goes to stderr.
"""

import asyncio
import json
import traceback
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from mcpscaffold import __version__
from mcpscaffold.errors import ConfigurationError
from mcpscaffold.logging_config import configure_logging
from mcpscaffold.schema import (
    VALID_LOG_LEVELS,
    ServerConfig,
    TransportConfig,
    TransportType,
    load_config,
)
from mcpscaffold.server import McpServer
from mcpscaffold.transports import DEFAULT_PORT

app = typer.Typer(
    name="mcp-scaffold",
    help="Model Context Protocol tool server.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to a YAML configuration file.",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]mcp-scaffold[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    mcp-scaffold - Model Context Protocol tool server.

    Serves registered tools over stdio or http with validated input and a
    uniform {success, message, data} response envelope.
    """
    pass


def _load_config_or_exit(config_path: Path | None, debug: bool = False) -> ServerConfig:
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        err_console.print(f"[red]Invalid configuration: {e}[/red]")
        if debug:
            err_console.print(f"[dim]{traceback.format_exc()}[/dim]")
        raise typer.Exit(code=1)


def _initialized_server(config: ServerConfig, debug: bool = False) -> McpServer:
    server = McpServer()
    try:
        server.initialize(config)
    except ConfigurationError as e:
        err_console.print(f"[red]Failed to start server: {e}[/red]")
        if debug:
            err_console.print(f"[dim]{traceback.format_exc()}[/dim]")
        raise typer.Exit(code=1)
    return server


@app.command()
def serve(
    transport: Annotated[
        str,
        typer.Option(
            "--transport",
            "-t",
            help="Transport type (stdio|http).",
        ),
    ] = "stdio",
    port: Annotated[
        int,
        typer.Option(
            "--port",
            "-p",
            help="Port for HTTP transport.",
            envvar="PORT",
        ),
    ] = DEFAULT_PORT,
    host: Annotated[
        str,
        typer.Option(
            "--host",
            help="Bind address for HTTP transport.",
        ),
    ] = "127.0.0.1",
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Log level (error|warn|info|debug). Overrides the config file.",
        ),
    ] = None,
    stateless: Annotated[
        bool,
        typer.Option(
            "--stateless",
            help="Serve HTTP without MCP sessions.",
        ),
    ] = False,
    config_path: ConfigOption = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full tracebacks for startup errors.",
        ),
    ] = False,
) -> None:
    """
    Start the server.

    Example:
        $ mcp-scaffold serve --transport http --port 3000
    """
    if transport not in {t.value for t in TransportType}:
        err_console.print('[red]Error: Transport must be either "stdio" or "http"[/red]')
        raise typer.Exit(code=1)
    transport_type = TransportType(transport)

    if log_level is not None and log_level.lower() not in VALID_LOG_LEVELS:
        err_console.print(f"[red]Error: Invalid log level: {log_level}[/red]")
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path, debug)
    if log_level is not None:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": log_level.lower()})}
        )

    log_file = configure_logging(
        config.logging,
        enable_console=transport_type == TransportType.HTTP,
    )

    server = _initialized_server(config, debug)
    transport_config = TransportConfig(
        type=transport_type,
        host=host,
        port=port if transport_type == TransportType.HTTP else None,
        stateless=stateless,
    )

    if transport_type == TransportType.HTTP:
        err_console.print(
            f"[bold]{config.server.name}[/bold] listening on "
            f"http://{host}:{port}/mcp  [dim](log: {log_file})[/dim]"
        )
        err_console.print("[dim]Press Ctrl+C to stop.[/dim]")

    try:
        asyncio.run(server.start(transport_config))
    except KeyboardInterrupt:
        err_console.print("[dim]Shutting down...[/dim]")


@app.command("tools")
def list_tools(
    config_path: ConfigOption = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output the tool listing in JSON format.",
        ),
    ] = False,
) -> None:
    """
    List the registered tools.

    Example:
        $ mcp-scaffold tools --json
    """
    server = _initialized_server(_load_config_or_exit(config_path))
    descriptors = server.registry.list_all()

    if json_output:
        print(json.dumps([d.to_listing() for d in descriptors], indent=2))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Arguments")

    for d in descriptors:
        properties = d.input_schema.get("properties", {})
        required = set(d.input_schema.get("required", []))
        args = ", ".join(
            f"{name}{'' if name in required else '?'}: {spec.get('type', 'any')}"
            for name, spec in properties.items()
        )
        table.add_row(d.name, d.description, args or "[dim]none[/dim]")

    console.print(table)


@app.command()
def call(
    name: Annotated[
        str,
        typer.Argument(help="Name of the tool to call."),
    ],
    args: Annotated[
        str,
        typer.Option(
            "--args",
            "-a",
            help="Tool arguments as a JSON object.",
        ),
    ] = "{}",
    config_path: ConfigOption = None,
) -> None:
    """
    Call a tool once, without starting a transport.

    Prints the response envelope as JSON. Exits 1 if the call failed.

    Example:
        $ mcp-scaffold call echo --args '{"message": "hello"}'
    """
    try:
        raw_args = json.loads(args)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]--args is not valid JSON: {e}[/red]")
        raise typer.Exit(code=1)

    server = _initialized_server(_load_config_or_exit(config_path))
    response = asyncio.run(server.dispatcher.dispatch(name, raw_args))

    print(json.dumps(response.to_dict(), indent=2))
    if not response.success:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
