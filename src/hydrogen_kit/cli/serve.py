from typing import Annotated

import typer
from rich.console import Console

from hydrogen_kit.config import AppConfig

console = Console(stderr=True)


def serve(
    ctx: typer.Context,
    transport: Annotated[str, typer.Option(help="MCP transport: stdio or sse.")] = "stdio",
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Start the MCP server."""
    from hydrogen_kit.mcp.server import create_mcp_server

    config: AppConfig = ctx.obj
    server = create_mcp_server(config)
    console.print(f"[green]Starting MCP server (transport: {transport}, root: {config.root_dir})[/green]")
    if transport == "stdio":
        server.run(transport="stdio")
    else:
        server.run(transport=transport, host=host, port=port)  # type: ignore[arg-type]
