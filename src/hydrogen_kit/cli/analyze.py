from typing import Annotated, Any

import typer
from rich.console import Console
from rich.json import JSON

from hydrogen_kit.config import AppConfig
from hydrogen_kit.core.schema import SchemaRegistry
from hydrogen_kit.mcp.server import check_placement, list_routes, lookup_schema, outline_file

console = Console()


def _emit(envelope: dict[str, Any]) -> None:
    console.print(JSON.from_data(envelope), soft_wrap=True)
    if not envelope["ok"]:
        raise typer.Exit(code=1)


def routes(
    ctx: typer.Context,
    routes_file: Annotated[str | None, typer.Argument(help="Route manifest, relative to the root.")] = None,
) -> None:
    """List routes declared in the route manifest."""
    config: AppConfig = ctx.obj
    _emit(list_routes(config, routes_file))


def outline(
    ctx: typer.Context,
    file_path: Annotated[str, typer.Argument(help="TypeScript/TSX file, relative to the root.")],
) -> None:
    """Outline a file's imports, exports, and top-level symbols."""
    config: AppConfig = ctx.obj
    _emit(outline_file(config, file_path))


def schema(
    ctx: typer.Context,
    type_name: Annotated[str | None, typer.Option("--type", help="Look up a type by name.")] = None,
    field_ref: Annotated[str | None, typer.Option("--field", help='Look up a field as "Type.field".')] = None,
    search: Annotated[str | None, typer.Option(help="Search type names by substring.")] = None,
    schema_file: Annotated[str | None, typer.Option("--file", help="Schema file inside the root.")] = None,
) -> None:
    """Look up types and fields in the Storefront API schema."""
    config: AppConfig = ctx.obj
    _emit(lookup_schema(config, SchemaRegistry(), schema_file, type_name, field_ref, search))


def placement(
    ctx: typer.Context,
    consumer: Annotated[str, typer.Argument(help="File that consumes the query.")],
    query: Annotated[str, typer.Argument(help="GraphQL query file.")],
    allow: Annotated[list[str] | None, typer.Option(help="Shared query path prefix (repeatable).")] = None,
) -> None:
    """Check a GraphQL query file's placement against module boundaries."""
    config: AppConfig = ctx.obj
    _emit(check_placement(config, consumer, query, allow or None))
