import logging
from typing import Annotated

import typer

from hydrogen_kit.cli.analyze import outline, placement, routes, schema
from hydrogen_kit.cli.serve import serve
from hydrogen_kit.config import load_config

app = typer.Typer(
    name="hydrogen-kit",
    help="Hydrogen Kit CLI: static analysis for Hydrogen storefronts.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    ctx: typer.Context,
    root: Annotated[str | None, typer.Option(help="Sandbox root directory (default: $MCP_ROOT_DIR or cwd).")] = None,
    schema_path: Annotated[
        str | None, typer.Option("--schema", help="GraphQL schema file (default: $MCP_SCHEMA_PATH).")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log diagnostics to stderr.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = load_config(root, schema_path)


app.command("routes")(routes)
app.command("outline")(outline)
app.command("schema")(schema)
app.command("placement")(placement)
app.command("serve")(serve)


def main() -> None:
    app()
