import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from entitytrace._entity import Entity
from entitytrace._graph import render_graph

from .config import ConfigError, OutputFormat, get_config
from .discover import load_entity_from_module_path, load_entity_from_script, load_entity_from_source
from .graph_render import graph_to_json, render_entity_table, render_rich_tree

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Entitytrace CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_entity(path: str | None, entity_var: str | None) -> Entity[Any]:
    """Load the entity from the CLI path or, when omitted, from [tool.entitytrace].entity."""
    if path is not None:
        if ":" in path:
            err_console.print(f"[cyan]Loading entity from module:[/cyan] {path}")
            return load_entity_from_module_path(path)
        script_path = Path(path)
        err_console.print(f"[cyan]Loading entity from script:[/cyan] {script_path}")
        return load_entity_from_script(script_path, entity_var)

    config = get_config()
    if config.entity is None:
        msg = "No entity specified. Provide a path argument or configure [tool.entitytrace].entity in pyproject.toml."
        raise typer.BadParameter(msg)
    err_console.print("[cyan]Loading entity from configuration[/cyan]")
    return load_entity_from_source(config.entity, entity_var)


def _load_or_exit(path: str | None, entity_var: str | None) -> Entity[Any]:
    try:
        entity = _load_entity(path, entity_var)
    except (ConfigError, typer.BadParameter, ImportError, ValueError, TypeError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    err_console.print(f"[cyan]Entity:[/cyan] [bold]{escape(entity.name)}[/bold]")
    err_console.print()
    return entity


PathArgument = Annotated[
    str | None,
    typer.Argument(help="Path to Python script or module path (e.g., examples.state_demo:total)"),
]
EntityOption = Annotated[
    str | None,
    typer.Option("--entity", "-e", help="Name of the entity variable (for script paths only)"),
]


@app.command()
def show(
    path: PathArgument = None,
    *,
    entity_var: EntityOption = None,
) -> None:
    """Show the value, dependency expression and dependencies of an entity."""
    entity = _load_or_exit(path, entity_var)

    try:
        render_entity_table(entity, out_console)
    except Exception as e:
        err_console.print(f"[red]Error while resolving {escape(entity.name)}: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def tree(
    path: PathArgument = None,
    *,
    entity_var: EntityOption = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format. Defaults to [tool.entitytrace].format or ascii"),
    ] = None,
) -> None:
    """Print the computation graph of an entity."""
    entity = _load_or_exit(path, entity_var)

    if output_format is None:
        try:
            output_format = get_config().format
        except ConfigError as e:
            err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from e

    try:
        node = entity.build_graph()
    except Exception as e:
        err_console.print(f"[red]Error while resolving {escape(entity.name)}: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    match output_format:
        case OutputFormat.ASCII:
            out_console.print(render_graph(node), markup=False, highlight=False, emoji=False, soft_wrap=True)
        case OutputFormat.RICH:
            render_rich_tree(node, out_console)
        case OutputFormat.JSON:
            out_console.print(graph_to_json(node), markup=False, highlight=False, emoji=False, soft_wrap=True)


def main() -> None:
    """Run the CLI application."""
    app()

