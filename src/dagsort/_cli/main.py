import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dagsort._graph import CycleError, Graph, UnknownNodeError
from dagsort._io import GraphFileError, export_order_to_toml, load_graph

from .config import ConfigError, DagsortConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

GraphArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to graph TOML file (defaults to tool.dagsort.graph in pyproject.toml)"),
]
RootOption = Annotated[
    str | None,
    typer.Option("-r", "--root", help="Node to sort from (defaults to tool.dagsort.root in pyproject.toml)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Dagsort CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
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


def _load_config() -> DagsortConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e


def _resolve_graph(graph_path: Path | None, config: DagsortConfig) -> Graph[str]:
    graph_path = graph_path or config.graph
    if graph_path is None:
        err_console.print("[red]Error: No graph file given and no \\[tool.dagsort].graph configured[/red]")
        raise typer.Exit(code=2)

    logger.debug(f"Loading graph from {graph_path}")
    try:
        return load_graph(graph_path)
    except GraphFileError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e


def _print_cycle(error: CycleError) -> None:
    path = " -> ".join(escape(str(node)) for node in error.cycle)
    err_console.print(f"[red]✗ Cycle detected:[/red] {path}")


@app.command()
def sort(
    graph_path: GraphArgument = None,
    *,
    root: RootOption = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the order to a TOML file"),
    ] = None,
) -> None:
    """Print the topological order of the nodes reachable from a root."""
    config = _load_config()
    graph = _resolve_graph(graph_path, config)

    root = root if root is not None else config.root
    if root is None:
        err_console.print("[red]Error: No root given and no \\[tool.dagsort].root configured[/red]")
        raise typer.Exit(code=2)

    try:
        order = graph.topological_sort(root)
    except CycleError as e:
        _print_cycle(e)
        raise typer.Exit(code=1) from e
    except UnknownNodeError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e

    for node in order:
        out_console.print(node, markup=False, highlight=False)

    if output is not None:
        export_order_to_toml(order, root, output)
        err_console.print(f"[cyan]Exported order to:[/cyan] {output}")


@app.command()
def check(
    graph_path: GraphArgument = None,
    *,
    root: RootOption = None,
) -> None:
    """Check that the graph can be sorted (from one root, or from every node)."""
    config = _load_config()
    graph = _resolve_graph(graph_path, config)

    root = root if root is not None else config.root

    try:
        if root is not None:
            graph.topological_sort(root)
        else:
            graph.topological_order()
    except CycleError as e:
        _print_cycle(e)
        raise typer.Exit(code=1) from e
    except UnknownNodeError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print(f"[green]✓ Graph is acyclic ({len(graph)} node(s))[/green]")


@app.command()
def nodes(graph_path: GraphArgument = None) -> None:
    """List the registered nodes and their children."""
    config = _load_config()
    graph = _resolve_graph(graph_path, config)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node", style="bold")
    table.add_column("Children")

    for node in graph.nodes:
        children = ", ".join(graph.children(node))
        table.add_row(escape(node), escape(children) if children else "[dim]-[/dim]")

    out_console.print(table)


def main() -> None:
    app()
