"""
CodeView CLI

Command-line host for the code graph viewer.
Loads a graph document, runs the layout, and renders or inspects it.

Commands:
    cgv render [document]          Settle the layout and write an SVG
    cgv inspect <id> [document]    Show the detail panel for one node
    cgv stats [document]           Count nodes and links per type
    cgv related <id> [document]    List nodes within N hops of a node

The document defaults to $CODEVIEW_DOCUMENT, then code_graph.json.

Usage:
    $ cgv render code_graph.json -o graph.svg --filter Class
    $ cgv inspect src/main.rs::main
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from codeview import __version__
from codeview.config import DEFAULT_HEIGHT, DEFAULT_WIDTH, ViewerConfig
from codeview.detail import OUTGOING, NodeDetail
from codeview.interaction import Select, SetFilter, ToggleLabels
from codeview.render import SvgRenderAdapter, node_color
from codeview.session import GraphSession, GraphViewer

# Initialize Typer app and Rich console
app = typer.Typer(
    name="cgv",
    help="CodeView: an interactive viewer for code dependency graphs",
    add_completion=False,
)
console = Console()


def _open(document: Optional[str], width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
    """Load a document into a fresh session or exit with an error."""
    adapter = SvgRenderAdapter(width, height)
    viewer = GraphViewer(adapter, ViewerConfig.from_env(document, width=width, height=height))
    session = asyncio.run(viewer.load())
    if session is None:
        console.print(f"[bold red]Error:[/bold red] {viewer.error}")
        raise typer.Exit(1)
    return session, adapter


@app.command()
def render(
    document: Optional[str] = typer.Argument(
        None,
        help="Path or URL of the graph document",
    ),
    output: Path = typer.Option(
        Path("graph.svg"),
        "--output",
        "-o",
        help="Where to write the SVG",
    ),
    filter_type: Optional[str] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Only draw nodes of this type (e.g. Class, Function)",
    ),
    no_labels: bool = typer.Option(
        False,
        "--no-labels",
        help="Hide node labels",
    ),
    ticks: int = typer.Option(
        300,
        "--ticks",
        "-t",
        help="Maximum number of layout steps",
    ),
    width: int = typer.Option(DEFAULT_WIDTH, "--width", help="Viewport width"),
    height: int = typer.Option(DEFAULT_HEIGHT, "--height", help="Viewport height"),
) -> None:
    """
    Settle the force layout and write the graph as SVG.
    """
    session, adapter = _open(document, width, height)

    if filter_type:
        session.dispatch(SetFilter(filter_type))
    if no_labels:
        session.dispatch(ToggleLabels())

    with console.status("Running layout..."):
        taken = session.layout.settle(ticks)
    session.redraw()
    adapter.save(output)

    console.print(
        f"[bold green]✓[/bold green] {session.model.node_count} nodes, "
        f"{session.model.link_count} links, {taken} ticks → [cyan]{output}[/cyan]"
    )


@app.command()
def inspect(
    node_id: str = typer.Argument(..., help="ID of the node to inspect"),
    document: Optional[str] = typer.Argument(None, help="Path or URL of the graph document"),
    as_html: bool = typer.Option(
        False,
        "--html",
        help="Print the panel's HTML fragment instead",
    ),
) -> None:
    """
    Show the detail panel for one node.
    """
    session, _ = _open(document)
    session.dispatch(Select(node_id))

    if not session.panel.visible:
        _suggest(session, node_id)
        raise typer.Exit(1)

    if as_html:
        console.print(session.panel.html, markup=False, highlight=False)
        return
    _print_detail(session.panel.detail)


@app.command()
def stats(
    document: Optional[str] = typer.Argument(None, help="Path or URL of the graph document"),
) -> None:
    """
    Count nodes and links per type.
    """
    session, _ = _open(document)
    model = session.model

    table = Table(title="Nodes", box=box.ROUNDED)
    table.add_column("Type", style="bold")
    table.add_column("Count", justify="right")
    for node_type, count in sorted(model.type_counts().items(), key=lambda kv: kv[0].value):
        color = node_color(node_type)
        table.add_row(f"[{color}]●[/{color}] {node_type.value}", str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{model.node_count}[/bold]")
    console.print(table)

    table = Table(title="Links", box=box.ROUNDED)
    table.add_column("Type", style="bold")
    table.add_column("Count", justify="right")
    for link_type, count in sorted(model.link_type_counts().items(), key=lambda kv: kv[0].value):
        table.add_row(link_type.value, str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{model.link_count}[/bold]")
    console.print(table)


@app.command()
def related(
    node_id: str = typer.Argument(..., help="ID of the center node"),
    document: Optional[str] = typer.Argument(None, help="Path or URL of the graph document"),
    depth: int = typer.Option(1, "--depth", "-n", help="Maximum number of hops"),
) -> None:
    """
    List the nodes within a number of hops of a node.
    """
    session, _ = _open(document)
    if node_id not in session.model:
        _suggest(session, node_id)
        raise typer.Exit(1)

    table = Table(title=f"Within {depth} hop(s) of {escape(node_id)}", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("File", style="dim")
    for node in session.model.related(node_id, depth):
        table.add_row(escape(node.id), node.type.value, escape(node.file_path))
    console.print(table)


# Helper functions for output formatting

def _suggest(session: GraphSession, node_id: str) -> None:
    """Print near matches for an unknown node id."""
    matches = [n.id for n in session.nodes if node_id in n.id or node_id == n.name]
    if matches:
        console.print(f"[yellow]Node '{escape(node_id)}' not found. Did you mean:[/yellow]")
        for match in matches[:5]:
            console.print(f"   • {escape(match)}")
    else:
        console.print(f"[red]Node '{escape(node_id)}' not found.[/red]")


def _print_detail(detail: NodeDetail) -> None:
    """Print the detail panel contents."""
    color = node_color(detail.type)
    console.print(f"\n[bold]{escape(detail.name)}[/bold] [{color}]{detail.type.value}[/{color}]")
    console.print(f"[bold]File:[/bold] {escape(detail.file_path)}")
    console.print(f"[bold]Lines:[/bold] {detail.line_range}")
    if detail.summary:
        console.print(f"[bold]Summary:[/bold] {escape(detail.summary)}")

    if detail.metadata:
        console.print("\n[bold]Metadata:[/bold]")
        for key, value in detail.metadata:
            console.print(f"   • {escape(key)}: {escape(value)}")

    console.print(Panel(Syntax(detail.content, "text", word_wrap=True), border_style="dim"))

    if not detail.relationships:
        console.print("[dim]No relationships.[/dim]")
        return

    table = Table(title="Relationships", box=box.SIMPLE)
    table.add_column("Direction")
    table.add_column("Type", style="bold")
    table.add_column("Node", style="cyan")
    for rel in detail.relationships:
        arrow = "→" if rel.direction == OUTGOING else "←"
        table.add_row(
            f"{arrow} {rel.direction}",
            rel.link_type.value,
            f"{escape(rel.other_name)} ({rel.other_type.value})",
        )
    console.print(table)


# Version and logging
def _version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"[bold]CodeView[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show debug logging",
    ),
) -> None:
    """
    CodeView: an interactive viewer for code dependency graphs.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


if __name__ == "__main__":
    app()
