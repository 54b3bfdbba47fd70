"""Structural summary for the check command.

summarize_graph is the functional core (no I/O); render_summary does the
Rich output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dagfold._graph import Direction, build_node_table, find_cycle

if TYPE_CHECKING:
    from rich.console import Console

    from dagfold._model import Graph


@dataclass(frozen=True, slots=True)
class GraphSummary:
    """Structural facts about a graph."""

    vertex_count: int
    arc_count: int
    roots: tuple[str, ...]
    sinks: tuple[str, ...]
    cycle_vertex: str | None

    @property
    def acyclic(self) -> bool:
        return self.cycle_vertex is None

    @property
    def renderable(self) -> bool:
        """Check if the graph has a unique root and no cycle."""
        return self.acyclic and len(self.roots) == 1

    @property
    def evaluable(self) -> bool:
        """Check if the graph has a unique sink and no cycle."""
        return self.acyclic and len(self.sinks) == 1


def summarize_graph(graph: Graph) -> GraphSummary:
    """Collect structural facts about a graph.

    Raises:
        UnknownVertexError: If an arc endpoint is not declared.

    """
    table = build_node_table(graph)
    cycle = find_cycle(table, Direction.DOWNSTREAM)
    return GraphSummary(
        vertex_count=len(table),
        arc_count=len(graph.arcs),
        roots=tuple(table.nodes[h].name for h in table.extremal(Direction.DOWNSTREAM)),
        sinks=tuple(table.nodes[h].name for h in table.extremal(Direction.UPSTREAM)),
        cycle_vertex=table.nodes[cycle].name if cycle is not None else None,
    )


def _format_extremal(names: tuple[str, ...]) -> str:
    if not names:
        return "[red]none[/red]"
    if len(names) == 1:
        return f"[green]{escape(names[0])}[/green]"
    return f"[red]ambiguous: {escape(', '.join(names))}[/red]"


def render_summary(summary: GraphSummary, console: Console) -> None:
    """Render a graph summary as a Rich panel.

    Args:
        summary: GraphSummary to render.
        console: Rich Console to output to.

    """
    table = Table(show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Vertices", str(summary.vertex_count))
    table.add_row("Arcs", str(summary.arc_count))
    table.add_row("Root (no parents)", _format_extremal(summary.roots))
    table.add_row("Sink (no children)", _format_extremal(summary.sinks))
    if summary.acyclic:
        table.add_row("Cycles", "[green]none[/green]")
    else:
        table.add_row("Cycles", f"[red]through {escape(summary.cycle_vertex or '')}[/red]")

    yes = "[green]✓ yes[/green]"
    no = "[red]✗ no[/red]"
    table.add_row("Renderable", yes if summary.renderable else no)
    table.add_row("Evaluable", yes if summary.evaluable else no)

    console.print(Panel(table, title="[bold]Graph[/bold]", border_style="cyan"))
