import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dagfold._errors import (
    CycleDetectedError,
    DagfoldError,
    GraphCodecError,
    MissingOperationError,
    NotationError,
    NoUniqueRootError,
    OperationTableError,
    UnknownVertexError,
)
from dagfold._eval import call_string, evaluate_graph
from dagfold._io import export_graph_xml, export_text, load_graph_xml, load_notation, load_operations

from .config import ConfigError, DagfoldConfig, get_config
from .summary import render_summary, summarize_graph

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (progress)
err_console = Console(stderr=True)
# Console for stdout (diagnostics)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Dagfold CLI."""
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


def _fail(message: str) -> typer.Exit:
    """Print a single diagnostic line on stdout and build the exit signal."""
    out_console.print(f"[red]✗ {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_config() -> DagfoldConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _resolve_path(cli_value: Path | None, config_value: Path | None, option: str) -> Path:
    """Prefer the CLI option, then the [tool.dagfold] value."""
    if cli_value is not None:
        return cli_value
    if config_value is not None:
        return config_value
    msg = f"No path given. Pass {option} or configure it in [tool.dagfold] of pyproject.toml."
    raise typer.BadParameter(msg)


def _describe(error: DagfoldError) -> str:
    """Map an engine error to its user-facing diagnostic."""
    match error:
        case NotationError() | GraphCodecError() | UnknownVertexError() | MissingOperationError():
            return f"Invalid input: {error}"
        case OperationTableError():
            return f"Invalid operation table: {error}"
        case CycleDetectedError():
            return f"Invalid input - the graph contains a cycle: {error}"
        case NoUniqueRootError():
            return f"Invalid input - the graph has no unique extremal vertex: {error}"
        case _:
            return str(error)


def _write(output: Path, write: Callable[[], None]) -> None:
    try:
        write()
    except OSError as e:
        logger.debug("Write failed", exc_info=True)
        raise _fail(f"Could not create the output file {output}") from e


InputOption = Annotated[
    Path | None,
    typer.Option("--input1", help="Path to the input graph file"),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output1", help="Path to the output file"),
]


@app.command()
def build(
    *,
    input1: InputOption = None,
    output1: OutputOption = None,
) -> None:
    """Convert a graph in arc notation into an XML graph document."""
    config = _load_config()
    input_path = _resolve_path(input1, config.input, "--input1")
    output_path = _resolve_path(output1, config.output, "--output1")

    err_console.print(f"[cyan]Reading notation from:[/cyan] {escape(str(input_path))}")
    try:
        graph = load_notation(input_path)
    except OSError as e:
        raise _fail(f"Could not read the graph from {input_path}") from e
    except DagfoldError as e:
        raise _fail(_describe(e)) from e

    err_console.print(f"[cyan]Writing XML graph to:[/cyan] {escape(str(output_path))}")
    _write(output_path, lambda: export_graph_xml(graph, output_path))
    err_console.print("[green]✓ Graph written[/green]")


@app.command()
def render(
    *,
    input1: InputOption = None,
    output1: OutputOption = None,
) -> None:
    """Render an XML graph as a nested call expression from its root."""
    config = _load_config()
    input_path = _resolve_path(input1, config.input, "--input1")
    output_path = _resolve_path(output1, config.output, "--output1")

    err_console.print(f"[cyan]Reading XML graph from:[/cyan] {escape(str(input_path))}")
    try:
        graph = load_graph_xml(input_path)
        result = call_string(graph)
    except OSError as e:
        raise _fail(f"Could not read the graph from {input_path}") from e
    except DagfoldError as e:
        raise _fail(_describe(e)) from e

    err_console.print(f"[cyan]Writing call string to:[/cyan] {escape(str(output_path))}")
    _write(output_path, lambda: export_text(result, output_path))
    err_console.print("[green]✓ Call string written[/green]")


@app.command()
def evaluate(
    *,
    input1: InputOption = None,
    input2: Annotated[
        Path | None,
        typer.Option("--input2", help="Path to the JSON operation table"),
    ] = None,
    output1: OutputOption = None,
) -> None:
    """Evaluate an XML graph at its sink under a JSON operation table."""
    config = _load_config()
    input_path = _resolve_path(input1, config.input, "--input1")
    operations_path = _resolve_path(input2, config.operations, "--input2")
    output_path = _resolve_path(output1, config.output, "--output1")

    err_console.print(f"[cyan]Reading XML graph from:[/cyan] {escape(str(input_path))}")
    try:
        graph = load_graph_xml(input_path)
    except OSError as e:
        raise _fail(f"Could not read the graph from {input_path}") from e
    except DagfoldError as e:
        raise _fail(_describe(e)) from e

    err_console.print(f"[cyan]Reading operations from:[/cyan] {escape(str(operations_path))}")
    try:
        operations = load_operations(operations_path)
        result = evaluate_graph(graph, operations)
    except OSError as e:
        raise _fail(f"Could not read the operations from {operations_path}") from e
    except DagfoldError as e:
        raise _fail(_describe(e)) from e

    if result.value is None:
        raise _fail(f"The graph cannot be evaluated: {result.mismatch}")

    value = result.value
    err_console.print(f"[cyan]Result:[/cyan] {value!r}")
    err_console.print(f"[cyan]Writing result to:[/cyan] {escape(str(output_path))}")
    _write(output_path, lambda: export_text(repr(value), output_path))
    err_console.print("[green]✓ Evaluation complete[/green]")


@app.command()
def check(
    *,
    input1: InputOption = None,
) -> None:
    """Report the structure of an XML graph without writing any file."""
    config = _load_config()
    input_path = _resolve_path(input1, config.input, "--input1")

    err_console.print(f"[cyan]Reading XML graph from:[/cyan] {escape(str(input_path))}")
    try:
        summary = summarize_graph(load_graph_xml(input_path))
    except OSError as e:
        raise _fail(f"Could not read the graph from {input_path}") from e
    except DagfoldError as e:
        raise _fail(_describe(e)) from e

    render_summary(summary, err_console)

    if not (summary.renderable or summary.evaluable):
        raise _fail("The graph can be neither rendered nor evaluated")


def main() -> None:
    app()
