"""File input and output for graphs, operation tables and results."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._codec import graph_from_xml, graph_to_xml
from ._notation import parse_notation
from ._operations import load_operation_table

if TYPE_CHECKING:
    from pathlib import Path

    from ._model import Graph
    from ._operations import Operation

logger = logging.getLogger(__name__)


def load_notation(input_path: Path) -> Graph:
    """Read and parse a notation file.

    Raises:
        OSError: If the file cannot be read.
        NotationError: If the content is malformed.

    """
    graph = parse_notation(input_path.read_bytes())
    logger.debug(f"Loaded notation graph from {input_path}")
    return graph


def load_graph_xml(input_path: Path) -> Graph:
    """Read and decode an XML graph file.

    Raises:
        OSError: If the file cannot be read.
        GraphCodecError: If the document is malformed.

    """
    graph = graph_from_xml(input_path.read_bytes())
    logger.debug(f"Loaded XML graph from {input_path}")
    return graph


def load_operations(input_path: Path) -> dict[str, Operation]:
    """Read and decode a JSON operation table file.

    Raises:
        OSError: If the file cannot be read.
        OperationTableError: If the content is malformed.

    """
    operations = load_operation_table(input_path.read_bytes())
    logger.debug(f"Loaded {len(operations)} operations from {input_path}")
    return operations


def export_graph_xml(graph: Graph, output_path: Path) -> None:
    """Write a graph as an XML document."""
    _write_text(graph_to_xml(graph), output_path)
    logger.debug(f"Exported graph to {output_path}")


def export_text(text: str, output_path: Path) -> None:
    """Write a rendered result."""
    _write_text(text, output_path)
    logger.debug(f"Exported result to {output_path}")


def _write_text(text: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        f.write(text)
