from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._eval_engine import EvaluationResult, evaluate_node_table, render_call_string
from ._graph import Direction, build_node_table, validate

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._model import Graph
    from ._operations import Operation

logger = logging.getLogger(__name__)


def call_string(graph: Graph) -> str:
    """Render a graph as a nested call expression from its unique root.

    Raises:
        UnknownVertexError: If an arc endpoint is not declared.
        CycleDetectedError: If the graph has a cycle.
        NoUniqueRootError: If there is not exactly one vertex without parents.

    """
    table = build_node_table(graph)
    root = validate(table, Direction.DOWNSTREAM)
    logger.debug(f"Rendering call string from root '{table.nodes[root].name}'")
    return render_call_string(table, root)


def evaluate_graph(graph: Graph, operations: Mapping[str, Operation]) -> EvaluationResult:
    """Evaluate a graph at its unique sink under an operation table.

    Raises:
        UnknownVertexError: If an arc endpoint is not declared.
        MissingOperationError: If a vertex has no operation.
        CycleDetectedError: If the graph has a cycle.
        NoUniqueRootError: If there is not exactly one vertex without children.

    """
    table = build_node_table(graph, operations)
    sink = validate(table, Direction.UPSTREAM)
    logger.debug(f"Evaluating from sink '{table.nodes[sink].name}'")
    return evaluate_node_table(table, sink)


def evaluate(graph: Graph, operations: Mapping[str, Operation]) -> float | None:
    """Evaluate a graph, returning None if it is not evaluable."""
    return evaluate_graph(graph, operations).value
