"""Single-rooted DAG parsing, validation, rendering and evaluation."""

__all__ = [
    "EXP",
    "MULT",
    "PLUS",
    "Arc",
    "ArityMismatch",
    "CycleDetectedError",
    "DagfoldError",
    "Direction",
    "EvaluationResult",
    "Graph",
    "GraphCodecError",
    "MissingOperationError",
    "Node",
    "NoUniqueRootError",
    "NodeTable",
    "NotationError",
    "OpKind",
    "Operation",
    "OperationTableError",
    "UnknownVertexError",
    "build_node_table",
    "call_string",
    "evaluate",
    "evaluate_graph",
    "evaluate_node_table",
    "format_notation",
    "graph_from_xml",
    "graph_to_xml",
    "load_operation_table",
    "parse_notation",
    "parse_operation",
    "render_call_string",
    "validate",
]

from ._codec import graph_from_xml, graph_to_xml
from ._errors import (
    CycleDetectedError,
    DagfoldError,
    GraphCodecError,
    MissingOperationError,
    NotationError,
    NoUniqueRootError,
    OperationTableError,
    UnknownVertexError,
)
from ._eval import call_string, evaluate, evaluate_graph
from ._eval_engine import ArityMismatch, EvaluationResult, evaluate_node_table, render_call_string
from ._graph import Direction, Node, NodeTable, build_node_table, validate
from ._model import Arc, Graph
from ._notation import format_notation, parse_notation
from ._operations import EXP, MULT, PLUS, Operation, OpKind, load_operation_table, parse_operation
