"""Numeric evaluation of a node table under per-vertex operations."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dagfold._errors import CycleDetectedError, MissingOperationError
from dagfold._operations import OpKind

if TYPE_CHECKING:
    from dagfold._graph import Node, NodeTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArityMismatch:
    """A vertex whose parent count does not fit its operation.

    Attributes:
        vertex: The vertex name.
        kind: The operation of the vertex.
        parent_count: How many parents the vertex has.

    """

    vertex: str
    kind: OpKind
    parent_count: int

    def __str__(self) -> str:
        return f"'{self.vertex}' ({self.kind}) has {self.parent_count} parent(s), expected {_expected_arity(self.kind)}"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Result of evaluating a node table.

    A structurally valid graph can still be inconsistent with its operation
    table. That is a result, not an error: ``value`` is None and
    ``mismatch`` names the vertex that voided the evaluation.

    Attributes:
        value: The value of the sink, or None if the graph is not evaluable.
        mismatch: The first arity mismatch found, if any.

    """

    value: float | None
    mismatch: ArityMismatch | None = None

    @property
    def success(self) -> bool:
        """Check if the graph evaluated to a number."""
        return self.value is not None


def _expected_arity(kind: OpKind) -> str:
    match kind:
        case OpKind.CONST:
            return "any number"
        case OpKind.EXP:
            return "exactly 1"
        case OpKind.PLUS | OpKind.MULT:
            return "at least 2"


def _arity_fits(kind: OpKind, parent_count: int) -> bool:
    match kind:
        case OpKind.CONST:
            return True
        case OpKind.EXP:
            return parent_count == 1
        case OpKind.PLUS | OpKind.MULT:
            return parent_count >= 2  # noqa: PLR2004


def _exp(value: float) -> float:
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def _fold(node: Node, values: dict[int, float]) -> float:
    """Combine the already computed parent values of ``node``."""
    operation = node.payload
    assert operation is not None  # noqa: S101
    match operation.kind:
        case OpKind.CONST:
            assert operation.value is not None  # noqa: S101
            return operation.value
        case OpKind.EXP:
            return _exp(values[node.parents[0]])
        case OpKind.PLUS:
            result = 0.0
            for parent in node.parents:
                result += values[parent]
            return result
        case OpKind.MULT:
            result = 1.0
            for parent in node.parents:
                result *= values[parent]
            return result


def evaluate_node_table(table: NodeTable, sink: int) -> EvaluationResult:
    """Evaluate the value of ``sink`` by folding over parents.

    Values flow from source vertices towards the sink. A constant ignores
    its parents, ``exp`` needs exactly one parent, ``+`` and ``*`` need at
    least two and fold left to right over the parents in recorded order.

    The first arity mismatch aborts the whole evaluation: a single bad
    subgraph makes the graph unevaluable.

    Args:
        table: A validated node table built with payloads.
        sink: Handle of the node to evaluate.

    Returns:
        EvaluationResult with the value, or with the mismatch that voided it.

    Raises:
        MissingOperationError: If a reached node has no payload.
        CycleDetectedError: If a cycle is reachable from ``sink``, which can
            only happen when the table was not validated.

    """
    values: dict[int, float] = {}
    in_progress: set[int] = set()
    stack: list[tuple[int, bool]] = [(sink, False)]

    while stack:
        handle, expanded = stack.pop()
        if handle in values:
            continue
        node = table.nodes[handle]
        if node.payload is None:
            raise MissingOperationError(node.name)
        kind = node.payload.kind

        if expanded or kind == OpKind.CONST:
            values[handle] = _fold(node, values)
            in_progress.discard(handle)
            logger.debug("Evaluated %s (%s) = %r", node.name, node.payload, values[handle])
            continue

        if not _arity_fits(kind, len(node.parents)):
            mismatch = ArityMismatch(vertex=node.name, kind=kind, parent_count=len(node.parents))
            logger.debug("Arity mismatch: %s", mismatch)
            return EvaluationResult(value=None, mismatch=mismatch)

        if handle in in_progress:
            raise CycleDetectedError(node.name)
        in_progress.add(handle)
        stack.append((handle, True))
        stack.extend((parent, False) for parent in reversed(node.parents) if parent not in values)

    return EvaluationResult(value=values[sink])
