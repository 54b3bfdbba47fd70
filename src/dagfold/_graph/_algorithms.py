"""Structural checks over a node table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dagfold._errors import CycleDetectedError, NoUniqueRootError

if TYPE_CHECKING:
    from ._node_table import Direction, NodeTable

logger = logging.getLogger(__name__)


def _reaches_itself(table: NodeTable, start: int, direction: Direction) -> bool:
    """Check whether ``start`` can reach itself along ``direction``.

    The start identity is compared at every edge, so a path that returns to
    ``start`` through an already visited node is still reported.
    """
    visited = {start}
    stack = [start]
    while stack:
        current = stack.pop()
        for neighbor in table.nodes[current].edges(direction):
            if neighbor == start:
                return True
            if neighbor not in visited:
                visited.add(neighbor)
                stack.append(neighbor)
    return False


def find_cycle(table: NodeTable, direction: Direction) -> int | None:
    """Find a vertex that lies on a cycle.

    Every vertex is tried as a start with a fresh visited set.

    Returns:
        Handle of the first vertex (in handle order) that reaches itself, or
        None if the graph is acyclic.

    """
    for start in range(len(table)):
        if _reaches_itself(table, start, direction):
            return start
    return None


def find_extremal(table: NodeTable, direction: Direction) -> int:
    """Get the unique vertex a traversal in ``direction`` starts from.

    Raises:
        NoUniqueRootError: If there is no such vertex or more than one.

    """
    candidates = table.extremal(direction)
    if len(candidates) != 1:
        raise NoUniqueRootError(table.nodes[handle].name for handle in candidates)
    return candidates[0]


def validate(table: NodeTable, direction: Direction) -> int:
    """Check that the table is acyclic with a unique extremal vertex.

    The cycle check runs first, so a graph made of a single cycle (which has
    no extremal vertex at all) is reported as a cycle.

    Returns:
        Handle of the unique extremal vertex.

    Raises:
        CycleDetectedError: If some vertex can reach itself.
        NoUniqueRootError: If the extremal vertex is missing or ambiguous.

    """
    cyclic = find_cycle(table, direction)
    if cyclic is not None:
        raise CycleDetectedError(table.nodes[cyclic].name)

    extremal = find_extremal(table, direction)
    logger.debug("Validated %s traversal from '%s'", direction, table.nodes[extremal].name)
    return extremal
