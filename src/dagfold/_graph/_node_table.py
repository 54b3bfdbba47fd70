"""Node arena built once from a Graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING

from dagfold._errors import MissingOperationError, UnknownVertexError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from dagfold._model import Graph
    from dagfold._operations import Operation

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    """The edge direction a traversal follows."""

    DOWNSTREAM = auto()  # Follow children; the extremal vertex has no parents
    UPSTREAM = auto()  # Follow parents; the extremal vertex has no children


@dataclass(frozen=True, slots=True)
class Node:
    """A vertex with its derived edge lists.

    Attributes:
        name: The vertex name.
        children: Handles of child nodes, ordered by ascending arc order.
        parents: Handles of parent nodes, in arc-list order.
        payload: The vertex operation, if an operation table was supplied.

    """

    name: str
    children: tuple[int, ...] = ()
    parents: tuple[int, ...] = ()
    payload: Operation | None = None

    def edges(self, direction: Direction) -> tuple[int, ...]:
        """Get the neighbors reached by following ``direction``."""
        match direction:
            case Direction.DOWNSTREAM:
                return self.children
            case Direction.UPSTREAM:
                return self.parents


@dataclass(frozen=True, slots=True)
class NodeTable:
    """An immutable arena of nodes.

    Names are resolved to integer handles once, at build time; edges are
    stored as handle tuples.

    Attributes:
        nodes: Nodes indexed by handle.
        index: Mapping from vertex name to handle.

    """

    nodes: tuple[Node, ...] = ()
    index: dict[str, int] = field(default_factory=dict)

    def handle(self, name: str) -> int:
        """Get the handle of a vertex.

        Raises:
            KeyError: If no vertex has this name.

        """
        return self.index[name]

    def node(self, name: str) -> Node:
        """Get a node by vertex name."""
        return self.nodes[self.index[name]]

    def extremal(self, direction: Direction) -> list[int]:
        """Get handles of vertices where a traversal in ``direction`` starts.

        For DOWNSTREAM these are vertices without parents (roots); for
        UPSTREAM, vertices without children (sinks).
        """
        opposite = Direction.UPSTREAM if direction == Direction.DOWNSTREAM else Direction.DOWNSTREAM
        return [handle for handle, node in enumerate(self.nodes) if not node.edges(opposite)]

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __contains__(self, name: object) -> bool:
        """Check if a vertex name is in the table."""
        return name in self.index


def build_node_table(graph: Graph, payloads: Mapping[str, Operation] | None = None) -> NodeTable:
    """Build the node arena for a graph.

    Children of a node are ordered by ascending arc order, ties keeping
    arc-list order. Parents keep arc-list order. Duplicate vertex names
    collapse to a single node.

    Args:
        graph: The graph to build from.
        payloads: Optional operation per vertex. When given, every vertex
            must have an entry; extra entries are ignored.

    Returns:
        The built NodeTable.

    Raises:
        UnknownVertexError: If an arc endpoint is not a declared vertex.
        MissingOperationError: If payloads are given and a vertex has none.

    """
    index: dict[str, int] = {}
    for vertex in graph.vertices:
        index.setdefault(vertex, len(index))
    names = list(index)

    children: list[list[tuple[int, int, int]]] = [[] for _ in names]
    parents: list[list[int]] = [[] for _ in names]
    for position, arc in enumerate(graph.arcs):
        for endpoint in (arc.source, arc.target):
            if endpoint not in index:
                raise UnknownVertexError(endpoint)
        source = index[arc.source]
        target = index[arc.target]
        children[source].append((arc.order, position, target))
        parents[target].append(source)

    if payloads is not None:
        for name in names:
            if name not in payloads:
                raise MissingOperationError(name)

    nodes = tuple(
        Node(
            name=name,
            children=tuple(target for _, _, target in sorted(children[handle])),
            parents=tuple(parents[handle]),
            payload=payloads[name] if payloads is not None else None,
        )
        for handle, name in enumerate(names)
    )
    logger.debug("Built node table with %d nodes and %d arcs", len(nodes), len(graph.arcs))
    return NodeTable(nodes=nodes, index=index)
