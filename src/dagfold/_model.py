"""Canonical in-memory graph: a vertex list plus an arc list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class Arc:
    """A directed arc ``source -> target``.

    ``order`` is the argument position of ``target`` among the children of
    ``source``. It does not have to start at zero or be contiguous.
    """

    source: str
    target: str
    order: int


@dataclass(frozen=True, slots=True)
class Graph:
    """A set of named vertices and the arcs between them.

    Referential integrity (every arc endpoint is a declared vertex) is not
    checked here; it is enforced when the node table is built.

    Attributes:
        vertices: Vertex names.
        arcs: Arcs in their recorded order.

    """

    vertices: tuple[str, ...] = ()
    arcs: tuple[Arc, ...] = ()

    @classmethod
    def from_arcs(cls, arcs: Iterable[Arc]) -> Graph:
        """Build a canonical graph whose vertex set is the union of arc endpoints.

        Example:
            >>> Graph.from_arcs([Arc("b", "a", 0)]).vertices
            ('a', 'b')

        """
        arcs = tuple(arcs)
        vertices: set[str] = set()
        for arc in arcs:
            vertices.add(arc.source)
            vertices.add(arc.target)
        return cls(vertices=tuple(vertices), arcs=arcs).canonical()

    def canonical(self) -> Graph:
        """Return a copy with sorted vertices and arcs stably sorted by order."""
        return Graph(
            vertices=tuple(sorted(set(self.vertices))),
            arcs=tuple(sorted(self.arcs, key=lambda arc: arc.order)),
        )

    def __len__(self) -> int:
        """Return the number of vertices."""
        return len(self.vertices)

    def __contains__(self, vertex: object) -> bool:
        """Check if a vertex is declared."""
        return vertex in self.vertices
