"""Exception types raised while parsing, building and validating graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class DagfoldError(Exception):
    """Base class for all dagfold errors."""


class NotationError(DagfoldError):
    """Raised when notation text does not follow the record grammar."""

    def __init__(self, position: int, reason: str) -> None:
        self.position = position
        self.reason = reason
        super().__init__(f"Invalid notation at position {position}: {reason}")


class GraphCodecError(DagfoldError):
    """Raised when an XML graph document cannot be decoded."""


class OperationTableError(DagfoldError):
    """Raised when an operation table cannot be decoded."""


class UnknownVertexError(DagfoldError):
    """Raised when an arc references a vertex that is not declared."""

    def __init__(self, vertex: str) -> None:
        self.vertex = vertex
        super().__init__(f"Arc references undeclared vertex '{vertex}'")


class MissingOperationError(DagfoldError):
    """Raised when a vertex has no entry in the operation table."""

    def __init__(self, vertex: str) -> None:
        self.vertex = vertex
        super().__init__(f"No operation given for vertex '{vertex}'")


class NoUniqueRootError(DagfoldError):
    """Raised when the graph has zero or several extremal vertices."""

    def __init__(self, candidates: Iterable[str]) -> None:
        self.candidates = tuple(candidates)
        if self.candidates:
            found = ", ".join(self.candidates)
            msg = f"Expected exactly one extremal vertex, found {len(self.candidates)}: {found}"
        else:
            msg = "Expected exactly one extremal vertex, found none"
        super().__init__(msg)


class CycleDetectedError(DagfoldError):
    """Raised when a vertex can reach itself."""

    def __init__(self, vertex: str) -> None:
        self.vertex = vertex
        super().__init__(f"Cycle detected through vertex '{vertex}'")
