"""Parser and formatter for the bracketed arc notation.

The notation is a sequence of records ``(source,target,order)``, each
followed by a comma::

    (A,B,0),(B,C,1),

Whitespace is ignored everywhere, including inside names.
"""

from __future__ import annotations

import logging
from enum import StrEnum, auto

from ._errors import NotationError
from ._model import Arc, Graph

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(" \t\n\r\x0c")
_MAX_ORDER = 2**31 - 1


class ParserState(StrEnum):
    """What the notation parser expects to read next."""

    EXPECT_OPEN_PAREN = auto()
    EXPECT_FROM = auto()
    EXPECT_TO = auto()
    EXPECT_ORDER = auto()
    EXPECT_COMMA_OR_END = auto()


# Record boundaries: after a trailing comma (or on empty input) and right after ')'.
_ACCEPTING_STATES = frozenset({ParserState.EXPECT_OPEN_PAREN, ParserState.EXPECT_COMMA_OR_END})


def _is_name_char(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_digit(char: str) -> bool:
    return char.isascii() and char.isdigit()


def _finish_order(digits: list[str], position: int) -> int:
    if not digits:
        raise NotationError(position, "missing arc order")
    order = int("".join(digits))
    if order > _MAX_ORDER:
        raise NotationError(position, f"arc order {order} does not fit a 32-bit integer")
    return order


def parse_notation(text: str | bytes) -> Graph:  # noqa: C901, PLR0912
    """Parse arc notation into a canonical Graph.

    The vertex set is the union of all arc endpoints, sorted by name. Arcs are
    stably sorted by ascending order.

    Args:
        text: Notation text, or raw ASCII bytes.

    Returns:
        The parsed Graph.

    Raises:
        NotationError: If the input does not follow the record grammar. No
            partial graph is produced.

    Example:
        >>> parse_notation("(A,B,0),(B,C,1),").vertices
        ('A', 'B', 'C')

    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError as e:
            raise NotationError(e.start, "input contains a non-ASCII byte") from e

    state = ParserState.EXPECT_OPEN_PAREN
    arcs: list[Arc] = []
    source: list[str] = []
    target: list[str] = []
    order: list[str] = []

    for position, char in enumerate(text):
        if char in _WHITESPACE:
            continue

        match state:
            case ParserState.EXPECT_OPEN_PAREN:
                if char != "(":
                    raise NotationError(position, f"expected '(' but found {char!r}")
                state = ParserState.EXPECT_FROM
            case ParserState.EXPECT_FROM:
                if char == ",":
                    if not source:
                        raise NotationError(position, "empty source vertex name")
                    state = ParserState.EXPECT_TO
                elif _is_name_char(char):
                    source.append(char)
                else:
                    raise NotationError(position, f"invalid character {char!r} in vertex name")
            case ParserState.EXPECT_TO:
                if char == ",":
                    if not target:
                        raise NotationError(position, "empty target vertex name")
                    state = ParserState.EXPECT_ORDER
                elif _is_name_char(char):
                    target.append(char)
                else:
                    raise NotationError(position, f"invalid character {char!r} in vertex name")
            case ParserState.EXPECT_ORDER:
                if char == ")":
                    arcs.append(Arc("".join(source), "".join(target), _finish_order(order, position)))
                    source.clear()
                    target.clear()
                    order.clear()
                    state = ParserState.EXPECT_COMMA_OR_END
                elif _is_digit(char):
                    order.append(char)
                else:
                    raise NotationError(position, f"invalid character {char!r} in arc order")
            case ParserState.EXPECT_COMMA_OR_END:
                if char != ",":
                    raise NotationError(position, f"expected ',' after record but found {char!r}")
                state = ParserState.EXPECT_OPEN_PAREN

    if state not in _ACCEPTING_STATES:
        raise NotationError(len(text), "unterminated record")

    graph = Graph.from_arcs(arcs)
    logger.debug("Parsed %d vertices and %d arcs from notation", len(graph.vertices), len(graph.arcs))
    return graph


def format_notation(graph: Graph) -> str:
    """Serialize the arcs of a graph back to notation.

    Vertices without any arc cannot be expressed in the notation and are
    dropped.

    Example:
        >>> format_notation(Graph.from_arcs([Arc("A", "B", 0)]))
        '(A,B,0),'

    """
    return "".join(f"({arc.source},{arc.target},{arc.order})," for arc in graph.arcs)
