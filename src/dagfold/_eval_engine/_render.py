"""Call-string rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dagfold._errors import CycleDetectedError

if TYPE_CHECKING:
    from dagfold._graph import NodeTable


def render_call_string(table: NodeTable, root: int) -> str:
    """Render the graph below ``root`` as a nested call expression.

    A node without children renders as ``name()``; otherwise as
    ``name(child_1, ..., child_n)`` with children in ascending arc order.
    Shared subgraphs are rendered once and reused.

    Args:
        table: A validated node table.
        root: Handle of the node to render from.

    Returns:
        The call string.

    Raises:
        CycleDetectedError: If a cycle is reachable from ``root``, which can
            only happen when the table was not validated.

    Example:
        >>> from dagfold import build_node_table, parse_notation
        >>> table = build_node_table(parse_notation("(f,x,0),(f,y,1),"))
        >>> render_call_string(table, table.handle("f"))
        'f(x(), y())'

    """
    rendered: dict[int, str] = {}
    in_progress: set[int] = set()
    stack: list[tuple[int, bool]] = [(root, False)]

    while stack:
        handle, expanded = stack.pop()
        if handle in rendered:
            continue
        node = table.nodes[handle]

        if expanded:
            arguments = ", ".join(rendered[child] for child in node.children)
            rendered[handle] = f"{node.name}({arguments})"
            in_progress.discard(handle)
            continue

        if handle in in_progress:
            raise CycleDetectedError(node.name)
        in_progress.add(handle)
        stack.append((handle, True))
        stack.extend((child, False) for child in reversed(node.children) if child not in rendered)

    return rendered[root]
