"""Graph module providing the node arena and structural validation.

This module contains:
- Direction: Which edges a traversal follows
- NodeTable: An immutable arena of nodes indexed by integer handle
- build_node_table: Builder from a Graph and optional payloads
- validate: Cycle check plus unique extremal vertex lookup
"""

from ._algorithms import find_cycle, find_extremal, validate
from ._node_table import Direction, Node, NodeTable, build_node_table

__all__ = [
    "Direction",
    "Node",
    "NodeTable",
    "build_node_table",
    "find_cycle",
    "find_extremal",
    "validate",
]
