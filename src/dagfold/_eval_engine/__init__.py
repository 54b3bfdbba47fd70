"""Evaluation engine module for dagfold.

This module provides the folds that run over a validated node table:

- render_call_string: Nested call expression from the root downwards
- evaluate_node_table: Numeric value of the sink under its operations
- EvaluationResult: The numeric value, or the arity mismatch that voided it
"""

from ._engine import ArityMismatch, EvaluationResult, evaluate_node_table
from ._render import render_call_string

__all__ = [
    "ArityMismatch",
    "EvaluationResult",
    "evaluate_node_table",
    "render_call_string",
]
