"""Per-vertex operations and the JSON operation table.

An operation table maps vertex names to descriptors::

    {"a": 2, "b": "3.5", "s": "+", "p": "*", "e": "exp"}

A descriptor is either one of the symbolic tags ``"exp"``, ``"+"``, ``"*"``
or a number, which means a constant.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any

from pydantic import PlainValidator, TypeAdapter, ValidationError

from ._errors import OperationTableError


class OpKind(StrEnum):
    """The kind of computation a vertex performs."""

    CONST = "const"
    EXP = "exp"
    PLUS = "+"
    MULT = "*"


_SYMBOLIC_KINDS = frozenset({OpKind.EXP, OpKind.PLUS, OpKind.MULT})
_DECIMAL_LITERAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


@dataclass(frozen=True, slots=True)
class Operation:
    """A tagged operation. ``value`` is only set for constants."""

    kind: OpKind
    value: float | None = None

    @classmethod
    def const(cls, value: float) -> Operation:
        return cls(kind=OpKind.CONST, value=float(value))

    def __str__(self) -> str:
        if self.kind == OpKind.CONST:
            return repr(self.value)
        return self.kind.value


EXP = Operation(OpKind.EXP)
PLUS = Operation(OpKind.PLUS)
MULT = Operation(OpKind.MULT)


def _finite_const(literal: float | str) -> Operation:
    try:
        value = float(literal)
    except OverflowError:
        msg = "Constant is too large for a float"
        raise ValueError(msg) from None
    if not math.isfinite(value):
        msg = f"Constant must be a finite number, got {value!r}"
        raise ValueError(msg)
    return Operation.const(value)


def parse_operation(descriptor: Any) -> Operation:
    """Decode a single descriptor.

    Symbolic tags are tried first; anything else must be a finite number (or
    a string holding a decimal literal) and becomes a constant.

    Raises:
        ValueError: If the descriptor is neither a tag nor a finite number.

    """
    # bool is an int subclass but never a valid constant
    if isinstance(descriptor, bool):
        msg = f"Invalid operation descriptor: {descriptor!r}"
        raise ValueError(msg)  # noqa: TRY004

    if isinstance(descriptor, str):
        if descriptor in _SYMBOLIC_KINDS:
            return Operation(OpKind(descriptor))
        if not _DECIMAL_LITERAL.fullmatch(descriptor):
            msg = f"Unknown operation '{descriptor}', expected one of 'exp', '+', '*' or a number"
            raise ValueError(msg)
        return _finite_const(descriptor)

    if isinstance(descriptor, (int, float)):
        return _finite_const(descriptor)

    msg = f"Invalid operation descriptor: {descriptor!r}"
    raise ValueError(msg)


OperationDescriptor = Annotated[Operation, PlainValidator(parse_operation)]

_operation_table_adapter: TypeAdapter[dict[str, Operation]] = TypeAdapter(dict[str, OperationDescriptor])


def load_operation_table(text: str | bytes) -> dict[str, Operation]:
    """Decode a JSON operation table keyed by vertex name.

    Raises:
        OperationTableError: If the document is not a JSON object of valid
            descriptors.

    """
    try:
        return _operation_table_adapter.validate_json(text)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        msg = f"{location}: {first['msg']}"
        raise OperationTableError(msg) from e
