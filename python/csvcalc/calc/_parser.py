"""Formula parser: ``=<col><row><op><col><row>`` -> :class:`ExpressionNode`."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from csvcalc._errors import MalformedExpressionError, UnknownOperatorError
from csvcalc._table import CellRef

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Column spec: one or more non-digits (the column name) then the row id.
# ASCII digits only; str.isdigit() would also accept other scripts.
_COLSPEC = r"([^0-9]+)([0-9]+)"
_COLSPEC_PREFIX_RE = re.compile(_COLSPEC)
_COLSPEC_RE = re.compile(rf"{_COLSPEC}\Z")


class Operator(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


@dataclass(frozen=True)
class ExpressionNode:
    """One parsed formula cell awaiting resolution."""

    op: Operator
    first: CellRef
    second: CellRef
    target: tuple[int, int]  # (internal row index, column index)
    source: str = ""  # original token, for diagnostics


def is_formula(token: str) -> bool:
    return token.startswith("=")


def parse_formula(token: str, target_row: int, target_col: int) -> ExpressionNode:
    """Parse a formula token for the cell at ``(target_row, target_col)``.

    Columns and rows are not looked up here, so a reference to a missing
    column only fails when the formula is resolved.
    """
    if not is_formula(token):
        raise MalformedExpressionError(token)
    body = token[1:]

    first = _COLSPEC_PREFIX_RE.match(body)
    if not first:
        raise MalformedExpressionError(token)

    pos = first.end()
    if pos >= len(body):
        # no operator and no second operand
        raise MalformedExpressionError(token)

    symbol = body[pos]
    try:
        op = Operator(symbol)
    except ValueError:
        raise UnknownOperatorError(token, symbol) from None

    second = _COLSPEC_RE.match(body, pos + 1)
    if not second:
        raise MalformedExpressionError(token)

    return ExpressionNode(
        op=op,
        first=CellRef(first.group(1), int(first.group(2))),
        second=CellRef(second.group(1), int(second.group(2))),
        target=(target_row, target_col),
        source=token,
    )
