"""Checked unsigned arithmetic for the four formula operators."""

from __future__ import annotations

from typing import Callable, Union

from csvcalc._errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    CalcError,
    DivideByZeroError,
    ErrorCode,
    MultiplicationOverflowError,
)
from csvcalc.calc._parser import Operator

# Largest 32-bit unsigned value, the default cell value limit
UINT32_MAX = 2**32 - 1

# ---------------------------------------------------------------------------
# ArithmeticFault: typed failure values returned instead of raised
# ---------------------------------------------------------------------------


class ArithmeticFault:
    """Failure value returned by a checked operator.

    Use ``ArithmeticFault.of(code)`` to get the cached singleton for a code.
    The resolution engine turns a fault into the matching exception with
    :meth:`to_error`.
    """

    __slots__ = ("code",)
    _cache: dict[ErrorCode, ArithmeticFault] = {}
    _errors: dict[ErrorCode, type[CalcError]] = {
        ErrorCode.ARITHMETIC_OVERFLOW: ArithmeticOverflowError,
        ErrorCode.ARITHMETIC_UNDERFLOW: ArithmeticUnderflowError,
        ErrorCode.DIVIDE_BY_ZERO: DivideByZeroError,
        ErrorCode.MULTIPLICATION_OVERFLOW: MultiplicationOverflowError,
    }

    OVERFLOW: ArithmeticFault
    UNDERFLOW: ArithmeticFault
    DIV0: ArithmeticFault
    MUL_OVERFLOW: ArithmeticFault

    def __init__(self, code: ErrorCode) -> None:
        self.code = code

    @classmethod
    def of(cls, code: ErrorCode) -> ArithmeticFault:
        if code not in cls._errors:
            raise ValueError(f"Not an arithmetic error code: {code!r}")
        if code not in cls._cache:
            cls._cache[code] = cls(code)
        return cls._cache[code]

    def to_error(self, cell: str | None = None) -> CalcError:
        err = self._errors[self.code]()
        if cell is not None:
            err.details["cell"] = cell
        return err

    def __repr__(self) -> str:
        return f"ArithmeticFault({self.code.value})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ArithmeticFault):
            return self.code == other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)


# Singletons
ArithmeticFault.OVERFLOW = ArithmeticFault.of(ErrorCode.ARITHMETIC_OVERFLOW)
ArithmeticFault.UNDERFLOW = ArithmeticFault.of(ErrorCode.ARITHMETIC_UNDERFLOW)
ArithmeticFault.DIV0 = ArithmeticFault.of(ErrorCode.DIVIDE_BY_ZERO)
ArithmeticFault.MUL_OVERFLOW = ArithmeticFault.of(ErrorCode.MULTIPLICATION_OVERFLOW)

Outcome = Union[int, ArithmeticFault]


# ---------------------------------------------------------------------------
# Operators. Operands are non-negative and at most *limit*.
# ---------------------------------------------------------------------------


def checked_add(a: int, b: int, limit: int) -> Outcome:
    total = a + b
    if total > limit:
        return ArithmeticFault.OVERFLOW
    return total


def checked_sub(a: int, b: int, limit: int) -> Outcome:
    if a < b:
        return ArithmeticFault.UNDERFLOW
    return a - b


def checked_mul(a: int, b: int, limit: int) -> Outcome:
    product = a * b
    if product > limit:
        return ArithmeticFault.MUL_OVERFLOW
    return product


def checked_div(a: int, b: int, limit: int) -> Outcome:
    if b == 0:
        return ArithmeticFault.DIV0
    return a // b


OPERATIONS: dict[Operator, Callable[[int, int, int], Outcome]] = {
    Operator.ADD: checked_add,
    Operator.SUB: checked_sub,
    Operator.MUL: checked_mul,
    Operator.DIV: checked_div,
}


def apply(op: Operator, a: int, b: int, limit: int) -> Outcome:
    """Apply *op* to ``a`` and ``b``, returning the result or a fault."""
    return OPERATIONS[op](a, b, limit)
