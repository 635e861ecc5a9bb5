"""Exception classes for table loading and formula resolution.

Every error is fatal to the resolution session that raised it: there is no
partial result and no per-row recovery.

Exception Hierarchy:
    CalcError (base, subclass of ValueError)
    ├── DuplicateColumnNameError
    ├── DuplicateRowIndexError
    ├── BadDimensionsError
    ├── NotANumberError
    ├── MalformedExpressionError
    ├── UnknownOperatorError
    ├── UnknownReferenceError
    ├── SelfReferenceError
    ├── CycleDetectedError
    ├── ArithmeticOverflowError
    ├── ArithmeticUnderflowError
    ├── DivideByZeroError
    ├── MultiplicationOverflowError
    └── FileOpenError
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error kinds surfaced to callers."""

    DUPLICATE_COLUMN_NAME = "DuplicateColumnName"
    DUPLICATE_ROW_INDEX = "DuplicateRowIndex"
    BAD_DIMENSIONS = "BadDimensions"
    NOT_A_NUMBER = "NotANumber"
    MALFORMED_EXPRESSION = "MalformedExpression"
    UNKNOWN_OPERATOR = "UnknownOperator"
    UNKNOWN_REFERENCE = "UnknownReference"
    SELF_REFERENCE = "SelfReference"
    CYCLE_DETECTED = "CycleDetected"
    ARITHMETIC_OVERFLOW = "ArithmeticOverflow"
    ARITHMETIC_UNDERFLOW = "ArithmeticUnderflow"
    DIVIDE_BY_ZERO = "DivideByZero"
    MULTIPLICATION_OVERFLOW = "MultiplicationOverflow"
    FILE_OPEN_ERROR = "FileOpenError"


class CalcError(ValueError):
    """Base exception for all csvcalc errors.

    Attributes:
        message: Human-readable error message, also returned by ``str()``.
        error_code: Kind of the error.
        details: Optional structured context (offending token, cell, ...).
    """

    error_code: ErrorCode
    default_message: str = "Table could not be resolved"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a plain dictionary."""
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Structural errors (raised while loading)
# =============================================================================


class DuplicateColumnNameError(CalcError):
    error_code = ErrorCode.DUPLICATE_COLUMN_NAME
    default_message = "Duplicate column names"

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Duplicate column name: {name!r}", details={"column": name},
        )


class DuplicateRowIndexError(CalcError):
    error_code = ErrorCode.DUPLICATE_ROW_INDEX
    default_message = "Duplicate row indices"

    def __init__(self, row_id: int) -> None:
        super().__init__(
            f"Duplicate row index: {row_id}", details={"row": row_id},
        )


class BadDimensionsError(CalcError):
    error_code = ErrorCode.BAD_DIMENSIONS
    default_message = "Bad table dimensions"

    def __init__(self, row_id: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Bad table dimensions: row {row_id} has {actual} cells, "
            f"expected {expected}",
            details={"row": row_id, "expected": expected, "actual": actual},
        )


class NotANumberError(CalcError):
    """A literal token is not an unsigned integer within range."""

    error_code = ErrorCode.NOT_A_NUMBER
    default_message = "One of the table's cells is not an unsigned int or expression"

    def __init__(self, token: str) -> None:
        super().__init__(
            f"{self.default_message}: {token!r}", details={"token": token},
        )


class MalformedExpressionError(CalcError):
    error_code = ErrorCode.MALFORMED_EXPRESSION
    default_message = "Malformed expression"

    def __init__(self, token: str) -> None:
        super().__init__(
            f"Malformed expression: {token!r}", details={"token": token},
        )


class UnknownOperatorError(CalcError):
    error_code = ErrorCode.UNKNOWN_OPERATOR
    default_message = "Unknown operator in one of the expressions"

    def __init__(self, token: str, operator: str) -> None:
        super().__init__(
            f"Unknown operator {operator!r} in expression {token!r}",
            details={"token": token, "operator": operator},
        )


# =============================================================================
# Resolution errors (raised while draining the pending queue)
# =============================================================================


class UnknownReferenceError(CalcError):
    error_code = ErrorCode.UNKNOWN_REFERENCE
    default_message = "One of the expressions references a non-existent row or column"

    def __init__(self, reference: str) -> None:
        super().__init__(
            f"Expression references a non-existent row or column: {reference}",
            details={"reference": reference},
        )


class SelfReferenceError(CalcError):
    error_code = ErrorCode.SELF_REFERENCE
    default_message = "Self-reference in one of the expressions"

    def __init__(self, cell: str) -> None:
        super().__init__(
            f"Self-reference in expression at {cell}", details={"cell": cell},
        )


class CycleDetectedError(CalcError):
    error_code = ErrorCode.CYCLE_DETECTED
    default_message = "Found a cycle in expression references"

    def __init__(self, cells: list[str] | None = None) -> None:
        if cells:
            super().__init__(
                f"{self.default_message} involving: {', '.join(cells)}",
                details={"cells": cells},
            )
        else:
            super().__init__()


class ArithmeticOverflowError(CalcError):
    error_code = ErrorCode.ARITHMETIC_OVERFLOW
    default_message = "Addition overflow"


class ArithmeticUnderflowError(CalcError):
    error_code = ErrorCode.ARITHMETIC_UNDERFLOW
    default_message = "Subtraction underflow"


class DivideByZeroError(CalcError):
    error_code = ErrorCode.DIVIDE_BY_ZERO
    default_message = "Division by zero"


class MultiplicationOverflowError(CalcError):
    error_code = ErrorCode.MULTIPLICATION_OVERFLOW
    default_message = "Multiplication overflow"


# =============================================================================
# I/O errors
# =============================================================================


class FileOpenError(CalcError):
    error_code = ErrorCode.FILE_OPEN_ERROR
    default_message = "could not open the file"

    def __init__(self, path: str) -> None:
        super().__init__(details={"path": path})
        self.path = path
