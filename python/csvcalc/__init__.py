"""csvcalc — resolve single-operator cell formulas in comma-separated tables.

Usage::

    import csvcalc

    table = csvcalc.load(",A,B\\n1,10,20\\n2,=A1+B1,5\\n")
    print(table["A2"])  # 30
    print(csvcalc.render(table), end="")
    # ,A,B
    # 1,10,20
    # 2,30,5
"""

from csvcalc._config import Settings, get_settings
from csvcalc._errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    BadDimensionsError,
    CalcError,
    CycleDetectedError,
    DivideByZeroError,
    DuplicateColumnNameError,
    DuplicateRowIndexError,
    ErrorCode,
    FileOpenError,
    MalformedExpressionError,
    MultiplicationOverflowError,
    NotANumberError,
    SelfReferenceError,
    UnknownOperatorError,
    UnknownReferenceError,
)
from csvcalc._reader import load, load_file
from csvcalc._table import UNRESOLVED, CellRef, Table
from csvcalc._writer import render
from csvcalc.calc import ResolutionResult, ResolutionSession, ResolutionStrategy

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ArithmeticOverflowError",
    "ArithmeticUnderflowError",
    "BadDimensionsError",
    "CalcError",
    "CellRef",
    "CycleDetectedError",
    "DivideByZeroError",
    "DuplicateColumnNameError",
    "DuplicateRowIndexError",
    "ErrorCode",
    "FileOpenError",
    "MalformedExpressionError",
    "MultiplicationOverflowError",
    "NotANumberError",
    "ResolutionResult",
    "ResolutionSession",
    "ResolutionStrategy",
    "SelfReferenceError",
    "Settings",
    "Table",
    "UNRESOLVED",
    "UnknownOperatorError",
    "UnknownReferenceError",
    "get_settings",
    "load",
    "load_file",
    "render",
]
