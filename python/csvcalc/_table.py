"""Table — the grid store: column map, row map and a dense cell matrix."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from csvcalc._errors import (
    DuplicateColumnNameError,
    DuplicateRowIndexError,
    UnknownReferenceError,
)


class Unresolved:
    """Marker for a formula cell whose value has not been computed yet.

    A distinct object rather than a reserved integer, so every integer up to
    the configured maximum remains a legal cell value.
    """

    __slots__ = ()
    _instance: Unresolved | None = None

    def __new__(cls) -> Unresolved:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = Unresolved()

CellValue = Union[int, Unresolved]

_REF_RE = re.compile(r"([^0-9]+)([0-9]+)\Z")


@dataclass(frozen=True)
class CellRef:
    """A cell addressed the way formulas write it: column name + row id."""

    column: str
    row_id: int

    @classmethod
    def parse(cls, text: str) -> CellRef:
        """Parse ``"A1"`` into ``CellRef("A", 1)``."""
        m = _REF_RE.match(text)
        if not m:
            raise ValueError(f"Invalid cell reference: {text!r}")
        return cls(m.group(1), int(m.group(2)))

    def __str__(self) -> str:
        return f"{self.column}{self.row_id}"


class Table:
    """A rectangular grid addressed by column name and external row id.

    Token position on an input line *is* the column index; the name map only
    serves formula references.
    """

    __slots__ = ("_columns", "_column_names", "_rows", "_row_ids", "_cells")

    def __init__(self) -> None:
        # name -> column index, in header order
        self._columns: dict[str, int] = {}
        self._column_names: list[str] = []
        # external row id -> internal row index, in first-seen order
        self._rows: dict[int, int] = {}
        self._row_ids: list[int] = []
        self._cells: list[list[CellValue]] = []

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def define_column(self, name: str) -> int:
        """Register a column name and return its index."""
        if name in self._columns:
            raise DuplicateColumnNameError(name)
        index = len(self._column_names)
        self._columns[name] = index
        self._column_names.append(name)
        return index

    def define_row(self, row_id: int) -> int:
        """Register an external row id and return its internal index.

        The new row starts with every cell unresolved.
        """
        if row_id in self._rows:
            raise DuplicateRowIndexError(row_id)
        index = len(self._row_ids)
        self._rows[row_id] = index
        self._row_ids.append(row_id)
        self._cells.append([UNRESOLVED] * len(self._column_names))
        return index

    @property
    def column_names(self) -> list[str]:
        return list(self._column_names)

    @property
    def row_ids(self) -> list[int]:
        return list(self._row_ids)

    @property
    def n_rows(self) -> int:
        return len(self._row_ids)

    @property
    def n_cols(self) -> int:
        return len(self._column_names)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def set_cell(self, row: int, col: int, value: CellValue) -> None:
        self._cells[row][col] = value

    def get_cell(self, row: int, col: int) -> CellValue:
        return self._cells[row][col]

    def lookup(self, column: str, row_id: int) -> tuple[int, int]:
        """Translate a (column name, external row id) pair to grid coordinates."""
        col = self._columns.get(column)
        row = self._rows.get(row_id)
        if row is None or col is None:
            raise UnknownReferenceError(f"{column}{row_id}")
        return row, col

    def ref_for(self, row: int, col: int) -> CellRef:
        """Inverse of :meth:`lookup`."""
        return CellRef(self._column_names[col], self._row_ids[row])

    def iter_rows(self) -> Iterator[tuple[int, list[CellValue]]]:
        """Yield ``(row_id, values)`` in internal row order."""
        for row_id, values in zip(self._row_ids, self._cells):
            yield row_id, list(values)

    @property
    def is_resolved(self) -> bool:
        return all(
            value is not UNRESOLVED for values in self._cells for value in values
        )

    def __getitem__(self, key: str) -> CellValue:
        """``table['A1']`` -> value of column ``A`` in row id ``1``."""
        ref = CellRef.parse(key)
        return self.get_cell(*self.lookup(ref.column, ref.row_id))

    def __repr__(self) -> str:
        return f"<Table {self.n_rows}x{self.n_cols} columns={self._column_names}>"
