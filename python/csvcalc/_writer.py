"""Renderer: serializes a resolved :class:`Table` back to text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from csvcalc._table import UNRESOLVED

if TYPE_CHECKING:
    from csvcalc._table import Table


def render(table: Table) -> str:
    """Render *table* in the input format with every formula replaced.

    Columns appear by index and rows by first-seen order, not by row id.
    Returns an empty string for a table without rows.
    """
    if table.n_rows == 0:
        return ""

    lines = [",".join(["", *table.column_names])]
    for row_id, values in table.iter_rows():
        if any(value is UNRESOLVED for value in values):
            raise RuntimeError(f"Row {row_id} has unresolved cells")
        lines.append(",".join([str(row_id), *(str(v) for v in values)]))
    return "\n".join(lines) + "\n"
