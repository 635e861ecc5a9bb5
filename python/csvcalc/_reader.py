"""Loader: turns table text into a fully resolved :class:`Table`."""

from __future__ import annotations

import logging
import os
import re

from csvcalc._config import Settings, get_settings
from csvcalc._errors import BadDimensionsError, FileOpenError, NotANumberError
from csvcalc._table import Table
from csvcalc.calc._evaluator import ResolutionSession
from csvcalc.calc._parser import is_formula, parse_formula

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_UNSIGNED_RE = re.compile(r"[0-9]+")


def _tokenize(line: str) -> list[str]:
    """Drop every whitespace character, then split on commas.

    A single trailing comma ends the line without adding an empty field.
    """
    fields = _WHITESPACE_RE.sub("", line).split(",")
    if len(fields) > 1 and fields[-1] == "":
        fields.pop()
    return fields


def _parse_unsigned(token: str, max_value: int) -> int:
    if not _UNSIGNED_RE.fullmatch(token):
        raise NotANumberError(token)
    value = int(token)
    if value > max_value:
        raise NotANumberError(token)
    return value


def load(text: str, settings: Settings | None = None) -> Table:
    """Parse *text* and resolve every formula.

    The first line holds an ignored leading field followed by the column
    names. Every other line holds an external row id followed by one token
    per column: an unsigned integer or a formula such as ``=A1+B2``. Lines
    that are empty after whitespace removal are skipped.

    Raises a ``CalcError`` subclass on the first problem found, in input
    order first and then in resolution order.
    """
    settings = settings or get_settings()
    table = Table()
    session = ResolutionSession(
        table, strategy=settings.strategy, max_value=settings.max_value,
    )

    lines = (line for line in text.splitlines() if _WHITESPACE_RE.sub("", line))
    header = next(lines, None)
    if header is None:
        return table

    for name in _tokenize(header)[1:]:
        table.define_column(name)

    for line in lines:
        row_token, *tokens = _tokenize(line)
        row_id = _parse_unsigned(row_token, settings.max_value)
        row = table.define_row(row_id)

        for col, token in enumerate(tokens):
            if is_formula(token):
                node = parse_formula(token, row, col)
                if col < table.n_cols:
                    session.enqueue(node)
            else:
                value = _parse_unsigned(token, settings.max_value)
                if col < table.n_cols:
                    table.set_cell(row, col, value)

        if len(tokens) != table.n_cols:
            raise BadDimensionsError(row_id, table.n_cols, len(tokens))

    logger.debug(
        "Loaded %d rows x %d columns, %d formulas pending",
        table.n_rows, table.n_cols, session.pending,
    )
    session.resolve()
    return table


def load_file(path: str | os.PathLike[str], settings: Settings | None = None) -> Table:
    """Read a table file and resolve it. See :func:`load`."""
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        raise FileOpenError(os.fspath(path)) from e
    return load(text, settings)
