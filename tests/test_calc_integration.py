"""Integration tests: text in, resolved text out."""

from __future__ import annotations

from pathlib import Path

import pytest

import csvcalc
from csvcalc import (
    BadDimensionsError,
    CycleDetectedError,
    DivideByZeroError,
    DuplicateColumnNameError,
    DuplicateRowIndexError,
    FileOpenError,
    NotANumberError,
    ResolutionStrategy,
    SelfReferenceError,
    Settings,
    Table,
    UnknownOperatorError,
    UnknownReferenceError,
    load,
    load_file,
    render,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

DEFERRED = Settings(strategy=ResolutionStrategy.DEFERRED)
TOPOLOGICAL = Settings(strategy=ResolutionStrategy.TOPOLOGICAL)

BOTH = pytest.mark.parametrize("settings", [DEFERRED, TOPOLOGICAL], ids=["deferred", "topological"])

LONG_REVERSED_CHAIN = ",A,B,C,D,E\n1,=B1+E1,=C1+E1,=D1+E1,=E1+E1,1\n"


def _resolve(text: str, settings: Settings | None = None) -> str:
    return render(load(text, settings))


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------


class TestRender:
    @BOTH
    def test_sum_example(self, settings: Settings) -> None:
        text = ",A,B\n1,10,20\n2,=A1+B1,5\n"
        assert _resolve(text, settings) == ",A,B\n1,10,20\n2,30,5\n"

    @BOTH
    def test_forward_reference(self, settings: Settings) -> None:
        text = ",A,B\n1,=A2*B2,0\n2,4,5\n"
        assert _resolve(text, settings) == ",A,B\n1,20,0\n2,4,5\n"

    def test_literals_reproduced_in_first_seen_order(self) -> None:
        text = ",X,Y,Z\n30,1,2,3\n5,4,5,6\n100,7,8,9\n"
        assert _resolve(text) == text

    def test_columns_by_header_order(self) -> None:
        text = ",Zeta,Alpha\n1,1,2\n"
        assert _resolve(text) == text

    def test_whitespace_stripped(self) -> None:
        text = " , A , B \n 1 , 1 , = A1 + A1 \n"
        assert _resolve(text) == ",A,B\n1,1,2\n"

    def test_blank_lines_and_crlf(self) -> None:
        text = ",A\r\n\r\n1,1\r\n   \r\n2,=A1*A1\r\n\r\n"
        assert _resolve(text) == ",A\n1,1\n2,1\n"

    def test_missing_trailing_newline(self) -> None:
        assert _resolve(",A\n1,5") == ",A\n1,5\n"

    def test_first_header_field_ignored(self) -> None:
        assert _resolve("id,A\n1,5\n") == ",A\n1,5\n"

    def test_trailing_comma_on_row(self) -> None:
        assert _resolve(",A,B\n1,10,20,\n2,=A1+B1,5,\n") == ",A,B\n1,10,20\n2,30,5\n"

    def test_trailing_comma_on_header(self) -> None:
        table = load(",A,B,\n1,10,20\n")
        assert table.column_names == ["A", "B"]
        assert render(table) == ",A,B\n1,10,20\n"

    def test_bare_comma_header_has_no_columns(self) -> None:
        table = load(",\n1\n")
        assert table.n_cols == 0
        assert render(table) == "\n1\n"

    def test_empty_input(self) -> None:
        assert _resolve("") == ""

    def test_header_only(self) -> None:
        table = load(",A,B\n")
        assert table.column_names == ["A", "B"]
        assert render(table) == ""

    def test_max_value_literal(self) -> None:
        text = ",A,B\n1,4294967295,=A1-C1\n"
        with pytest.raises(UnknownReferenceError):
            load(text)
        text = ",A,B,C\n1,4294967295,=A1-C1,0\n"
        assert _resolve(text) == ",A,B,C\n1,4294967295,4294967295,0\n"

    def test_render_unresolved_table(self) -> None:
        table = Table()
        table.define_column("A")
        table.define_row(1)
        with pytest.raises(RuntimeError, match="unresolved"):
            render(table)

    def test_package_api(self) -> None:
        table = csvcalc.load(",A,B\n1,10,20\n2,=A1+B1,5\n")
        assert table["A2"] == 30
        assert csvcalc.__version__


# ---------------------------------------------------------------------------
# Structural errors
# ---------------------------------------------------------------------------


class TestLoadErrors:
    @pytest.mark.parametrize("header", [",A,A", ",A,B,A", ",B,A,C,A"])
    def test_duplicate_column(self, header: str) -> None:
        with pytest.raises(DuplicateColumnNameError):
            load(header + "\n")

    def test_duplicate_row(self) -> None:
        with pytest.raises(DuplicateRowIndexError):
            load(",A\n1,1\n2,2\n1,3\n")

    def test_duplicate_row_checked_before_cells(self) -> None:
        with pytest.raises(DuplicateRowIndexError):
            load(",A\n1,1\n1,x\n")

    @pytest.mark.parametrize("row", ["1,1", "1,1,2,3", "1", "1,1,"])
    def test_bad_dimensions(self, row: str) -> None:
        with pytest.raises(BadDimensionsError):
            load(f",A,B\n{row}\n")

    @pytest.mark.parametrize("token", ["x", "-1", "1.5", "", "4294967296", "+3"])
    def test_not_a_number(self, token: str) -> None:
        with pytest.raises(NotANumberError):
            load(f",A,B\n1,{token},2\n")

    def test_bad_row_id(self) -> None:
        with pytest.raises(NotANumberError):
            load(",A\nr1,1\n")

    def test_only_one_trailing_comma_dropped(self) -> None:
        with pytest.raises(NotANumberError):
            load(",A,B\n1,10,,\n")

    def test_not_a_number_before_bad_dimensions(self) -> None:
        with pytest.raises(NotANumberError):
            load(",A\n1,x,2\n")

    def test_parse_error_before_resolution(self) -> None:
        # also a self reference, but parsing fails first
        with pytest.raises(UnknownOperatorError):
            load(",A,B\n1,=A1%B1,2\n")

    def test_error_message(self) -> None:
        with pytest.raises(BadDimensionsError) as exc:
            load(",A,B\n7,1\n")
        assert str(exc.value) == "Bad table dimensions: row 7 has 1 cells, expected 2"


# ---------------------------------------------------------------------------
# Resolution errors and strategies
# ---------------------------------------------------------------------------


class TestResolutionErrors:
    @BOTH
    def test_self_reference(self, settings: Settings) -> None:
        with pytest.raises(SelfReferenceError):
            load(",A\n1,=A1+A1\n", settings)

    @BOTH
    def test_unknown_column(self, settings: Settings) -> None:
        with pytest.raises(UnknownReferenceError):
            load(",A,B\n1,=C1+B1,2\n", settings)

    @BOTH
    def test_divide_by_zero(self, settings: Settings) -> None:
        with pytest.raises(DivideByZeroError):
            load(",A,B\n1,=A2/B2,1\n2,=B1+B1,=B1-B1\n", settings)

    @BOTH
    def test_two_cell_cycle(self, settings: Settings) -> None:
        with pytest.raises(CycleDetectedError):
            load(",A,B,C\n1,=B1+C1,=A1+C1,1\n", settings)

    @BOTH
    def test_earlier_division_wins_over_later_unknown_reference(
        self, settings: Settings,
    ) -> None:
        with pytest.raises(DivideByZeroError):
            load(",A,B\n1,=B1/B2,0\n2,=Z9+B1,0\n", settings)

    @BOTH
    def test_division_reported_despite_cycle(self, settings: Settings) -> None:
        with pytest.raises(DivideByZeroError):
            load(",A,B,C\n1,=B1+C1,=A1+C1,0\n2,=C1/C1,1,1\n", settings)

    def test_long_chain_topological(self) -> None:
        assert _resolve(LONG_REVERSED_CHAIN, TOPOLOGICAL) == ",A,B,C,D,E\n1,5,4,3,2,1\n"

    def test_long_chain_deferred_limitation(self) -> None:
        with pytest.raises(CycleDetectedError):
            load(LONG_REVERSED_CHAIN, DEFERRED)

    def test_strategy_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CSVCALC_STRATEGY", "deferred")
        with pytest.raises(CycleDetectedError):
            load(LONG_REVERSED_CHAIN)

    def test_max_value_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CSVCALC_MAX_VALUE", "100")
        with pytest.raises(NotANumberError):
            load(",A\n1,101\n")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadFile:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "table.csv"
        path.write_text(",A,B\n1,10,20\n2,=A1+B1,5\n", encoding="utf-8")
        assert render(load_file(path)) == ",A,B\n1,10,20\n2,30,5\n"

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        path = tmp_path / "table.csv"
        path.write_text(",A\n1,1\n", encoding="utf-8")
        assert load_file(str(path)).n_rows == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.csv"
        with pytest.raises(FileOpenError) as exc:
            load_file(missing)
        assert str(exc.value) == "could not open the file"
        assert exc.value.path == str(missing)

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOpenError):
            load_file(tmp_path)
