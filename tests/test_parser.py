"""Tests for sheetdiff.parser module."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from pathlib import Path

import pytest

from sheetdiff.diff import compare_workbooks
from sheetdiff.exceptions import WorkbookParseError
from sheetdiff.parser import DEFAULT_FILE_NAME, normalize_value, parse_workbook


class TestNormalizeValue:
    """Tests for normalize_value."""

    def test_scalars_pass_through(self) -> None:
        assert normalize_value(42) == 42
        assert normalize_value(3.5) == 3.5
        assert normalize_value(True) is True
        assert normalize_value("text") == "text"

    def test_empty(self) -> None:
        assert normalize_value(None) is None
        assert normalize_value("") is None

    def test_dates(self) -> None:
        assert normalize_value(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00"
        assert normalize_value(date(2024, 1, 15)) == "2024-01-15"
        assert normalize_value(time(9, 5)) == "09:05:00"
        assert normalize_value(timedelta(hours=1)) == "1:00:00"

    def test_error_code(self) -> None:
        assert normalize_value("#DIV/0!", "e") == "#ERROR: #DIV/0!"


class TestParseWorkbook:
    """Tests for parse_workbook against files written with openpyxl."""

    def test_values_and_types(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx(
            "types.xlsx",
            {"Data": [["name", 42, 3.5, True], ["when", datetime(2024, 1, 15, 10, 30)]]},
        )
        workbook = parse_workbook(path, uploaded_at="2024-01-01T00:00:00+00:00")

        assert workbook.file_name == "types.xlsx"
        assert workbook.uploaded_at == "2024-01-01T00:00:00+00:00"
        sheet = workbook.sheets[0]
        assert sheet.name == "Data"
        assert (sheet.max_row, sheet.max_col) == (2, 4)
        assert [sheet.cell_at(0, c).value for c in range(4)] == ["name", 42, 3.5, True]
        assert sheet.cell_at(1, 1).value == "2024-01-15T10:30:00"
        assert sheet.cell_at(1, 2) is None
        assert sheet.cell_at(0, 1).address == "B1"

    def test_formula_without_cached_value(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("formula.xlsx", {"Calc": [[5, "=A1*2"]]})
        cell = parse_workbook(path).sheets[0].cell_at(0, 1)
        assert cell.formula == "=A1*2"
        assert cell.value is None

    def test_error_cell(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("errors.xlsx", {"Data": [["#DIV/0!"]]})
        assert parse_workbook(path).sheets[0].cell_at(0, 0).value == "#ERROR: #DIV/0!"

    def test_sheet_order(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("order.xlsx", {"Zeta": [[1]], "Alpha": [[2]], "Mid": [[3]]})
        assert parse_workbook(path).sheet_names() == ["Zeta", "Alpha", "Mid"]

    def test_empty_sheet(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("empty.xlsx", {"Blank": []})
        sheet = parse_workbook(path).sheets[0]
        assert list(sheet.iter_cells()) == []

    def test_bytes_source(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("bytes.xlsx", {"Data": [["x"]]})
        data = path.read_bytes()
        assert parse_workbook(data).file_name == DEFAULT_FILE_NAME
        assert parse_workbook(data, "upload.xlsx").file_name == "upload.xlsx"

    def test_str_path(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("str.xlsx", {"Data": [["x"]]})
        assert parse_workbook(str(path)).file_name == "str.xlsx"

    def test_invalid_bytes(self) -> None:
        with pytest.raises(WorkbookParseError) as exc_info:
            parse_workbook(b"not a spreadsheet", "broken.xlsx")
        assert exc_info.value.file_name == "broken.xlsx"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(WorkbookParseError):
            parse_workbook(tmp_path / "missing.xlsx")

    def test_self_compare(self, make_xlsx: Callable[..., Path]) -> None:
        path = make_xlsx("same.xlsx", {"Data": [[1, "=A1+1"], ["x", None, 2]]})
        workbook = parse_workbook(path)
        assert compare_workbooks(workbook, workbook).total_changes == 0

    def test_compare_edited_files(self, make_xlsx: Callable[..., Path]) -> None:
        old = parse_workbook(make_xlsx("old.xlsx", {"Data": [["a", 1], ["b", 2]]}))
        new = parse_workbook(make_xlsx("new.xlsx", {"Data": [["A", 1], ["b", 3]], "Extra": [[1]]}))
        result = compare_workbooks(old, new)
        assert [c.address for c in result.sheet("Data").changed_cells] == ["B2"]
        assert result.sheet("Extra").total_changes == 1
