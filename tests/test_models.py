"""Tests for the sheetdiff data model."""

from __future__ import annotations

import dataclasses

import pytest

from sheetdiff.models import (
    Cell,
    CellDiff,
    ComparisonResult,
    Sheet,
    SheetDiff,
    Workbook,
    has_content,
)


class TestCell:
    """Tests for Cell construction and emptiness."""

    def test_at_derives_coordinates(self) -> None:
        cell = Cell.at(6, 1, "x")
        assert cell.address == "B7"
        assert (cell.row, cell.col) == (7, 2)

    def test_empty_formula_is_dropped(self) -> None:
        assert Cell.at(0, 0, None, "").formula is None

    def test_is_empty(self) -> None:
        assert Cell.at(0, 0).is_empty()
        assert not Cell.at(0, 0, 0).is_empty()
        assert not Cell.at(0, 0, False).is_empty()
        assert not Cell.at(0, 0, None, "=A2").is_empty()

    def test_has_content(self) -> None:
        assert not has_content(None)
        assert not has_content(Cell.at(0, 0))
        assert has_content(Cell.at(0, 0, ""))

    def test_to_dict_omits_missing_formula(self) -> None:
        assert Cell.at(0, 0, 5).to_dict() == {
            "value": 5,
            "address": "A1",
            "row": 1,
            "col": 1,
        }
        assert Cell.at(0, 0, 5, "=2+3").to_dict()["formula"] == "=2+3"


class TestSheet:
    """Tests for Sheet lookup and construction helpers."""

    def test_cell_at_is_sparse_safe(self) -> None:
        sheet = Sheet(name="S", data=[[Cell.at(0, 0, 1)], []], max_row=5, max_col=5)
        assert sheet.cell_at(0, 0).value == 1
        assert sheet.cell_at(0, 3) is None
        assert sheet.cell_at(1, 0) is None
        assert sheet.cell_at(4, 4) is None
        assert sheet.cell_at(-1, 0) is None

    def test_from_values_extents(self) -> None:
        sheet = Sheet.from_values("S", [[1], [2, 3, 4]])
        assert (sheet.max_row, sheet.max_col) == (2, 3)
        assert sheet.cell_at(0, 1) is None
        assert sheet.cell_at(1, 2).address == "C2"

    def test_from_values_formulas_extend_grid(self) -> None:
        sheet = Sheet.from_values("S", [[1]], formulas={"C3": "=A1"})
        assert (sheet.max_row, sheet.max_col) == (3, 3)
        cell = sheet.cell_at(2, 2)
        assert cell.formula == "=A1"
        assert cell.value is None

    def test_from_values_declared_extent_override(self) -> None:
        sheet = Sheet.from_values("S", [[1]], max_row=10, max_col=4)
        assert (sheet.max_row, sheet.max_col) == (10, 4)

    def test_iter_cells_skips_absent(self) -> None:
        sheet = Sheet.from_values("S", [[1, None], [None, 2]])
        assert [(r, c) for r, c, _ in sheet.iter_cells()] == [(0, 0), (1, 1)]


class TestWorkbookWireFormat:
    """Tests for dict conversion of workbook snapshots."""

    def test_round_trip(self) -> None:
        workbook = Workbook(
            file_name="a.xlsx",
            sheets=[Sheet.from_values("S", [[1, "x"], [None, True]], formulas={"A2": "=A1"})],
            uploaded_at="2024-01-01T00:00:00+00:00",
        )
        assert Workbook.from_dict(workbook.to_dict()) == workbook

    def test_from_dict_recomputes_coordinates(self) -> None:
        payload = {
            "fileName": "a.xlsx",
            "sheets": [
                {
                    "name": "S",
                    "data": [[None, {"value": 1, "address": "Z99", "row": 99, "col": 26}]],
                    "maxRow": 1,
                    "maxCol": 2,
                }
            ],
            "uploadedAt": "2024-01-01T00:00:00+00:00",
        }
        cell = Workbook.from_dict(payload).sheets[0].cell_at(0, 1)
        assert (cell.address, cell.row, cell.col) == ("B1", 1, 2)

    def test_from_dict_defaults_extents(self) -> None:
        sheet = Sheet.from_dict({"name": "S", "data": [[{"value": 1}], [None, None, None]]})
        assert (sheet.max_row, sheet.max_col) == (2, 3)


class TestResultTypes:
    """Tests for report types."""

    def _diff(self, change_type: str, row: int = 1) -> CellDiff:
        return CellDiff(
            address=f"A{row}",
            row=row,
            col=1,
            old_value=None,
            new_value=1,
            type=change_type,  # type: ignore[arg-type]
        )

    def test_sheet_diff_total(self) -> None:
        sheet_diff = SheetDiff(
            sheet_name="S",
            added_cells=(self._diff("added"),),
            changed_cells=(self._diff("changed", 2), self._diff("changed", 3)),
        )
        assert sheet_diff.total_changes == 3

    def test_cell_diff_is_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            self._diff("added").new_value = 2  # type: ignore[misc]

    def test_cell_diff_to_dict(self) -> None:
        data = self._diff("added").to_dict()
        assert data == {
            "address": "A1",
            "row": 1,
            "col": 1,
            "oldValue": None,
            "newValue": 1,
            "type": "added",
        }

    def test_result_summary_and_round_trip(self) -> None:
        result = ComparisonResult(
            file1_name="a.xlsx",
            file2_name="b.xlsx",
            compared_at="2024-01-01T00:00:00+00:00",
            sheets=(
                SheetDiff(sheet_name="S1", added_cells=(self._diff("added"),)),
                SheetDiff(sheet_name="S2", removed_cells=(self._diff("removed"),)),
            ),
        )
        data = result.to_dict()
        assert data["summary"] == {"added": 1, "removed": 1, "changed": 0}
        assert data["totalChanges"] == 2
        assert data["sheets"][0]["sheetName"] == "S1"
        assert ComparisonResult.from_dict(data) == result
        assert result.sheet("S2").total_changes == 1
        assert result.sheet("missing") is None
