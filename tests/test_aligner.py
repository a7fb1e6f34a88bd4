"""Tests for sheetdiff.aligner module."""

from sheetdiff.aligner import (
    AlignmentMode,
    SheetAlignment,
    align_sheets,
    find_sheet,
    union_sheet_names,
)
from sheetdiff.models import Sheet, Workbook


def _workbook(*names: str) -> Workbook:
    return Workbook(
        file_name="book.xlsx",
        sheets=[Sheet.from_values(name, [[name]]) for name in names],
        uploaded_at="2024-01-01T00:00:00+00:00",
    )


class TestUnionSheetNames:
    """Tests for union_sheet_names."""

    def test_left_order_then_right_only(self) -> None:
        left = _workbook("A", "B")
        right = _workbook("C", "B", "D")
        assert union_sheet_names(left, right) == ["A", "B", "C", "D"]

    def test_names_are_case_sensitive(self) -> None:
        assert union_sheet_names(_workbook("Data"), _workbook("data")) == ["Data", "data"]

    def test_duplicates_collapse(self) -> None:
        assert union_sheet_names(_workbook("A", "A"), _workbook("A")) == ["A"]

    def test_empty_workbooks(self) -> None:
        assert union_sheet_names(_workbook(), _workbook()) == []


class TestFindSheet:
    """Tests for find_sheet."""

    def test_first_match_wins(self) -> None:
        workbook = Workbook(
            file_name="book.xlsx",
            sheets=[Sheet.from_values("A", [[1]]), Sheet.from_values("A", [[2]])],
            uploaded_at="2024-01-01T00:00:00+00:00",
        )
        assert find_sheet(workbook, "A").cell_at(0, 0).value == 1

    def test_missing(self) -> None:
        assert find_sheet(_workbook("A"), "a") is None


class TestAlignSheets:
    """Tests for align_sheets and alignment modes."""

    def test_modes(self) -> None:
        alignments = align_sheets(_workbook("Old", "Both"), _workbook("Both", "New"))
        assert [(a.name, a.mode) for a in alignments] == [
            ("Old", AlignmentMode.LEFT_ONLY),
            ("Both", AlignmentMode.BOTH),
            ("New", AlignmentMode.RIGHT_ONLY),
        ]

    def test_neither(self) -> None:
        assert SheetAlignment(name="X", left=None, right=None).mode is AlignmentMode.NEITHER

    def test_mode_values(self) -> None:
        assert AlignmentMode.BOTH.value == "both"
        assert AlignmentMode.LEFT_ONLY.value == "left_only"
