"""Core diff engine for sheetdiff.

Compares two workbook snapshots cell by cell and builds a ComparisonResult.
Cells are always compared by absolute position; coordinates in the output are
derived from the walk indices, never from the input cells.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any

from sheetdiff.aligner import AlignmentMode, SheetAlignment, align_sheets
from sheetdiff.models import (
    Cell,
    CellDiff,
    ComparisonResult,
    Sheet,
    SheetDiff,
    Workbook,
    has_content,
    utc_now_iso,
)
from sheetdiff.utils import cell_to_a1

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")
_SPACED_PUNCTUATION = re.compile(r" ?([^\w\s]) ?")
# Excel escapes a quote inside a string literal by doubling it.
_STRING_LITERAL = re.compile(r'("(?:[^"]|"")*")')


def normalize_formula(text: str) -> str:
    """Canonical form of formula text for comparison.

    Whitespace runs collapse to one space, letters are lowercased and the
    ends are trimmed. Outside string literals a space next to an operator or
    bracket is dropped, so ``= sum( A1 : A2 )`` and ``=SUM(A1:A2)`` normalize
    alike; a space between two operands (the range intersection operator) is
    kept. Spacing inside ``"..."`` literals is left alone.
    """
    collapsed = _WHITESPACE_RUN.sub(" ", text).lower().strip()
    # split() with a capturing group puts the literals at odd indices
    parts = _STRING_LITERAL.split(collapsed)
    return "".join(
        part if index % 2 else _SPACED_PUNCTUATION.sub(r"\1", part)
        for index, part in enumerate(parts)
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_date_like(value: Any) -> bool:
    return isinstance(value, (datetime, date))


def _to_millis(value: date) -> datetime:
    """Promote to datetime and drop sub-millisecond precision."""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def _strictly_equal(a: Any, b: Any) -> bool:
    # Booleans never equal numbers even though bool subclasses int.
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return False


def is_equal(a: Any, b: Any) -> bool:
    """Lenient cell equality.

    1. Strictly equal values are equal.
    2. Two Nones are equal; a single None is not.
    3. Two dates are equal when they are the same instant to the millisecond.
    4. Two strings compare case-insensitively; when either starts with ``=``
       both are compared in normalized formula form.
    5. Any other pairing is unequal.
    """
    if a is b or _strictly_equal(a, b):
        return True
    if a is None or b is None:
        return False
    if _is_date_like(a) and _is_date_like(b):
        return _to_millis(a) == _to_millis(b)
    if isinstance(a, str) and isinstance(b, str):
        if a.startswith("=") or b.startswith("="):
            return normalize_formula(a) == normalize_formula(b)
        return a.lower() == b.lower()
    return False


def _added(row_index: int, col_index: int, cell: Cell) -> CellDiff:
    return CellDiff(
        address=cell_to_a1(row_index, col_index),
        row=row_index + 1,
        col=col_index + 1,
        old_value=None,
        new_value=cell.value,
        type="added",
        old_formula=None,
        new_formula=cell.formula,
    )


def _removed(row_index: int, col_index: int, cell: Cell) -> CellDiff:
    return CellDiff(
        address=cell_to_a1(row_index, col_index),
        row=row_index + 1,
        col=col_index + 1,
        old_value=cell.value,
        new_value=None,
        type="removed",
        old_formula=cell.formula,
        new_formula=None,
    )


def _changed(row_index: int, col_index: int, old: Cell, new: Cell) -> CellDiff:
    return CellDiff(
        address=cell_to_a1(row_index, col_index),
        row=row_index + 1,
        col=col_index + 1,
        old_value=old.value,
        new_value=new.value,
        type="changed",
        old_formula=old.formula,
        new_formula=new.formula,
    )


def cells_differ(old: Cell, new: Cell) -> bool:
    """True when either the values or the formulas are unequal."""
    return not is_equal(old.value, new.value) or not is_equal(old.formula, new.formula)


def diff_sheet_pair(old: Sheet, new: Sheet) -> SheetDiff:
    """Diff two sheets that share a name.

    Walks the union of both declared extents so a grid that grew or shrank is
    fully covered.
    """
    added: list[CellDiff] = []
    removed: list[CellDiff] = []
    changed: list[CellDiff] = []

    max_row = max(old.max_row, new.max_row)
    max_col = max(old.max_col, new.max_col)

    for row_index in range(max_row):
        for col_index in range(max_col):
            old_cell = old.cell_at(row_index, col_index)
            new_cell = new.cell_at(row_index, col_index)
            old_present = has_content(old_cell)
            new_present = has_content(new_cell)

            if not old_present and not new_present:
                continue
            if not old_present:
                added.append(_added(row_index, col_index, new_cell))
            elif not new_present:
                removed.append(_removed(row_index, col_index, old_cell))
            elif cells_differ(old_cell, new_cell):
                changed.append(_changed(row_index, col_index, old_cell, new_cell))

    return SheetDiff(
        sheet_name=new.name,
        added_cells=tuple(added),
        removed_cells=tuple(removed),
        changed_cells=tuple(changed),
    )


def diff_added_sheet(sheet: Sheet) -> SheetDiff:
    """Every populated cell of a sheet that only exists in the new workbook."""
    added = [
        _added(row_index, col_index, cell)
        for row_index, col_index, cell in sheet.iter_cells()
        if has_content(cell)
    ]
    return SheetDiff(sheet_name=sheet.name, added_cells=tuple(added))


def diff_removed_sheet(sheet: Sheet) -> SheetDiff:
    """Every populated cell of a sheet that only exists in the old workbook."""
    removed = [
        _removed(row_index, col_index, cell)
        for row_index, col_index, cell in sheet.iter_cells()
        if has_content(cell)
    ]
    return SheetDiff(sheet_name=sheet.name, removed_cells=tuple(removed))


def diff_sheet(alignment: SheetAlignment) -> SheetDiff:
    """Diff one aligned sheet name according to its alignment mode."""
    mode = alignment.mode
    if mode is AlignmentMode.BOTH:
        return diff_sheet_pair(alignment.left, alignment.right)
    if mode is AlignmentMode.LEFT_ONLY:
        return diff_removed_sheet(alignment.left)
    if mode is AlignmentMode.RIGHT_ONLY:
        return diff_added_sheet(alignment.right)
    return SheetDiff(sheet_name=alignment.name)


def compare_workbooks(
    old: Workbook,
    new: Workbook,
    *,
    compared_at: str | None = None,
) -> ComparisonResult:
    """Compare two validated workbooks.

    Args:
        old: The baseline workbook ("file1")
        new: The workbook compared against the baseline ("file2")
        compared_at: Override for the report timestamp (ISO-8601)

    Returns:
        ComparisonResult with one SheetDiff per sheet name in either workbook
    """
    sheets: list[SheetDiff] = []
    for alignment in align_sheets(old, new):
        sheet_diff = diff_sheet(alignment)
        logger.debug(
            "Sheet %r (%s): %d change(s)",
            alignment.name,
            alignment.mode.value,
            sheet_diff.total_changes,
        )
        sheets.append(sheet_diff)

    return ComparisonResult(
        file1_name=old.file_name,
        file2_name=new.file_name,
        compared_at=compared_at or utc_now_iso(),
        sheets=tuple(sheets),
    )
