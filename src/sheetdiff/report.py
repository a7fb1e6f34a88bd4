"""Presentation helpers for an already-computed ComparisonResult.

Sorting, filtering and plain-text rendering only; nothing here changes what
the engine reported.
"""

from __future__ import annotations

from collections.abc import Iterable

from sheetdiff.formula_changes import FormulaChangeKind, classify_formula_change
from sheetdiff.models import CellDiff, CellValue, ChangeType, ComparisonResult, SheetDiff

EMPTY_MARKER = "-"


def format_cell_value(value: CellValue) -> str:
    """Display form of a cell value: None is blank, booleans are TRUE/FALSE."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def sorted_cell_diffs(
    sheet_diff: SheetDiff,
    types: Iterable[ChangeType] | None = None,
) -> list[CellDiff]:
    """All diffs of a sheet merged and ordered by row, then column.

    Args:
        sheet_diff: The sheet to flatten
        types: Only keep these change types (all types when None)
    """
    wanted = set(types) if types is not None else None
    merged = [
        *sheet_diff.added_cells,
        *sheet_diff.removed_cells,
        *sheet_diff.changed_cells,
    ]
    if wanted is not None:
        merged = [d for d in merged if d.type in wanted]
    return sorted(merged, key=lambda d: (d.row, d.col))


def select_sheets(
    result: ComparisonResult, sheet_name: str | None = None
) -> list[SheetDiff]:
    """The sheets to display: one by name, or all of them."""
    if sheet_name is None:
        return list(result.sheets)
    return [s for s in result.sheets if s.sheet_name == sheet_name]


def _old_display(cell_diff: CellDiff) -> str:
    if cell_diff.type in ("removed", "changed"):
        return format_cell_value(cell_diff.old_value)
    return EMPTY_MARKER


def _new_display(cell_diff: CellDiff) -> str:
    if cell_diff.type in ("added", "changed"):
        return format_cell_value(cell_diff.new_value)
    return EMPTY_MARKER


def render_text(
    result: ComparisonResult,
    *,
    sheet_name: str | None = None,
    types: Iterable[ChangeType] | None = None,
    show_formulas: bool = False,
) -> str:
    """Render a report as plain text for terminals and logs."""
    summary = result.summary
    lines = [
        f"Comparison: {result.file1_name} -> {result.file2_name}",
        f"Compared at: {result.compared_at}",
        (
            f"Added: {summary.added}  Removed: {summary.removed}  "
            f"Changed: {summary.changed}  Total: {result.total_changes}"
        ),
    ]
    wanted = list(types) if types is not None else None

    for sheet_diff in select_sheets(result, sheet_name):
        lines.append("")
        lines.append(f"== {sheet_diff.sheet_name} ({sheet_diff.total_changes} changes)")
        cell_diffs = sorted_cell_diffs(sheet_diff, wanted)
        if not cell_diffs:
            lines.append("  (no changes)")
            continue

        address_width = max(len(d.address) for d in cell_diffs)
        for cell_diff in cell_diffs:
            lines.append(
                f"  {cell_diff.address:<{address_width}}  {cell_diff.type:<7}  "
                f"{_old_display(cell_diff)} -> {_new_display(cell_diff)}"
            )
            if not show_formulas:
                continue
            kind = classify_formula_change(cell_diff)
            if cell_diff.old_formula or cell_diff.new_formula:
                formula_line = (
                    f"  {'':<{address_width}}  formula: "
                    f"{cell_diff.old_formula or EMPTY_MARKER} -> "
                    f"{cell_diff.new_formula or EMPTY_MARKER}"
                )
                if kind is not FormulaChangeKind.NONE:
                    formula_line += f" [{kind.value}]"
                lines.append(formula_line)

    return "\n".join(lines)
