"""sheetdiff - Cell-by-cell comparison of spreadsheet workbooks.

Aligns sheets by name across two workbook snapshots, compares every cell with
formula-aware, case-insensitive equality and reports added, removed and
changed cells per sheet and in aggregate.
"""

__version__ = "0.1.0"

from sheetdiff.aligner import AlignmentMode, SheetAlignment, align_sheets
from sheetdiff.diff import compare_workbooks, is_equal, normalize_formula
from sheetdiff.exceptions import (
    InvalidWorkbookError,
    MissingWorkbookError,
    SheetDiffError,
    UnsupportedFileTypeError,
    WorkbookNotFoundError,
    WorkbookParseError,
)
from sheetdiff.formula_changes import FormulaChangeKind, classify_formula_change
from sheetdiff.models import (
    Cell,
    CellDiff,
    ChangeSummary,
    ComparisonResult,
    Sheet,
    SheetDiff,
    Workbook,
)
from sheetdiff.parser import parse_workbook
from sheetdiff.validation import compare_payloads

__all__ = [
    "AlignmentMode",
    "Cell",
    "CellDiff",
    "ChangeSummary",
    "ComparisonResult",
    "FormulaChangeKind",
    "InvalidWorkbookError",
    "MissingWorkbookError",
    "Sheet",
    "SheetAlignment",
    "SheetDiff",
    "SheetDiffError",
    "UnsupportedFileTypeError",
    "Workbook",
    "WorkbookNotFoundError",
    "WorkbookParseError",
    "__version__",
    "align_sheets",
    "classify_formula_change",
    "compare_payloads",
    "compare_workbooks",
    "is_equal",
    "normalize_formula",
    "parse_workbook",
]
