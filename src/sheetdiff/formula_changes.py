"""Formula change classification for sheetdiff.

Describes *how* a formula differs between two versions of a cell. This is a
shallow text heuristic, not a formula parser: references are runs of
uppercase letters followed by digits and functions are runs of uppercase
letters followed by ``(``. Lowercase function names, named ranges and
cross-sheet references (``Sheet2!A1``) can be misclassified.
"""

from __future__ import annotations

import re
from enum import Enum

from sheetdiff.models import CellDiff

_REFERENCE_PATTERN = re.compile(r"[A-Z]+[0-9]+")
_FUNCTION_PATTERN = re.compile(r"([A-Z]+)\(")


class FormulaChangeKind(str, Enum):
    """Nature of a formula difference."""

    NONE = "none"
    FORMULA_ADDED = "formula-added"
    FORMULA_REMOVED = "formula-removed"
    REFERENCE_CHANGED = "reference-changed"
    FUNCTION_CHANGED = "function-changed"
    FORMULA_MODIFIED = "formula-modified"
    FORMULA_CHANGED = "formula-changed"


def extract_references(formula: str) -> list[str]:
    """Sorted cell-reference tokens, duplicates kept."""
    return sorted(_REFERENCE_PATTERN.findall(formula))


def extract_functions(formula: str) -> list[str]:
    """Sorted function-name tokens, duplicates kept."""
    return sorted(_FUNCTION_PATTERN.findall(formula))


def classify_formula_change(cell_diff: CellDiff) -> FormulaChangeKind:
    """Classify the formula difference carried by a CellDiff.

    Examples:
        added with a formula                  -> formula-added
        ``=A1+B1`` -> ``=A1+B2``              -> reference-changed
        ``=SUM(A1:A2)`` -> ``=MAX(A1:A2)``    -> function-changed
        ``=A1*2`` -> ``=A1*3``                -> formula-modified
        ``=A1*2`` -> no formula               -> formula-changed
    """
    old_formula = cell_diff.old_formula
    new_formula = cell_diff.new_formula

    if cell_diff.type == "added":
        return FormulaChangeKind.FORMULA_ADDED if new_formula else FormulaChangeKind.NONE
    if cell_diff.type == "removed":
        return FormulaChangeKind.FORMULA_REMOVED if old_formula else FormulaChangeKind.NONE

    if not old_formula and not new_formula:
        return FormulaChangeKind.NONE
    if old_formula == new_formula:
        return FormulaChangeKind.NONE

    if (
        old_formula
        and new_formula
        and old_formula.startswith("=")
        and new_formula.startswith("=")
    ):
        if extract_references(old_formula) != extract_references(new_formula):
            return FormulaChangeKind.REFERENCE_CHANGED
        if extract_functions(old_formula) != extract_functions(new_formula):
            return FormulaChangeKind.FUNCTION_CHANGED
        return FormulaChangeKind.FORMULA_MODIFIED

    return FormulaChangeKind.FORMULA_CHANGED
