"""Input validation at the comparison boundary.

The diff engine assumes well-formed workbooks. These helpers reject missing
or structurally invalid inputs before it runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sheetdiff.diff import compare_workbooks
from sheetdiff.exceptions import InvalidWorkbookError, MissingWorkbookError
from sheetdiff.models import ComparisonResult, Workbook

logger = logging.getLogger(__name__)

WorkbookInput = Workbook | Mapping[str, Any] | None


def _sheets_of(workbook: Workbook | Mapping[str, Any]) -> Any:
    if isinstance(workbook, Workbook):
        return workbook.sheets
    return workbook.get("sheets")


def _is_missing(value: Any) -> bool:
    """None or a falsy scalar ('', 0, False). An empty object is present."""
    return value is None or (isinstance(value, (str, int, float)) and not value)


def validate_workbook(workbook: Any, side: str) -> Workbook:
    """Check one input and convert it to a Workbook.

    Raises:
        InvalidWorkbookError: If the input is not a mapping/Workbook or its
            ``sheets`` field is not a list
    """
    if not isinstance(workbook, (Workbook, Mapping)):
        raise InvalidWorkbookError(side, "workbook must be an object")
    if not isinstance(_sheets_of(workbook), (list, tuple)):
        raise InvalidWorkbookError(side)
    if isinstance(workbook, Workbook):
        return workbook
    return Workbook.from_dict(workbook)


def validate_workbooks(file1: WorkbookInput, file2: WorkbookInput) -> tuple[Workbook, Workbook]:
    """Validate both comparison inputs.

    Raises:
        MissingWorkbookError: If either input is absent
        InvalidWorkbookError: If either input is malformed, naming the side
    """
    if _is_missing(file1) or _is_missing(file2):
        raise MissingWorkbookError(
            has_file1=not _is_missing(file1), has_file2=not _is_missing(file2)
        )
    return validate_workbook(file1, "file1"), validate_workbook(file2, "file2")


def compare_payloads(
    file1: WorkbookInput,
    file2: WorkbookInput,
    *,
    compared_at: str | None = None,
) -> ComparisonResult:
    """Validate two inputs (wire dicts or Workbooks) and compare them."""
    old, new = validate_workbooks(file1, file2)
    logger.debug(
        "Comparing %r (%d sheet(s)) with %r (%d sheet(s))",
        old.file_name,
        len(old.sheets),
        new.file_name,
        len(new.sheets),
    )
    return compare_workbooks(old, new, compared_at=compared_at)
