"""Sheet alignment for sheetdiff.

Matches sheets between two workbooks by exact name and decides how each
sheet name is compared:

- ``both``: present on both sides, compared cell by cell
- ``left_only``: only in the old workbook, every populated cell is removed
- ``right_only``: only in the new workbook, every populated cell is added
- ``neither``: not present on either side, nothing to report
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sheetdiff.models import Sheet, Workbook


class AlignmentMode(str, Enum):
    """How a sheet name is represented across the two workbooks."""

    BOTH = "both"
    LEFT_ONLY = "left_only"
    RIGHT_ONLY = "right_only"
    NEITHER = "neither"


@dataclass(frozen=True)
class SheetAlignment:
    """One sheet name with the matching sheet from each side."""

    name: str
    left: Sheet | None
    right: Sheet | None

    @property
    def mode(self) -> AlignmentMode:
        if self.left is not None and self.right is not None:
            return AlignmentMode.BOTH
        if self.left is not None:
            return AlignmentMode.LEFT_ONLY
        if self.right is not None:
            return AlignmentMode.RIGHT_ONLY
        return AlignmentMode.NEITHER


def union_sheet_names(left: Workbook, right: Workbook) -> list[str]:
    """Distinct sheet names from both workbooks in first-seen order.

    Left's names come first in left's order, then names only found on the
    right in right's order.
    """
    names = dict.fromkeys(sheet.name for sheet in left.sheets)
    names.update(dict.fromkeys(sheet.name for sheet in right.sheets))
    return list(names)


def find_sheet(workbook: Workbook, name: str) -> Sheet | None:
    """Exact, case-sensitive lookup. The first sheet with the name wins."""
    for sheet in workbook.sheets:
        if sheet.name == name:
            return sheet
    return None


def align_sheets(left: Workbook, right: Workbook) -> list[SheetAlignment]:
    """Align every sheet name in either workbook."""
    return [
        SheetAlignment(name=name, left=find_sheet(left, name), right=find_sheet(right, name))
        for name in union_sheet_names(left, right)
    ]
