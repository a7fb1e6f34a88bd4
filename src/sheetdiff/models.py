"""Data model for sheetdiff.

Workbook snapshots (Workbook, Sheet, Cell) are the engine's input; CellDiff,
SheetDiff, ChangeSummary and ComparisonResult are its output. Every type
converts to and from the camelCase dict shape used on the wire.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any, Literal

from sheetdiff.utils import a1_to_cell, cell_to_a1

CellValue = str | int | float | bool | None
ChangeType = Literal["added", "removed", "changed"]

CHANGE_TYPES: tuple[ChangeType, ...] = ("added", "removed", "changed")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def _serialize_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class Cell:
    """A single populated grid position."""

    value: CellValue
    address: str  # A1 notation
    row: int  # 1-based
    col: int  # 1-based
    formula: str | None = None

    @classmethod
    def at(
        cls,
        row_index: int,
        col_index: int,
        value: CellValue = None,
        formula: str | None = None,
    ) -> Cell:
        """Build a cell from zero-based indices.

        address, row and col are derived together so they always agree.
        """
        return cls(
            value=value,
            address=cell_to_a1(row_index, col_index),
            row=row_index + 1,
            col=col_index + 1,
            formula=formula or None,
        )

    def is_empty(self) -> bool:
        return self.value is None and not self.formula

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "value": _serialize_value(self.value),
            "address": self.address,
            "row": self.row,
            "col": self.col,
        }
        if self.formula is not None:
            result["formula"] = self.formula
        return result


def has_content(cell: Cell | None) -> bool:
    """True if the position holds a value or a formula."""
    return cell is not None and not cell.is_empty()


@dataclass
class Sheet:
    """A named, possibly sparse grid of cells.

    ``data`` is jagged: a missing row, a short row and a ``None`` entry all
    mean the position is absent.
    """

    name: str
    data: list[list[Cell | None]] = field(default_factory=list)
    max_row: int = 0
    max_col: int = 0

    def cell_at(self, row_index: int, col_index: int) -> Cell | None:
        """Sparse-safe lookup by zero-based indices."""
        if row_index < 0 or col_index < 0 or row_index >= len(self.data):
            return None
        row = self.data[row_index]
        if not row or col_index >= len(row):
            return None
        return row[col_index]

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield (row_index, col_index, cell) for every stored cell."""
        for row_index, row in enumerate(self.data):
            if not row:
                continue
            for col_index, cell in enumerate(row):
                if cell is not None:
                    yield row_index, col_index, cell

    @classmethod
    def from_values(
        cls,
        name: str,
        rows: Sequence[Sequence[CellValue]],
        formulas: Mapping[str, str] | None = None,
        *,
        max_row: int | None = None,
        max_col: int | None = None,
    ) -> Sheet:
        """Build a sheet from a grid of plain values.

        Args:
            name: Sheet name
            rows: Row-major values; ``None`` leaves the position empty
            formulas: Optional mapping of A1 address to formula text
            max_row: Declared row extent (defaults to the populated extent)
            max_col: Declared column extent (defaults to the populated extent)
        """
        formula_positions = {
            a1_to_cell(address): formula
            for address, formula in (formulas or {}).items()
        }
        n_rows = max(
            len(rows), max((r + 1 for r, _ in formula_positions), default=0)
        )
        n_cols = max(
            max((len(row) for row in rows), default=0),
            max((c + 1 for _, c in formula_positions), default=0),
        )

        data: list[list[Cell | None]] = []
        for r in range(n_rows):
            values = rows[r] if r < len(rows) else ()
            row_cells: list[Cell | None] = []
            for c in range(n_cols):
                value = values[c] if c < len(values) else None
                formula = formula_positions.get((r, c))
                if value is None and not formula:
                    row_cells.append(None)
                else:
                    row_cells.append(Cell.at(r, c, value, formula))
            data.append(row_cells)

        return cls(
            name=name,
            data=data,
            max_row=n_rows if max_row is None else max_row,
            max_col=n_cols if max_col is None else max_col,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "data": [
                [cell.to_dict() if cell is not None else None for cell in row]
                for row in self.data
            ],
            "maxRow": self.max_row,
            "maxCol": self.max_col,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Sheet:
        """Build a sheet from its wire dict.

        Cell coordinates are recomputed from grid position; the payload's own
        address/row/col fields are ignored.
        """
        data: list[list[Cell | None]] = []
        for row_index, raw_row in enumerate(payload.get("data") or []):
            row_cells: list[Cell | None] = []
            for col_index, raw_cell in enumerate(raw_row or []):
                if raw_cell is None:
                    row_cells.append(None)
                    continue
                row_cells.append(
                    Cell.at(
                        row_index,
                        col_index,
                        raw_cell.get("value"),
                        raw_cell.get("formula"),
                    )
                )
            data.append(row_cells)

        max_row = payload.get("maxRow")
        max_col = payload.get("maxCol")
        return cls(
            name=payload["name"],
            data=data,
            max_row=len(data) if max_row is None else int(max_row),
            max_col=(
                max((len(row) for row in data), default=0)
                if max_col is None
                else int(max_col)
            ),
        )


@dataclass
class Workbook:
    """One parsed spreadsheet file."""

    file_name: str
    sheets: list[Sheet] = field(default_factory=list)
    uploaded_at: str = field(default_factory=utc_now_iso)

    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "sheets": [sheet.to_dict() for sheet in self.sheets],
            "uploadedAt": self.uploaded_at,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Workbook:
        return cls(
            file_name=payload.get("fileName") or "",
            sheets=[Sheet.from_dict(sheet) for sheet in payload["sheets"]],
            uploaded_at=payload.get("uploadedAt") or utc_now_iso(),
        )


@dataclass(frozen=True)
class CellDiff:
    """One reported difference at a single address."""

    address: str
    row: int  # 1-based
    col: int  # 1-based
    old_value: CellValue
    new_value: CellValue
    type: ChangeType
    old_formula: str | None = None
    new_formula: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "address": self.address,
            "row": self.row,
            "col": self.col,
            "oldValue": _serialize_value(self.old_value),
            "newValue": _serialize_value(self.new_value),
            "type": self.type,
        }
        if self.old_formula is not None:
            result["oldFormula"] = self.old_formula
        if self.new_formula is not None:
            result["newFormula"] = self.new_formula
        return result

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> CellDiff:
        return cls(
            address=payload["address"],
            row=payload["row"],
            col=payload["col"],
            old_value=payload.get("oldValue"),
            new_value=payload.get("newValue"),
            type=payload["type"],
            old_formula=payload.get("oldFormula"),
            new_formula=payload.get("newFormula"),
        )


@dataclass(frozen=True)
class SheetDiff:
    """All cell differences for one sheet name, bucketed by type."""

    sheet_name: str
    added_cells: tuple[CellDiff, ...] = ()
    removed_cells: tuple[CellDiff, ...] = ()
    changed_cells: tuple[CellDiff, ...] = ()

    @property
    def total_changes(self) -> int:
        return len(self.added_cells) + len(self.removed_cells) + len(self.changed_cells)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetName": self.sheet_name,
            "addedCells": [d.to_dict() for d in self.added_cells],
            "removedCells": [d.to_dict() for d in self.removed_cells],
            "changedCells": [d.to_dict() for d in self.changed_cells],
            "totalChanges": self.total_changes,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SheetDiff:
        return cls(
            sheet_name=payload["sheetName"],
            added_cells=tuple(CellDiff.from_dict(d) for d in payload.get("addedCells", [])),
            removed_cells=tuple(
                CellDiff.from_dict(d) for d in payload.get("removedCells", [])
            ),
            changed_cells=tuple(
                CellDiff.from_dict(d) for d in payload.get("changedCells", [])
            ),
        )


@dataclass(frozen=True)
class ChangeSummary:
    """Per-category change counts across all sheets."""

    added: int = 0
    removed: int = 0
    changed: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.changed

    def to_dict(self) -> dict[str, int]:
        return {"added": self.added, "removed": self.removed, "changed": self.changed}


@dataclass(frozen=True)
class ComparisonResult:
    """The complete report for one pair of workbooks."""

    file1_name: str
    file2_name: str
    compared_at: str
    sheets: tuple[SheetDiff, ...] = ()

    @property
    def summary(self) -> ChangeSummary:
        return ChangeSummary(
            added=sum(len(s.added_cells) for s in self.sheets),
            removed=sum(len(s.removed_cells) for s in self.sheets),
            changed=sum(len(s.changed_cells) for s in self.sheets),
        )

    @property
    def total_changes(self) -> int:
        return self.summary.total

    def has_changes(self) -> bool:
        return any(sheet.total_changes for sheet in self.sheets)

    def sheet(self, name: str) -> SheetDiff | None:
        """Return the SheetDiff for ``name``, or None."""
        for sheet_diff in self.sheets:
            if sheet_diff.sheet_name == name:
                return sheet_diff
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file1Name": self.file1_name,
            "file2Name": self.file2_name,
            "comparedAt": self.compared_at,
            "sheets": [sheet.to_dict() for sheet in self.sheets],
            "totalChanges": self.total_changes,
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ComparisonResult:
        return cls(
            file1_name=payload["file1Name"],
            file2_name=payload["file2Name"],
            compared_at=payload["comparedAt"],
            sheets=tuple(SheetDiff.from_dict(s) for s in payload.get("sheets", [])),
        )
