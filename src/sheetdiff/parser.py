"""Read .xlsx files into the sheetdiff data model.

Each workbook is opened twice with openpyxl: once for formula text and once
with ``data_only=True`` for the cached results, so a formula cell carries both
its expression and its last computed value.
"""

from __future__ import annotations

import io
import logging
import zipfile
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.cell.cell import Cell as XlCell
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook as XlWorkbook
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet

from sheetdiff.exceptions import WorkbookParseError
from sheetdiff.models import Cell, CellValue, Sheet, Workbook, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "workbook.xlsx"


def _load(source: Path | bytes, *, data_only: bool) -> XlWorkbook:
    if isinstance(source, bytes):
        return openpyxl.load_workbook(io.BytesIO(source), data_only=data_only)
    return openpyxl.load_workbook(source, data_only=data_only)


def normalize_value(value: Any, data_type: str | None = None) -> CellValue:
    """Convert an openpyxl cell value to a wire-safe scalar.

    Dates and times become ISO-8601 strings, error codes become
    ``"#ERROR: <code>"`` and empty strings become None.
    """
    if value is None:
        return None
    if data_type == "e":
        return f"#ERROR: {value}"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, str):
        return value or None
    if isinstance(value, (bool, int, float)):
        return value
    return str(value)


def _parse_cell(
    row_index: int, col_index: int, formula_cell: XlCell, value_cell: XlCell
) -> Cell | None:
    raw = formula_cell.value
    formula: str | None = None

    if isinstance(raw, ArrayFormula):
        formula = raw.text
        value = normalize_value(value_cell.value, value_cell.data_type)
    elif formula_cell.data_type == "f":
        formula = str(raw)
        value = normalize_value(value_cell.value, value_cell.data_type)
    else:
        value = normalize_value(raw, formula_cell.data_type)

    if value is None and not formula:
        return None
    return Cell.at(row_index, col_index, value, formula)


def _parse_sheet(formula_ws: Worksheet, value_ws: Worksheet) -> Sheet:
    max_row = formula_ws.max_row or 1
    max_col = formula_ws.max_column or 1

    data: list[list[Cell | None]] = []
    rows = zip(
        formula_ws.iter_rows(min_row=1, max_row=max_row, max_col=max_col),
        value_ws.iter_rows(min_row=1, max_row=max_row, max_col=max_col),
        strict=True,
    )
    for row_index, (formula_row, value_row) in enumerate(rows):
        data.append(
            [
                _parse_cell(row_index, col_index, formula_cell, value_cell)
                for col_index, (formula_cell, value_cell) in enumerate(
                    zip(formula_row, value_row, strict=True)
                )
            ]
        )

    logger.debug(
        "Parsed sheet %r: %d row(s) x %d column(s)", formula_ws.title, max_row, max_col
    )
    return Sheet(name=formula_ws.title, data=data, max_row=max_row, max_col=max_col)


def parse_workbook(
    source: str | Path | bytes,
    file_name: str | None = None,
    *,
    uploaded_at: str | None = None,
) -> Workbook:
    """Parse an .xlsx file into a Workbook.

    Args:
        source: Path to the file, or its raw bytes
        file_name: Name recorded on the Workbook (defaults to the path's name)
        uploaded_at: Provenance timestamp (defaults to now, UTC)

    Returns:
        Workbook with one Sheet per worksheet, in workbook order.
        Chartsheets are skipped.

    Raises:
        WorkbookParseError: If the file cannot be opened as a workbook
    """
    if isinstance(source, bytes):
        name = file_name or DEFAULT_FILE_NAME
        loadable: Path | bytes = source
    else:
        loadable = Path(source)
        name = file_name or loadable.name

    try:
        formula_wb = _load(loadable, data_only=False)
        value_wb = _load(loadable, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise WorkbookParseError(name, str(e) or type(e).__name__) from e

    try:
        sheets = [
            _parse_sheet(worksheet, value_wb[worksheet.title])
            for worksheet in formula_wb.worksheets
        ]
    finally:
        formula_wb.close()
        value_wb.close()

    return Workbook(
        file_name=name,
        sheets=sheets,
        uploaded_at=uploaded_at or utc_now_iso(),
    )
