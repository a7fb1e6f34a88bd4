"""Shared test fixtures for sheetdiff."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import openpyxl
import pytest

from sheetdiff.models import Sheet, Workbook


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """Write an .xlsx file from ``{sheet title: rows}`` and return its path.

    Strings starting with ``=`` are stored as formulas (without cached
    values, since openpyxl does not calculate).
    """

    def _make(file_name: str, sheets: dict[str, list[list[Any]]]) -> Path:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(row)
        path = tmp_path / file_name
        wb.save(path)
        return path

    return _make


@pytest.fixture
def budget_v1() -> Workbook:
    """Baseline workbook used across engine tests."""
    return Workbook(
        file_name="budget-v1.xlsx",
        sheets=[
            Sheet.from_values(
                "Summary",
                [
                    ["Item", "Amount"],
                    ["Rent", 1200],
                    ["Food", 300],
                    ["Total", 1500],
                ],
                formulas={"B4": "=SUM(B2:B3)"},
            ),
            Sheet.from_values("Notes", [["Reviewed", True]]),
        ],
        uploaded_at="2024-01-01T00:00:00+00:00",
    )


@pytest.fixture
def budget_v2() -> Workbook:
    """budget_v1 with one edit of each kind and an extra sheet."""
    return Workbook(
        file_name="budget-v2.xlsx",
        sheets=[
            Sheet.from_values(
                "Summary",
                [
                    ["item", "Amount"],  # case-only change
                    ["Rent", 1250],  # changed value
                    [None, None],  # removed row
                    ["Total", 1250, "checked"],  # added C4
                ],
                formulas={"B4": "=SUM(B2:B2)"},
            ),
            Sheet.from_values("Notes", [["Reviewed", True]]),
            Sheet.from_values("Forecast", [["Q1", 100], ["Q2", None]]),
        ],
        uploaded_at="2024-02-01T00:00:00+00:00",
    )
