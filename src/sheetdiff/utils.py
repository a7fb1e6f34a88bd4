"""
Coordinate helpers for sheetdiff.

Converts between zero-based grid indices and A1 spreadsheet addresses.
"""

from __future__ import annotations

import re

_A1_PATTERN = re.compile(r"^([A-Za-z]+)(\d+)$")


def column_index_to_letter(index: int) -> str:
    """Convert a zero-based column index to its column letter(s).

    Uses bijective base-26, so there is no zero digit.

    Examples:
        0 -> A, 1 -> B, 25 -> Z, 26 -> AA, 27 -> AB, 702 -> AAA
    """
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")
    result = ""
    while True:
        result = chr(ord("A") + (index % 26)) + result
        index = index // 26 - 1
        if index < 0:
            break
    return result


def letter_to_column_index(letter: str) -> int:
    """Convert column letter(s) to a zero-based column index.

    Examples:
        A -> 0, B -> 1, Z -> 25, AA -> 26, AB -> 27, AAA -> 702
    """
    if not letter or not letter.isalpha():
        raise ValueError(f"Invalid column letter: {letter!r}")
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def cell_to_a1(row_index: int, col_index: int) -> str:
    """Convert zero-based row and column indices to an A1 address.

    Examples:
        (0, 0) -> A1, (0, 1) -> B1, (9, 2) -> C10
    """
    if row_index < 0:
        raise ValueError(f"Row index must be non-negative: {row_index}")
    return f"{column_index_to_letter(col_index)}{row_index + 1}"


def a1_to_cell(a1: str) -> tuple[int, int]:
    """Convert an A1 address to zero-based (row_index, col_index).

    Examples:
        A1 -> (0, 0), B1 -> (0, 1), C10 -> (9, 2)
    """
    match = _A1_PATTERN.match(a1)
    if not match:
        raise ValueError(f"Invalid A1 notation: {a1}")
    col_letter, row_str = match.groups()
    row = int(row_str)
    if row < 1:
        raise ValueError(f"Invalid A1 notation: {a1}")
    return row - 1, letter_to_column_index(col_letter)
