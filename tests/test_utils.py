"""Tests for sheetdiff.utils module."""

import pytest

from sheetdiff.utils import (
    a1_to_cell,
    cell_to_a1,
    column_index_to_letter,
    letter_to_column_index,
)


class TestColumnConversion:
    """Tests for column index to letter conversion."""

    def test_single_letters(self) -> None:
        assert column_index_to_letter(0) == "A"
        assert column_index_to_letter(1) == "B"
        assert column_index_to_letter(25) == "Z"

    def test_double_letters(self) -> None:
        assert column_index_to_letter(26) == "AA"
        assert column_index_to_letter(27) == "AB"
        assert column_index_to_letter(51) == "AZ"
        assert column_index_to_letter(52) == "BA"
        assert column_index_to_letter(701) == "ZZ"

    def test_triple_letters(self) -> None:
        assert column_index_to_letter(702) == "AAA"

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_index_to_letter(-1)

    def test_letter_to_index(self) -> None:
        assert letter_to_column_index("A") == 0
        assert letter_to_column_index("z") == 25
        assert letter_to_column_index("AA") == 26
        assert letter_to_column_index("ZZ") == 701
        assert letter_to_column_index("AAA") == 702

    def test_letter_to_index_invalid(self) -> None:
        with pytest.raises(ValueError):
            letter_to_column_index("")
        with pytest.raises(ValueError):
            letter_to_column_index("A1")

    def test_roundtrip(self) -> None:
        for i in range(1000):
            assert letter_to_column_index(column_index_to_letter(i)) == i


class TestCellConversion:
    """Tests for cell coordinate conversion."""

    def test_cell_to_a1(self) -> None:
        assert cell_to_a1(0, 0) == "A1"
        assert cell_to_a1(0, 1) == "B1"
        assert cell_to_a1(6, 1) == "B7"
        assert cell_to_a1(9, 2) == "C10"
        assert cell_to_a1(0, 26) == "AA1"

    def test_a1_to_cell(self) -> None:
        assert a1_to_cell("A1") == (0, 0)
        assert a1_to_cell("B7") == (6, 1)
        assert a1_to_cell("c10") == (9, 2)
        assert a1_to_cell("AA1") == (0, 26)

    def test_a1_to_cell_invalid(self) -> None:
        with pytest.raises(ValueError):
            a1_to_cell("invalid")
        with pytest.raises(ValueError):
            a1_to_cell("123")
        with pytest.raises(ValueError):
            a1_to_cell("A0")
        with pytest.raises(ValueError):
            a1_to_cell("")
