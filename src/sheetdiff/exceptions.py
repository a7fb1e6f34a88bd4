"""Custom exceptions for sheetdiff."""

from __future__ import annotations


class SheetDiffError(Exception):
    """Base exception for sheetdiff errors."""

    pass


class MissingWorkbookError(SheetDiffError):
    """Raised when one or both workbooks are missing from a comparison request."""

    def __init__(self, has_file1: bool = False, has_file2: bool = False) -> None:
        self.has_file1 = has_file1
        self.has_file2 = has_file2
        super().__init__("Both files are required for comparison")


class InvalidWorkbookError(SheetDiffError):
    """Raised when a workbook payload does not have a proper sheet list.

    ``side`` names the offending input ("file1" or "file2").
    """

    def __init__(self, side: str, reason: str = "sheets must be a list") -> None:
        self.side = side
        self.reason = reason
        super().__init__(f"Invalid {side} structure")


class WorkbookParseError(SheetDiffError):
    """Raised when a spreadsheet file cannot be read."""

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Failed to parse '{file_name}': {reason}")


class UnsupportedFileTypeError(SheetDiffError):
    """Raised when an uploaded file does not have an accepted extension."""

    def __init__(self, file_name: str, allowed: tuple[str, ...]) -> None:
        self.file_name = file_name
        self.allowed = allowed
        super().__init__(
            f"Invalid file type for '{file_name}'. "
            f"Please upload an Excel file ({', '.join(allowed)})."
        )


class WorkbookNotFoundError(SheetDiffError):
    """Raised when a stored workbook id is unknown or has expired."""

    def __init__(self, file_id: str) -> None:
        self.file_id = file_id
        super().__init__(
            f"File '{file_id}' not found. It may have expired; upload it again."
        )
