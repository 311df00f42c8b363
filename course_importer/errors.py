from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.import_result import InvalidRecord

"""Exception taxonomy for the course import pipeline.

File and header errors are fatal for one import attempt (the user has to
re-upload). Row-level problems are never raised; they travel as
``InvalidRecord`` values inside ``ImportBatchResult``.
"""

__all__ = [
    "CourseImportError",
    "UnsupportedFormatError",
    "HeaderMismatchError",
    "EmptyValidBatchError",
    "SubmissionError",
]


class CourseImportError(Exception):
    """Base exception for import attempts."""


class UnsupportedFormatError(CourseImportError):
    """Raised when the selected file is not an .xls/.xlsx workbook."""


class HeaderMismatchError(CourseImportError):
    """Raised when the first row does not match the expected column list."""

    def __init__(self, expected: Sequence[str], actual: Sequence[str]) -> None:
        self.expected = list(expected)
        self.actual = list(actual)
        super().__init__(
            "Invalid Excel format. Please use the correct column headers. "
            f"expected={self.expected} actual={self.actual}"
        )


class EmptyValidBatchError(CourseImportError):
    """Raised when every record failed validation; nothing is submitted."""

    def __init__(self, invalid: Sequence[InvalidRecord]) -> None:
        self.invalid = list(invalid)
        super().__init__(f"No valid courses to import ({len(self.invalid)} invalid)")


class SubmissionError(CourseImportError):
    """Raised when the backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
