from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from course_importer.errors import HeaderMismatchError

"""Header validation against the two course workbook layouts.

Matching is positional: column i of the sheet must equal expected column i
(trimmed, case-insensitive) and the column counts must agree. Reordered
columns are a mismatch even when the names are the same.
"""

__all__ = [
    "HeaderSchema",
    "SEMESTER_SCHEMA",
    "REGULATION_SCHEMA",
    "headers_match",
    "validate_headers",
]

SEMESTER_COLUMN = "Semester No"


@dataclass(frozen=True)
class HeaderSchema:
    """Ordered column layout of an import workbook."""
    name: str
    columns: tuple[str, ...]

    @property
    def has_semester(self) -> bool:
        return SEMESTER_COLUMN in self.columns

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def index_of(self, column: str) -> int:
        return self.columns.index(column)


_COURSE_COLUMNS = (
    "Course Code",
    "Course Title",
    "Category",
    "L",
    "T",
    "P",
    "E",
    "Total Contact Periods",
    "Credits",
    "Min Marks",
    "Max Marks",
)

# Semester chosen by the caller, one semester per file
SEMESTER_SCHEMA = HeaderSchema("semester", ("S. No",) + _COURSE_COLUMNS)
# Bulk regulation import, semester per row
REGULATION_SCHEMA = HeaderSchema("regulation", ("S. No", SEMESTER_COLUMN) + _COURSE_COLUMNS)


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().casefold()


def headers_match(header_row: Sequence[Any], schema: HeaderSchema) -> bool:
    if len(header_row) != schema.column_count:
        return False
    return all(
        _normalize(actual) == _normalize(expected)
        for actual, expected in zip(header_row, schema.columns, strict=True)
    )


def validate_headers(header_row: Sequence[Any], schema: HeaderSchema) -> None:
    """Raise HeaderMismatchError unless ``header_row`` matches ``schema``."""
    if not headers_match(header_row, schema):
        actual = ["" if h is None else str(h).strip() for h in header_row]
        raise HeaderMismatchError(expected=schema.columns, actual=actual)
