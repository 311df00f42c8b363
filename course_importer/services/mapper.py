from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any

from course_importer.excel.headers import HeaderSchema
from course_importer.excel.reader import RawRow
from course_importer.models.course_record import CourseImportRecord, CourseType

"""Row mapper: RawRow -> CourseImportRecord.

Hour cells (L/T/P/E) that do not parse default to 0. Totals, credits, marks
and the semester number stay ``None`` so the validator can flag them.
"""

__all__ = [
    "derive_course_type",
    "parse_int",
    "map_row",
    "map_rows",
]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def derive_course_type(
    lecture_hours: int, tutorial_hours: int, practical_hours: int, experiential_hours: int
) -> CourseType:
    """Classify a course from its hours. Branch order matters."""
    if experiential_hours > 0:
        return CourseType.EXPERIENTIAL_LEARNING
    if practical_hours > 0:
        if lecture_hours > 0 or tutorial_hours > 0:
            return CourseType.INTEGRATED
        return CourseType.PRACTICAL
    return CourseType.THEORY


def parse_int(value: Any) -> int | None:
    """Parse the leading integer of a cell, None when there is none.

    >>> parse_int("3 hrs"), parse_int(4.9), parse_int("x")
    (3, 4, None)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def map_row(row: Sequence[Any], schema: HeaderSchema, row_number: int) -> CourseImportRecord | None:
    """Build a record from one data row; None for rows shorter than the schema."""
    if len(row) < schema.column_count:
        return None

    def cell(column: str) -> Any:
        return row[schema.index_of(column)]

    lecture = parse_int(cell("L")) or 0
    tutorial = parse_int(cell("T")) or 0
    practical = parse_int(cell("P")) or 0
    experiential = parse_int(cell("E")) or 0
    return CourseImportRecord(
        row_number=row_number,
        course_code=_text(cell("Course Code")),
        course_title=_text(cell("Course Title")),
        category=_text(cell("Category")),
        lecture_hours=lecture,
        tutorial_hours=tutorial,
        practical_hours=practical,
        experiential_hours=experiential,
        total_contact_periods=parse_int(cell("Total Contact Periods")),
        credits=parse_int(cell("Credits")),
        min_mark=parse_int(cell("Min Marks")),
        max_mark=parse_int(cell("Max Marks")),
        course_type=derive_course_type(lecture, tutorial, practical, experiential),
        semester_number=parse_int(cell("Semester No")) if schema.has_semester else None,
    )


def map_rows(rows: Sequence[RawRow], schema: HeaderSchema) -> tuple[list[CourseImportRecord], list[int]]:
    """Map every data row below the header.

    Returns:
        tuple: (records, short_row_numbers). Blank rows appear in neither.
    """
    records: list[CourseImportRecord] = []
    short_rows: list[int] = []
    for index, row in enumerate(rows[1:], start=1):
        if not row:
            continue
        row_number = index + 1  # Excel numbering, header is row 1
        record = map_row(row, schema, row_number)
        if record is None:
            short_rows.append(row_number)
        else:
            records.append(record)
    return records, short_rows
