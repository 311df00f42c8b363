from __future__ import annotations

from collections.abc import Callable, Iterable

from course_importer.excel.headers import HeaderSchema
from course_importer.models.course_record import VALID_CATEGORIES, CourseImportRecord, CourseType
from course_importer.models.import_result import ImportBatchResult, InvalidRecord

"""Record validator.

Every rule is evaluated for every record and all failures are reported
together, so the user can fix a row in one pass.
"""

__all__ = [
    "MAX_MARK_LIMIT",
    "SEMESTER_RANGE",
    "REASON_SEPARATOR",
    "validate_record",
    "partition_records",
]

MAX_MARK_LIMIT = 100
SEMESTER_RANGE = (1, 8)
REASON_SEPARATOR = "; "

_VALID_TYPES = {t.value for t in CourseType}


def validate_record(
    record: CourseImportRecord,
    schema: HeaderSchema,
    *,
    enforce_contact_total: bool = True,
) -> list[str]:
    """Return the reasons ``record`` is invalid; empty when it is valid."""
    reasons: list[str] = []

    if not record.course_code:
        reasons.append("Course Code is required")
    if not record.course_title:
        reasons.append("Course Title is required")
    if not record.category:
        reasons.append("Category is required")
    elif record.category.upper() not in VALID_CATEGORIES:
        reasons.append(
            f"Category '{record.category}' is not one of {', '.join(VALID_CATEGORIES)}"
        )
    if not isinstance(record.course_type, CourseType) or record.course_type.value not in _VALID_TYPES:
        reasons.append(f"Type '{record.course_type}' is not a valid course type")

    numbers = {
        "Min Marks": record.min_mark,
        "Max Marks": record.max_mark,
        "Total Contact Periods": record.total_contact_periods,
        "Credits": record.credits,
    }
    for name, value in numbers.items():
        if value is None:
            reasons.append(f"{name} must be a number")

    min_mark, max_mark = record.min_mark, record.max_mark
    if min_mark is not None and max_mark is not None and min_mark > max_mark:
        reasons.append(f"Min Marks ({min_mark}) exceeds Max Marks ({max_mark})")
    for name, value in (("Min Marks", min_mark), ("Max Marks", max_mark)):
        if value is None:
            continue
        if value < 0:
            reasons.append(f"{name} must not be negative")
        elif value > MAX_MARK_LIMIT:
            reasons.append(f"{name} must not exceed {MAX_MARK_LIMIT}")
    if record.credits is not None and record.credits < 0:
        reasons.append("Credits must not be negative")
    hours = {
        "L": record.lecture_hours,
        "T": record.tutorial_hours,
        "P": record.practical_hours,
        "E": record.experiential_hours,
    }
    for name, value in hours.items():
        if value < 0:
            reasons.append(f"{name} must not be negative")

    if (
        enforce_contact_total
        and record.total_contact_periods is not None
        and record.total_contact_periods != record.hours_total
    ):
        reasons.append(
            f"Total Contact Periods ({record.total_contact_periods}) "
            f"does not equal L+T+P+E ({record.hours_total})"
        )

    if schema.has_semester:
        low, high = SEMESTER_RANGE
        if record.semester_number is None:
            reasons.append("Semester No must be a number")
        elif not low <= record.semester_number <= high:
            reasons.append(f"Semester No must be between {low} and {high}")

    return reasons


def _duplicate_key(record: CourseImportRecord, schema: HeaderSchema) -> tuple[object, ...]:
    code = record.course_code.upper()
    return (record.semester_number, code) if schema.has_semester else (code,)


def partition_records(
    records: Iterable[CourseImportRecord],
    schema: HeaderSchema,
    *,
    enforce_contact_total: bool = True,
    on_record: Callable[[CourseImportRecord], None] | None = None,
) -> ImportBatchResult:
    """Split records into the valid batch and the invalid ones with reasons.

    A course code seen earlier in the file (within the same semester for
    the regulation layout) makes the later row invalid.

    Args:
        on_record: Optional callback invoked after each record (progress display)
    """
    valid: list[CourseImportRecord] = []
    invalid: list[InvalidRecord] = []
    first_seen: dict[tuple[object, ...], int] = {}

    for record in records:
        reasons = validate_record(record, schema, enforce_contact_total=enforce_contact_total)
        if record.course_code:
            key = _duplicate_key(record, schema)
            if key in first_seen:
                reasons.append(
                    f"Duplicate Course Code '{record.course_code}' (first seen in row {first_seen[key]})"
                )
            else:
                first_seen[key] = record.row_number
        if reasons:
            invalid.append(InvalidRecord(record=record, reason=REASON_SEPARATOR.join(reasons)))
        else:
            valid.append(record)
        if on_record is not None:
            on_record(record)

    return ImportBatchResult(valid=valid, invalid=invalid)
