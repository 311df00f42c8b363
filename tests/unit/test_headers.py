from __future__ import annotations

import pytest

from course_importer.errors import HeaderMismatchError
from course_importer.excel.headers import (
    REGULATION_SCHEMA,
    SEMESTER_SCHEMA,
    headers_match,
    validate_headers,
)


def test_schemas_have_expected_column_counts():
    assert SEMESTER_SCHEMA.column_count == 12
    assert REGULATION_SCHEMA.column_count == 13
    assert not SEMESTER_SCHEMA.has_semester
    assert REGULATION_SCHEMA.has_semester
    assert REGULATION_SCHEMA.columns[1] == "Semester No"


def test_exact_header_matches(semester_header):
    assert headers_match(semester_header, SEMESTER_SCHEMA)


def test_header_match_is_case_insensitive_and_trimmed(semester_header):
    lowered = [f"  {h.lower()} " for h in semester_header]
    assert headers_match(lowered, SEMESTER_SCHEMA)


def test_reordered_header_is_mismatch(semester_header):
    swapped = list(semester_header)
    swapped[1], swapped[2] = swapped[2], swapped[1]
    assert sorted(swapped) == sorted(semester_header)
    assert not headers_match(swapped, SEMESTER_SCHEMA)


def test_misspelled_column_is_mismatch(semester_header):
    bad = ["CourseCode" if h == "Course Code" else h for h in semester_header]
    assert not headers_match(bad, SEMESTER_SCHEMA)


def test_missing_or_extra_columns_are_mismatch(semester_header):
    assert not headers_match(semester_header[:-1], SEMESTER_SCHEMA)
    assert not headers_match(semester_header + ["Remarks"], SEMESTER_SCHEMA)


def test_twelve_column_header_does_not_match_regulation_schema(semester_header, regulation_header):
    assert not headers_match(semester_header, REGULATION_SCHEMA)
    assert headers_match(regulation_header, REGULATION_SCHEMA)


def test_validate_headers_raises_with_both_lists(semester_header):
    bad = ["CourseCode" if h == "Course Code" else h for h in semester_header]
    with pytest.raises(HeaderMismatchError) as e:
        validate_headers(bad, SEMESTER_SCHEMA)
    assert e.value.expected == list(SEMESTER_SCHEMA.columns)
    assert e.value.actual == bad


def test_validate_headers_empty_sheet():
    with pytest.raises(HeaderMismatchError) as e:
        validate_headers([], SEMESTER_SCHEMA)
    assert e.value.actual == []
