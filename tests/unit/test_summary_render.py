from __future__ import annotations

import re

from course_importer.excel.headers import SEMESTER_SCHEMA
from course_importer.models.import_result import ImportBatchResult, ImportReport, InvalidRecord
from course_importer.services.mapper import map_row
from course_importer.services.summary import render_summary_line

"""Unit tests for the SUMMARY line of one import run."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+file=(\S+)\s+rows=([0-9]+)\s+valid=([0-9]+)\s+invalid=([0-9]+)\s+"
    r"short_rows=([0-9]+)\s+imported=([0-9]+|\?)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def _report(course_row, *, valid=1, invalid=0, short_rows=(), imported=1, elapsed=1.0):
    records = [map_row(course_row(i + 1, code=f"C{i}"), SEMESTER_SCHEMA, i + 2) for i in range(valid + invalid)]
    batch = ImportBatchResult(
        valid=records[:valid],
        invalid=[InvalidRecord(r, "Credits must be a number") for r in records[valid:]],
    )
    return ImportReport(
        file_name="courses.xlsx",
        data_rows=valid + invalid + len(short_rows),
        batch=batch,
        imported_count=imported,
        message="Courses added successfully",
        elapsed_seconds=elapsed,
        short_rows=list(short_rows),
    )


def test_render_summary_line_all_success(course_row):
    line = render_summary_line(_report(course_row, valid=3, imported=3, elapsed=2.0))
    match = SUMMARY_PATTERN.match(line)
    assert match, line
    assert match.groups() == ("courses.xlsx", "3", "3", "0", "0", "3", "2")


def test_render_summary_line_partial(course_row):
    line = render_summary_line(_report(course_row, valid=2, invalid=1, short_rows=[7], imported=2, elapsed=0.84))
    assert line == (
        "SUMMARY file=courses.xlsx rows=4 valid=2 invalid=1 short_rows=1 imported=2 elapsed_sec=0.84"
    )


def test_unknown_server_count_renders_question_mark(course_row):
    line = render_summary_line(_report(course_row, imported=None))
    assert "imported=? " in line
    assert SUMMARY_PATTERN.match(line)


def test_elapsed_formatting(course_row):
    assert render_summary_line(_report(course_row, elapsed=0.0)).endswith("elapsed_sec=0")
    assert render_summary_line(_report(course_row, elapsed=5.0)).endswith("elapsed_sec=5")
    assert render_summary_line(_report(course_row, elapsed=1.23456)).endswith("elapsed_sec=1.235")
    # no scientific notation for tiny values
    assert render_summary_line(_report(course_row, elapsed=0.00001)).endswith("elapsed_sec=0")
