#!/usr/bin/env python3
"""Sample course workbook generator.

Writes a workbook in the import layout (header row + course rows) for
manual testing of ``course-import``. A share of the rows can be made
invalid on purpose (min marks above max marks) to exercise the partial
import path.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from course_importer.excel.headers import REGULATION_SCHEMA, SEMESTER_SCHEMA, HeaderSchema
from course_importer.models.course_record import VALID_CATEGORIES

# (L, T, P, E) patterns covering every course type
HOUR_PATTERNS = [
    (3, 0, 0, 0),  # THEORY
    (3, 1, 0, 0),  # THEORY
    (0, 0, 4, 0),  # PRACTICAL
    (3, 0, 2, 0),  # INTEGRATED
    (0, 0, 0, 2),  # EXPERIENTIAL LEARNING
]


def generate_course_rows(
    rows: int, schema: HeaderSchema, invalid_ratio: float = 0.0, seed: int = 42
) -> list[list[Any]]:
    """Generate data rows (without header) for ``schema``."""
    rng = np.random.default_rng(seed)
    data: list[list[Any]] = []
    for i in range(rows):
        lecture, tutorial, practical, experiential = HOUR_PATTERNS[rng.integers(len(HOUR_PATTERNS))]
        total = lecture + tutorial + practical + experiential
        min_mark, max_mark = 50, 100
        if rng.random() < invalid_ratio:
            min_mark, max_mark = 80, 40
        row: list[Any] = [i + 1]
        if schema.has_semester:
            row.append(int(rng.integers(1, 9)))
        row += [
            f"CS{1000 + i}",
            f"Sample Course {i + 1}",
            str(rng.choice(VALID_CATEGORIES)),
            lecture,
            tutorial,
            practical,
            experiential,
            total,
            max(1, total // 2),
            min_mark,
            max_mark,
        ]
        data.append(row)
    return data


def create_course_workbook(
    output_path: Path, rows: int, schema: HeaderSchema, invalid_ratio: float = 0.0, seed: int = 42
) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    sheet_data = [list(schema.columns)] + generate_course_rows(rows, schema, invalid_ratio, seed)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet_data).to_excel(writer, sheet_name="Courses", header=False, index=False)
    print(f"Created course workbook: {output_path}")
    print(f"  Layout: {schema.name} ({schema.column_count} columns)")
    print(f"  Course rows: {rows}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a sample course import workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 20 courses for a single semester
  %(prog)s courses.xlsx --rows 20

  # Regulation layout with about 10% broken rows
  %(prog)s regulation.xlsx --rows 200 --with-semester --invalid-ratio 0.1
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--rows", type=int, default=20, help="Number of course rows (default: 20)")
    parser.add_argument("--with-semester", action="store_true", help="Use the 13-column layout")
    parser.add_argument("--invalid-ratio", type=float, default=0.0, help="Share of invalid rows (0..1)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.invalid_ratio <= 1.0:
        print("Error: --invalid-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    schema = REGULATION_SCHEMA if args.with_semester else SEMESTER_SCHEMA
    try:
        create_course_workbook(args.output, args.rows, schema, args.invalid_ratio, args.seed)
    except OSError as e:
        print(f"Error writing workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
