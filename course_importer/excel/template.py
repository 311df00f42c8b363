from __future__ import annotations

from pathlib import Path

import pandas as pd

from .headers import SEMESTER_SCHEMA, HeaderSchema

"""Blank import template: one sheet, one header row, no data."""

TEMPLATE_SHEET = "Courses"


def write_template(path: Path, schema: HeaderSchema = SEMESTER_SCHEMA) -> Path:
    path = Path(path)
    if path.suffix.lower() != ".xlsx":
        path = path.with_suffix(".xlsx")
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame([list(schema.columns)])
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET, header=False, index=False)
    return path
