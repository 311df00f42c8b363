from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any

import pandas as pd

from course_importer.errors import UnsupportedFormatError

"""Workbook reader.

Reads the first sheet of an .xls/.xlsx workbook into RawRows: plain lists of
cell values, row 0 being the header row. No header inference happens here;
the header validator decides whether row 0 is acceptable.
"""

__all__ = [
    "RawRow",
    "XLS_MIME",
    "XLSX_MIME",
    "detect_format",
    "read_workbook",
    "sheet_preview",
]

RawRow = list[Any]

XLS_MIME = "application/vnd.ms-excel"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# suffix -> pandas engine
_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}
_MIME_SUFFIX = {
    XLS_MIME: ".xls",
    XLSX_MIME: ".xlsx",
}


def detect_format(filename: str | None, content_type: str | None = None) -> str:
    """Return the workbook suffix (``.xls`` / ``.xlsx``) for a file.

    A declared MIME type wins over the file name, as it does for browser
    uploads. Anything outside the two spreadsheet formats is rejected.
    """
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        suffix = _MIME_SUFFIX.get(mime)
        if suffix is None:
            raise UnsupportedFormatError(
                f"Please upload a valid Excel file (.xls or .xlsx), got content type '{content_type}'"
            )
        return suffix
    suffix = Path(filename).suffix.lower() if filename else ""
    if suffix not in _ENGINES:
        raise UnsupportedFormatError(
            f"Please upload a valid Excel file (.xls or .xlsx), got '{filename or '<unnamed>'}'"
        )
    return suffix


def _normalize_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        # pandas hands back "" for blank openpyxl cells
        return value if value.strip() else None
    if pd.isna(value):
        return None
    return value


def _trim_row(values: list[Any]) -> RawRow:
    row = [_normalize_cell(v) for v in values]
    while row and row[-1] is None:
        row.pop()
    return row


def read_workbook(
    source: Path | str | bytes,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> list[RawRow]:
    """Read the first sheet of a workbook into RawRows.

    Parameters
    ----------
    source: workbook path or its raw bytes
    filename: name used for format detection (defaults to the path name)
    content_type: declared MIME type, if the file came with one

    Trailing empty cells are trimmed from every row, so ``len(row)`` tells
    how many columns the row actually fills. Blank rows are kept as ``[]``
    to preserve Excel row numbering (row index + 1).
    """
    if isinstance(source, (bytes, bytearray)):
        io_obj: Any = BytesIO(source)
        name = filename
    else:
        path = Path(source)
        io_obj = path
        name = filename or path.name

    suffix = detect_format(name, content_type)
    try:
        df = pd.read_excel(
            io_obj,
            sheet_name=0,
            header=None,
            dtype=object,
            keep_default_na=False,
            engine=_ENGINES[suffix],
        )
    except FileNotFoundError:
        raise
    except Exception as e:
        raise UnsupportedFormatError(f"could not read workbook '{name}': {e}") from e

    return [_trim_row(values) for values in df.values.tolist()]


def sheet_preview(rows: list[RawRow], limit: int = 3) -> tuple[RawRow, list[RawRow]]:
    """Header row plus the first ``limit`` non-blank data rows."""
    if not rows:
        return [], []
    data = [r for r in rows[1:] if r]
    return rows[0], data[:limit]
