from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from course_importer.errors import (
    EmptyValidBatchError,
    HeaderMismatchError,
    SubmissionError,
    UnsupportedFormatError,
)
from course_importer.excel.headers import REGULATION_SCHEMA, SEMESTER_SCHEMA, HeaderSchema, validate_headers
from course_importer.excel.reader import read_workbook
from course_importer.logging.error_log import ErrorLogBuffer, ErrorRecord
from course_importer.models.api_result import ApiError, ApiOk
from course_importer.models.import_result import ImportReport
from course_importer.services.mapper import map_rows
from course_importer.services.progress import ProgressTracker
from course_importer.services.submission import CourseApiClient
from course_importer.services.validator import partition_records

"""Import orchestration: workbook -> headers -> records -> validation -> backend.

Stages run strictly in order. File and header problems abort before any row
is mapped, an all-invalid batch aborts before any request is sent, and no
local state changes until the backend has accepted the batch.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ImportSession",
    "run_import",
]

SHEET_LABEL = "<FIRST_SHEET>"
FILE_LEVEL = "<FILE_LEVEL>"


@dataclass
class ImportSession:
    """State of one import attempt, handed to every stage.

    ``semester_id`` goes with the 12-column layout (one semester per file),
    ``regulation_id`` with the 13-column layout (semester per row).
    """
    path: Path
    schema: HeaderSchema
    semester_id: int | None = None
    regulation_id: int | None = None
    content_type: str | None = None
    enforce_contact_total: bool = True

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if (self.semester_id is None) == (self.regulation_id is None):
            raise ValueError("exactly one of semester_id / regulation_id is required")
        if self.regulation_id is not None and not self.schema.has_semester:
            raise ValueError(f"regulation import needs a semester column, schema '{self.schema.name}' has none")
        if self.semester_id is not None and self.schema.has_semester:
            raise ValueError(f"semester import cannot use schema '{self.schema.name}'")

    @classmethod
    def for_semester(cls, path: Path, semester_id: int, **kwargs: Any) -> ImportSession:
        return cls(path=path, schema=SEMESTER_SCHEMA, semester_id=semester_id, **kwargs)

    @classmethod
    def for_regulation(cls, path: Path, regulation_id: int, **kwargs: Any) -> ImportSession:
        return cls(path=path, schema=REGULATION_SCHEMA, regulation_id=regulation_id, **kwargs)


def _record_file_error(error_log: ErrorLogBuffer | None, file_name: str, error_type: str, message: str) -> None:
    if error_log is None:
        return
    error_log.append(ErrorRecord.create(file_name, FILE_LEVEL, -1, error_type, message))
    error_log.flush()


def run_import(
    session: ImportSession,
    client: CourseApiClient,
    *,
    error_log: ErrorLogBuffer | None = None,
) -> ImportReport:
    """Run one import attempt end to end.

    Args:
        session: What to import and where to
        client: Backend client used for the submission and the refresh
        error_log: Receives one JSON line per rejected or dropped row

    Returns:
        ImportReport for an accepted submission (status success or partial)

    Raises:
        UnsupportedFormatError: Not an .xls/.xlsx workbook
        HeaderMismatchError: First row differs from the session schema
        EmptyValidBatchError: No record passed validation; nothing was sent
        SubmissionError: The backend rejected the batch or was unreachable
    """
    start = time.perf_counter()
    file_name = session.path.name

    try:
        rows = read_workbook(session.path, content_type=session.content_type)
        validate_headers(rows[0] if rows else [], session.schema)
    except UnsupportedFormatError as e:
        _record_file_error(error_log, file_name, "UNSUPPORTED_FORMAT", str(e))
        raise
    except HeaderMismatchError as e:
        _record_file_error(error_log, file_name, "HEADER_MISMATCH", str(e))
        raise

    records, short_rows = map_rows(rows, session.schema)
    logger.debug(f"{file_name}: mapped {len(records)} record(s), {len(short_rows)} short row(s)")
    for row_number in short_rows:
        logger.warning(f"row {row_number}: fewer than {session.schema.column_count} columns, row dropped")
        if error_log is not None:
            error_log.append(ErrorRecord.create(
                file_name, SHEET_LABEL, row_number, "SHORT_ROW",
                f"fewer than {session.schema.column_count} columns",
            ))

    with ProgressTracker(len(records)) as progress:
        batch = partition_records(
            records,
            session.schema,
            enforce_contact_total=session.enforce_contact_total,
            on_record=progress.advance,
        )

    log_path = None
    if error_log is not None:
        for invalid in batch.invalid:
            error_log.append(ErrorRecord.create(
                file_name, SHEET_LABEL, invalid.row_number, "ROW_VALIDATION_ERROR", invalid.reason,
            ))
        log_path = error_log.flush()

    if not batch.valid:
        raise EmptyValidBatchError(batch.invalid)

    if batch.invalid:
        where = f"; details in {log_path}" if log_path else ""
        logger.warning(f"{len(batch.invalid)} invalid course row(s) skipped{where}")
        for invalid in batch.invalid:
            code = invalid.record.course_code or "unknown"
            logger.warning(f"row {invalid.row_number} ({code}): {invalid.reason}")

    result = client.import_courses(
        batch.valid,
        semester_id=session.semester_id,
        regulation_id=session.regulation_id,
    )
    if isinstance(result, ApiError):
        raise SubmissionError(result.message, result.status_code)

    body = result.value if isinstance(result.value, dict) else {}
    count = body.get("importedCount")
    imported_count = count if isinstance(count, int) and not isinstance(count, bool) else None

    courses = None
    if session.semester_id is not None:
        refreshed = client.fetch_courses(session.semester_id)
        if isinstance(refreshed, ApiOk):
            courses = refreshed.value
        else:
            logger.warning(f"could not refresh courses of semester {session.semester_id}: {refreshed.message}")

    return ImportReport(
        file_name=file_name,
        data_rows=len(records) + len(short_rows),
        batch=batch,
        imported_count=imported_count,
        message=body.get("message"),
        elapsed_seconds=time.perf_counter() - start,
        short_rows=short_rows,
        courses=courses,
    )
