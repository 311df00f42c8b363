from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .course_record import CourseImportRecord

"""Result models for one import attempt."""

__all__ = [
    "InvalidRecord",
    "ImportBatchResult",
    "ImportReport",
]


@dataclass(frozen=True)
class InvalidRecord:
    """A record that failed validation, with every failing rule in ``reason``."""
    record: CourseImportRecord
    reason: str

    @property
    def row_number(self) -> int:
        return self.record.row_number


@dataclass(frozen=True)
class ImportBatchResult:
    """Partition of mapped records into the valid batch and the rejects."""
    valid: list[CourseImportRecord]
    invalid: list[InvalidRecord]

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.invalid)

    def payload(self) -> list[dict[str, Any]]:
        return [r.to_payload() for r in self.valid]


@dataclass(frozen=True)
class ImportReport:
    """Outcome of an import whose submission was accepted by the backend."""
    file_name: str
    data_rows: int  # non-blank rows below the header
    batch: ImportBatchResult
    imported_count: int | None  # as reported by the server, None if not reported
    message: str | None  # server message
    elapsed_seconds: float
    short_rows: list[int] = field(default_factory=list)  # dropped row numbers
    courses: list[dict[str, Any]] | None = None  # refreshed course list

    @property
    def status(self) -> str:
        return "partial" if self.batch.invalid else "success"
