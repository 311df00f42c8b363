"""Domain models for the course import tool.

Records built from workbook rows, the per-import result containers, the
decoded backend responses and the structured error log entries.
"""

from .api_result import ApiError, ApiOk, ApiResult
from .course_record import VALID_CATEGORIES, CourseImportRecord, CourseType
from .error_record import ErrorRecord
from .import_result import ImportBatchResult, ImportReport, InvalidRecord

__all__ = [
    # Course records
    "CourseImportRecord",
    "CourseType",
    "VALID_CATEGORIES",
    # Import results
    "ImportBatchResult",
    "ImportReport",
    "InvalidRecord",
    # Backend responses
    "ApiOk",
    "ApiError",
    "ApiResult",
    # Error log
    "ErrorRecord",
]
