from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""CourseImportRecord domain model.

One record is created per data row of an import workbook. It is never
persisted locally: it either ends up in the valid batch sent to the backend
or is discarded together with the reasons it failed validation.
"""

__all__ = [
    "CourseType",
    "VALID_CATEGORIES",
    "CourseImportRecord",
]


class CourseType(Enum):
    """Teaching type derived from the L/T/P/E hours of a course."""
    THEORY = "THEORY"
    PRACTICAL = "PRACTICAL"
    INTEGRATED = "INTEGRATED"
    EXPERIENTIAL_LEARNING = "EXPERIENTIAL LEARNING"


VALID_CATEGORIES: tuple[str, ...] = ("HSMC", "BSC", "ESC", "PEC", "OEC", "EEC", "PCC")


@dataclass(frozen=True)
class CourseImportRecord:
    """Typed course built from one workbook row.

    Numeric fields that could not be parsed are ``None`` so the validator can
    report them; hour fields default to 0 instead.
    """
    row_number: int  # 1-based Excel row, header is row 1
    course_code: str
    course_title: str
    category: str
    lecture_hours: int
    tutorial_hours: int
    practical_hours: int
    experiential_hours: int
    total_contact_periods: int | None
    credits: int | None
    min_mark: int | None
    max_mark: int | None
    course_type: CourseType
    semester_number: int | None = None  # 13-column workbooks only

    @property
    def hours_total(self) -> int:
        return (
            self.lecture_hours
            + self.tutorial_hours
            + self.practical_hours
            + self.experiential_hours
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON shape the backend expects (camelCase keys)."""
        payload: dict[str, Any] = {
            "courseCode": self.course_code,
            "courseTitle": self.course_title,
            "category": self.category.upper(),
            "type": self.course_type.value,
            "lectureHours": self.lecture_hours,
            "tutorialHours": self.tutorial_hours,
            "practicalHours": self.practical_hours,
            "experientialHours": self.experiential_hours,
            "totalContactPeriods": self.total_contact_periods,
            "credits": self.credits,
            "minMark": self.min_mark,
            "maxMark": self.max_mark,
        }
        if self.semester_number is not None:
            payload["semesterNumber"] = self.semester_number
        return payload
