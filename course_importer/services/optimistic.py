from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from course_importer.errors import SubmissionError
from course_importer.models.api_result import ApiError, ApiOk
from course_importer.services.submission import CourseApiClient

"""Optimistic local updates with rollback.

The local view is changed before the backend confirms; if the confirming
call fails (server error or client timeout) the snapshot taken beforehand is
put back and the error is re-raised.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "StateHolder",
    "CourseList",
    "optimistic_update",
    "delete_course",
    "FK_CONSTRAINT_MESSAGE",
]

T = TypeVar("T")

FK_CONSTRAINT_MESSAGE = (
    "Cannot delete course because it has associated sections or staff allocations. "
    "Please remove them first."
)


class StateHolder(Generic[T]):
    """Mutable box around one piece of local state."""

    def __init__(self, value: T) -> None:
        self.value = value


@contextmanager
def optimistic_update(holder: StateHolder[T], mutate: Callable[[T], T]) -> Iterator[T]:
    """Apply ``mutate`` to the held value now, undo it if the block raises.

    Example:
        with optimistic_update(courses, lambda cs: [c for c in cs if c["courseId"] != 7]):
            confirm_on_server()
    """
    snapshot = copy.deepcopy(holder.value)
    holder.value = mutate(holder.value)
    try:
        yield holder.value
    except Exception:
        holder.value = snapshot
        raise


class CourseList(StateHolder[list[dict[str, Any]]]):
    """Locally held course list of one semester."""

    def __init__(self, courses: list[dict[str, Any]] | None = None, semester_id: int | None = None) -> None:
        super().__init__(list(courses or []))
        self.semester_id = semester_id

    def course_ids(self) -> list[Any]:
        return [c.get("courseId") for c in self.value]


def delete_course(course_list: CourseList, client: CourseApiClient, course_id: int) -> None:
    """Remove a course locally, then on the server; restore it if the server call fails.

    Raises:
        SubmissionError: The backend refused the delete or did not answer in time
    """
    def _without(courses: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [c for c in courses if c.get("courseId") != course_id]

    with optimistic_update(course_list, _without):
        logger.debug(f"optimistically removed course {course_id}")
        result = client.delete_course(course_id)
        if isinstance(result, ApiError):
            message = result.message
            if "foreign key constraint" in message:
                message = FK_CONSTRAINT_MESSAGE
            raise SubmissionError(message, result.status_code)

    logger.info(f"Course {course_id} deleted successfully")
    if course_list.semester_id is None:
        return
    refreshed = client.fetch_courses(course_list.semester_id)
    if isinstance(refreshed, ApiOk):
        course_list.value = refreshed.value
    else:
        logger.warning(f"could not refresh courses of semester {course_list.semester_id}: {refreshed.message}")
