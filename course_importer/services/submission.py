from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from course_importer.models.api_result import ApiError, ApiOk, ApiResult
from course_importer.models.course_record import CourseImportRecord

"""Backend client for course import and the course list endpoints.

Every call returns an ApiResult; HTTP status, ``status: failure`` bodies and
transport errors are all folded into ApiError here so callers never look at
raw responses. Nothing is retried.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "GENERIC_FAILURE",
    "TIMEOUT_MESSAGE",
    "CourseApiClient",
    "decode_response",
]

GENERIC_FAILURE = "Error processing request"
TIMEOUT_MESSAGE = "Request timed out"


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def decode_response(response: httpx.Response) -> ApiResult:
    """Decode a backend response into ApiOk / ApiError."""
    body = _json_body(response)
    message = body.get("message") if isinstance(body, dict) else None

    if response.is_success:
        if isinstance(body, dict) and body.get("status") == "failure":
            return ApiError(message=message or GENERIC_FAILURE, status_code=response.status_code)
        return ApiOk(value=body)

    if not message:
        message = f"{GENERIC_FAILURE} (HTTP {response.status_code})"
    return ApiError(message=str(message), status_code=response.status_code)


class CourseApiClient:
    """Thin wrapper around ``httpx.Client`` for the admin course endpoints.

    Args:
        base_url: Admin API root, e.g. ``http://localhost:4000/api/admin``
        token: Bearer token sent with every request, if given
        timeout: Per-request timeout in seconds
        transport: Custom httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> ApiResult:
        logger.debug(f"{method} {url}")
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.debug(f"{method} {url} timed out: {e}")
            return ApiError(message=TIMEOUT_MESSAGE)
        except httpx.RequestError as e:
            return ApiError(message=f"{GENERIC_FAILURE}: {e}")
        return decode_response(response)

    def import_courses(
        self,
        records: Sequence[CourseImportRecord],
        *,
        semester_id: int | None = None,
        regulation_id: int | None = None,
    ) -> ApiResult:
        """POST the valid batch.

        ``/courses`` with ``semesterId`` for single-semester files,
        ``/regulations/courses`` with ``regulationId`` for bulk files.
        """
        if (semester_id is None) == (regulation_id is None):
            raise ValueError("exactly one of semester_id / regulation_id is required")

        body: dict[str, Any] = {"courses": [r.to_payload() for r in records]}
        if regulation_id is not None:
            body["regulationId"] = regulation_id
            return self._request("POST", "/regulations/courses", json=body)
        body["semesterId"] = semester_id
        return self._request("POST", "/courses", json=body)

    def fetch_courses(self, semester_id: int) -> ApiResult:
        """Courses of one semester; the value is the ``data`` list."""
        result = self._request("GET", f"/semesters/{semester_id}/courses")
        if isinstance(result, ApiError) and result.status_code == 404:
            # backend answers 404 for a semester without courses
            return ApiOk(value=[])
        if isinstance(result, ApiOk):
            body = result.value
            data = body.get("data") if isinstance(body, dict) else body
            return ApiOk(value=list(data or []))
        return result

    def delete_course(self, course_id: int) -> ApiResult:
        return self._request("DELETE", f"/courses/{course_id}")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> CourseApiClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
