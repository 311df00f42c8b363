from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

"""Discriminated result type for backend calls.

Responses are decoded once at the HTTP boundary (see
``services.submission.decode_response``) so callers branch on ``kind``
instead of probing the response body shape.
"""

__all__ = [
    "ApiOk",
    "ApiError",
    "ApiResult",
]


@dataclass(frozen=True)
class ApiOk:
    value: Any
    kind: Literal["ok"] = field(default="ok", init=False)


@dataclass(frozen=True)
class ApiError:
    message: str
    status_code: int | None = None
    kind: Literal["error"] = field(default="error", init=False)


ApiResult = ApiOk | ApiError
