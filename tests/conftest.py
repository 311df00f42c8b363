# Shared pytest fixtures
from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pandas as pd
import pytest

from course_importer.excel.headers import REGULATION_SCHEMA, SEMESTER_SCHEMA
from course_importer.services.submission import CourseApiClient

BASE_URL = "http://backend.test/api/admin"


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("COLLEGE_API_BASE_URL", raising=False)
    monkeypatch.delenv("COLLEGE_API_TOKEN", raising=False)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return f"""api:
  base_url: {BASE_URL}
  timeout_seconds: 5
logs_dir: ./logs
validation:
  enforce_contact_total: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _course_row(
    sno: int,
    code: str = "CS101",
    title: str = "Programming in C",
    category: str = "PCC",
    lecture: Any = 3,
    tutorial: Any = 0,
    practical: Any = 0,
    experiential: Any = 0,
    total: Any = None,
    credits: Any = 3,
    min_mark: Any = 50,
    max_mark: Any = 100,
    semester: Any = None,
) -> list[Any]:
    """One data row in sheet order; ``semester`` switches to the 13-column layout."""
    if total is None:
        total = sum(v for v in (lecture, tutorial, practical, experiential) if isinstance(v, int))
    row: list[Any] = [sno]
    if semester is not None:
        row.append(semester)
    row += [code, title, category, lecture, tutorial, practical, experiential, total, credits, min_mark, max_mark]
    return row


@pytest.fixture()
def course_row() -> Callable[..., list[Any]]:
    return _course_row


@pytest.fixture()
def semester_header() -> list[str]:
    return list(SEMESTER_SCHEMA.columns)


@pytest.fixture()
def regulation_header() -> list[str]:
    return list(REGULATION_SCHEMA.columns)


@pytest.fixture()
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (header included) to the first sheet of an .xlsx file."""
    def _make(name: str, rows: list[list[Any]], directory: Path | None = None) -> Path:
        p = (directory or tmp_path) / name
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name="Courses", header=False, index=False)
        return p
    return _make


class FakeBackend:
    """In-memory stand-in for the admin API behind ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.courses: list[dict[str, Any]] = []
        self.import_status = 200
        self.import_body: dict[str, Any] | None = None  # None -> echo importedCount
        self.delete_status = 200
        self.delete_body: dict[str, Any] = {"status": "success", "message": "Course deleted"}
        self.raise_on: dict[str, Exception] = {}  # method -> transport error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.raise_on:
            raise self.raise_on[request.method]
        if request.method == "POST":
            if self.import_body is not None:
                return httpx.Response(self.import_status, json=self.import_body)
            payload = json.loads(request.content)
            return httpx.Response(
                self.import_status,
                json={"status": "success", "message": "Courses added successfully",
                      "importedCount": len(payload["courses"])},
            )
        if request.method == "GET":
            return httpx.Response(200, json={"status": "success", "data": self.courses})
        if request.method == "DELETE":
            return httpx.Response(self.delete_status, json=self.delete_body)
        return httpx.Response(405)

    @property
    def posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def posted_json(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.posts[index].content)

    def client(self, **kwargs: Any) -> CourseApiClient:
        return CourseApiClient(BASE_URL, transport=httpx.MockTransport(self.handler), **kwargs)


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()
