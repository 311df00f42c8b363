from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from course_importer.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ImportConfig, load_config
from course_importer.errors import (
    EmptyValidBatchError,
    HeaderMismatchError,
    SubmissionError,
    UnsupportedFormatError,
)
from course_importer.excel.headers import REGULATION_SCHEMA, SEMESTER_SCHEMA
from course_importer.excel.reader import read_workbook, sheet_preview
from course_importer.excel.template import write_template
from course_importer.logging.error_log import ErrorLogBuffer
from course_importer.logging.init import log_summary, setup_logging
from course_importer.services.optimistic import CourseList, delete_course
from course_importer.services.pipeline import ImportSession, run_import
from course_importer.services.submission import CourseApiClient
from course_importer.services.summary import render_summary_line

"""CLI entrypoint.

Commands:
- import:        validate a course workbook and submit the valid rows
- template:      write an empty workbook with the expected header row
- inspect:       print the header and the first rows of a workbook
- delete-course: delete one course with optimistic local update
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _make_client(cfg: ImportConfig) -> CourseApiClient:
    return CourseApiClient(
        cfg.api.base_url,
        token=cfg.api.token,
        timeout=cfg.api.timeout_seconds,
    )


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="course-import", description="Excel -> college admin course importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import courses from an .xls/.xlsx workbook")
    imp.add_argument("file", type=Path)
    target = imp.add_mutually_exclusive_group(required=True)
    target.add_argument("--semester-id", type=int, help="Target semester (12-column layout)")
    target.add_argument("--regulation-id", type=int, help="Target regulation (13-column layout)")
    imp.add_argument("--content-type", help="Declared MIME type of the file")

    tpl = sub.add_parser("template", help="Write an empty import template")
    tpl.add_argument("output", type=Path)
    tpl.add_argument("--with-semester", action="store_true", help="Use the 13-column layout")

    ins = sub.add_parser("inspect", help="Print header & first rows then exit")
    ins.add_argument("file", type=Path)

    dele = sub.add_parser("delete-course", help="Delete a course")
    dele.add_argument("course_id", type=int)
    dele.add_argument("--semester-id", type=int, help="Refresh this semester's course list afterwards")
    return p.parse_args(argv)


def _inspect(path: Path) -> int:
    try:
        rows = read_workbook(path)
    except (UnsupportedFormatError, FileNotFoundError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    header, sample = sheet_preview(rows)
    print(f"FILE: {path.name} rows={max(len(rows) - 1, 0)}")
    print(f"  header={header}")
    for row in sample:
        # datetime cells are not JSON friendly
        print("  row=", [v.isoformat() if hasattr(v, "isoformat") else v for v in row])
    return EXIT_SUCCESS_ALL


def _import(args: argparse.Namespace, cfg: ImportConfig, logger: logging.Logger) -> int:
    if not args.file.exists():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL
    options = {"content_type": args.content_type, "enforce_contact_total": cfg.enforce_contact_total}
    if args.regulation_id is not None:
        session = ImportSession.for_regulation(args.file, args.regulation_id, **options)
    else:
        session = ImportSession.for_semester(args.file, args.semester_id, **options)

    logger.info(f"Processing Excel file: {args.file.name}")
    error_log = ErrorLogBuffer(cfg.logs_dir)
    with _make_client(cfg) as client:
        try:
            report = run_import(session, client, error_log=error_log)
        except UnsupportedFormatError as e:
            logger.error(str(e))
            return EXIT_FATAL
        except HeaderMismatchError as e:
            logger.error("Invalid Excel format. Please use the correct column headers.")
            logger.error(f"expected: {e.expected}")
            logger.error(f"actual:   {e.actual}")
            return EXIT_FATAL
        except EmptyValidBatchError as e:
            logger.error("No valid courses to import")
            for invalid in e.invalid:
                logger.error(f"row {invalid.row_number} ({invalid.record.course_code or 'unknown'}): {invalid.reason}")
            return EXIT_FATAL
        except SubmissionError as e:
            logger.error(f"import failed: {e.message}")
            return EXIT_FATAL

    if report.imported_count is not None:
        logger.info(f"Imported {report.imported_count} course(s)")
    elif report.message:
        logger.info(report.message)
    if report.courses is not None:
        logger.info(f"semester {args.semester_id} now has {len(report.courses)} course(s)")

    summary_line = render_summary_line(report)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if report.status == "partial" else EXIT_SUCCESS_ALL


def _delete_course(args: argparse.Namespace, cfg: ImportConfig, logger: logging.Logger) -> int:
    with _make_client(cfg) as client:
        courses = CourseList(semester_id=args.semester_id)
        if args.semester_id is not None:
            # a failed fetch leaves an empty local list; the delete still runs
            fetched = client.fetch_courses(args.semester_id)
            if fetched.kind == "ok":
                courses.value = fetched.value
        try:
            delete_course(courses, client, args.course_id)
        except SubmissionError as e:
            logger.error(e.message)
            return EXIT_FATAL
    if args.semester_id is not None:
        logger.info(f"semester {args.semester_id} now has {len(courses.value)} course(s)")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときだけ sys.argv を読む (テストで [] を渡せるように)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    if args.command == "template":
        schema = REGULATION_SCHEMA if args.with_semester else SEMESTER_SCHEMA
        path = write_template(args.output, schema)
        logger.info(f"Template written: {path}")
        return EXIT_SUCCESS_ALL
    if args.command == "inspect":
        return _inspect(args.file)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "import":
        return _import(args, cfg, logger)
    return _delete_course(args, cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
