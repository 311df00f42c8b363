from __future__ import annotations

from course_importer.models.import_result import ImportReport

"""SUMMARY line rendering for one import run."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    # fixed notation, no scientific format for tiny values
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def render_summary_line(report: ImportReport) -> str:
    """Render the SUMMARY line of an accepted import.

    Format:
    SUMMARY file={name} rows={rows} valid={valid} invalid={invalid}
    short_rows={short} imported={count|?} elapsed_sec={elapsed}

    ``imported`` is the server's own count, ``?`` when it did not send one.
    """
    imported = "?" if report.imported_count is None else str(report.imported_count)
    return (
        f"SUMMARY file={report.file_name} "
        f"rows={report.data_rows} "
        f"valid={len(report.batch.valid)} "
        f"invalid={len(report.batch.invalid)} "
        f"short_rows={len(report.short_rows)} "
        f"imported={imported} "
        f"elapsed_sec={_format_seconds(report.elapsed_seconds)}"
    )
