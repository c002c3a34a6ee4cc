"""Text and tabular exports of a user's entries."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Sequence

from .clock import minutes_to_duration_string
from .models import DATE_FORMAT, Entry, UserProfile
from .paths import exports_dir
from .settings import DEFAULT_EXPORT_DATE_FORMAT
from .time_segments import duration
from .totals import Totals, extra_minutes_for, summarize_entries

UNSET_TIME_LABEL = "--:--"

ENTRY_COLUMNS = ["date", "start", "end", "minutes", "duration", "extra_minutes", "note"]


class ExportFormat(Enum):
    CSV = "csv"
    JSONL = "jsonl"
    JSON = "json"
    EXCEL = "excel"


@dataclass
class ExportTable:
    columns: list[str]
    rows: list[dict[str, object]]
    summary: dict[str, object] = field(default_factory=dict)


def export_text(
    entries: Sequence[Entry],
    totals: Totals,
    *,
    include_extra: bool = False,
    date_format: str = DEFAULT_EXPORT_DATE_FORMAT,
) -> str:
    """Render entries as clipboard-friendly lines followed by the totals."""
    lines = []
    for index, entry in enumerate(entries, start=1):
        interval = entry.as_interval()
        minutes = duration(interval) if interval is not None else 0
        start = entry.start or UNSET_TIME_LABEL
        end = entry.end or UNSET_TIME_LABEL
        line = (
            f"Entry {index} - {entry.work_date.strftime(date_format)} - "
            f"{start}-{end} ({minutes_to_duration_string(minutes)})"
        )
        if entry.note:
            line += f" - {entry.note}"
        lines.append(line)
    lines.append(f"Total: {totals.total_label}")
    if include_extra:
        lines.append(f"Extra: {totals.extra_label}")
    return "\n".join(lines)


def export_user_text(
    entries: Sequence[Entry],
    profile: UserProfile | None,
    date_format: str = DEFAULT_EXPORT_DATE_FORMAT,
) -> str:
    totals = summarize_entries(entries, profile)
    has_shift = profile is not None and profile.shift_window() is not None
    return export_text(entries, totals, include_extra=has_shift, date_format=date_format)


def build_entries_table(entries: Sequence[Entry], profile: UserProfile | None = None) -> ExportTable:
    shift = profile.shift_window() if profile is not None else None
    rows: list[dict[str, object]] = []
    for entry in sorted(entries, key=lambda e: (e.work_date, e.start or "", e.entry_id)):
        interval = entry.as_interval()
        minutes = duration(interval) if interval is not None else 0
        extra = extra_minutes_for(interval, shift) if interval is not None and shift is not None else 0
        rows.append(
            {
                "date": entry.work_date.strftime(DATE_FORMAT),
                "start": entry.start or "",
                "end": entry.end or "",
                "minutes": minutes,
                "duration": minutes_to_duration_string(minutes),
                "extra_minutes": extra,
                "note": entry.note,
            }
        )

    totals = summarize_entries(entries, profile)
    summary: dict[str, object] = {
        "user": profile.name if profile is not None else "",
        "shift": profile.shift_label if profile is not None else "",
        "total": totals.total_label,
        "extra": totals.extra_label if shift is not None else "",
        "rows": len(rows),
    }
    return ExportTable(columns=list(ENTRY_COLUMNS), rows=rows, summary=summary)


def write_export(table: ExportTable, export_format: ExportFormat, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if export_format is ExportFormat.CSV:
        _write_csv(table, path)
        return
    if export_format is ExportFormat.JSON:
        _write_json(table, path)
        return
    if export_format is ExportFormat.JSONL:
        _write_jsonl(table, path)
        return
    if export_format is ExportFormat.EXCEL:
        _write_excel(table, path)
        return
    raise ValueError(f"Unsupported export format: {export_format}")


# ---------------------------------------------------------------------------
# Writers

def _write_csv(table: ExportTable, path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=table.columns)
        writer.writeheader()
        for row in table.rows:
            writer.writerow({column: row.get(column, "") for column in table.columns})


def _write_json(table: ExportTable, path: Path) -> None:
    payload = {"summary": table.summary, "columns": table.columns, "rows": table.rows}
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")


def _write_jsonl(table: ExportTable, path: Path) -> None:
    with path.open("w", encoding="utf-8") as handle:
        for row in table.rows:
            handle.write(json.dumps(row, ensure_ascii=False))
            handle.write("\n")


def _write_excel(table: ExportTable, path: Path) -> None:
    from openpyxl import Workbook  # type: ignore[import]
    from openpyxl.utils import get_column_letter  # type: ignore[import]

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Entries"

    sheet.append(table.columns)
    for row in table.rows:
        sheet.append([row.get(column, "") for column in table.columns])

    for index, column_name in enumerate(table.columns, start=1):
        max_length = len(str(column_name))
        for row in table.rows:
            max_length = max(max_length, len(str(row.get(column_name, ""))))
        sheet.column_dimensions[get_column_letter(index)].width = max(10, min(max_length + 2, 60))

    summary = workbook.create_sheet("Summary")
    for key, value in table.summary.items():
        summary.append([key.capitalize(), value])

    workbook.save(path)


_EXTENSIONS = {
    ExportFormat.CSV: ".csv",
    ExportFormat.JSON: ".json",
    ExportFormat.JSONL: ".jsonl",
    ExportFormat.EXCEL: ".xlsx",
}


def default_export_path(profile: UserProfile | None, export_format: ExportFormat) -> Path:
    stem = "timesheet"
    if profile is not None:
        slug = "-".join(profile.name.lower().split())
        stem = f"{stem}-{slug}" if slug else stem
    stamp = date.today().strftime("%Y%m%d")
    return exports_dir() / f"{stem}-{stamp}{_EXTENSIONS[export_format]}"
