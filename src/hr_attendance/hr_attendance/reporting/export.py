from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

import pandas as pd

REPORT_FIELDS = [
    "user_id",
    "name",
    "department",
    "total_attendance",
    "on_time_count",
    "late_count",
    "leave_count",
]

LEAVE_FIELDS = [
    "request_id",
    "name",
    "department",
    "leave_type",
    "start_date",
    "end_date",
    "days",
    "status",
    "reason",
]

LEAVE_SUMMARY_FIELDS = [
    "user_id",
    "name",
    "department",
    "total",
    "approved",
    "rejected",
    "pending",
    "cancelled",
    "approved_days",
    "remaining_annual",
]

REPORT_SHEET = "Attendance"
LEAVE_SHEET = "Leave"
LEAVE_SUMMARY_SHEET = "Leave summary"


def rows_csv_bytes(rows: Iterable, fields: Sequence[str]) -> bytes:
    """Rows exposing as_dict() written as CSV."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fields))
    writer.writeheader()
    for row in rows:
        writer.writerow(row.as_dict())
    # BOM so spreadsheet apps detect UTF-8.
    return out.getvalue().encode("utf-8-sig")


def rows_xlsx_bytes(rows: Iterable, fields: Sequence[str], *, sheet_name: str) -> bytes:
    df = pd.DataFrame([r.as_dict() for r in rows], columns=list(fields))
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


def report_csv_bytes(rows) -> bytes:
    return rows_csv_bytes(rows, REPORT_FIELDS)


def report_xlsx_bytes(rows, *, sheet_name: str = REPORT_SHEET) -> bytes:
    return rows_xlsx_bytes(rows, REPORT_FIELDS, sheet_name=sheet_name)


def report_filename(year: int, month: int, ext: str) -> str:
    return f"attendance_report_{year:04d}-{month:02d}.{ext}"


def leave_filename(label: str, ext: str) -> str:
    return f"leave_{label}.{ext}"
