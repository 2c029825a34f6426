"""Attendance classification rules.

Pure functions over in-memory records: no I/O, no clock reads, inputs are
never mutated.
"""

from __future__ import annotations

import logging
import warnings
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import count_work_days as _count_work_days_between
from ..common.datetime_utils import is_weekend, iter_days, month_bounds, to_local_naive
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AttendanceStatus, DayStatus
from ..core.exceptions import DataGapWarning
from .model import AttendanceRecord, DailyAttendance, DayClassification

logger = logging.getLogger(__name__)


def report_data_gap(message: str, *args) -> None:
    """Non-fatal: log and warn, then let the caller skip the record."""
    text = message % args if args else message
    logger.warning(text)
    warnings.warn(text, DataGapWarning, stacklevel=3)


def usable_records(records: Optional[Iterable[AttendanceRecord]]) -> list[AttendanceRecord]:
    """Drop records without a clock-in (reported as data gaps)."""
    out = []
    for r in records or ():
        if r is None or r.clock_in is None:
            report_data_gap("Skipping attendance record %s without clock-in", getattr(r, "attendance_id", None))
            continue
        out.append(r)
    return out


def records_between(
    records: Iterable[AttendanceRecord],
    start: date,
    end: date,
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[AttendanceRecord]:
    """Usable records whose work date falls in [start, end]."""
    return [r for r in usable_records(records) if start <= r.work_date(tz_name) <= end]


def classify_day(records: Sequence[AttendanceRecord], employee_count: int) -> DayClassification:
    """Count present / late / early-leave / absent / on-time for one day.

    Present is any record with a clock-in, whatever its status. Absent and
    on-time never go below zero.
    """
    valid = usable_records(records)
    present = len(valid)
    late = sum(1 for r in valid if r.status == AttendanceStatus.LATE)
    early_leave = sum(1 for r in valid if r.status == AttendanceStatus.EARLY_LEAVE)
    return DayClassification(
        present=present,
        late=late,
        early_leave=early_leave,
        absent=max(0, int(employee_count or 0) - present),
        on_time=max(0, present - late - early_leave),
    )


def count_work_days(year: int, month: int) -> int:
    """Weekdays in the month; no holiday calendar is consulted."""
    start, end = month_bounds(year, month)
    return _count_work_days_between(start, end)


def monthly_attendance_rate(
    records: Sequence[AttendanceRecord],
    employee_count: int,
    year: int,
    month: int,
    tz_name: str = DEFAULT_TIMEZONE,
) -> int:
    """Attendance rows / (employees x work days) as a percentage in [0, 100]."""
    expected = max(0, int(employee_count or 0)) * count_work_days(year, month)
    if expected <= 0:
        return 0
    start, end = month_bounds(year, month)
    rows = len(records_between(records, start, end, tz_name))
    return max(0, min(100, round(rows / expected * 100)))


def attendance_period(
    records: Sequence[AttendanceRecord],
    start: date,
    end: date,
    *,
    today: date,
    leave_days: Iterable[date] = (),
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[DailyAttendance]:
    """One entry per day in [start, end] for a single employee.

    Days without a record are "future" from today on, "leave" when covered by
    approved leave, "weekend" on Saturday/Sunday, and "absent" otherwise.
    """
    by_day: dict[date, AttendanceRecord] = {}
    for r in sorted(usable_records(records), key=lambda x: to_local_naive(x.clock_in, tz_name)):
        by_day.setdefault(r.work_date(tz_name), r)
    on_leave = set(leave_days)

    out = []
    for day in iter_days(start, end):
        record = by_day.get(day)
        if record:
            out.append(
                DailyAttendance(
                    day=day,
                    status=DayStatus(record.status.value),
                    clock_in=record.clock_in,
                    clock_out=record.clock_out,
                    record_id=record.attendance_id,
                    notes=record.notes,
                )
            )
            continue

        if day >= today:
            status = DayStatus.FUTURE
        elif day in on_leave:
            status = DayStatus.LEAVE
        elif is_weekend(day):
            status = DayStatus.WEEKEND
        else:
            status = DayStatus.ABSENT
        out.append(DailyAttendance(day=day, status=status))
    return out
