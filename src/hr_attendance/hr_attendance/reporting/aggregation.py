"""Dashboard and report folds.

Every function here is pure: records, employees and configuration come in
as arguments, nothing is read from the database or the clock, and missing
inputs degrade to zero values instead of raising.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..attendance.classifier import classify_day, monthly_attendance_rate, usable_records
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import count_work_days, is_weekend, month_bounds, shift_month, to_local_naive
from ..core.constants import (
    DEFAULT_TIMEZONE,
    DEFAULT_TREND_MONTHS,
    MONTHLY_WINDOW_COUNT,
    MONTHLY_WINDOW_DAYS,
    UNASSIGNED_DEPARTMENT,
    WEEKLY_TREND_DAYS,
)
from ..core.enums import AttendanceStatus, JournalStatus, LeaveStatus, LiveStatus
from ..journal.model import JournalEntry
from ..leave.ledger import leave_ledger
from ..leave.model import LeaveRequest
from ..users.model import Employee
from .model import (
    DashboardStats,
    DepartmentCount,
    LeaveReportRow,
    LeaveSummaryRow,
    LiveRow,
    MonthlyTrend,
    ReportRow,
    TrendPoint,
    WindowPoint,
)


def _by_work_date(records: Optional[Iterable[AttendanceRecord]], tz_name: str) -> dict[date, list[AttendanceRecord]]:
    grouped: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for r in usable_records(records):
        grouped[r.work_date(tz_name)].append(r)
    return grouped


def _in_range(grouped: dict[date, list[AttendanceRecord]], start: date, end: date) -> list[AttendanceRecord]:
    return [r for day, rows in grouped.items() if start <= day <= end for r in rows]


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return max(0, min(100, round(part / whole * 100)))


def weekly_trend(
    records: Optional[Iterable[AttendanceRecord]],
    employee_count: int,
    end_date: date,
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[TrendPoint]:
    """Seven points, oldest first, ending on end_date.

    Weekends never count absences.
    """
    grouped = _by_work_date(records, tz_name)
    points = []
    for offset in range(WEEKLY_TREND_DAYS - 1, -1, -1):
        day = end_date - timedelta(days=offset)
        c = classify_day(grouped.get(day, []), employee_count)
        points.append(TrendPoint(day=day, present=c.present, late=c.late, absent=0 if is_weekend(day) else c.absent))
    return points


def monthly_series(
    records: Optional[Iterable[AttendanceRecord]],
    employee_count: int,
    today: date,
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[WindowPoint]:
    """Current month split into fixed windows starting on the 1st.

    Windows starting after today are left out; the window containing today
    stops at today.
    """
    grouped = _by_work_date(records, tz_name)
    _, month_end = month_bounds(today.year, today.month)
    employee_count = max(0, int(employee_count or 0))

    points = []
    for index in range(MONTHLY_WINDOW_COUNT):
        start = date(today.year, today.month, 1 + index * MONTHLY_WINDOW_DAYS)
        if start > today:
            break
        end = min(start + timedelta(days=MONTHLY_WINDOW_DAYS - 1), today, month_end)
        c = classify_day(_in_range(grouped, start, end), employee_count)
        expected = employee_count * count_work_days(start, end)
        points.append(
            WindowPoint(
                label=f"Week {index + 1}",
                start=start,
                end=end,
                present=c.present,
                late=c.late,
                absent=max(0, expected - c.present),
            )
        )
    return points


def monthly_trend(
    records: Optional[Iterable[AttendanceRecord]],
    employee_count: int,
    today: date,
    months: int = DEFAULT_TREND_MONTHS,
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[MonthlyTrend]:
    grouped = _by_work_date(records, tz_name)
    out = []
    for back in range(max(0, months) - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -back)
        start, end = month_bounds(year, month)
        rows = _in_range(grouped, start, end)
        c = classify_day(rows, employee_count)
        out.append(
            MonthlyTrend(
                year=year,
                month=month,
                attendance_rate=monthly_attendance_rate(rows, employee_count, year, month, tz_name),
                on_time_rate=_percent(c.on_time, c.present),
                total=c.present,
                late=c.late,
            )
        )
    return out


def department_distribution(
    employees: Optional[Iterable[Employee]],
    include_unassigned: bool = False,
) -> list[DepartmentCount]:
    counts: Counter = Counter()
    for e in employees or ():
        name = (e.department or "").strip()
        if not name:
            if not include_unassigned:
                continue
            name = UNASSIGNED_DEPARTMENT
        counts[name] += 1
    return [DepartmentCount(name=n, count=c) for n, c in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]


def employee_report_row(
    employee: Employee,
    records: Optional[Iterable[AttendanceRecord]],
    leave_requests: Optional[Iterable[LeaveRequest]],
    year: int,
    month: int,
    tracking_start: date,
    tz_name: str = DEFAULT_TIMEZONE,
) -> ReportRow:
    """Monthly totals for one employee.

    Counting starts at the later of the 1st of the month and tracking_start;
    a month that ends before tracking_start is all zeros.
    """
    month_start, month_end = month_bounds(year, month)
    if month_end < tracking_start:
        return ReportRow(employee.user_id, employee.full_name, employee.department, 0, 0, 0, 0)

    start = max(month_start, tracking_start)
    own = [r for r in (records or ()) if r is not None and r.user_id == employee.user_id]
    c = classify_day(_in_range(_by_work_date(own, tz_name), start, month_end), 0)

    leave_count = sum(
        1
        for req in leave_requests or ()
        if req is not None
        and req.user_id == employee.user_id
        and req.status == LeaveStatus.APPROVED
        and req.start_date >= start
        and req.end_date <= month_end
    )
    return ReportRow(
        user_id=employee.user_id,
        name=employee.full_name,
        department=employee.department,
        total_attendance=c.present,
        on_time_count=c.on_time,
        late_count=c.late,
        leave_count=leave_count,
    )


def leave_request_rows(
    leave_requests: Optional[Iterable[LeaveRequest]],
    employees: Optional[Iterable[Employee]],
) -> list[LeaveReportRow]:
    """Flat leave list for export, newest start date first."""
    by_id = {e.user_id: e for e in employees or ()}
    rows = []
    for req in leave_requests or ():
        if req is None:
            continue
        owner = by_id.get(req.user_id)
        rows.append(
            LeaveReportRow(
                request_id=req.request_id,
                user_id=req.user_id,
                name=owner.full_name if owner else "-",
                department=owner.department if owner else None,
                leave_type=req.leave_type,
                start_date=req.start_date,
                end_date=req.end_date,
                days=req.day_span,
                status=req.status,
                reason=req.reason or "-",
            )
        )
    return sorted(rows, key=lambda r: (r.start_date, str(r.request_id)), reverse=True)


def leave_summary_rows(
    leave_requests: Optional[Iterable[LeaveRequest]],
    employees: Optional[Iterable[Employee]],
    *,
    quota: int,
    year: int,
) -> list[LeaveSummaryRow]:
    """Per-employee request counts for requests starting in ``year``.

    approved_days covers every leave type; remaining_annual follows the
    annual quota ledger.
    """
    grouped: dict[str, list[LeaveRequest]] = defaultdict(list)
    for req in leave_requests or ():
        if req is not None and req.start_date.year == year:
            grouped[req.user_id].append(req)

    rows = []
    for e in employees or ():
        own = grouped.get(e.user_id, [])
        statuses = Counter(r.status for r in own)
        rows.append(
            LeaveSummaryRow(
                user_id=e.user_id,
                name=e.full_name,
                department=e.department,
                total=len(own),
                approved=statuses[LeaveStatus.APPROVED],
                rejected=statuses[LeaveStatus.REJECTED],
                pending=statuses[LeaveStatus.PENDING],
                cancelled=statuses[LeaveStatus.CANCELLED],
                approved_days=sum(r.day_span for r in own if r.status == LeaveStatus.APPROVED),
                remaining_annual=leave_ledger(own, quota, year).remaining,
            )
        )
    return rows


def _approved_on(leaves: Iterable[LeaveRequest], day: date, ids: set[str]) -> dict[str, LeaveRequest]:
    out: dict[str, LeaveRequest] = {}
    for req in leaves:
        if req is not None and req.status == LeaveStatus.APPROVED and req.user_id in ids and req.covers(day):
            out.setdefault(req.user_id, req)
    return out


def dashboard_stats(
    employees: Optional[Sequence[Employee]],
    records: Optional[Iterable[AttendanceRecord]],
    leave_requests: Optional[Iterable[LeaveRequest]],
    *,
    today: date,
    pending_leaves: int = 0,
    pending_journals: int = 0,
    all_employees: Optional[Sequence[Employee]] = None,
    tz_name: str = DEFAULT_TIMEZONE,
) -> DashboardStats:
    """Headline numbers for the admin dashboard.

    records should cover the current month; employees are the tracked ones.
    Someone on approved leave today is not counted absent.
    """
    employees = list(employees or ())
    ids = {e.user_id for e in employees}
    leaves = list(leave_requests or ())
    grouped = _by_work_date((r for r in (records or ()) if r is not None and r.user_id in ids), tz_name)

    todays = grouped.get(today, [])
    c = classify_day(todays, len(employees))
    came_in = {r.user_id for r in todays}
    on_leave = set(_approved_on(leaves, today, ids)) - came_in

    month_start, month_end = month_bounds(today.year, today.month)
    month_rows = _in_range(grouped, month_start, month_end)
    departments = {(e.department or "").strip() for e in (all_employees if all_employees is not None else employees)}
    departments.discard("")

    return DashboardStats(
        total_employees=len(employees),
        present_today=c.present,
        late_today=c.late,
        absent_today=len(ids - came_in - on_leave),
        on_leave_today=len(on_leave),
        on_time_rate=_percent(c.on_time, c.present),
        department_count=len(departments),
        pending_leaves=max(0, int(pending_leaves or 0)),
        pending_journals=max(0, int(pending_journals or 0)),
        new_employees_this_month=sum(
            1 for e in employees if e.created_at is not None and month_start <= e.created_at.date() <= month_end
        ),
        approved_leaves_this_month=sum(
            1
            for req in leaves
            if req is not None
            and req.status == LeaveStatus.APPROVED
            and req.user_id in ids
            and req.start_date <= month_end
            and req.end_date >= month_start
        ),
        attendance_rate=monthly_attendance_rate(month_rows, len(employees), today.year, today.month, tz_name),
    )


def live_monitoring(
    employees: Optional[Sequence[Employee]],
    records: Optional[Iterable[AttendanceRecord]],
    leave_requests: Optional[Iterable[LeaveRequest]],
    *,
    today: date,
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[LiveRow]:
    """Today's status for every tracked employee, latest clock-in first."""
    employees = list(employees or ())
    ids = {e.user_id for e in employees}
    todays: dict[str, AttendanceRecord] = {}
    for r in _by_work_date(records, tz_name).get(today, []):
        current = todays.get(r.user_id)
        if current is None or to_local_naive(r.clock_in, tz_name) > to_local_naive(current.clock_in, tz_name):
            todays[r.user_id] = r
    leaves = _approved_on(leave_requests or (), today, ids)

    rows = []
    for e in employees:
        record = todays.get(e.user_id)
        leave = leaves.get(e.user_id)
        if record:
            if record.clock_out is not None:
                status = LiveStatus.INACTIVE
            elif record.status == AttendanceStatus.LATE:
                status = LiveStatus.LATE
            else:
                status = LiveStatus.PRESENT
        elif leave:
            status = LiveStatus.LEAVE
        else:
            status = LiveStatus.ABSENT
        rows.append(
            LiveRow(
                user_id=e.user_id,
                full_name=e.full_name or "Unknown",
                department=e.department,
                live_status=status,
                clock_in=record.clock_in if record else None,
                clock_out=record.clock_out if record else None,
                leave_type=leave.leave_type if leave and not record else None,
            )
        )

    with_clock_in = sorted(
        (r for r in rows if r.clock_in), key=lambda r: to_local_naive(r.clock_in, tz_name), reverse=True
    )
    without = sorted((r for r in rows if not r.clock_in), key=lambda r: r.full_name.lower())
    return with_clock_in + without


def journal_status_counts(entries: Optional[Iterable[JournalEntry]]) -> dict[str, int]:
    counts = {s.value: 0 for s in JournalStatus}
    for e in entries or ():
        if e is not None:
            counts[e.verification_status.value] += 1
    return counts
