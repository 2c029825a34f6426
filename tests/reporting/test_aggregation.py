from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from src.hr_attendance.hr_attendance.attendance.model import AttendanceRecord
from src.hr_attendance.hr_attendance.core.enums import (
    AttendanceStatus,
    JournalStatus,
    LeaveStatus,
    LeaveType,
    LiveStatus,
)
from src.hr_attendance.hr_attendance.journal.model import JournalEntry
from src.hr_attendance.hr_attendance.leave.model import LeaveRequest
from src.hr_attendance.hr_attendance.reporting.aggregation import (
    dashboard_stats,
    department_distribution,
    employee_report_row,
    journal_status_counts,
    live_monitoring,
    monthly_series,
    monthly_trend,
    weekly_trend,
)
from src.hr_attendance.hr_attendance.users.model import Employee


def _rec(rid, user_id, clock_in, status=AttendanceStatus.PRESENT, clock_out=None):
    return AttendanceRecord(rid, user_id, clock_in, clock_out=clock_out, status=status)


def _leave(rid, user_id, start, end, status=LeaveStatus.APPROVED):
    return LeaveRequest(rid, user_id, LeaveType.ANNUAL, start, end, "Trip", status=status)


def test_weekly_trend_has_seven_days_oldest_first():
    records = [
        _rec(1, "u1", datetime(2024, 6, 14, 8, 0)),
        _rec(2, "u2", datetime(2024, 6, 10, 9, 30), AttendanceStatus.LATE),
        _rec(3, "u1", datetime(2024, 6, 10, 8, 0)),
    ]

    points = weekly_trend(records, 3, date(2024, 6, 16))

    assert len(points) == 7
    assert [p.day for p in points] == [date(2024, 6, 10) + timedelta(days=i) for i in range(7)]
    assert points[-1].day == date(2024, 6, 16)
    assert (points[0].present, points[0].late, points[0].absent) == (2, 1, 1)
    assert points[1].absent == 3


def test_weekly_trend_ignores_input_order():
    records = [
        _rec(1, "u1", datetime(2024, 6, 14, 8, 0)),
        _rec(2, "u2", datetime(2024, 6, 10, 9, 30), AttendanceStatus.LATE),
        _rec(3, "u1", datetime(2024, 6, 10, 8, 0)),
    ]

    assert weekly_trend(records, 3, date(2024, 6, 16)) == weekly_trend(list(reversed(records)), 3, date(2024, 6, 16))


def test_weekly_trend_weekends_have_no_absences():
    points = weekly_trend([], 5, date(2024, 6, 16))

    weekend = [p for p in points if p.day.weekday() >= 5]
    assert len(weekend) == 2
    assert all(p.absent == 0 for p in weekend)
    assert all(p.absent == 5 for p in points if p.day.weekday() < 5)


def test_weekly_trend_with_missing_data_is_all_zero():
    points = weekly_trend(None, 0, date(2024, 6, 16))

    assert len(points) == 7
    assert all((p.present, p.late, p.absent) == (0, 0, 0) for p in points)


def test_monthly_series_drops_future_windows_and_clips_current():
    records = [
        _rec(1, "u1", datetime(2024, 6, 3, 8, 0)),
        _rec(2, "u2", datetime(2024, 6, 4, 9, 30), AttendanceStatus.LATE),
    ]

    windows = monthly_series(records, 2, date(2024, 6, 16))

    assert [(w.start.day, w.end.day) for w in windows] == [(1, 7), (8, 14), (15, 16)]
    assert (windows[0].present, windows[0].late, windows[0].absent) == (2, 1, 8)
    assert windows[1].absent == 10
    # 15-16 June 2024 is a weekend.
    assert windows[2].absent == 0


def test_monthly_series_full_month_has_four_windows():
    windows = monthly_series([], 1, date(2024, 6, 30))

    assert [(w.start.day, w.end.day) for w in windows] == [(1, 7), (8, 14), (15, 21), (22, 28)]


def test_monthly_trend_covers_last_months_in_order():
    records = [_rec(1, "u1", datetime(2024, 3, 5, 8, 0)), _rec(2, "u1", datetime(2024, 3, 6, 9, 30), AttendanceStatus.LATE)]

    trend = monthly_trend(records, 1, date(2024, 6, 12))

    assert [(t.year, t.month) for t in trend] == [(2024, m) for m in range(1, 7)]
    march = trend[2]
    assert (march.total, march.late, march.on_time_rate) == (2, 1, 50)
    assert trend[0].total == 0
    assert trend[0].on_time_rate == 0


def test_monthly_trend_crosses_year_boundary():
    trend = monthly_trend([], 1, date(2024, 2, 1), months=3)

    assert [(t.year, t.month) for t in trend] == [(2023, 12), (2024, 1), (2024, 2)]


def test_department_distribution():
    employees = [
        Employee("u1", "A", department="IT"),
        Employee("u2", "B", department="IT"),
        Employee("u3", "C", department="HR"),
        Employee("u4", "D"),
        Employee("u5", "E", department="  "),
    ]

    plain = department_distribution(employees)
    with_unassigned = department_distribution(employees, include_unassigned=True)

    assert [(d.name, d.count) for d in plain] == [("IT", 2), ("HR", 1)]
    assert [(d.name, d.count) for d in with_unassigned] == [("IT", 2), ("Unassigned", 2), ("HR", 1)]


def test_report_row_before_tracking_start_is_all_zero():
    employee = Employee("u1", "Budi", department="IT")
    records = [_rec(1, "u1", datetime(2024, 5, 6, 8, 0))]

    row = employee_report_row(employee, records, [], 2024, 5, date(2024, 6, 1))

    assert (row.total_attendance, row.on_time_count, row.late_count, row.leave_count) == (0, 0, 0, 0)
    assert row.name == "Budi"


def test_report_row_counts_from_tracking_start():
    employee = Employee("u1", "Budi", department="IT")
    records = [
        _rec(1, "u1", datetime(2024, 6, 10, 8, 0)),
        _rec(2, "u1", datetime(2024, 6, 17, 8, 0)),
        _rec(3, "u1", datetime(2024, 6, 18, 9, 30), AttendanceStatus.LATE),
        _rec(4, "u2", datetime(2024, 6, 18, 8, 0)),
    ]
    leaves = [
        _leave(1, "u1", date(2024, 6, 20), date(2024, 6, 21)),
        _leave(2, "u1", date(2024, 6, 12), date(2024, 6, 13)),
        _leave(3, "u1", date(2024, 6, 24), date(2024, 6, 24), status=LeaveStatus.PENDING),
        _leave(4, "u2", date(2024, 6, 24), date(2024, 6, 24)),
    ]

    row = employee_report_row(employee, records, leaves, 2024, 6, date(2024, 6, 15))

    assert row.total_attendance == 2
    assert row.on_time_count == 1
    assert row.late_count == 1
    assert row.leave_count == 1


def test_report_row_with_missing_inputs():
    row = employee_report_row(Employee("u1", "Budi"), None, None, 2024, 6, date(2024, 1, 1))

    assert row.total_attendance == 0
    assert row.leave_count == 0


def test_live_monitoring_statuses_and_order():
    today = date(2024, 6, 12)
    employees = [
        Employee("a", "Andi"),
        Employee("b", "Bayu"),
        Employee("c", "Citra"),
        Employee("e", "Eka"),
        Employee("d", "Dewi"),
    ]
    records = [
        _rec(1, "a", datetime(2024, 6, 12, 8, 0)),
        _rec(2, "b", datetime(2024, 6, 12, 9, 30), AttendanceStatus.LATE),
        _rec(3, "c", datetime(2024, 6, 12, 7, 50), clock_out=datetime(2024, 6, 12, 12, 0)),
        _rec(4, "e", datetime(2024, 6, 11, 8, 0)),
    ]
    leaves = [_leave(1, "d", date(2024, 6, 10), date(2024, 6, 14))]

    rows = live_monitoring(employees, records, leaves, today=today)

    assert [r.user_id for r in rows] == ["b", "a", "c", "d", "e"]
    assert [r.live_status for r in rows] == [
        LiveStatus.LATE,
        LiveStatus.PRESENT,
        LiveStatus.INACTIVE,
        LiveStatus.LEAVE,
        LiveStatus.ABSENT,
    ]
    assert rows[3].leave_type == LeaveType.ANNUAL


def test_live_monitoring_mixes_stored_and_fresh_clock_ins():
    today = date(2024, 6, 12)
    employees = [Employee("a", "Andi"), Employee("b", "Bayu")]
    records = [
        _rec(1, "a", datetime(2024, 6, 12, 8, 0)),
        _rec(2, "b", datetime(2024, 6, 12, 1, 15, tzinfo=ZoneInfo("UTC"))),
    ]

    rows = live_monitoring(employees, records, [], today=today, tz_name="Asia/Jakarta")

    assert [r.user_id for r in rows] == ["b", "a"]


def test_dashboard_stats_leave_is_not_absent():
    today = date(2024, 6, 12)
    employees = [
        Employee("u1", "A", department="IT", created_at=datetime(2024, 6, 1, 10, 0)),
        Employee("u2", "B", department="IT", created_at=datetime(2024, 1, 1, 10, 0)),
        Employee("u3", "C", department="HR"),
        Employee("u4", "D"),
    ]
    records = [
        _rec(1, "u1", datetime(2024, 6, 12, 8, 0)),
        _rec(2, "u2", datetime(2024, 6, 12, 9, 30), AttendanceStatus.LATE),
        _rec(3, "outsider", datetime(2024, 6, 12, 8, 0)),
    ]
    leaves = [_leave(1, "u3", date(2024, 6, 12), date(2024, 6, 13))]

    stats = dashboard_stats(employees, records, leaves, today=today, pending_leaves=2, pending_journals=3)

    assert stats.total_employees == 4
    assert stats.present_today == 2
    assert stats.late_today == 1
    assert stats.on_leave_today == 1
    assert stats.absent_today == 1
    assert stats.on_time_rate == 50
    assert stats.department_count == 2
    assert stats.new_employees_this_month == 1
    assert stats.approved_leaves_this_month == 1
    assert (stats.pending_leaves, stats.pending_journals) == (2, 3)


def test_dashboard_stats_with_nothing_is_zero():
    stats = dashboard_stats(None, None, None, today=date(2024, 6, 12))

    assert stats.total_employees == 0
    assert stats.absent_today == 0
    assert stats.on_time_rate == 0
    assert stats.attendance_rate == 0


def test_journal_status_counts():
    entries = [
        JournalEntry(1, "u1", date(2024, 6, 10), "x" * 10, verification_status=JournalStatus.SUBMITTED),
        JournalEntry(2, "u1", date(2024, 6, 11), "x" * 10, verification_status=JournalStatus.SUBMITTED),
        JournalEntry(3, "u2", date(2024, 6, 11), "x" * 10, verification_status=JournalStatus.APPROVED),
    ]

    counts = journal_status_counts(entries)

    assert counts["submitted"] == 2
    assert counts["approved"] == 1
    assert counts["draft"] == 0
    assert set(counts) == {s.value for s in JournalStatus}
