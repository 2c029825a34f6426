from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from src.hr_attendance.hr_attendance.attendance import service as attendance_service
from src.hr_attendance.hr_attendance.attendance.model import AttendanceRecord
from src.hr_attendance.hr_attendance.attendance.service import AttendanceService
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus, DayStatus, LeaveStatus, LeaveType
from src.hr_attendance.hr_attendance.core.exceptions import ValidationError
from src.hr_attendance.hr_attendance.leave.model import LeaveRequest
from src.hr_attendance.hr_attendance.settings.model import AttendanceSettings
from src.hr_attendance.hr_attendance.users.model import Employee


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def list_attendance(self, *, start_date, end_date, employee_ids=None):
        return [
            r
            for r in self.records.values()
            if start_date <= r.clock_in.date() <= end_date and (employee_ids is None or r.user_id in employee_ids)
        ]

    def get_recent_for_user(self, user_id, limit):
        rows = [r for r in self.records.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.clock_in, reverse=True)[:limit]

    def get_open_for_user(self, user_id):
        return next((r for r in self.records.values() if r.user_id == user_id and r.is_open), None)

    def get_for_user_and_date(self, user_id, work_date):
        return next(
            (r for r in self.records.values() if r.user_id == user_id and r.clock_in.date() == work_date),
            None,
        )

    def create_clock_in(self, *, user_id, clock_in, status, location=None, notes=None):
        rid = self._next_id
        self._next_id += 1
        self.records[rid] = AttendanceRecord(rid, user_id, clock_in, status=status, location=location, notes=notes)
        return rid

    def update_clock_out(self, *, attendance_id, clock_out, status, notes=None):
        rec = self.records.get(attendance_id)
        if not rec:
            return False
        self.records[attendance_id] = replace(rec, clock_out=clock_out, status=status, notes=notes)
        return True


class FakeEmployeesRepo:
    def __init__(self, *employees):
        self._by_id = {e.user_id: e for e in employees}

    def list_employees(self):
        return list(self._by_id.values())

    def get_by_id(self, user_id):
        return self._by_id.get(user_id)


class FakeLeaveRepo:
    def __init__(self, requests):
        self.requests = list(requests)

    def list_leave_requests(self, *, employee_ids=None, status=None, start_date=None, end_date=None):
        return [
            r
            for r in self.requests
            if (employee_ids is None or r.user_id in employee_ids) and (status is None or r.status == status)
        ]


def _service(leaves=None):
    attendance = FakeAttendanceRepo()
    changes = []
    svc = AttendanceService(
        attendance,
        FakeEmployeesRepo(Employee("u1", "Budi"), Employee("u2", "Sari")),
        leaves=leaves,
        settings_provider=AttendanceSettings,
        on_change=changes.append,
    )
    return svc, attendance, changes


def test_clock_in_on_time_creates_present_record():
    svc, attendance, changes = _service()

    record = svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 45), location="Office")

    assert record.status == AttendanceStatus.PRESENT
    assert attendance.records[record.attendance_id].location == "Office"
    assert changes == ["attendance"]


def test_clock_in_late_after_threshold():
    svc, _, _ = _service()

    record = svc.clock_in("u1", now=datetime(2024, 6, 10, 9, 20))

    assert record.status == AttendanceStatus.LATE
    assert record.notes


def test_second_open_record_is_rejected():
    svc, _, _ = _service()
    svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 0))

    with pytest.raises(ValidationError):
        svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 5))


def test_clock_in_twice_on_same_day_after_clock_out_is_rejected():
    svc, _, _ = _service()
    svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 0))
    svc.clock_out("u1", now=datetime(2024, 6, 10, 17, 30))

    with pytest.raises(ValidationError):
        svc.clock_in("u1", now=datetime(2024, 6, 10, 18, 0))


def test_clock_in_unknown_employee():
    svc, _, _ = _service()

    with pytest.raises(ValidationError):
        svc.clock_in("ghost", now=datetime(2024, 6, 10, 8, 0))


def test_clock_out_before_window_is_early_leave():
    svc, attendance, _ = _service()
    record = svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 0))

    status = svc.clock_out("u1", now=datetime(2024, 6, 10, 15, 0))

    assert status == AttendanceStatus.EARLY_LEAVE
    assert attendance.records[record.attendance_id].clock_out == datetime(2024, 6, 10, 15, 0)


def test_clock_out_without_clock_in():
    svc, _, _ = _service()

    with pytest.raises(ValidationError):
        svc.clock_out("u1", now=datetime(2024, 6, 10, 17, 0))


def test_clock_out_earlier_than_clock_in():
    svc, _, _ = _service()
    svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 0))

    with pytest.raises(ValidationError):
        svc.clock_out("u1", now=datetime(2024, 6, 10, 7, 0))


def test_calendar_marks_approved_leave_days():
    leave = LeaveRequest(
        request_id=1,
        user_id="u1",
        leave_type=LeaveType.SICK,
        start_date=date(2024, 6, 11),
        end_date=date(2024, 6, 11),
        reason="Flu",
        status=LeaveStatus.APPROVED,
    )
    svc, _, _ = _service(leaves=FakeLeaveRepo([leave]))
    svc.clock_in("u1", now=datetime(2024, 6, 10, 8, 0))

    days = svc.calendar("u1", start=date(2024, 6, 10), end=date(2024, 6, 12), today=date(2024, 6, 20))
    summary = svc.summarize_calendar(days)

    assert [d.status for d in days] == [DayStatus.PRESENT, DayStatus.LEAVE, DayStatus.ABSENT]
    assert summary["present"] == 1
    assert summary["leave"] == 1
    assert summary["absent"] == 1


def test_clock_out_with_clock_in_read_back_without_timezone(monkeypatch):
    svc, attendance, _ = _service()
    attendance.records[1] = AttendanceRecord(1, "u1", datetime(2024, 6, 10, 8, 0))
    monkeypatch.setattr(
        attendance_service,
        "now_local",
        lambda tz_name: datetime(2024, 6, 10, 17, 30, tzinfo=ZoneInfo(tz_name)),
    )

    status = svc.clock_out("u1")

    assert status == AttendanceStatus.PRESENT
    assert attendance.records[1].clock_out == datetime(2024, 6, 10, 17, 30)


def test_clock_in_stores_local_wall_clock_time():
    svc, attendance, _ = _service()

    record = svc.clock_in("u1", now=datetime(2024, 6, 10, 1, 30, tzinfo=ZoneInfo("UTC")))

    assert attendance.records[record.attendance_id].clock_in == datetime(2024, 6, 10, 8, 30)
    assert record.status == AttendanceStatus.PRESENT
