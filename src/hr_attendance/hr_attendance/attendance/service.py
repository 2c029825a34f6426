from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local, to_local_naive
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, DayStatus, LeaveStatus
from ..core.exceptions import ValidationError
from ..leave.repository import LeaveRepository
from ..settings.model import AttendanceSettings
from ..users.repository import EmployeeRepository
from .classifier import attendance_period
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, DailyAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        leaves: Optional[LeaveRepository] = None,
        settings_provider=None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        on_change=None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._leaves = leaves
        self._settings_provider = settings_provider or AttendanceSettings
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._on_change = on_change

    def _settings(self) -> AttendanceSettings:
        return self._settings_provider()

    def _changed(self) -> None:
        if self._on_change:
            self._on_change("attendance")

    def clock_in(
        self,
        user_id: str,
        *,
        now: Optional[datetime] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        settings = self._settings()
        now = to_local_naive(now or now_local(settings.timezone), settings.timezone)

        if not self._employees.get_by_id(user_id):
            raise ValidationError("Employee not found")

        # The store does not enforce a single open record; check here.
        if self._attendance.get_open_for_user(user_id):
            raise ValidationError("You are already clocked in")
        if self._attendance.get_for_user_and_date(user_id, now.date()):
            raise ValidationError("You have already clocked in today")

        strategy = self._factory.for_clock_in(now=now, settings=settings)
        decision = strategy.decide_clock_in(now=now, settings=settings)
        note = optional_text(notes) or decision.note

        attendance_id = self._attendance.create_clock_in(
            user_id=user_id,
            clock_in=now,
            status=decision.status,
            location=optional_text(location),
            notes=note,
        )
        logger.info("Clock-in %s for %s (%s)", attendance_id, user_id, decision.status.value)
        self._changed()
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            clock_in=now,
            status=decision.status,
            location=optional_text(location),
            notes=note,
        )

    def clock_out(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceStatus:
        settings = self._settings()
        now = to_local_naive(now or now_local(settings.timezone), settings.timezone)

        record = self._attendance.get_open_for_user(user_id)
        if not record:
            raise ValidationError("You have not clocked in")
        if record.clock_in and now < to_local_naive(record.clock_in, settings.timezone):
            raise ValidationError("Clock-out cannot be earlier than clock-in")

        strategy = self._factory.for_clock_out(now=now, settings=settings, current_status=record.status)
        decision = strategy.decide_clock_out(now=now, settings=settings, current=record.status)

        ok = self._attendance.update_clock_out(
            attendance_id=record.attendance_id,
            clock_out=now,
            status=decision.status,
            notes=decision.note or record.notes,
        )
        if not ok:
            raise ValidationError("Clock-out failed")
        logger.info("Clock-out %s for %s (%s)", record.attendance_id, user_id, decision.status.value)
        self._changed()
        return decision.status

    def history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT):
        return self._attendance.get_recent_for_user(user_id, limit)

    def today_record(self, user_id: str, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, today)

    def calendar(self, user_id: str, *, start: date, end: date, today: Optional[date] = None) -> list[DailyAttendance]:
        """Day-by-day attendance of one employee, gaps filled in."""
        if end < start:
            raise ValidationError("End date must be on or after start date")
        settings = self._settings()
        today = today or now_local(settings.timezone).date()

        records = self._attendance.list_attendance(start_date=start, end_date=end, employee_ids=[user_id])
        leave_days: set[date] = set()
        if self._leaves:
            for req in self._leaves.list_leave_requests(
                employee_ids=[user_id], status=LeaveStatus.APPROVED, start_date=start, end_date=end
            ):
                leave_days.update(req.days())
        return attendance_period(
            records, start, end, today=today, leave_days=leave_days, tz_name=settings.timezone
        )

    @staticmethod
    def summarize_calendar(days: list[DailyAttendance]) -> dict[str, int]:
        counts = {s.value: 0 for s in DayStatus}
        for d in days:
            counts[d.status.value] += 1
        return counts
