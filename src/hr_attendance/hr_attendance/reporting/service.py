from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Optional, TypeVar

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local, shift_month
from ..core.constants import DEFAULT_TREND_MONTHS
from ..core.enums import JournalStatus, LeaveStatus, Role
from ..core.exceptions import AuthorizationError
from ..journal.repository import JournalRepository
from ..leave.repository import LeaveRepository
from ..settings.model import AttendanceSettings
from ..users.repository import EmployeeRepository
from ..users.service import tracked_employees
from . import aggregation
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

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReportService:
    """Fetches raw rows and hands them to the pure aggregations.

    A failing fetch is logged and replaced by empty data so the rest of the
    dashboard still renders.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        journals: JournalRepository,
        *,
        settings_provider=None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._journals = journals
        self._settings_provider = settings_provider or AttendanceSettings

    def _safe(self, section: str, fetch: Callable[[], T], default: T) -> T:
        try:
            return fetch()
        except Exception:
            logger.exception("Failed to load %s; showing empty data", section)
            return default

    def _today(self, settings: AttendanceSettings, today: Optional[date]) -> date:
        return today or now_local(settings.timezone).date()

    def _all_employees(self):
        return list(self._safe("employees", self._employees.list_employees, []))

    def _tracked(self):
        return tracked_employees(self._all_employees())

    def _attendance_between(self, start: date, end: date, ids):
        return self._safe(
            "attendance",
            lambda: self._attendance.list_attendance(start_date=start, end_date=end, employee_ids=ids),
            [],
        )

    def _approved_leave_between(self, start: date, end: date, ids):
        return self._safe(
            "leave requests",
            lambda: self._leaves.list_leave_requests(
                employee_ids=ids, status=LeaveStatus.APPROVED, start_date=start, end_date=end
            ),
            [],
        )

    @staticmethod
    def _require_reviewer(current_role: Role) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only managers or admins can view reports")

    def dashboard(self, *, current_role: Role, today: Optional[date] = None) -> DashboardStats:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        today = self._today(settings, today)
        all_employees = self._all_employees()
        employees = tracked_employees(all_employees)
        ids = [e.user_id for e in employees]
        month_start, month_end = month_bounds(today.year, today.month)

        pending_leaves = self._safe(
            "pending leave", lambda: len(self._leaves.list_leave_requests(status=LeaveStatus.PENDING)), 0
        )
        pending_journals = self._safe(
            "pending journals",
            lambda: len(self._journals.list_journal_entries(status=JournalStatus.SUBMITTED)),
            0,
        )
        return aggregation.dashboard_stats(
            employees,
            self._attendance_between(month_start, month_end, ids),
            self._approved_leave_between(month_start, month_end, ids),
            today=today,
            pending_leaves=pending_leaves,
            pending_journals=pending_journals,
            all_employees=all_employees,
            tz_name=settings.timezone,
        )

    def weekly(self, *, current_role: Role, today: Optional[date] = None) -> list[TrendPoint]:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        today = self._today(settings, today)
        employees = self._tracked()
        ids = [e.user_id for e in employees]
        records = self._attendance_between(today - timedelta(days=6), today, ids)
        return aggregation.weekly_trend(records, len(employees), today, settings.timezone)

    def monthly(self, *, current_role: Role, today: Optional[date] = None) -> list[WindowPoint]:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        today = self._today(settings, today)
        employees = self._tracked()
        ids = [e.user_id for e in employees]
        records = self._attendance_between(date(today.year, today.month, 1), today, ids)
        return aggregation.monthly_series(records, len(employees), today, settings.timezone)

    def trend(
        self, *, current_role: Role, today: Optional[date] = None, months: int = DEFAULT_TREND_MONTHS
    ) -> list[MonthlyTrend]:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        today = self._today(settings, today)
        employees = self._tracked()
        ids = [e.user_id for e in employees]
        first_year, first_month = shift_month(today.year, today.month, -(max(1, months) - 1))
        _, month_end = month_bounds(today.year, today.month)
        records = self._attendance_between(date(first_year, first_month, 1), month_end, ids)
        return aggregation.monthly_trend(records, len(employees), today, months, settings.timezone)

    def departments(self, *, current_role: Role, include_unassigned: bool = False) -> list[DepartmentCount]:
        self._require_reviewer(current_role)
        return aggregation.department_distribution(self._all_employees(), include_unassigned)

    def live(self, *, current_role: Role, today: Optional[date] = None) -> list[LiveRow]:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        today = self._today(settings, today)
        employees = self._tracked()
        ids = [e.user_id for e in employees]
        return aggregation.live_monitoring(
            employees,
            self._attendance_between(today, today, ids),
            self._approved_leave_between(today, today, ids),
            today=today,
            tz_name=settings.timezone,
        )

    def journal_counts(
        self, *, current_role: Role, start: Optional[date] = None, end: Optional[date] = None
    ) -> dict[str, int]:
        self._require_reviewer(current_role)
        entries = self._safe(
            "journals", lambda: self._journals.list_journal_entries(start_date=start, end_date=end), []
        )
        return aggregation.journal_status_counts(entries)

    def employee_report(self, *, current_role: Role, year: int, month: int) -> list[ReportRow]:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        employees = self._tracked()
        month_start, month_end = month_bounds(year, month)
        if month_end < settings.attendance_tracking_start_date:
            # Nothing was tracked yet; skip the queries.
            records, leaves = [], []
        else:
            ids = [e.user_id for e in employees]
            start = max(month_start, settings.attendance_tracking_start_date)
            records = self._attendance_between(start, month_end, ids)
            leaves = self._approved_leave_between(start, month_end, ids)
        return [
            aggregation.employee_report_row(
                e, records, leaves, year, month, settings.attendance_tracking_start_date, settings.timezone
            )
            for e in employees
        ]

    def leave_report(
        self,
        *,
        current_role: Role,
        status: Optional[LeaveStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[LeaveReportRow]:
        self._require_reviewer(current_role)
        requests = self._safe(
            "leave requests",
            lambda: self._leaves.list_leave_requests(status=status, start_date=start, end_date=end),
            [],
        )
        return aggregation.leave_request_rows(requests, self._all_employees())

    def leave_summary(self, *, current_role: Role, year: int) -> list[LeaveSummaryRow]:
        self._require_reviewer(current_role)
        settings = self._settings_provider()
        employees = self._tracked()
        requests = self._safe(
            "leave requests",
            lambda: self._leaves.list_leave_requests(
                employee_ids=[e.user_id for e in employees],
                start_date=date(year, 1, 1),
                end_date=date(year, 12, 31),
            ),
            [],
        )
        return aggregation.leave_summary_rows(
            requests, employees, quota=settings.annual_leave_quota_days, year=year
        )
