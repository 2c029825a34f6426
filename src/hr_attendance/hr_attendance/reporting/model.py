from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import LeaveStatus, LeaveType, LiveStatus


@dataclass(frozen=True)
class TrendPoint:
    day: date
    present: int
    late: int
    absent: int


@dataclass(frozen=True)
class WindowPoint:
    """One fixed 7-day slice of a month (days 1-7, 8-14, ...)."""

    label: str
    start: date
    end: date
    present: int
    late: int
    absent: int


@dataclass(frozen=True)
class MonthlyTrend:
    year: int
    month: int
    attendance_rate: int
    on_time_rate: int
    total: int
    late: int


@dataclass(frozen=True)
class DepartmentCount:
    name: str
    count: int


@dataclass(frozen=True)
class ReportRow:
    user_id: str
    name: str
    department: Optional[str]
    total_attendance: int
    on_time_count: int
    late_count: int
    leave_count: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "department": self.department or "",
            "total_attendance": self.total_attendance,
            "on_time_count": self.on_time_count,
            "late_count": self.late_count,
            "leave_count": self.leave_count,
        }


@dataclass(frozen=True)
class LeaveReportRow:
    request_id: Any
    user_id: str
    name: str
    department: Optional[str]
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    status: LeaveStatus
    reason: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "name": self.name,
            "department": self.department or "",
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "status": self.status.value,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class LeaveSummaryRow:
    """Per-employee leave totals for one year."""

    user_id: str
    name: str
    department: Optional[str]
    total: int
    approved: int
    rejected: int
    pending: int
    cancelled: int
    approved_days: int
    remaining_annual: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "department": self.department or "",
            "total": self.total,
            "approved": self.approved,
            "rejected": self.rejected,
            "pending": self.pending,
            "cancelled": self.cancelled,
            "approved_days": self.approved_days,
            "remaining_annual": self.remaining_annual,
        }


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int = 0
    present_today: int = 0
    late_today: int = 0
    absent_today: int = 0
    on_leave_today: int = 0
    on_time_rate: int = 0
    department_count: int = 0
    pending_leaves: int = 0
    pending_journals: int = 0
    new_employees_this_month: int = 0
    approved_leaves_this_month: int = 0
    attendance_rate: int = 0


@dataclass(frozen=True)
class LiveRow:
    user_id: str
    full_name: str
    department: Optional[str]
    live_status: LiveStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    leave_type: Optional[LeaveType] = None
