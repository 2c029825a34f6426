"""Annual leave ledger: used and remaining days per employee and year."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from .model import LeaveBalance, LeaveRequest


def leave_day_span(start: date, end: date) -> int:
    if end < start:
        raise ValidationError("End date must be on or after start date")
    return (end - start).days + 1


def counts_against_quota(request: LeaveRequest, year: int) -> bool:
    """Approved annual leave lying inside the calendar year.

    Sick and permission leave never consume the annual quota.
    """
    return (
        request.status == LeaveStatus.APPROVED
        and request.leave_type == LeaveType.ANNUAL
        and request.start_date >= date(year, 1, 1)
        and request.end_date <= date(year, 12, 31)
    )


def used_annual_days(requests: Optional[Iterable[LeaveRequest]], year: int) -> int:
    # Overlapping requests are summed as-is.
    return sum(r.day_span for r in (requests or ()) if r is not None and counts_against_quota(r, year))


def leave_ledger(requests: Optional[Iterable[LeaveRequest]], quota: int, year: int) -> LeaveBalance:
    used = used_annual_days(requests, year)
    quota = max(0, int(quota or 0))
    return LeaveBalance(used=used, remaining=max(0, quota - used), quota=quota)
