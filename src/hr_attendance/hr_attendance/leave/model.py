from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: Any
    user_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    rejection_reason: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def day_span(self) -> int:
        """Inclusive day count: a single-day request spans 1 day."""
        return (self.end_date - self.start_date).days + 1

    def days(self) -> Iterator[date]:
        for offset in range(max(0, self.day_span)):
            yield self.start_date + timedelta(days=offset)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LeaveRequest":
        start = coerce_date(row.get("start_date"))
        end = coerce_date(row.get("end_date"))
        if start is None or end is None:
            raise ValueError(f"Leave request {row.get('id')!r} has no start/end date")
        return cls(
            request_id=row.get("id", row.get("request_id")),
            user_id=str(row["user_id"]),
            leave_type=LeaveType(row.get("leave_type") or LeaveType.ANNUAL.value),
            start_date=start,
            end_date=end,
            reason=str(row.get("reason") or ""),
            status=LeaveStatus(row.get("status") or LeaveStatus.PENDING.value),
            rejection_reason=row.get("rejection_reason"),
            approved_by=row.get("approved_by"),
            approved_at=coerce_datetime(row.get("approved_at")),
            created_at=coerce_datetime(row.get("created_at")),
        )


@dataclass(frozen=True)
class LeaveBalance:
    used: int
    remaining: int
    quota: int
