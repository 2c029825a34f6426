from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create_leave(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_leave(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_leave_requests(
        self,
        *,
        employee_ids: Optional[Sequence[str]] = None,
        status: Optional[LeaveStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Requests overlapping [start_date, end_date] when a range is given."""

        raise NotImplementedError

    def decide_leave(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: str,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to approved/rejected. False if not pending."""

        raise NotImplementedError

    def cancel_leave(self, *, request_id: int) -> bool:
        """Soft delete: pending -> cancelled. False if not pending."""

        raise NotImplementedError
