from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, IllegalTransitionError, ValidationError
from ..settings.model import AttendanceSettings
from .ledger import leave_day_span, leave_ledger
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, *, settings_provider=None, on_change=None):
        self._leaves = leaves
        self._settings_provider = settings_provider or AttendanceSettings
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change:
            self._on_change("leave_requests")

    def _get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_leave(request_id=int(request_id))
        if not req:
            raise ValidationError("Leave request not found")
        return req

    def balance(self, *, user_id: str, year: Optional[int] = None) -> LeaveBalance:
        settings: AttendanceSettings = self._settings_provider()
        year = year or now_local(settings.timezone).year
        approved = self._leaves.list_leave_requests(
            employee_ids=[user_id],
            status=LeaveStatus.APPROVED,
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
        )
        return leave_ledger(approved, settings.annual_leave_quota_days, year)

    def submit(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        span = leave_day_span(start_date, end_date)
        reason = require_non_empty(reason, "Reason")

        if leave_type == LeaveType.ANNUAL:
            if start_date.year != end_date.year:
                raise ValidationError("Annual leave cannot cross a calendar year; split the request")
            remaining = self.balance(user_id=user_id, year=start_date.year).remaining
            if span > remaining:
                raise ValidationError(f"Requested {span} day(s) but only {remaining} annual leave day(s) remain")

        request_id = self._leaves.create_leave(
            user_id=user_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("Leave request %s submitted by %s (%s, %d day(s))", request_id, user_id, leave_type.value, span)
        self._changed()
        return request_id

    def approve(self, *, current_role: Role, reviewer_id: str, request_id: int) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only managers or admins can approve leave")

        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise IllegalTransitionError(f"Leave request is already {req.status.value}")
        if req.user_id == reviewer_id:
            raise AuthorizationError("You cannot approve your own leave request")

        if not self._leaves.decide_leave(
            request_id=int(request_id), status=LeaveStatus.APPROVED, decided_by=reviewer_id
        ):
            raise IllegalTransitionError("Leave request is no longer pending")
        logger.info("Leave request %s approved by %s", request_id, reviewer_id)
        self._changed()

    def reject(self, *, current_role: Role, reviewer_id: str, request_id: int, rejection_reason: str) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only managers or admins can reject leave")

        rejection_reason = require_non_empty(rejection_reason, "Rejection reason")
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise IllegalTransitionError(f"Leave request is already {req.status.value}")

        if not self._leaves.decide_leave(
            request_id=int(request_id),
            status=LeaveStatus.REJECTED,
            decided_by=reviewer_id,
            rejection_reason=rejection_reason,
        ):
            raise IllegalTransitionError("Leave request is no longer pending")
        logger.info("Leave request %s rejected by %s", request_id, reviewer_id)
        self._changed()

    def cancel(self, *, user_id: str, request_id: int) -> None:
        """Owner withdraws a pending request. The row is kept as cancelled."""
        req = self._get(request_id)
        if req.user_id != user_id:
            raise AuthorizationError("You can only cancel your own leave requests")
        if req.status != LeaveStatus.PENDING:
            raise IllegalTransitionError("Only pending leave requests can be cancelled")

        if not self._leaves.cancel_leave(request_id=int(request_id)):
            raise IllegalTransitionError("Leave request is no longer pending")
        logger.info("Leave request %s cancelled by %s", request_id, user_id)
        self._changed()

    def list_mine(self, *, user_id: str) -> Sequence[LeaveRequest]:
        return self._leaves.list_leave_requests(employee_ids=[user_id])

    def list_for_review(self, *, current_role: Role, status: Optional[LeaveStatus] = LeaveStatus.PENDING):
        if not current_role.is_reviewer:
            raise AuthorizationError("Only managers or admins can review leave")
        return self._leaves.list_leave_requests(status=status)
