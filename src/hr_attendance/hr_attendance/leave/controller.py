from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    current_role,
    current_user_id,
    date_field,
    json_body,
    login_required,
    ok,
    reviewer_required,
)
from ..container import Container
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError


def _leave_type(raw) -> LeaveType:
    try:
        return LeaveType(str(raw or LeaveType.ANNUAL.value))
    except ValueError:
        raise ValidationError(f"Unknown leave type: {raw!r}")


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave", methods=["POST"], endpoint="api_leave_submit")
    @login_required
    def submit():
        data = json_body()
        request_id = service.submit(
            user_id=current_user_id(),
            leave_type=_leave_type(data.get("leave_type")),
            start_date=date_field(data, "start_date"),
            end_date=date_field(data, "end_date"),
            reason=data.get("reason"),
        )
        return ok({"id": request_id}, 201, message="Leave request submitted")

    @app.route("/api/leave/me", methods=["GET"], endpoint="api_leave_mine")
    @login_required
    def mine():
        return ok(service.list_mine(user_id=current_user_id()))

    @app.route("/api/leave/balance", methods=["GET"], endpoint="api_leave_balance")
    @login_required
    def balance():
        year = request.args.get("year", type=int)
        return ok(service.balance(user_id=current_user_id(), year=year))

    @app.route("/api/leave/<int:request_id>/cancel", methods=["POST"], endpoint="api_leave_cancel")
    @login_required
    def cancel(request_id: int):
        service.cancel(user_id=current_user_id(), request_id=request_id)
        return ok(message="Leave request cancelled")

    @app.route("/api/leave/review", methods=["GET"], endpoint="api_leave_review")
    @reviewer_required
    def review_list():
        raw = request.args.get("status", LeaveStatus.PENDING.value)
        try:
            status = LeaveStatus(raw) if raw != "all" else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw!r}")
        return ok(service.list_for_review(current_role=current_role(), status=status))

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="api_leave_approve")
    @reviewer_required
    def approve(request_id: int):
        service.approve(current_role=current_role(), reviewer_id=current_user_id(), request_id=request_id)
        return ok(message="Leave request approved")

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="api_leave_reject")
    @reviewer_required
    def reject(request_id: int):
        service.reject(
            current_role=current_role(),
            reviewer_id=current_user_id(),
            request_id=request_id,
            rejection_reason=json_body().get("rejection_reason"),
        )
        return ok(message="Leave request rejected")
