from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import current_user_id, date_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    @login_required
    def clock_in():
        data = json_body()
        record = container.attendance_service.clock_in(
            current_user_id(),
            location=data.get("location"),
            notes=data.get("notes"),
        )
        return ok(record, 201, message=f"Clocked in ({record.status.value})")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    @login_required
    def clock_out():
        status = container.attendance_service.clock_out(current_user_id())
        return ok({"status": status.value}, message="Clocked out")

    @app.route("/api/attendance/me", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    def my_history():
        limit = request.args.get("limit", type=int) or 30
        return ok(container.attendance_service.history(current_user_id(), limit=max(1, min(limit, 366))))

    @app.route("/api/attendance/me/calendar", methods=["GET"], endpoint="api_my_calendar")
    @login_required
    def my_calendar():
        today = now_local(container.settings_service.current().timezone).date()
        end = date_arg("end", today)
        start = date_arg("start", end - timedelta(days=29))
        days = container.attendance_service.calendar(current_user_id(), start=start, end=end, today=today)
        return ok(days, summary=container.attendance_service.summarize_calendar(days))
