from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import current_role, date_arg, fail, login_required, ok, reviewer_required
from ..container import Container
from ..core.enums import LeaveStatus
from ..core.exceptions import ValidationError
from .export import (
    LEAVE_FIELDS,
    LEAVE_SHEET,
    LEAVE_SUMMARY_FIELDS,
    LEAVE_SUMMARY_SHEET,
    leave_filename,
    report_csv_bytes,
    report_filename,
    report_xlsx_bytes,
    rows_csv_bytes,
    rows_xlsx_bytes,
)
from .invalidation import stale_views

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    service = container.report_service
    hub = container.invalidation_hub

    def _month_args() -> tuple[int, int]:
        today = now_local(container.settings_service.current().timezone).date()
        year = request.args.get("year", type=int) or today.year
        month = request.args.get("month", type=int) or today.month
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        return year, month

    def _download(payload: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="api_dashboard_stats")
    @reviewer_required
    def stats():
        return ok(service.dashboard(current_role=current_role()))

    @app.route("/api/dashboard/weekly", methods=["GET"], endpoint="api_dashboard_weekly")
    @reviewer_required
    def weekly():
        return ok(service.weekly(current_role=current_role()))

    @app.route("/api/dashboard/monthly", methods=["GET"], endpoint="api_dashboard_monthly")
    @reviewer_required
    def monthly():
        return ok(service.monthly(current_role=current_role()))

    @app.route("/api/dashboard/trend", methods=["GET"], endpoint="api_dashboard_trend")
    @reviewer_required
    def trend():
        months = request.args.get("months", type=int) or 6
        return ok(service.trend(current_role=current_role(), months=max(1, min(months, 24))))

    @app.route("/api/dashboard/departments", methods=["GET"], endpoint="api_dashboard_departments")
    @reviewer_required
    def departments():
        include = request.args.get("include_unassigned", "0") in {"1", "true", "yes"}
        return ok(service.departments(current_role=current_role(), include_unassigned=include))

    @app.route("/api/dashboard/live", methods=["GET"], endpoint="api_dashboard_live")
    @reviewer_required
    def live():
        return ok(service.live(current_role=current_role()))

    @app.route("/api/dashboard/journals", methods=["GET"], endpoint="api_dashboard_journals")
    @reviewer_required
    def journal_counts():
        return ok(service.journal_counts(current_role=current_role()))

    @app.route("/api/dashboard/subscribe", methods=["POST"], endpoint="api_dashboard_subscribe")
    @login_required
    def subscribe():
        return ok({"subscription": hub.subscribe()}, 201)

    @app.route("/api/dashboard/subscribe/<sid>", methods=["DELETE"], endpoint="api_dashboard_unsubscribe")
    @login_required
    def unsubscribe(sid: str):
        if not hub.unsubscribe(sid):
            return fail("Subscription not found", 404)
        return ok()

    @app.route("/api/dashboard/changes/<sid>", methods=["GET"], endpoint="api_dashboard_changes")
    @login_required
    def changes(sid: str):
        if not hub.is_subscribed(sid):
            return fail("Subscription not found or expired", 404)
        events = hub.drain(sid)
        return ok({"events": [e.as_dict() for e in events], "stale": stale_views(events)})

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_report_attendance")
    @reviewer_required
    def report():
        year, month = _month_args()
        return ok(service.employee_report(current_role=current_role(), year=year, month=month))

    @app.route("/api/reports/attendance.csv", methods=["GET"], endpoint="api_report_attendance_csv")
    @reviewer_required
    def report_csv():
        year, month = _month_args()
        rows = service.employee_report(current_role=current_role(), year=year, month=month)
        return _download(report_csv_bytes(rows), mimetype="text/csv", filename=report_filename(year, month, "csv"))

    @app.route("/api/reports/attendance.xlsx", methods=["GET"], endpoint="api_report_attendance_xlsx")
    @reviewer_required
    def report_xlsx():
        year, month = _month_args()
        rows = service.employee_report(current_role=current_role(), year=year, month=month)
        return _download(
            report_xlsx_bytes(rows),
            mimetype=XLSX_MIMETYPE,
            filename=report_filename(year, month, "xlsx"),
        )

    def _leave_rows():
        raw = request.args.get("status")
        try:
            status = LeaveStatus(raw) if raw else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw!r}")
        return service.leave_report(
            current_role=current_role(), status=status, start=date_arg("start"), end=date_arg("end")
        )

    def _summary_rows() -> tuple[int, list]:
        year = request.args.get("year", type=int) or now_local(container.settings_service.current().timezone).year
        return year, service.leave_summary(current_role=current_role(), year=year)

    @app.route("/api/reports/leave", methods=["GET"], endpoint="api_report_leave")
    @reviewer_required
    def leave_report():
        return ok(_leave_rows())

    @app.route("/api/reports/leave.csv", methods=["GET"], endpoint="api_report_leave_csv")
    @reviewer_required
    def leave_report_csv():
        payload = rows_csv_bytes(_leave_rows(), LEAVE_FIELDS)
        return _download(payload, mimetype="text/csv", filename=leave_filename("requests", "csv"))

    @app.route("/api/reports/leave.xlsx", methods=["GET"], endpoint="api_report_leave_xlsx")
    @reviewer_required
    def leave_report_xlsx():
        payload = rows_xlsx_bytes(_leave_rows(), LEAVE_FIELDS, sheet_name=LEAVE_SHEET)
        return _download(payload, mimetype=XLSX_MIMETYPE, filename=leave_filename("requests", "xlsx"))

    @app.route("/api/reports/leave-summary", methods=["GET"], endpoint="api_report_leave_summary")
    @reviewer_required
    def leave_summary():
        _, rows = _summary_rows()
        return ok(rows)

    @app.route("/api/reports/leave-summary.csv", methods=["GET"], endpoint="api_report_leave_summary_csv")
    @reviewer_required
    def leave_summary_csv():
        year, rows = _summary_rows()
        payload = rows_csv_bytes(rows, LEAVE_SUMMARY_FIELDS)
        return _download(payload, mimetype="text/csv", filename=leave_filename(f"summary_{year}", "csv"))

    @app.route("/api/reports/leave-summary.xlsx", methods=["GET"], endpoint="api_report_leave_summary_xlsx")
    @reviewer_required
    def leave_summary_xlsx():
        year, rows = _summary_rows()
        payload = rows_xlsx_bytes(rows, LEAVE_SUMMARY_FIELDS, sheet_name=LEAVE_SUMMARY_SHEET)
        return _download(payload, mimetype=XLSX_MIMETYPE, filename=leave_filename(f"summary_{year}", "xlsx"))
