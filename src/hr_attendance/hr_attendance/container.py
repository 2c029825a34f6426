from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .journal.mysql_journal_repository import MySQLJournalRepository
from .journal.service import JournalService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveService
from .reporting.invalidation import InvalidationHub
from .reporting.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLEmployeeRepository
from .users.service import EmployeeService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRepository
    journal_repo: MySQLJournalRepository
    settings_repo: MySQLSettingsRepository

    invalidation_hub: InvalidationHub
    settings_service: SettingsService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    journal_service: JournalService
    report_service: ReportService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    journal_repo = MySQLJournalRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)

    hub = InvalidationHub()
    settings_service = SettingsService(settings_repo, on_change=hub.publish)
    employee_service = EmployeeService(employees_repo, on_change=hub.publish)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        leaves=leave_repo,
        settings_provider=settings_service.current,
        strategy_factory=AttendanceStrategyFactory(),
        on_change=hub.publish,
    )
    leave_service = LeaveService(leave_repo, settings_provider=settings_service.current, on_change=hub.publish)
    journal_service = JournalService(journal_repo, on_change=hub.publish)
    report_service = ReportService(
        employees_repo,
        attendance_repo,
        leave_repo,
        journal_repo,
        settings_provider=settings_service.current,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        journal_repo=journal_repo,
        settings_repo=settings_repo,
        invalidation_hub=hub,
        settings_service=settings_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        journal_service=journal_service,
        report_service=report_service,
    )
