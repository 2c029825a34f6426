from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, user_id, clock_in, clock_out, status, location, notes"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_attendance(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance WHERE clock_in >= %s AND clock_in < %s"
        params: tuple = (datetime.combine(start_date, time.min), datetime.combine(end_date + timedelta(days=1), time.min))
        if employee_ids is not None:
            clause, ids = in_clause("user_id", list(employee_ids))
            sql += f" AND {clause}"
            params += ids
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY clock_in", params)
            return [AttendanceRecord.from_row(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s
                ORDER BY clock_in DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [AttendanceRecord.from_row(r) for r in fetchall(cur)]

    def get_open_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s AND clock_out IS NULL
                ORDER BY clock_in DESC
                LIMIT 1
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return AttendanceRecord.from_row(r) if r else None

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s AND clock_in >= %s AND clock_in < %s
                ORDER BY clock_in
                LIMIT 1
                """,
                (
                    user_id,
                    datetime.combine(work_date, time.min),
                    datetime.combine(work_date + timedelta(days=1), time.min),
                ),
            )
            r = fetchone(cur)
            return AttendanceRecord.from_row(r) if r else None

    def create_clock_in(
        self,
        *,
        user_id: str,
        clock_in: datetime,
        status: AttendanceStatus,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, clock_in, status, location, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user_id, clock_in, status.value, location, notes),
            )
            return int(cur.lastrowid)

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, status=%s, notes=%s
                WHERE id=%s AND clock_out IS NULL
                """,
                (clock_out, status.value, notes, int(attendance_id)),
            )
            return cur.rowcount > 0
