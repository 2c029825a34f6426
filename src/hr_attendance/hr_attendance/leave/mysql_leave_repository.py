from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = (
    "id, user_id, leave_type, start_date, end_date, reason, status, "
    "rejection_reason, approved_by, approved_at, created_at"
)


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_leave(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_leave(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return LeaveRequest.from_row(r) if r else None

    def list_leave_requests(
        self,
        *,
        employee_ids: Optional[Sequence[str]] = None,
        status: Optional[LeaveStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        where = ["1=1"]
        params: list = []
        if employee_ids is not None:
            clause, ids = in_clause("user_id", list(employee_ids))
            where.append(clause)
            params.extend(ids)
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        if end_date is not None:
            where.append("start_date <= %s")
            params.append(end_date)
        if start_date is not None:
            where.append("end_date >= %s")
            params.append(start_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {' AND '.join(where)} ORDER BY created_at DESC",
                tuple(params),
            )
            return [LeaveRequest.from_row(r) for r in fetchall(cur)]

    def decide_leave(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: str,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    decided_by,
                    datetime.now(),
                    rejection_reason,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel_leave(self, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET status=%s WHERE id=%s AND status=%s",
                (LeaveStatus.CANCELLED.value, int(request_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0
