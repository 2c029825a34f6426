from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, ProfileUpdate
from .repository import EmployeeRepository

_SELECT_EMPLOYEE = """
    SELECT p.user_id, p.full_name, p.department, p.position, p.created_at,
           COALESCE(r.role, 'employee') AS role
    FROM profiles p
    LEFT JOIN user_roles r ON r.user_id = p.user_id
"""


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_employees(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EMPLOYEE + " ORDER BY p.full_name")
            return [Employee.from_row(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EMPLOYEE + " WHERE p.user_id=%s", (user_id,))
            r = fetchone(cur)
            return Employee.from_row(r) if r else None

    def create_profile(
        self,
        *,
        user_id: str,
        full_name: str,
        department: Optional[str],
        position: Optional[str],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(user_id, full_name, department, position)
                VALUES(%s,%s,%s,%s)
                """,
                (user_id, full_name, department, position),
            )

    def update_profile(self, *, user_id: str, update: ProfileUpdate) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE profiles
                SET full_name=COALESCE(%s, full_name),
                    department=COALESCE(%s, department),
                    position=COALESCE(%s, position)
                WHERE user_id=%s
                """,
                (update.full_name, update.department, update.position, user_id),
            )
            return cur.rowcount > 0

    def get_role(self, user_id: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return Role(r["role"]) if r else None

    def upsert_role(self, *, user_id: str, role: Role) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_roles(user_id, role) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE role=VALUES(role)
                """,
                (user_id, role.value),
            )
