from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import JournalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import JournalEntry
from .repository import JournalRepository

_COLUMNS = (
    "id, user_id, date, content, work_result, obstacles, mood, duration, "
    "verification_status, manager_notes, created_at, updated_at"
)


class MySQLJournalRepository(JournalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_journal_entries(
        self,
        *,
        employee_ids: Optional[Sequence[str]] = None,
        status: Optional[JournalStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[JournalEntry]:
        where = ["1=1"]
        params: list = []
        if employee_ids is not None:
            clause, ids = in_clause("user_id", list(employee_ids))
            where.append(clause)
            params.extend(ids)
        if status is not None:
            where.append("verification_status=%s")
            params.append(status.value)
        if start_date is not None:
            where.append("date >= %s")
            params.append(start_date)
        if end_date is not None:
            where.append("date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_journals WHERE {' AND '.join(where)} ORDER BY date DESC, id DESC",
                tuple(params),
            )
            return [JournalEntry.from_row(r) for r in fetchall(cur)]

    def get_journal(self, *, journal_id: int) -> Optional[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_journals WHERE id=%s", (int(journal_id),))
            r = fetchone(cur)
            return JournalEntry.from_row(r) if r else None

    def get_for_user_and_date(self, *, user_id: str, entry_date: date) -> Optional[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM work_journals WHERE user_id=%s AND date=%s ORDER BY id LIMIT 1",
                (user_id, entry_date),
            )
            r = fetchone(cur)
            return JournalEntry.from_row(r) if r else None

    def create_journal(self, entry: JournalEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_journals(
                    user_id, date, content, work_result, obstacles, mood, duration, verification_status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.user_id,
                    entry.entry_date,
                    entry.content,
                    entry.work_result.value,
                    entry.obstacles,
                    entry.mood,
                    int(entry.duration_minutes),
                    entry.verification_status.value,
                ),
            )
            return int(cur.lastrowid)

    def save_journal(self, entry: JournalEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_journals
                SET content=%s, work_result=%s, obstacles=%s, mood=%s, duration=%s,
                    verification_status=%s, manager_notes=%s, updated_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (
                    entry.content,
                    entry.work_result.value,
                    entry.obstacles,
                    entry.mood,
                    int(entry.duration_minutes),
                    entry.verification_status.value,
                    entry.manager_notes,
                    int(entry.journal_id),
                ),
            )
            return cur.rowcount > 0

    def delete_journal(self, *, journal_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_journals WHERE id=%s", (int(journal_id),))
            return cur.rowcount > 0

    def delete_between(self, *, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_journals WHERE date >= %s AND date <= %s", (start_date, end_date))
            return int(cur.rowcount)

    def delete_before(self, *, cutoff: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_journals WHERE date < %s", (cutoff,))
            return int(cur.rowcount)
