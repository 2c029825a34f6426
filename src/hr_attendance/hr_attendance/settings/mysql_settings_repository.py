from __future__ import annotations

from typing import Mapping

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_key_values(self) -> Mapping[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT `key`, `value` FROM system_settings")
            return {str(r["key"]): str(r["value"]) for r in fetchall(cur) if r.get("value") is not None}

    def save_value(self, *, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_settings(`key`, `value`) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE `value`=VALUES(`value`)
                """,
                (key, value),
            )
