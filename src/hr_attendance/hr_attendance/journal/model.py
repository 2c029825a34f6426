from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime, local_date
from ..core.constants import BACKDATE_THRESHOLD_DAYS, DEFAULT_TIMEZONE
from ..core.enums import JournalStatus, WorkResult


@dataclass(frozen=True)
class JournalEntry:
    """Domain entity: one employee's work journal for one activity date."""

    journal_id: Any
    user_id: str
    entry_date: date
    content: str
    work_result: WorkResult = WorkResult.COMPLETED
    obstacles: Optional[str] = None
    mood: Optional[str] = None
    duration_minutes: int = 0
    verification_status: JournalStatus = JournalStatus.DRAFT
    manager_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "JournalEntry":
        entry_date = coerce_date(row.get("date", row.get("entry_date")))
        if entry_date is None:
            raise ValueError(f"Journal {row.get('id')!r} has no activity date")
        return cls(
            journal_id=row.get("id", row.get("journal_id")),
            user_id=str(row["user_id"]),
            entry_date=entry_date,
            content=str(row.get("content") or ""),
            work_result=WorkResult(row.get("work_result") or WorkResult.COMPLETED.value),
            obstacles=row.get("obstacles"),
            mood=row.get("mood"),
            duration_minutes=int(row.get("duration") or row.get("duration_minutes") or 0),
            verification_status=JournalStatus(row.get("verification_status") or JournalStatus.DRAFT.value),
            manager_notes=row.get("manager_notes"),
            created_at=coerce_datetime(row.get("created_at")),
            updated_at=coerce_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True)
class JournalPermissions:
    can_edit: bool
    can_delete: bool
    is_locked: bool


def is_backdated(entry: JournalEntry, tz_name: str = DEFAULT_TIMEZONE) -> bool:
    """Created more than one day after its activity date. Display-only flag."""
    if entry.created_at is None:
        return False
    created = local_date(entry.created_at, tz_name)
    return created > entry.entry_date + timedelta(days=BACKDATE_THRESHOLD_DAYS)
