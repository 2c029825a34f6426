from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import JournalStatus
from .model import JournalEntry


class JournalRepository(Protocol):
    def list_journal_entries(
        self,
        *,
        employee_ids: Optional[Sequence[str]] = None,
        status: Optional[JournalStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[JournalEntry]:
        raise NotImplementedError

    def get_journal(self, *, journal_id: int) -> Optional[JournalEntry]:
        raise NotImplementedError

    def get_for_user_and_date(self, *, user_id: str, entry_date: date) -> Optional[JournalEntry]:
        raise NotImplementedError

    def create_journal(self, entry: JournalEntry) -> int:
        raise NotImplementedError

    def save_journal(self, entry: JournalEntry) -> bool:
        """Persist editable fields and workflow status of an existing entry."""

        raise NotImplementedError

    def delete_journal(self, *, journal_id: int) -> bool:
        raise NotImplementedError

    def delete_between(self, *, start_date: date, end_date: date) -> int:
        """Hard delete entries dated in [start_date, end_date]; returns the count."""

        raise NotImplementedError

    def delete_before(self, *, cutoff: date) -> int:
        raise NotImplementedError
