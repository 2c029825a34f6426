from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence, Union

from ..common.validators import optional_text, require_min_length
from ..core.constants import JOURNAL_MIN_CONTENT_LENGTH
from ..core.enums import JournalAction, JournalStatus, Role, WorkResult
from ..core.exceptions import AuthorizationError, IllegalTransitionError, ValidationError
from .model import JournalEntry
from .repository import JournalRepository
from .workflow import journal_permissions, transition_journal

logger = logging.getLogger(__name__)


class JournalService:
    def __init__(self, journals: JournalRepository, *, on_change=None):
        self._journals = journals
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change:
            self._on_change("work_journals")

    def _get(self, journal_id: int) -> JournalEntry:
        entry = self._journals.get_journal(journal_id=int(journal_id))
        if not entry:
            raise ValidationError("Journal not found")
        return entry

    @staticmethod
    def _check_access(entry: JournalEntry, *, actor_id: str, actor_role: Role, action: str) -> None:
        if not actor_role.is_reviewer and entry.user_id != actor_id:
            raise AuthorizationError("You can only access your own journals")
        perms = journal_permissions(entry, actor_role, actor_id)
        allowed = perms.can_delete if action == "delete" else perms.can_edit
        if not allowed:
            raise IllegalTransitionError(
                f"Journal in state {entry.verification_status.value} can no longer be {action}d"
            )

    def create(
        self,
        *,
        user_id: str,
        entry_date: date,
        content: str,
        work_result: WorkResult = WorkResult.COMPLETED,
        obstacles: Optional[str] = None,
        mood: Optional[str] = None,
        duration_minutes: int = 0,
        submit: bool = False,
    ) -> int:
        content = require_min_length(content, "Content", JOURNAL_MIN_CONTENT_LENGTH)
        if int(duration_minutes) < 0:
            raise ValidationError("Duration cannot be negative")

        # One journal per employee and date; the table has no unique index.
        if self._journals.get_for_user_and_date(user_id=user_id, entry_date=entry_date):
            raise ValidationError(f"A journal for {entry_date.isoformat()} already exists")

        entry = JournalEntry(
            journal_id=None,
            user_id=user_id,
            entry_date=entry_date,
            content=content,
            work_result=work_result,
            obstacles=optional_text(obstacles),
            mood=optional_text(mood),
            duration_minutes=int(duration_minutes),
            verification_status=JournalStatus.SUBMITTED if submit else JournalStatus.DRAFT,
        )
        journal_id = self._journals.create_journal(entry)
        logger.info("Journal %s created by %s for %s (%s)", journal_id, user_id, entry_date, entry.verification_status.value)
        self._changed()
        return journal_id

    def edit(
        self,
        *,
        actor_id: str,
        actor_role: Role,
        journal_id: int,
        content: Optional[str] = None,
        work_result: Optional[WorkResult] = None,
        obstacles: Optional[str] = None,
        mood: Optional[str] = None,
        duration_minutes: Optional[int] = None,
    ) -> JournalEntry:
        entry = self._get(journal_id)
        self._check_access(entry, actor_id=actor_id, actor_role=actor_role, action="update")

        changes = {}
        if content is not None:
            changes["content"] = require_min_length(content, "Content", JOURNAL_MIN_CONTENT_LENGTH)
        if work_result is not None:
            changes["work_result"] = work_result
        if obstacles is not None:
            changes["obstacles"] = optional_text(obstacles)
        if mood is not None:
            changes["mood"] = optional_text(mood)
        if duration_minutes is not None:
            if int(duration_minutes) < 0:
                raise ValidationError("Duration cannot be negative")
            changes["duration_minutes"] = int(duration_minutes)

        updated = replace(entry, updated_at=datetime.now(), **changes)
        self._journals.save_journal(updated)
        self._changed()
        return updated

    def transition(
        self,
        *,
        actor_id: str,
        actor_role: Role,
        journal_id: int,
        action: Union[JournalAction, str],
        note: Optional[str] = None,
    ) -> JournalEntry:
        entry = self._get(journal_id)
        updated = transition_journal(entry, action, actor_role, note, actor_id=actor_id)
        self._journals.save_journal(updated)
        logger.info(
            "Journal %s: %s -> %s by %s",
            journal_id,
            entry.verification_status.value,
            updated.verification_status.value,
            actor_id,
        )
        self._changed()
        return updated

    def delete(self, *, actor_id: str, actor_role: Role, journal_id: int) -> None:
        """Hard delete, unlike leave cancellation which keeps the row."""
        entry = self._get(journal_id)
        self._check_access(entry, actor_id=actor_id, actor_role=actor_role, action="delete")
        if not self._journals.delete_journal(journal_id=int(journal_id)):
            raise ValidationError("Journal not found")
        logger.info("Journal %s deleted by %s", journal_id, actor_id)
        self._changed()

    def cleanup(
        self,
        *,
        current_role: Role,
        actor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        before: Optional[date] = None,
    ) -> int:
        """Bulk hard delete for admins: a date range, or everything before a cutoff."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can clean up journals")

        if before is not None:
            if start_date is not None or end_date is not None:
                raise ValidationError("Use either a date range or a cutoff date, not both")
            deleted = self._journals.delete_before(cutoff=before)
            scope = f"before {before.isoformat()}"
        else:
            if start_date is None or end_date is None:
                raise ValidationError("Start and end dates are required")
            if end_date < start_date:
                raise ValidationError("End date must be on or after start date")
            deleted = self._journals.delete_between(start_date=start_date, end_date=end_date)
            scope = f"{start_date.isoformat()}..{end_date.isoformat()}"

        logger.info("Journal cleanup by %s removed %d entries (%s)", actor_id, deleted, scope)
        if deleted:
            self._changed()
        return deleted

    def list_mine(self, *, user_id: str) -> Sequence[JournalEntry]:
        return self._journals.list_journal_entries(employee_ids=[user_id])

    def list_for_review(
        self,
        *,
        current_role: Role,
        status: Optional[JournalStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[JournalEntry]:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only managers or admins can review journals")
        return self._journals.list_journal_entries(status=status, start_date=start_date, end_date=end_date)
