"""Journal verification workflow.

draft -> submitted -> {read, need_revision} -> approved, with
need_revision -> submitted as the only way back. Approved is terminal for
the owner; reviewers keep an override on edit/delete.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Union

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import JOURNAL_MIN_CONTENT_LENGTH
from ..core.enums import JournalAction, JournalStatus, Role
from ..core.exceptions import AuthorizationError, IllegalTransitionError, ValidationError
from .model import JournalEntry, JournalPermissions

OWNER_EDITABLE = frozenset({JournalStatus.DRAFT, JournalStatus.SUBMITTED, JournalStatus.NEED_REVISION})

_SUBMIT_FROM = OWNER_EDITABLE
_SAVE_DRAFT_BLOCKED = frozenset({JournalStatus.APPROVED, JournalStatus.READ})
_MARK_READ_FROM = frozenset({JournalStatus.SUBMITTED})
_APPROVE_FROM = frozenset({JournalStatus.SUBMITTED, JournalStatus.READ, JournalStatus.NEED_REVISION})
_REVISION_FROM = frozenset({JournalStatus.SUBMITTED, JournalStatus.READ})


def journal_permissions(
    entry: JournalEntry,
    actor_role: Role,
    actor_id: Optional[str] = None,
) -> JournalPermissions:
    status = entry.verification_status
    if actor_role.is_reviewer:
        return JournalPermissions(can_edit=True, can_delete=True, is_locked=False)

    # Only employees are locked out of approved entries.
    locked = status == JournalStatus.APPROVED
    if actor_id is not None and actor_id != entry.user_id:
        return JournalPermissions(can_edit=False, can_delete=False, is_locked=locked)

    editable = status in OWNER_EDITABLE
    return JournalPermissions(can_edit=editable, can_delete=editable, is_locked=locked)


def _require_owner(entry: JournalEntry, actor_id: Optional[str]) -> None:
    if actor_id is not None and actor_id != entry.user_id:
        raise AuthorizationError("Only the owner can change this journal")


def _require_reviewer(actor_role: Role) -> None:
    if not actor_role.is_reviewer:
        raise AuthorizationError("Only managers or admins can review journals")


def _require_state(entry: JournalEntry, allowed: frozenset, action: JournalAction) -> None:
    if entry.verification_status not in allowed:
        raise IllegalTransitionError(
            f"Cannot {action.value.replace('_', ' ')} a journal in state {entry.verification_status.value}"
        )


def transition_journal(
    entry: JournalEntry,
    action: Union[JournalAction, str],
    actor_role: Role,
    note: Optional[str] = None,
    *,
    actor_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> JournalEntry:
    """Apply a workflow action and return the updated entry.

    The input entry is left untouched.
    """
    try:
        action = JournalAction(action)
    except ValueError:
        raise ValidationError(f"Unknown journal action: {action!r}")
    now = now or datetime.now()

    if action == JournalAction.REQUEST_REVISION:
        note = require_non_empty(note, "Revision note")
        _require_reviewer(actor_role)
        _require_state(entry, _REVISION_FROM, action)
        return replace(entry, verification_status=JournalStatus.NEED_REVISION, manager_notes=note, updated_at=now)

    if action == JournalAction.APPROVE:
        _require_reviewer(actor_role)
        _require_state(entry, _APPROVE_FROM, action)
        return replace(
            entry,
            verification_status=JournalStatus.APPROVED,
            manager_notes=optional_text(note) or entry.manager_notes,
            updated_at=now,
        )

    if action == JournalAction.MARK_READ:
        _require_reviewer(actor_role)
        _require_state(entry, _MARK_READ_FROM, action)
        return replace(entry, verification_status=JournalStatus.READ, updated_at=now)

    _require_owner(entry, actor_id)
    if action == JournalAction.SUBMIT:
        _require_state(entry, _SUBMIT_FROM, action)
        content = require_min_length(entry.content, "Content", JOURNAL_MIN_CONTENT_LENGTH)
        return replace(entry, content=content, verification_status=JournalStatus.SUBMITTED, updated_at=now)

    # save_draft
    if entry.verification_status in _SAVE_DRAFT_BLOCKED:
        raise IllegalTransitionError(f"Cannot save a {entry.verification_status.value} journal as draft")
    content = require_min_length(entry.content, "Content", JOURNAL_MIN_CONTENT_LENGTH)
    return replace(entry, content=content, verification_status=JournalStatus.DRAFT, updated_at=now)
