from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored in user_roles, used for authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"

    @property
    def is_reviewer(self) -> bool:
        return self in {Role.ADMIN, Role.MANAGER}


class AttendanceStatus(str, Enum):
    """Status persisted on an attendance row."""

    PRESENT = "present"
    LATE = "late"
    EARLY_LEAVE = "early_leave"


class DayStatus(str, Enum):
    """Per-day status of an employee's attendance calendar."""

    PRESENT = "present"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    ABSENT = "absent"
    LEAVE = "leave"
    WEEKEND = "weekend"
    FUTURE = "future"


class LiveStatus(str, Enum):
    """Status shown on the real-time monitoring table."""

    PRESENT = "present"
    LATE = "late"
    INACTIVE = "inactive"
    LEAVE = "leave"
    ABSENT = "absent"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERMISSION = "permission"


class LeaveStatus(str, Enum):
    """Leave approval flow. Cancellation is a soft delete."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class WorkResult(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"


class JournalStatus(str, Enum):
    """Verification status of a work journal entry."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    READ = "read"
    NEED_REVISION = "need_revision"
    APPROVED = "approved"


class JournalAction(str, Enum):
    SUBMIT = "submit"
    SAVE_DRAFT = "save_draft"
    MARK_READ = "mark_read"
    APPROVE = "approve"
    REQUEST_REVISION = "request_revision"

    @classmethod
    def _missing_(cls, value):
        # Accept camelCase names sent by clients, e.g. "requestRevision".
        if isinstance(value, str):
            snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in value).lstrip("_")
            for member in cls:
                if member.value == snake:
                    return member
        return None
