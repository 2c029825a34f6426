from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.constants import EXCLUDED_USER_NAMES
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Employee, ProfileUpdate
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def tracked_employees(
    employees: Iterable[Employee],
    *,
    excluded_names: Sequence[str] = EXCLUDED_USER_NAMES,
) -> list[Employee]:
    """Employees who are required to clock in.

    Only the employee role counts, and service accounts whose name contains
    an excluded name (case-insensitive) are dropped. Employees without a name
    are kept.
    """
    lowered = [n.lower() for n in excluded_names]
    out = []
    for e in employees:
        if e.role != Role.EMPLOYEE:
            continue
        name = e.full_name.lower()
        if name and any(x in name for x in lowered):
            continue
        out.append(e)
    return out


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, *, on_change=None):
        self._employees = employees
        self._on_change = on_change

    def _changed(self, table: str) -> None:
        if self._on_change:
            self._on_change(table)

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_employees()

    def list_tracked(self) -> list[Employee]:
        return tracked_employees(self._employees.list_employees())

    def get(self, user_id: str) -> Employee:
        emp = self._employees.get_by_id(user_id)
        if not emp:
            raise ValidationError("Employee not found")
        return emp

    def create_employee(
        self,
        *,
        current_role: Role,
        full_name: str,
        department: Optional[str] = None,
        position: Optional[str] = None,
        role: Role = Role.EMPLOYEE,
        user_id: Optional[str] = None,
    ) -> str:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can create employees")

        full_name = require_non_empty(full_name, "Full name")
        new_id = user_id or str(uuid.uuid4())
        self._employees.create_profile(
            user_id=new_id,
            full_name=full_name,
            department=optional_text(department),
            position=optional_text(position),
        )
        self._employees.upsert_role(user_id=new_id, role=role)
        logger.info("Employee %s created with role %s", new_id, role.value)
        self._changed("profiles")
        return new_id

    def update_profile(self, *, current_role: Role, user_id: str, update: ProfileUpdate) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can edit profiles")
        if update.full_name is not None:
            update = ProfileUpdate(
                full_name=require_non_empty(update.full_name, "Full name"),
                department=update.department,
                position=update.position,
            )
        if not self._employees.update_profile(user_id=user_id, update=update):
            raise ValidationError("Employee not found")
        self._changed("profiles")

    def assign_role(self, *, current_role: Role, current_user_id: str, user_id: str, role: Role) -> None:
        """Role changes go through user_roles only, never the profile update."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can assign roles")
        if user_id == current_user_id and role != Role.ADMIN:
            raise ValidationError("Admins cannot demote themselves")
        if not self._employees.get_by_id(user_id):
            raise ValidationError("Employee not found")

        self._employees.upsert_role(user_id=user_id, role=role)
        logger.info("Role of %s set to %s by %s", user_id, role.value, current_user_id)
        self._changed("user_roles")
