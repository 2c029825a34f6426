from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee, ProfileUpdate


class EmployeeRepository(Protocol):
    def list_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        user_id: str,
        full_name: str,
        department: Optional[str],
        position: Optional[str],
    ) -> None:
        raise NotImplementedError

    def update_profile(self, *, user_id: str, update: ProfileUpdate) -> bool:
        raise NotImplementedError

    def get_role(self, user_id: str) -> Optional[Role]:
        raise NotImplementedError

    def upsert_role(self, *, user_id: str, role: Role) -> None:
        """Keep exactly one role row per user."""

        raise NotImplementedError
