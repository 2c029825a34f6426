from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_datetime
from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: a profile joined with its single role assignment."""

    user_id: str
    full_name: str
    role: Role = Role.EMPLOYEE
    department: Optional[str] = None
    position: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Employee":
        return cls(
            user_id=str(row["user_id"]),
            full_name=str(row.get("full_name") or ""),
            role=Role(row.get("role") or Role.EMPLOYEE.value),
            department=(row.get("department") or None),
            position=(row.get("position") or None),
            created_at=coerce_datetime(row.get("created_at")),
        )


@dataclass(frozen=True)
class ProfileUpdate:
    """Fields an admin may change on a profile. Role is deliberately absent."""

    full_name: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
