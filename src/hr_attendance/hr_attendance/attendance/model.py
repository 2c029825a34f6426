from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_datetime, local_date
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AttendanceStatus, DayStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in/clock-out pair.

    clock_in is Optional only because upstream rows can be malformed; the
    aggregations skip such rows as data gaps.
    """

    attendance_id: Any
    user_id: str
    clock_in: Optional[datetime]
    clock_out: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    location: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_in is not None and self.clock_out is None

    def work_date(self, tz_name: str = DEFAULT_TIMEZONE) -> Optional[date]:
        if self.clock_in is None:
            return None
        return local_date(self.clock_in, tz_name)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceRecord":
        raw_status = row.get("status") or AttendanceStatus.PRESENT.value
        return cls(
            attendance_id=row.get("id", row.get("attendance_id")),
            user_id=str(row["user_id"]),
            clock_in=coerce_datetime(row.get("clock_in")),
            clock_out=coerce_datetime(row.get("clock_out")),
            status=AttendanceStatus(raw_status),
            location=row.get("location"),
            notes=row.get("notes"),
        )


@dataclass(frozen=True)
class DayClassification:
    present: int
    late: int
    early_leave: int
    absent: int
    on_time: int


@dataclass(frozen=True)
class DailyAttendance:
    """One cell of an employee's attendance calendar."""

    day: date
    status: DayStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    record_id: Any = None
    notes: Optional[str] = None

    @property
    def is_weekend(self) -> bool:
        return self.day.weekday() >= 5
