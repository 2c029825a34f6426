from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceSettings


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, settings: AttendanceSettings) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(
        self, *, now: datetime, settings: AttendanceSettings, current: AttendanceStatus
    ) -> StatusDecision:
        raise NotImplementedError
