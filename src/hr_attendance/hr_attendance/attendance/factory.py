from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import local_time
from ..core.enums import AttendanceStatus
from ..settings.model import AttendanceSettings
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now: datetime, settings: AttendanceSettings) -> AttendanceStrategy:
        if local_time(now, settings.timezone) <= settings.late_threshold:
            return NormalStrategy()
        return LateStrategy()

    def for_clock_out(
        self, *, now: datetime, settings: AttendanceSettings, current_status: AttendanceStatus
    ) -> AttendanceStrategy:
        before_window = local_time(now, settings.timezone) < settings.clock_out_window.start
        if before_window and current_status == AttendanceStatus.PRESENT:
            return EarlyLeaveStrategy()
        return NormalStrategy()
