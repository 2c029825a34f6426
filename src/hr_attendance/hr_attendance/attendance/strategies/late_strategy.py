from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import local_time
from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceSettings
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Clock-in after the late threshold."""

    def decide_clock_in(self, *, now: datetime, settings: AttendanceSettings) -> StatusDecision:
        note = None
        if local_time(now, settings.timezone) > settings.clock_in_window.end:
            note = "Clocked in after the clock-in window"
        return StatusDecision(status=AttendanceStatus.LATE, note=note)

    def decide_clock_out(
        self, *, now: datetime, settings: AttendanceSettings, current: AttendanceStatus
    ) -> StatusDecision:
        return StatusDecision(status=current)
