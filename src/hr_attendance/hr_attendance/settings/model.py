from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Mapping, Optional

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..core.constants import (
    DEFAULT_ANNUAL_LEAVE_QUOTA_DAYS,
    DEFAULT_CLOCK_IN_END,
    DEFAULT_CLOCK_IN_START,
    DEFAULT_CLOCK_OUT_END,
    DEFAULT_CLOCK_OUT_START,
    DEFAULT_LATE_THRESHOLD,
    DEFAULT_TIMEZONE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeWindow:
    start: time
    end: time

    def contains(self, moment: time) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class AttendanceSettings:
    """Company-wide attendance configuration.

    Passed explicitly to services and aggregations; nothing in the rule
    engines reads it from ambient state.
    """

    attendance_tracking_start_date: date = date(1970, 1, 1)
    annual_leave_quota_days: int = DEFAULT_ANNUAL_LEAVE_QUOTA_DAYS
    clock_in_window: TimeWindow = field(
        default_factory=lambda: TimeWindow(DEFAULT_CLOCK_IN_START, DEFAULT_CLOCK_IN_END)
    )
    clock_out_window: TimeWindow = field(
        default_factory=lambda: TimeWindow(DEFAULT_CLOCK_OUT_START, DEFAULT_CLOCK_OUT_END)
    )
    late_threshold: time = DEFAULT_LATE_THRESHOLD
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_key_values(
        cls, values: Mapping[str, str], *, defaults: Optional["AttendanceSettings"] = None
    ) -> "AttendanceSettings":
        """Build settings from system_settings rows (key -> value).

        Missing or malformed keys keep the default value.
        """
        base = defaults or cls()

        def _time(key: str, fallback: time) -> time:
            raw = values.get(key)
            if not raw:
                return fallback
            try:
                return parse_hhmm(raw)
            except ValueError:
                logger.warning("Ignoring malformed setting %s=%r", key, raw)
                return fallback

        start_date = base.attendance_tracking_start_date
        raw_start = values.get("attendance_start_date")
        if raw_start:
            try:
                start_date = parse_iso_date(raw_start)
            except ValueError:
                logger.warning("Ignoring malformed setting attendance_start_date=%r", raw_start)

        quota = base.annual_leave_quota_days
        raw_quota = values.get("max_leave_days")
        if raw_quota:
            try:
                quota = max(0, int(raw_quota))
            except ValueError:
                logger.warning("Ignoring malformed setting max_leave_days=%r", raw_quota)

        return cls(
            attendance_tracking_start_date=start_date,
            annual_leave_quota_days=quota,
            clock_in_window=TimeWindow(
                _time("clock_in_start", base.clock_in_window.start),
                _time("clock_in_end", base.clock_in_window.end),
            ),
            clock_out_window=TimeWindow(
                _time("clock_out_start", base.clock_out_window.start),
                _time("clock_out_end", base.clock_out_window.end),
            ),
            late_threshold=_time("late_threshold", base.late_threshold),
            timezone=values.get("timezone") or base.timezone,
        )
