from __future__ import annotations

import logging
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

TIME_KEYS = frozenset({"clock_in_start", "clock_in_end", "clock_out_start", "clock_out_end", "late_threshold"})
EDITABLE_KEYS = TIME_KEYS | {"attendance_start_date", "max_leave_days", "timezone"}


def _validate(key: str, value: str) -> None:
    try:
        if key in TIME_KEYS:
            parse_hhmm(value)
        elif key == "attendance_start_date":
            parse_iso_date(value)
        elif key == "max_leave_days":
            if int(value) < 0:
                raise ValueError(value)
        elif key == "timezone":
            ZoneInfo(value)
    except (ValueError, ZoneInfoNotFoundError):
        raise ValidationError(f"Invalid value for {key}: {value!r}")


class SettingsService:
    def __init__(self, settings: SettingsRepository, *, defaults: Optional[AttendanceSettings] = None, on_change=None):
        self._settings = settings
        self._defaults = defaults or AttendanceSettings()
        self._on_change = on_change

    def current(self) -> AttendanceSettings:
        """Read settings; fall back to defaults when the store is unavailable."""
        try:
            values = self._settings.load_key_values()
        except Exception:
            logger.exception("Could not load system settings; using defaults")
            return self._defaults
        return AttendanceSettings.from_key_values(values, defaults=self._defaults)

    def update(self, *, current_role: Role, values: dict[str, str]) -> AttendanceSettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change settings")

        unknown = set(values) - EDITABLE_KEYS
        if unknown:
            raise ValidationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        for key, value in values.items():
            _validate(key, str(value).strip())

        for key, value in values.items():
            self._settings.save_value(key=key, value=str(value).strip())
        logger.info("System settings updated: %s", ", ".join(sorted(values)))
        if self._on_change:
            self._on_change("system_settings")
        return self.current()
