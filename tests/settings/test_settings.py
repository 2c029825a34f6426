from __future__ import annotations

import logging
from datetime import date, time

import pytest

from src.hr_attendance.hr_attendance.core.enums import Role
from src.hr_attendance.hr_attendance.core.exceptions import AuthorizationError, ValidationError
from src.hr_attendance.hr_attendance.settings.model import AttendanceSettings
from src.hr_attendance.hr_attendance.settings.service import SettingsService


class FakeSettingsRepo:
    def __init__(self, values=None):
        self.values = dict(values or {})

    def load_key_values(self):
        return dict(self.values)

    def save_value(self, *, key, value):
        self.values[key] = value


class BrokenSettingsRepo:
    def load_key_values(self):
        raise ConnectionError("database unavailable")


def test_defaults():
    s = AttendanceSettings()

    assert s.annual_leave_quota_days == 12
    assert s.late_threshold == time(9, 0)
    assert (s.clock_in_window.start, s.clock_in_window.end) == (time(8, 0), time(9, 0))
    assert (s.clock_out_window.start, s.clock_out_window.end) == (time(17, 0), time(18, 0))


def test_from_key_values():
    s = AttendanceSettings.from_key_values(
        {
            "attendance_start_date": "2024-03-01",
            "max_leave_days": "15",
            "late_threshold": "08:15",
            "clock_out_start": "16:30",
        }
    )

    assert s.attendance_tracking_start_date == date(2024, 3, 1)
    assert s.annual_leave_quota_days == 15
    assert s.late_threshold == time(8, 15)
    assert s.clock_out_window.start == time(16, 30)
    assert s.clock_out_window.end == time(18, 0)


def test_malformed_values_keep_defaults(caplog):
    with caplog.at_level(logging.WARNING):
        s = AttendanceSettings.from_key_values({"max_leave_days": "lots", "late_threshold": "nine"})

    assert s.annual_leave_quota_days == 12
    assert s.late_threshold == time(9, 0)
    assert "max_leave_days" in caplog.text


def test_unavailable_store_falls_back_to_defaults():
    assert SettingsService(BrokenSettingsRepo()).current() == AttendanceSettings()


def test_admin_updates_settings():
    repo = FakeSettingsRepo()
    changes = []
    svc = SettingsService(repo, on_change=changes.append)

    updated = svc.update(current_role=Role.ADMIN, values={"max_leave_days": "10", "late_threshold": "08:30"})

    assert updated.annual_leave_quota_days == 10
    assert updated.late_threshold == time(8, 30)
    assert changes == ["system_settings"]


def test_non_admin_cannot_update():
    with pytest.raises(AuthorizationError):
        SettingsService(FakeSettingsRepo()).update(current_role=Role.MANAGER, values={"max_leave_days": "10"})


@pytest.mark.parametrize(
    "values",
    [
        {"late_threshold": "nine"},
        {"max_leave_days": "-1"},
        {"attendance_start_date": "01/03/2024"},
        {"timezone": "Mars/Olympus"},
        {"favourite_colour": "blue"},
    ],
)
def test_invalid_updates_are_rejected_before_saving(values):
    repo = FakeSettingsRepo()

    with pytest.raises(ValidationError):
        SettingsService(repo).update(current_role=Role.ADMIN, values=values)

    assert repo.values == {}
