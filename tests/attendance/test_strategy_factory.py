from datetime import datetime

from src.hr_attendance.hr_attendance.attendance.factory import AttendanceStrategyFactory
from src.hr_attendance.hr_attendance.attendance.strategies.early_strategy import EarlyLeaveStrategy
from src.hr_attendance.hr_attendance.attendance.strategies.late_strategy import LateStrategy
from src.hr_attendance.hr_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus
from src.hr_attendance.hr_attendance.settings.model import AttendanceSettings


def test_factory_clock_in_at_threshold_is_on_time():
    settings = AttendanceSettings()
    now = datetime(2024, 6, 10, 9, 0, 0)

    strategy = AttendanceStrategyFactory().for_clock_in(now=now, settings=settings)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_clock_in(now=now, settings=settings).status == AttendanceStatus.PRESENT


def test_factory_clock_in_after_threshold_is_late():
    settings = AttendanceSettings()
    now = datetime(2024, 6, 10, 9, 0, 1)

    strategy = AttendanceStrategyFactory().for_clock_in(now=now, settings=settings)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_clock_in(now=now, settings=settings).status == AttendanceStatus.LATE


def test_factory_clock_out_before_window_marks_early_leave():
    settings = AttendanceSettings()
    now = datetime(2024, 6, 10, 16, 0)

    strategy = AttendanceStrategyFactory().for_clock_out(
        now=now, settings=settings, current_status=AttendanceStatus.PRESENT
    )

    assert isinstance(strategy, EarlyLeaveStrategy)


def test_factory_clock_out_keeps_late_status():
    settings = AttendanceSettings()
    now = datetime(2024, 6, 10, 16, 0)

    strategy = AttendanceStrategyFactory().for_clock_out(now=now, settings=settings, current_status=AttendanceStatus.LATE)
    decision = strategy.decide_clock_out(now=now, settings=settings, current=AttendanceStatus.LATE)

    assert isinstance(strategy, NormalStrategy)
    assert decision.status == AttendanceStatus.LATE
