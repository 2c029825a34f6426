from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from src.hr_attendance.hr_attendance.attendance.classifier import (
    attendance_period,
    classify_day,
    count_work_days,
    monthly_attendance_rate,
)
from src.hr_attendance.hr_attendance.attendance.model import AttendanceRecord
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus, DayStatus
from src.hr_attendance.hr_attendance.core.exceptions import DataGapWarning


def _rec(i, status=AttendanceStatus.PRESENT, clock_in=datetime(2024, 6, 10, 8, 30)):
    return AttendanceRecord(attendance_id=i, user_id=f"u{i}", clock_in=clock_in, status=status)


def _day_records():
    statuses = [
        AttendanceStatus.LATE,
        AttendanceStatus.LATE,
        AttendanceStatus.EARLY_LEAVE,
        AttendanceStatus.PRESENT,
        AttendanceStatus.PRESENT,
        AttendanceStatus.PRESENT,
    ]
    return [_rec(i, s) for i, s in enumerate(statuses)]


def test_classify_day_counts_each_bucket():
    result = classify_day(_day_records(), 10)

    assert result.present == 6
    assert result.late == 2
    assert result.early_leave == 1
    assert result.on_time == 3
    assert result.absent == 4


def test_classify_day_is_repeatable_and_leaves_input_alone():
    records = _day_records()
    snapshot = list(records)

    assert classify_day(records, 10) == classify_day(records, 10)
    assert records == snapshot


def test_absent_never_negative_when_more_present_than_employees():
    result = classify_day(_day_records(), 2)

    assert result.absent == 0


def test_record_without_clock_in_is_skipped_with_warning():
    records = _day_records() + [_rec(99, clock_in=None)]

    with pytest.warns(DataGapWarning):
        result = classify_day(records, 10)

    assert result.present == 6


def test_count_work_days_skips_weekends():
    # June 2024 starts on a Saturday.
    assert count_work_days(2024, 6) == 20


def test_monthly_rate_with_no_employees_is_zero():
    assert monthly_attendance_rate(_day_records(), 0, 2024, 6) == 0


def test_monthly_rate_is_rounded_and_clamped():
    # 6 rows / (1 employee x 20 work days) = 30%
    assert monthly_attendance_rate(_day_records(), 1, 2024, 6) == 30

    flood = [_rec(i) for i in range(50)]
    assert monthly_attendance_rate(flood, 1, 2024, 6) == 100


def test_monthly_rate_ignores_rows_outside_the_month():
    records = [_rec(1, clock_in=datetime(2024, 5, 31, 8, 0)), _rec(2, clock_in=datetime(2024, 6, 3, 8, 0))]

    assert monthly_attendance_rate(records, 1, 2024, 6) == 5


def test_attendance_period_fills_gaps():
    records = [
        AttendanceRecord(1, "u1", datetime(2024, 6, 10, 9, 15), status=AttendanceStatus.LATE),
        AttendanceRecord(2, "u1", datetime(2024, 6, 12, 8, 0)),
    ]

    days = attendance_period(
        records,
        date(2024, 6, 7),
        date(2024, 6, 14),
        today=date(2024, 6, 13),
        leave_days={date(2024, 6, 11)},
    )
    by_day = {d.day: d.status for d in days}

    assert len(days) == 8
    assert by_day[date(2024, 6, 7)] == DayStatus.ABSENT
    assert by_day[date(2024, 6, 8)] == DayStatus.WEEKEND
    assert by_day[date(2024, 6, 9)] == DayStatus.WEEKEND
    assert by_day[date(2024, 6, 10)] == DayStatus.LATE
    assert by_day[date(2024, 6, 11)] == DayStatus.LEAVE
    assert by_day[date(2024, 6, 12)] == DayStatus.PRESENT
    assert by_day[date(2024, 6, 13)] == DayStatus.FUTURE
    assert by_day[date(2024, 6, 14)] == DayStatus.FUTURE


def test_attendance_period_keeps_earliest_record_across_timezone_forms():
    records = [
        AttendanceRecord(1, "u1", datetime(2024, 6, 10, 9, 15), status=AttendanceStatus.LATE),
        AttendanceRecord(2, "u1", datetime(2024, 6, 10, 1, 0, tzinfo=ZoneInfo("UTC"))),
    ]

    days = attendance_period(records, date(2024, 6, 10), date(2024, 6, 10), today=date(2024, 6, 20))

    assert days[0].record_id == 2
    assert days[0].status == DayStatus.PRESENT
