from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Iterator, Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) into a time."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def coerce_datetime(value: Any) -> Optional[datetime]:
    """Accept datetimes or ISO strings from the data layer; None if unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def coerce_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def local_date(moment: datetime, tz_name: str = DEFAULT_TIMEZONE) -> date:
    """Calendar date of a timestamp in the company timezone.

    Naive datetimes are assumed to already be local.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(ZoneInfo(tz_name)).date()


def local_time(moment: datetime, tz_name: str = DEFAULT_TIMEZONE) -> time:
    if moment.tzinfo is None:
        return moment.time()
    return moment.astimezone(ZoneInfo(tz_name)).time()


def to_local_naive(moment: datetime, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Wall-clock time in the company timezone without tzinfo.

    MySQL DATETIME columns store and return naive values, so timestamps are
    compared and persisted in this form.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current time in the company timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(ZoneInfo(tz_name))


def is_weekend(day: date) -> bool:
    # 5 = Saturday, 6 = Sunday
    return day.weekday() >= 5


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def count_work_days(start: date, end: date) -> int:
    """Monday to Friday days in [start, end]. Holidays are not modelled."""
    return sum(1 for d in iter_days(start, end) if not is_weekend(d))


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
