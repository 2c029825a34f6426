"""Invalidate-and-recompute notifications for dashboard views.

Services publish the table they wrote to; subscribers (HTTP pollers,
tests) receive the list of views to fetch again. Aggregations are never
subscribed themselves.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from queue import Empty, Full, Queue
from typing import Optional

logger = logging.getLogger(__name__)

REAL_TIME_MONITORING = "real_time_monitoring"
DASHBOARD_STATS = "dashboard_stats"
LIVE_STATS = "live_stats"
WEEKLY_TREND = "weekly_trend"
MONTHLY_SERIES = "monthly_series"
MONTHLY_TREND = "monthly_trend"
DEPARTMENT_DISTRIBUTION = "department_distribution"
JOURNAL_COUNTS = "journal_counts"
EMPLOYEE_REPORT = "employee_report"

ALL_VIEWS = (
    REAL_TIME_MONITORING,
    DASHBOARD_STATS,
    LIVE_STATS,
    WEEKLY_TREND,
    MONTHLY_SERIES,
    MONTHLY_TREND,
    DEPARTMENT_DISTRIBUTION,
    JOURNAL_COUNTS,
    EMPLOYEE_REPORT,
)

VIEWS_BY_TABLE: dict[str, tuple[str, ...]] = {
    "attendance": (
        REAL_TIME_MONITORING,
        DASHBOARD_STATS,
        LIVE_STATS,
        WEEKLY_TREND,
        MONTHLY_SERIES,
        MONTHLY_TREND,
        EMPLOYEE_REPORT,
    ),
    "leave_requests": (REAL_TIME_MONITORING, DASHBOARD_STATS, EMPLOYEE_REPORT),
    "work_journals": (JOURNAL_COUNTS, DASHBOARD_STATS),
    "profiles": ALL_VIEWS,
    "user_roles": ALL_VIEWS,
    "system_settings": ALL_VIEWS,
}


@dataclass(frozen=True)
class DataChanged:
    table: str
    views: tuple[str, ...] = field(default=())
    at: float = field(default_factory=time.time)

    def as_dict(self) -> dict:
        return {"table": self.table, "views": list(self.views), "at": self.at}


@dataclass
class _Subscription:
    queue: Queue
    last_seen: float


class InvalidationHub:
    """Fan-out of DataChanged events to per-subscriber queues.

    Subscribers that have not polled for ``idle_ttl`` seconds are dropped on
    the next subscribe or publish.
    """

    def __init__(self, *, max_queue: int = 1000, idle_ttl: float = 300.0, clock=time.monotonic):
        self._subs: dict[str, _Subscription] = {}
        self._lock = threading.Lock()
        self._max_queue = max_queue
        self._idle_ttl = idle_ttl
        self._clock = clock

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def _expire_locked(self, now: float) -> None:
        stale = [sid for sid, sub in self._subs.items() if now - sub.last_seen > self._idle_ttl]
        for sid in stale:
            del self._subs[sid]
        if stale:
            logger.info("Expired %d idle invalidation subscriber(s)", len(stale))

    def subscribe(self) -> str:
        sid = f"s_{uuid.uuid4().hex}"
        now = self._clock()
        with self._lock:
            self._expire_locked(now)
            self._subs[sid] = _Subscription(Queue(maxsize=self._max_queue), now)
        return sid

    def unsubscribe(self, sid: str) -> bool:
        with self._lock:
            return self._subs.pop(sid, None) is not None

    def is_subscribed(self, sid: str) -> bool:
        with self._lock:
            return sid in self._subs

    def poll(self, sid: str, timeout: float = 0.0) -> Optional[DataChanged]:
        with self._lock:
            sub = self._subs.get(sid)
            if sub is not None:
                sub.last_seen = self._clock()
        if sub is None:
            return None
        try:
            if timeout > 0:
                return sub.queue.get(timeout=timeout)
            return sub.queue.get_nowait()
        except Empty:
            return None

    def drain(self, sid: str) -> list[DataChanged]:
        events = []
        while True:
            event = self.poll(sid)
            if event is None:
                return events
            events.append(event)

    def publish(self, table: str) -> DataChanged:
        event = DataChanged(table=table, views=VIEWS_BY_TABLE.get(table, ()))
        with self._lock:
            self._expire_locked(self._clock())
            subs = [(sid, sub.queue) for sid, sub in self._subs.items()]
        for sid, q in subs:
            try:
                q.put_nowait(event)
            except Full:
                logger.warning("Invalidation queue full for %s; dropping %s event", sid, table)
        logger.debug("Published change of %s -> %s", table, ", ".join(event.views))
        return event


def stale_views(events: list[DataChanged]) -> list[str]:
    """Distinct views to recompute, in ALL_VIEWS order."""
    wanted = {v for e in events for v in e.views}
    return [v for v in ALL_VIEWS if v in wanted]
