from src.hr_attendance.hr_attendance.reporting.invalidation import (
    ALL_VIEWS,
    DASHBOARD_STATS,
    JOURNAL_COUNTS,
    LIVE_STATS,
    REAL_TIME_MONITORING,
    WEEKLY_TREND,
    InvalidationHub,
    stale_views,
)


def test_attendance_change_invalidates_live_views():
    hub = InvalidationHub()
    sid = hub.subscribe()

    hub.publish("attendance")
    events = hub.drain(sid)

    assert len(events) == 1
    assert events[0].table == "attendance"
    for view in (REAL_TIME_MONITORING, DASHBOARD_STATS, LIVE_STATS, WEEKLY_TREND):
        assert view in events[0].views


def test_profile_change_invalidates_everything():
    hub = InvalidationHub()
    sid = hub.subscribe()

    hub.publish("profiles")

    assert stale_views(hub.drain(sid)) == list(ALL_VIEWS)


def test_stale_views_are_deduplicated():
    hub = InvalidationHub()
    sid = hub.subscribe()
    hub.publish("work_journals")
    hub.publish("work_journals")

    assert stale_views(hub.drain(sid)) == [DASHBOARD_STATS, JOURNAL_COUNTS]


def test_unsubscribed_client_gets_nothing():
    hub = InvalidationHub()
    sid = hub.subscribe()
    hub.unsubscribe(sid)

    hub.publish("attendance")

    assert hub.poll(sid) is None
    assert hub.drain(sid) == []


def test_unknown_table_has_no_views():
    event = InvalidationHub().publish("audit_log")

    assert event.views == ()


def test_full_queue_drops_events():
    hub = InvalidationHub(max_queue=1)
    sid = hub.subscribe()
    hub.publish("attendance")
    hub.publish("leave_requests")

    assert [e.table for e in hub.drain(sid)] == ["attendance"]


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_idle_subscribers_expire_on_publish():
    clock = FakeClock()
    hub = InvalidationHub(idle_ttl=60, clock=clock)
    abandoned = [hub.subscribe() for _ in range(50)]
    active = hub.subscribe()

    clock.now = 45
    hub.poll(active)
    clock.now = 90
    hub.publish("attendance")

    assert hub.subscriber_count == 1
    assert not any(hub.is_subscribed(sid) for sid in abandoned)
    assert [e.table for e in hub.drain(active)] == ["attendance"]


def test_idle_subscribers_expire_on_subscribe():
    clock = FakeClock()
    hub = InvalidationHub(idle_ttl=60, clock=clock)
    old = hub.subscribe()

    clock.now = 61
    new = hub.subscribe()

    assert not hub.is_subscribed(old)
    assert hub.is_subscribed(new)
    assert hub.subscriber_count == 1


def test_unsubscribe_reports_whether_subscription_existed():
    hub = InvalidationHub()
    sid = hub.subscribe()

    assert hub.unsubscribe(sid) is True
    assert hub.unsubscribe(sid) is False
    assert hub.subscriber_count == 0
