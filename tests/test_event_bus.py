import asyncio

from linechat.event_bus import EventBus
from linechat.events import LogClearedEvent, ThemeChangedEvent


def test_critical_event_retries_handler_and_delivers():
    bus = EventBus(critical_handler_retries=1)
    calls = {"count": 0}

    def flaky_handler(event: ThemeChangedEvent) -> None:
        calls["count"] += 1
        if calls["count"] == 1:
            raise RuntimeError("transient failure")
        assert event.theme == "light"

    bus.subscribe(ThemeChangedEvent, flaky_handler)
    ok = bus.publish(ThemeChangedEvent(source="test", theme="light"), critical=True)
    assert ok is True
    assert bus.drain() == 1

    metrics = bus.snapshot_metrics()
    assert calls["count"] == 2
    assert metrics.retried == 1
    assert metrics.delivered == 1
    assert metrics.handler_failures == 1


def test_non_critical_handler_failure_does_not_retry(caplog):
    bus = EventBus(critical_handler_retries=1)
    calls = {"count": 0}

    def always_fails(_event: LogClearedEvent) -> None:
        calls["count"] += 1
        raise RuntimeError("fail")

    bus.subscribe(LogClearedEvent, always_fails)
    bus.publish(LogClearedEvent(source="test"))
    bus.drain()

    assert calls["count"] == 1
    assert bus.snapshot_metrics().handler_failures == 1
    assert "Event handler failed topic=log_cleared" in caplog.text


def test_publish_drops_when_queue_is_full():
    bus = EventBus(maxsize=1)
    assert bus.publish(LogClearedEvent(source="test")) is True
    assert bus.publish(LogClearedEvent(source="test")) is False
    assert bus.snapshot_metrics().dropped == 1
    assert bus.backlog == 1


def test_critical_event_is_queued_when_queue_is_full():
    bus = EventBus(maxsize=1)
    seen = []
    bus.subscribe(ThemeChangedEvent, lambda e: seen.append(e.theme))
    assert bus.publish(LogClearedEvent(source="test")) is True
    assert bus.publish(ThemeChangedEvent(source="test", theme="light"), critical=True) is True
    assert bus.backlog == 2
    assert bus.snapshot_metrics().dropped == 0
    assert bus.drain() == 2
    assert seen == ["light"]


def test_handlers_only_see_their_event_type():
    bus = EventBus()
    seen = []
    bus.subscribe(ThemeChangedEvent, lambda e: seen.append(e.topic))
    bus.publish(LogClearedEvent(source="test"))
    bus.publish(ThemeChangedEvent(source="test", theme="dark"))
    bus.drain()
    assert seen == ["theme_changed"]


def test_worker_dispatches_on_the_running_loop():
    async def scenario():
        bus = EventBus()
        seen = []
        bus.subscribe(ThemeChangedEvent, lambda e: seen.append(e.theme))
        bus.start()
        bus.publish(ThemeChangedEvent(source="test", theme="light"))
        for _ in range(20):
            if seen:
                break
            await asyncio.sleep(0.005)
        await bus.stop()
        return seen

    assert asyncio.run(scenario()) == ["light"]


def test_stop_flushes_pending_events():
    async def scenario():
        bus = EventBus()
        seen = []
        bus.subscribe(LogClearedEvent, lambda e: seen.append(e.topic))
        bus.start()
        bus.publish(LogClearedEvent(source="test"))
        await bus.stop()
        return seen

    assert asyncio.run(scenario()) == ["log_cleared"]
