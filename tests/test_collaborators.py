"""
Tests for locators, event sinks and the expiry sweeper.
"""
import asyncio
import logging
import random
from datetime import timedelta

from shortlink_app.events import (
    DomainEvent,
    EventSink,
    EventSinkBackend,
    EventSinkFactory,
    EventType,
    InMemoryEventSink,
    LoggingEventSink,
    NullEventSink,
    notify,
)
from shortlink_app.locator import (
    LocatorBackend,
    LocatorFactory,
    MockLocator,
    StaticLocator,
)
from shortlink_app.services.url_service import utcnow
from shortlink_app.sweeper.expiry_sweeper import ExpirySweeper


def hours_ago(hours):
    return utcnow() - timedelta(hours=hours)


class TestLocators:

    def test_mock_locator_picks_known_city(self):
        locator = MockLocator(rng=random.Random(1))

        for _ in range(20):
            assert locator.locate("10.0.0.1") in MockLocator.DEFAULT_LOCATIONS

    def test_mock_locator_custom_locations(self):
        locator = MockLocator(locations=["Only, XX"])
        assert locator.locate("10.0.0.1") == "Only, XX"

    def test_static_locator(self):
        assert StaticLocator("Nowhere").locate("10.0.0.1") == "Nowhere"

    def test_factory_builds_and_caches(self):
        LocatorFactory.clear_instance()
        try:
            locator = LocatorFactory.create(LocatorBackend.STATIC)
            assert isinstance(locator, StaticLocator)
            assert LocatorFactory.create(LocatorBackend.MOCK) is locator
        finally:
            LocatorFactory.clear_instance()


class TestEventSinks:

    def test_in_memory_sink_collects(self):
        sink = InMemoryEventSink()
        sink.emit(DomainEvent(event_type=EventType.URL_CREATED, short_code="abc"))
        sink.emit(DomainEvent(event_type=EventType.URL_ACCESSED, short_code="abc"))

        assert len(sink.events) == 2
        assert [e.short_code for e in sink.of_type(EventType.URL_CREATED)] == ["abc"]

        sink.clear()
        assert sink.events == []

    def test_logging_sink_levels(self, caplog):
        sink = LoggingEventSink()

        with caplog.at_level(logging.INFO, logger="shortlink_app.events"):
            sink.emit(DomainEvent(event_type=EventType.URL_CREATED, short_code="abc"))
            sink.emit(DomainEvent(event_type=EventType.URL_EXPIRED_ACCESS, short_code="abc"))
            sink.emit(DomainEvent(event_type=EventType.VALIDATION_FAILURE, detail="bad"))

        levels = [record.levelno for record in caplog.records]
        assert levels == [logging.INFO, logging.WARNING, logging.ERROR]
        assert "url_created code=abc" in caplog.records[0].getMessage()

    def test_null_sink_drops_everything(self):
        NullEventSink().emit(DomainEvent(event_type=EventType.URL_CREATED))

    def test_notify_swallows_sink_failure(self, caplog):
        class BrokenSink(EventSink):
            def emit(self, event):
                raise ConnectionError("collector unreachable")

        with caplog.at_level(logging.ERROR):
            notify(BrokenSink(), DomainEvent(event_type=EventType.URL_ACCESSED))

        assert "Event sink failed" in caplog.text

    def test_factory_builds_memory_sink(self):
        EventSinkFactory.clear_instance()
        try:
            assert isinstance(EventSinkFactory.create(EventSinkBackend.MEMORY), InMemoryEventSink)
        finally:
            EventSinkFactory.clear_instance()


class TestExpirySweeper:

    def test_sweep_once(self, service, registry):
        service.create_short_url(
            "https://a.com", custom_code="stale", validity_minutes=1, now=hours_ago(2)
        )
        service.create_short_url("https://b.com", custom_code="fresh", validity_minutes=60)

        sweeper = ExpirySweeper(service, interval_seconds=60, retention_minutes=0)

        assert sweeper.sweep_once() == 1
        assert sweeper.purged_count == 1
        assert not registry.exists("stale")

    def test_run_and_stop(self, service, registry):
        service.create_short_url(
            "https://a.com", custom_code="stale", validity_minutes=1,
            now=hours_ago(2)
        )
        sweeper = ExpirySweeper(service, interval_seconds=0.01, retention_minutes=0)

        async def run_briefly():
            sweeper.start()
            await asyncio.sleep(0.05)
            await sweeper.stop()

        asyncio.run(run_briefly())

        assert not sweeper.running
        assert not registry.exists("stale")

    def test_failed_sweep_keeps_running(self, service, caplog):
        calls = []

        def broken_purge(older_than_minutes, now=None):
            calls.append(older_than_minutes)
            raise RuntimeError("boom")

        service.purge_expired = broken_purge
        sweeper = ExpirySweeper(service, interval_seconds=0.01, retention_minutes=5)

        async def run_briefly():
            sweeper.start()
            await asyncio.sleep(0.05)
            await sweeper.stop()

        with caplog.at_level(logging.ERROR):
            asyncio.run(run_briefly())

        assert len(calls) >= 2
        assert "Expiry sweep failed" in caplog.text
