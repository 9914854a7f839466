"""
Test configuration and fixtures for the URL shortener.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.dependencies import (
    get_analytics_store,
    get_event_sink,
    get_locator,
    get_registry,
)
from shortlink_app.events import InMemoryEventSink
from shortlink_app.locator import StaticLocator
from shortlink_app.services.code_generator import CodeGenerator
from shortlink_app.services.short_code_strategies import RandomShortCodeStrategy
from shortlink_app.services.url_service import ShortenerService
from shortlink_app.storage import AnalyticsStore, Registry

# Fixed clock for service-level tests
NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture(scope="function")
def registry():
    """Fresh registry for each test, so tests are isolated"""
    return Registry()


@pytest.fixture(scope="function")
def analytics_store():
    return AnalyticsStore()


@pytest.fixture
def code_generator():
    return CodeGenerator(RandomShortCodeStrategy(length=6, max_retries=100))


@pytest.fixture
def locator():
    return StaticLocator("Test City, TC")


@pytest.fixture
def service(registry, analytics_store, code_generator, locator):
    return ShortenerService(
        registry=registry,
        analytics=analytics_store,
        code_generator=code_generator,
        locator=locator,
        max_active_per_creator=5,
        default_validity_minutes=30
    )


@pytest.fixture
def event_sink():
    return InMemoryEventSink()


@pytest.fixture(scope="function")
def client(registry, analytics_store, locator, event_sink):
    """
    Create a test client with fresh in-memory stores.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_analytics_store] = lambda: analytics_store
    app.dependency_overrides[get_locator] = lambda: locator
    app.dependency_overrides[get_event_sink] = lambda: event_sink

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
