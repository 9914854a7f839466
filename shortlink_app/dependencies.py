"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the registry, analytics store,
locator and event sink that are injected into the service and routes.

Pattern: Dependency Injection
- Shared in-memory state lives in the singletons, not in module globals
- Easy to test (override with fresh instances per test)
- Flexible (swap locator / event sink via config)
"""

from functools import lru_cache

from fastapi import Depends, Request

from shortlink_app.config import settings
from shortlink_app.events.factory import EventSinkFactory, EventSinkBackend
from shortlink_app.events.strategies import EventSink
from shortlink_app.locator.factory import LocatorFactory, LocatorBackend
from shortlink_app.locator.strategies import LocatorStrategy
from shortlink_app.services.code_generator import CodeGenerator
from shortlink_app.services.short_code_factory import ShortCodeFactory
from shortlink_app.services.url_service import ShortenerService
from shortlink_app.storage import AnalyticsStore, Registry


@lru_cache()
def get_registry() -> Registry:
    """Process-wide URL registry (singleton)"""
    return Registry()


@lru_cache()
def get_analytics_store() -> AnalyticsStore:
    """Process-wide click analytics store (singleton)"""
    return AnalyticsStore()


@lru_cache()
def get_code_generator() -> CodeGenerator:
    """
    Get code generator (singleton).

    Strategy comes from settings via the factory.
    """
    return CodeGenerator(
        strategy=ShortCodeFactory.create_strategy(),
        min_length=settings.custom_code_min_length,
        max_length=settings.custom_code_max_length
    )


@lru_cache()
def get_locator() -> LocatorStrategy:
    """Get locator instance (singleton) based on settings"""
    backend = LocatorBackend(settings.locator_backend)
    return LocatorFactory.create(backend)


@lru_cache()
def get_event_sink() -> EventSink:
    """Get event sink instance (singleton) based on settings"""
    backend = EventSinkBackend(settings.event_sink_backend)
    return EventSinkFactory.create(backend)


def get_url_service(
    registry: Registry = Depends(get_registry),
    analytics: AnalyticsStore = Depends(get_analytics_store),
    code_generator: CodeGenerator = Depends(get_code_generator),
    locator: LocatorStrategy = Depends(get_locator)
) -> ShortenerService:
    """
    Get ShortenerService with all dependencies injected.

    The service itself is stateless; every request gets a fresh one over
    the shared stores.
    """
    return ShortenerService(
        registry=registry,
        analytics=analytics,
        code_generator=code_generator,
        locator=locator,
        max_active_per_creator=settings.max_active_urls_per_creator,
        default_validity_minutes=settings.default_validity_minutes
    )


def get_client_address(request: Request) -> str:
    """
    Client IP address, used as the creator identity for quotas.

    Handles proxies and load balancers by checking X-Forwarded-For first.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"
