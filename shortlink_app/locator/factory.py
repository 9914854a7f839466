"""
Factory for creating locator instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum
from .strategies import LocatorStrategy, MockLocator, StaticLocator
from shortlink_app.config import settings

logger = logging.getLogger(__name__)


class LocatorBackend(Enum):
    """Available locator backends"""
    MOCK = "mock"
    STATIC = "static"


class LocatorFactory:
    """
    Simple factory for creating locator instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: LocatorStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: LocatorBackend) -> LocatorStrategy:
        """
        Create or return cached locator instance.

        Args:
            backend: Type of locator backend (from enum)

        Returns:
            Singleton locator instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == LocatorBackend.MOCK:
            cls._instance = MockLocator()
        elif backend == LocatorBackend.STATIC:
            cls._instance = StaticLocator(settings.static_location)
        else:
            raise ValueError(f"Unknown locator backend: {backend}")

        logger.info("%s locator initialized", backend.value)
        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
