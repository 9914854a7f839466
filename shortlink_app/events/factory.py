"""
Factory for creating event sink instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum
from .strategies import EventSink, LoggingEventSink, InMemoryEventSink, NullEventSink

logger = logging.getLogger(__name__)


class EventSinkBackend(Enum):
    """Available event sink backends"""
    LOGGING = "logging"
    MEMORY = "memory"
    NULL = "null"


class EventSinkFactory:
    """
    Simple factory for creating event sink instances.

    Uses Singleton Pattern - creates instance once, reuses it.
    """

    _instance: EventSink = None  # Single cached instance

    @classmethod
    def create(cls, backend: EventSinkBackend) -> EventSink:
        """
        Create or return cached event sink instance.

        Args:
            backend: Type of event sink backend (from enum)

        Returns:
            Singleton event sink instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == EventSinkBackend.LOGGING:
            cls._instance = LoggingEventSink()
        elif backend == EventSinkBackend.MEMORY:
            cls._instance = InMemoryEventSink()
        elif backend == EventSinkBackend.NULL:
            cls._instance = NullEventSink()
        else:
            raise ValueError(f"Unknown event sink backend: {backend}")

        logger.info("%s event sink initialized", backend.value)
        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
