"""
Event sink strategies using Strategy Pattern.
Allows switching where audit events go (log, memory, nowhere).
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import DomainEvent, EventType

logger = logging.getLogger(__name__)


class EventSink(ABC):
    """
    Abstract base class for event sinks.

    Sinks receive notifications after the fact; they never influence the
    outcome of the operation that produced the event.
    """

    @abstractmethod
    def emit(self, event: DomainEvent) -> None:
        """
        Deliver one event.

        Args:
            event: DomainEvent to deliver
        """
        pass


class LoggingEventSink(EventSink):
    """
    Writes events through the standard logging module.

    Levels: info for created/accessed, warning for expired or unknown
    codes, error for validation failures.
    """

    LEVELS = {
        EventType.URL_CREATED: logging.INFO,
        EventType.URL_ACCESSED: logging.INFO,
        EventType.URL_EXPIRED_ACCESS: logging.WARNING,
        EventType.INVALID_CODE_ACCESS: logging.WARNING,
        EventType.VALIDATION_FAILURE: logging.ERROR,
    }

    def __init__(self, event_logger: Optional[logging.Logger] = None):
        self.logger = event_logger or logging.getLogger("shortlink_app.events")

    def emit(self, event: DomainEvent) -> None:
        self.logger.log(
            self.LEVELS.get(event.event_type, logging.INFO),
            "%s code=%s url=%s ip=%s %s",
            event.event_type.value,
            event.short_code or "-",
            event.original_url or "-",
            event.client_address or "-",
            event.detail or "",
        )


class InMemoryEventSink(EventSink):
    """
    Keeps events in a list.

    Used in tests to assert which events an endpoint emitted.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: DomainEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> List[DomainEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: EventType) -> List[DomainEvent]:
        return [event for event in self.events if event.event_type == event_type]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class NullEventSink(EventSink):
    """Null Object Pattern - drops every event."""

    def emit(self, event: DomainEvent) -> None:
        pass


def notify(sink: EventSink, event: DomainEvent) -> None:
    """
    Fire-and-forget delivery.

    A failing sink is logged and otherwise ignored.
    """
    try:
        sink.emit(event)
    except Exception:
        logger.exception("Event sink failed to deliver %s", event.event_type.value)
