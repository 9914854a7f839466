"""
Audit event module.

The HTTP layer reports what happened (URL created, accessed, expired access,
unknown code, validation failure) to a pluggable sink. The shortener core
does not depend on this module.
"""

from .models import DomainEvent, EventType
from .strategies import EventSink, LoggingEventSink, InMemoryEventSink, NullEventSink, notify
from .factory import EventSinkFactory, EventSinkBackend

__all__ = [
    "DomainEvent",
    "EventType",
    "EventSink",
    "LoggingEventSink",
    "InMemoryEventSink",
    "NullEventSink",
    "notify",
    "EventSinkFactory",
    "EventSinkBackend",
]
