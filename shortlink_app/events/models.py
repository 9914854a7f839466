"""
Data models for audit events.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    URL_CREATED = "url_created"
    URL_ACCESSED = "url_accessed"
    URL_EXPIRED_ACCESS = "url_expired_access"
    INVALID_CODE_ACCESS = "invalid_code_access"
    VALIDATION_FAILURE = "validation_failure"


class DomainEvent(BaseModel):
    """
    Event emitted by the HTTP layer around shortener operations.

    Only event_type is required; the rest is filled in where the
    operation has it.
    """

    event_type: EventType
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred"
    )
    short_code: Optional[str] = Field(None, description="Short code involved")
    original_url: Optional[str] = Field(None, description="Target URL involved")
    client_address: Optional[str] = Field(None, description="Client IP address")
    detail: Optional[str] = Field(None, description="Free-form detail, e.g. the error message")

    model_config = {
        "json_schema_extra": {
            "example": {
                "event_type": "url_accessed",
                "timestamp": "2025-10-29T10:30:00Z",
                "short_code": "abc123",
                "original_url": "https://example.com",
                "client_address": "192.168.1.1",
                "detail": "London, UK"
            }
        }
    }
