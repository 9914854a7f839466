from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class URLRecord(BaseModel):
    """
    One shortened URL.

    Records are immutable once created. Whether a record is active is derived
    from expiry_date and the current time; is_active is informational only.
    """

    id: str
    original_url: str
    short_code: str
    created_at: datetime
    expiry_date: datetime
    created_by: str
    validity_period: int = 30  # minutes
    is_active: bool = True

    model_config = ConfigDict(frozen=True)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expiry_date


class ClickRecord(BaseModel):
    """One observed redirect."""

    timestamp: datetime
    client_address: str
    user_agent: str
    location: str

    model_config = ConfigDict(frozen=True)


class AnalyticsEntry(BaseModel):
    """
    Click ledger for a single short code.

    clicks is kept in insertion order, which is chronological order.
    """

    total_clicks: int = 0
    clicks: List[ClickRecord] = Field(default_factory=list)

    def snapshot(self) -> "AnalyticsEntry":
        # ClickRecord is frozen, so copying the list is enough
        return AnalyticsEntry(total_clicks=self.total_clicks, clicks=list(self.clicks))
