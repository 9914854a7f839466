"""
Read models returned by the shortener service.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel

from .url import URLRecord, ClickRecord


class ClickSummary(BaseModel):
    """Reduced click view used in listings."""
    timestamp: datetime
    location: str


class URLStats(BaseModel):
    record: URLRecord
    total_clicks: int
    is_expired: bool
    click_history: List[ClickSummary]


class URLAnalytics(BaseModel):
    record: URLRecord
    total_clicks: int
    is_expired: bool
    clicks: List[ClickRecord]


class HealthSnapshot(BaseModel):
    total_urls: int
    active_urls: int
