"""
Domain models for the URL shortener.

Everything is held in memory: URL records live in the registry, click
ledgers in the analytics store, both keyed by short code.
"""

from .url import URLRecord, ClickRecord, AnalyticsEntry
from .stats import ClickSummary, URLStats, URLAnalytics, HealthSnapshot

__all__ = [
    "URLRecord",
    "ClickRecord",
    "AnalyticsEntry",
    "ClickSummary",
    "URLStats",
    "URLAnalytics",
    "HealthSnapshot",
]
