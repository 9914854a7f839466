"""
In-memory storage for URL records and click analytics.

Nothing here survives a restart; both stores are plain dicts guarded by locks.
"""

from .registry import Registry
from .analytics import AnalyticsStore

__all__ = [
    "Registry",
    "AnalyticsStore",
]
