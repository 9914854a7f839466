"""
In-memory click analytics store.

One AnalyticsEntry per short code. Appending a click and bumping the
counter happen under one lock, so total_clicks always equals len(clicks).
Readers get snapshot copies and never see the live entry.
"""

import threading
from typing import Dict, Optional

from shortlink_app.core.exceptions import DuplicateShortCode, UnknownShortCode
from shortlink_app.models.url import AnalyticsEntry, ClickRecord


class AnalyticsStore:

    def __init__(self):
        self._entries: Dict[str, AnalyticsEntry] = {}
        self._lock = threading.Lock()

    def init_for(self, short_code: str) -> None:
        """
        Create an empty entry. Called once per short code, together with
        the registry insertion.
        """
        with self._lock:
            if short_code in self._entries:
                raise DuplicateShortCode(short_code)
            self._entries[short_code] = AnalyticsEntry()

    def record_click(self, short_code: str, click: ClickRecord) -> None:
        with self._lock:
            entry = self._entries.get(short_code)
            if entry is None:
                raise UnknownShortCode(short_code)
            entry.clicks.append(click)
            entry.total_clicks += 1

    def get(self, short_code: str) -> Optional[AnalyticsEntry]:
        with self._lock:
            entry = self._entries.get(short_code)
            return entry.snapshot() if entry is not None else None

    def remove(self, short_code: str) -> bool:
        with self._lock:
            return self._entries.pop(short_code, None) is not None
