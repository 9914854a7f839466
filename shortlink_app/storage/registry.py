"""
In-memory URL registry.

Authoritative short code -> URLRecord mapping. Insertion order is kept, so
listings come back oldest first.

Locking discipline:
- Every method takes `lock` for the duration of its own read or write.
- `lock` is re-entrant and public: the shortener service holds it across
  "check quota -> allocate code -> insert -> init analytics" so that the
  whole sequence is atomic.
"""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from shortlink_app.core.exceptions import DuplicateShortCode
from shortlink_app.models.url import URLRecord

logger = logging.getLogger(__name__)


class Registry:

    def __init__(self):
        self._records: Dict[str, URLRecord] = {}
        self.lock = threading.RLock()

    def create(self, record: URLRecord) -> None:
        """
        Insert a record keyed by its short code.

        Raises:
            DuplicateShortCode: If the code is already registered
        """
        with self.lock:
            if record.short_code in self._records:
                raise DuplicateShortCode(record.short_code)
            self._records[record.short_code] = record

    def get(self, short_code: str) -> Optional[URLRecord]:
        with self.lock:
            return self._records.get(short_code)

    def exists(self, short_code: str) -> bool:
        with self.lock:
            return short_code in self._records

    def list_all(self) -> List[URLRecord]:
        """Snapshot of all records in insertion order"""
        with self.lock:
            return list(self._records.values())

    def count(self) -> int:
        with self.lock:
            return len(self._records)

    def count_active(self, now: datetime) -> int:
        with self.lock:
            return sum(1 for record in self._records.values() if not record.is_expired(now))

    def count_active_for_creator(self, creator_id: str, now: datetime) -> int:
        """Count records owned by creator_id that have not expired at `now`"""
        with self.lock:
            return sum(
                1 for record in self._records.values()
                if record.created_by == creator_id and now <= record.expiry_date
            )

    def is_expired(self, record: URLRecord, now: datetime) -> bool:
        return record.is_expired(now)

    def remove(self, short_code: str) -> bool:
        """
        Drop a record. Only used for rollback and expired-record cleanup.

        Returns:
            True if the record existed
        """
        with self.lock:
            removed = self._records.pop(short_code, None)
        if removed is not None:
            logger.debug("Removed short code %s from registry", short_code)
        return removed is not None
