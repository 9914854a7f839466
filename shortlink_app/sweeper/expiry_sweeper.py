"""
Expired URL Sweeper

Periodically drops records that have been expired for longer than the
retention window, so a long-running process does not keep every short URL
forever.

Architecture:
- Runs as an asyncio task inside the API process (started from the lifespan)
- Calls ShortenerService.purge_expired, which takes the registry lock
- Disabled unless expired_retention_minutes is configured
"""

import asyncio
import logging
from typing import Optional

from shortlink_app.services.url_service import ShortenerService

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """
    Background purge of long-expired short URLs.

    A failed sweep is logged and retried on the next tick.
    """

    def __init__(
        self,
        service: ShortenerService,
        interval_seconds: int = 60,
        retention_minutes: int = 0
    ):
        """
        Initialize sweeper.

        Args:
            service: Shortener service whose stores are swept
            interval_seconds: Pause between sweeps
            retention_minutes: How long a record stays after it expires
        """
        self.service = service
        self.interval_seconds = interval_seconds
        self.retention_minutes = retention_minutes
        self.running = False
        self.purged_count = 0
        self._task: Optional[asyncio.Task] = None

    def sweep_once(self) -> int:
        removed = self.service.purge_expired(self.retention_minutes)
        self.purged_count += removed
        return removed

    async def run(self):
        """Sweep until stopped"""
        self.running = True
        logger.info(
            "Expiry sweeper started (interval %ss, retention %s min)",
            self.interval_seconds, self.retention_minutes
        )

        while self.running:
            try:
                self.sweep_once()
            except Exception:
                logger.exception("Expiry sweep failed")

            try:
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break

        logger.info("Expiry sweeper stopped after purging %d URLs", self.purged_count)

    def start(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        """Stop the sweeper and wait for the task to finish"""
        self.running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
