import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shortlink_app.core.exceptions import (
    InvalidUrl,
    InvalidValidityPeriod,
    MissingUrl,
    QuotaExceeded,
    ShortCodeExpired,
    ShortCodeNotFound,
)
from shortlink_app.locator.strategies import LocatorStrategy
from shortlink_app.models import (
    ClickRecord,
    ClickSummary,
    HealthSnapshot,
    URLAnalytics,
    URLRecord,
    URLStats,
)
from shortlink_app.services.code_generator import CodeGenerator
from shortlink_app.storage import AnalyticsStore, Registry

logger = logging.getLogger(__name__)

_any_url = TypeAdapter(AnyUrl)

ALLOWED_SCHEMES = {"http", "https"}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(now: Optional[datetime]) -> datetime:
    """Current time when None; naive datetimes are taken to be UTC"""
    if now is None:
        return utcnow()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


class ShortenerService:
    """
    Shortener Service with its collaborators injected.

    The service is the only caller of the registry, the analytics store and
    the code generator. It is synchronous and holds no state of its own, so
    a fresh instance per request is fine as long as the stores are shared.

    Every operation accepts an explicit `now` so expiry is testable without
    patching the clock.
    """

    def __init__(
        self,
        registry: Registry,
        analytics: AnalyticsStore,
        code_generator: CodeGenerator,
        locator: LocatorStrategy,
        max_active_per_creator: int = 5,
        default_validity_minutes: int = 30
    ):
        """
        Initialize shortener service with dependencies.

        Args:
            registry: Shared URL registry
            analytics: Shared click analytics store
            code_generator: Short code allocator
            locator: Address -> coarse location lookup for clicks
            max_active_per_creator: Quota of unexpired URLs per creator
            default_validity_minutes: Validity used when none is given
        """
        self.registry = registry
        self.analytics = analytics
        self.code_generator = code_generator
        self.locator = locator
        self.max_active_per_creator = max_active_per_creator
        self.default_validity_minutes = default_validity_minutes

    def create_short_url(
        self,
        original_url: Optional[str],
        custom_code: Optional[str] = None,
        validity_minutes: Optional[int] = None,
        creator_id: str = "unknown",
        now: Optional[datetime] = None
    ) -> URLRecord:
        """Create a new short URL

        Process:
        1. Validate the URL and validity period (no lock needed)
        2. Under the registry lock: check quota, allocate a code, insert the
           record and initialize its analytics entry
        3. Roll back the registry insertion if analytics init fails

        Raises:
            MissingUrl, InvalidUrl, InvalidValidityPeriod, QuotaExceeded,
            and any CodeGenerator error
        """
        now = as_utc(now)

        if not original_url:
            raise MissingUrl()
        self._validate_url(original_url)

        if validity_minutes is not None and validity_minutes < 0:
            raise InvalidValidityPeriod(validity_minutes)
        # Missing or zero falls back to the default
        validity = validity_minutes or self.default_validity_minutes

        with self.registry.lock:
            active = self.registry.count_active_for_creator(creator_id, now)
            if active >= self.max_active_per_creator:
                raise QuotaExceeded(creator_id, self.max_active_per_creator)

            short_code = self.code_generator.allocate(custom_code, self.registry.exists)

            record = URLRecord(
                id=str(uuid.uuid4()),
                original_url=original_url,
                short_code=short_code,
                created_at=now,
                expiry_date=now + timedelta(minutes=validity),
                created_by=creator_id,
                validity_period=validity,
            )

            self.registry.create(record)
            try:
                self.analytics.init_for(short_code)
            except Exception:
                logger.warning("Analytics init failed for %s, rolling back", short_code)
                self.registry.remove(short_code)
                raise

        logger.debug("Created %s -> %s (expires %s)", short_code, original_url, record.expiry_date)
        return record

    def list_with_stats(self, now: Optional[datetime] = None) -> List[URLStats]:
        """List every record with click counts and expiry flags.

        Records are read under the registry lock, which is also held while
        analytics entries are created, so a listed record always has one.
        """
        now = as_utc(now)

        with self.registry.lock:
            rows = [
                (record, self.analytics.get(record.short_code))
                for record in self.registry.list_all()
            ]

        stats = []
        for record, entry in rows:
            clicks = entry.clicks if entry else []
            stats.append(URLStats(
                record=record,
                total_clicks=entry.total_clicks if entry else 0,
                is_expired=self.registry.is_expired(record, now),
                click_history=[
                    ClickSummary(timestamp=click.timestamp, location=click.location)
                    for click in clicks
                ],
            ))
        return stats

    def get_analytics(self, short_code: str, now: Optional[datetime] = None) -> URLAnalytics:
        """Full record plus complete click history

        Raises:
            ShortCodeNotFound: If the code is not registered
        """
        now = as_utc(now)

        with self.registry.lock:
            record = self.registry.get(short_code)
            if record is None:
                raise ShortCodeNotFound(short_code)
            entry = self.analytics.get(short_code)

        return URLAnalytics(
            record=record,
            total_clicks=entry.total_clicks if entry else 0,
            is_expired=self.registry.is_expired(record, now),
            clicks=entry.clicks if entry else [],
        )

    def resolve_and_record_click(
        self,
        short_code: str,
        client_address: str,
        user_agent: str,
        now: Optional[datetime] = None
    ) -> str:
        """
        Resolve a short code for redirection and record the click.

        Flow:
        1. Look up the record (ShortCodeNotFound if unknown)
        2. Refuse expired records (ShortCodeExpired carries the expiry date)
        3. Resolve a coarse location, outside any lock
        4. Append the click to the analytics entry
        5. Return the original URL
        """
        now = as_utc(now)

        record = self.registry.get(short_code)
        if record is None:
            raise ShortCodeNotFound(short_code)

        if self.registry.is_expired(record, now):
            raise ShortCodeExpired(short_code, record.expiry_date)

        location = self._locate(client_address)

        self.analytics.record_click(short_code, ClickRecord(
            timestamp=now,
            client_address=client_address,
            user_agent=user_agent,
            location=location,
        ))

        return record.original_url

    def health_snapshot(self, now: Optional[datetime] = None) -> HealthSnapshot:
        now = as_utc(now)
        with self.registry.lock:
            return HealthSnapshot(
                total_urls=self.registry.count(),
                active_urls=self.registry.count_active(now),
            )

    def purge_expired(self, older_than_minutes: int, now: Optional[datetime] = None) -> int:
        """
        Drop records that have been expired for longer than the retention window.

        Their analytics entries go with them. Runs under the registry lock
        so it cannot interleave with a create.

        Returns:
            Number of records removed
        """
        now = as_utc(now)
        cutoff = now - timedelta(minutes=older_than_minutes)

        removed = 0
        with self.registry.lock:
            for record in self.registry.list_all():
                if record.is_expired(cutoff):
                    self.registry.remove(record.short_code)
                    self.analytics.remove(record.short_code)
                    removed += 1

        if removed:
            logger.info("Purged %d expired short URLs", removed)
        return removed

    def _validate_url(self, original_url: str) -> None:
        # No length cap, unlike HttpUrl
        try:
            url = _any_url.validate_python(original_url)
        except ValidationError:
            raise InvalidUrl(original_url) from None

        if url.scheme not in ALLOWED_SCHEMES or not url.host:
            raise InvalidUrl(original_url)

    def _locate(self, client_address: str) -> str:
        # A broken locator must not block the redirect
        try:
            return self.locator.locate(client_address)
        except Exception:
            logger.exception("Locator failed for %s", client_address)
            return "Unknown"
