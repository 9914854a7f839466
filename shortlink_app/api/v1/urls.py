from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status

from shortlink_app.core.exceptions import (
    CodeSpaceExhausted,
    DuplicateShortCode,
    ShortenerError,
    UnknownShortCode,
)
from shortlink_app.dependencies import get_client_address, get_event_sink, get_url_service
from shortlink_app.events import DomainEvent, EventSink, EventType, notify
from shortlink_app.schemas.url import (
    APIResponse,
    ClickDetail,
    ClickHistoryItem,
    HealthResponse,
    URLAnalyticsResponse,
    URLCreate,
    URLCreated,
    URLListItem,
)
from shortlink_app.services.url_service import ShortenerService

router = APIRouter(prefix="/api", tags=["urls"])


@router.post("/shorten", response_model=APIResponse[URLCreated], status_code=status.HTTP_201_CREATED)
def create_short_url(
    url_data: URLCreate,
    client_address: str = Depends(get_client_address),
    url_service: ShortenerService = Depends(get_url_service),
    events: EventSink = Depends(get_event_sink)
):
    """Create a new short URL for the calling client"""
    try:
        record = url_service.create_short_url(
            url_data.original_url,
            custom_code=url_data.custom_shortcode,
            validity_minutes=url_data.validity_period,
            creator_id=client_address
        )
    except (UnknownShortCode, DuplicateShortCode, CodeSpaceExhausted):
        raise
    except ShortenerError as exc:
        notify(events, DomainEvent(
            event_type=EventType.VALIDATION_FAILURE,
            short_code=url_data.custom_shortcode,
            original_url=url_data.original_url,
            client_address=client_address,
            detail=exc.message
        ))
        raise

    notify(events, DomainEvent(
        event_type=EventType.URL_CREATED,
        short_code=record.short_code,
        original_url=record.original_url,
        client_address=client_address,
        detail=f"expires {record.expiry_date.isoformat()}"
    ))
    return APIResponse(data=URLCreated(**record.model_dump()))


@router.get("/urls", response_model=APIResponse[List[URLListItem]])
def list_urls(url_service: ShortenerService = Depends(get_url_service)):
    """All short URLs with click counts and expiry flags"""
    items = [
        URLListItem(
            **stats.record.model_dump(),
            total_clicks=stats.total_clicks,
            is_expired=stats.is_expired,
            click_history=[
                ClickHistoryItem(timestamp=click.timestamp, location=click.location)
                for click in stats.click_history
            ]
        )
        for stats in url_service.list_with_stats()
    ]
    return APIResponse(data=items)


@router.get("/analytics/{short_code}", response_model=APIResponse[URLAnalyticsResponse])
def get_url_analytics(
    short_code: str,
    url_service: ShortenerService = Depends(get_url_service)
):
    """Full click history for one short URL"""
    analytics = url_service.get_analytics(short_code)
    return APIResponse(data=URLAnalyticsResponse(
        **analytics.record.model_dump(),
        total_clicks=analytics.total_clicks,
        is_expired=analytics.is_expired,
        click_history=[
            ClickDetail(
                timestamp=click.timestamp,
                ip=click.client_address,
                user_agent=click.user_agent,
                location=click.location
            )
            for click in analytics.clicks
        ]
    ))


@router.get("/health", response_model=HealthResponse)
def health_check(url_service: ShortenerService = Depends(get_url_service)):
    """Health check with registry counters"""
    snapshot = url_service.health_snapshot()
    return HealthResponse(
        message="URL Shortener API is running",
        timestamp=datetime.now(timezone.utc),
        total_urls=snapshot.total_urls,
        active_urls=snapshot.active_urls
    )
