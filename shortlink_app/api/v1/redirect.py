from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from shortlink_app.core.exceptions import ShortCodeExpired, ShortCodeNotFound
from shortlink_app.dependencies import get_client_address, get_event_sink, get_url_service
from shortlink_app.events import DomainEvent, EventSink, EventType, notify
from shortlink_app.services.url_service import ShortenerService

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
def redirect_to_original_url(
    short_code: str,
    request: Request,
    client_address: str = Depends(get_client_address),
    url_service: ShortenerService = Depends(get_url_service),
    events: EventSink = Depends(get_event_sink)
):
    """
    Redirect to the original URL.

    Flow:
    1. Resolve the short code and record the click (in memory, fast)
    2. Notify the event sink
    3. Redirect

    Unknown codes answer 404, expired ones 410 with the expiry date.
    """
    user_agent = request.headers.get("user-agent") or "unknown"

    try:
        original_url = url_service.resolve_and_record_click(short_code, client_address, user_agent)
    except ShortCodeNotFound:
        notify(events, DomainEvent(
            event_type=EventType.INVALID_CODE_ACCESS,
            short_code=short_code,
            client_address=client_address
        ))
        raise
    except ShortCodeExpired as exc:
        notify(events, DomainEvent(
            event_type=EventType.URL_EXPIRED_ACCESS,
            short_code=short_code,
            client_address=client_address,
            detail=f"expired {exc.expired_at.isoformat()}"
        ))
        raise

    notify(events, DomainEvent(
        event_type=EventType.URL_ACCESSED,
        short_code=short_code,
        original_url=original_url,
        client_address=client_address,
        detail=user_agent
    ))

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
