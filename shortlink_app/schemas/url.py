from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from shortlink_app.config import settings

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class URLCreate(CamelModel):
    # Left as plain strings so the service reports missing/invalid URLs itself
    original_url: Optional[str] = Field(None, description="The original URL to be shortened")
    custom_shortcode: Optional[str] = Field(None, description="Requested short code (3-20 chars)")
    validity_period: Optional[int] = Field(None, description="Validity in minutes (default 30)")


class URLCreated(CamelModel):
    id: str
    original_url: str
    short_code: str
    created_at: datetime
    expiry_date: datetime
    validity_period: int

    @computed_field(alias="shortUrl")
    @property
    def short_url(self) -> str:
        """Computed field - automatically generated from short_code"""
        return f"{settings.base_url}/{self.short_code}"


class URLDetails(CamelModel):
    id: str
    original_url: str
    short_code: str
    created_at: datetime
    expiry_date: datetime
    created_by: str
    is_active: bool
    validity_period: int


class ClickHistoryItem(CamelModel):
    timestamp: datetime
    location: str


class ClickDetail(CamelModel):
    timestamp: datetime
    ip: str
    user_agent: str
    location: str


class URLListItem(URLDetails):
    total_clicks: int
    is_expired: bool
    click_history: List[ClickHistoryItem]


class URLAnalyticsResponse(URLDetails):
    total_clicks: int
    is_expired: bool
    click_history: List[ClickDetail]


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class HealthResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: datetime
    total_urls: int
    active_urls: int


class ErrorResponse(CamelModel):
    error: str
    expired_at: Optional[datetime] = None
