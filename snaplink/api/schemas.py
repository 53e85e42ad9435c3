"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. Bodies use camelCase keys on the wire.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serializing to and accepting camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class LoginRequest(CamelModel):
    """Request schema for exchanging an identity token for a session."""
    token: str


class UserResponse(CamelModel):
    """Public view of a user account."""
    id: int
    name: Optional[str] = None
    email: str
    profile_pic: Optional[str] = None


class LoginResponse(CamelModel):
    """Response schema for a successful login."""
    token: str
    user: UserResponse


class ShortenRequest(CamelModel):
    """Request schema for creating a short link."""
    # Checked by the service so a missing value answers 400, not 422
    long_url: Optional[str] = None
    custom_alias: Optional[str] = None
    topic: Optional[str] = None


class ShortenResponse(CamelModel):
    """Response schema for a created short link."""
    short_url: str
    short_code: str
    topic: str
    created_at: datetime


class DateClicks(CamelModel):
    """Clicks on one UTC calendar date."""
    date: str
    clicks: int


class OSStats(CamelModel):
    os_name: str
    total_clicks: int
    unique_users: int


class DeviceStats(CamelModel):
    device_name: str
    total_clicks: int
    unique_users: int


class TopicURLStats(CamelModel):
    short_url: str
    total_clicks: int
    unique_users: int


class LinkAnalyticsResponse(CamelModel):
    """Response schema for a single link's analytics."""
    short_code: str
    total_clicks: int
    unique_users: int
    clicks_by_date: List[DateClicks]
    os_type: List[OSStats]
    device_type: List[DeviceStats]


class TopicAnalyticsResponse(CamelModel):
    """Response schema for analytics across a topic."""
    topic: str
    total_clicks: int
    unique_users: int
    clicks_by_date: List[DateClicks]
    urls: List[TopicURLStats]


class OverallAnalyticsResponse(CamelModel):
    """Response schema for analytics across everything a user created."""
    total_urls: int
    total_clicks: int
    unique_users: int
    clicks_by_date: List[DateClicks]
    os_type: List[OSStats]
    device_type: List[DeviceStats]


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
