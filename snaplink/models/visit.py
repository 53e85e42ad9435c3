"""
Visit tracking data models.

This module defines the Visit model, one row per redirect of a short link.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel

UNKNOWN_OS = "Unknown"
DEFAULT_DEVICE = "Desktop"


class VisitBase(SQLModel):
    """Base model for visit data."""

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        description="UTC timestamp of the redirect"
    )
    ip_address: Optional[str] = Field(
        default=None,
        description="IP address of the visitor",
        max_length=45  # Support both IPv4 and IPv6 addresses
    )
    user_agent: Optional[str] = Field(
        default=None,
        description="Raw user agent string of the visitor",
    )
    os_type: str = Field(
        default=UNKNOWN_OS,
        description="Operating system parsed from the user agent"
    )
    device_type: str = Field(
        default=DEFAULT_DEVICE,
        description="Device category parsed from the user agent"
    )


class Visit(VisitBase, table=True):
    """
    Visit model recording a single redirect.

    Visits are appended at redirect time and never updated or removed;
    insertion order (the primary key) is chronological order.
    """

    __tablename__ = "visits"

    id: Optional[int] = Field(default=None, primary_key=True)
    link_id: int = Field(
        foreign_key="short_links.id",
        description="Foreign key reference to the short link"
    )

    __table_args__ = (
        # Per-link scans ordered by insertion
        Index("ix_visits_link_id_id", "link_id", "id"),
        Index("ix_visits_timestamp", "timestamp"),
    )


class VisitCreate(VisitBase):
    """Schema for recording a new visit."""
    link_id: int
