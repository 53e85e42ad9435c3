"""Short link data models.

This module defines the ShortLink model mapping short codes to long URLs
together with ownership and topic metadata.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel


class ShortLinkBase(SQLModel):
    """Base model for short link data."""

    long_url: str = Field(description="The original (long) URL to redirect to")
    short_url: str = Field(
        unique=True,
        description="Base URL joined with the short code"
    )
    short_code: str = Field(
        unique=True,
        description="Unique code for the shortened URL",
    )
    topic: str = Field(
        default="general",
        index=True,
        description="Free-form grouping tag used for topic analytics"
    )
    created_by: Optional[int] = Field(
        default=None,
        foreign_key="users.id",
        index=True,
        description="Id of the user who created the link"
    )


class ShortLink(ShortLinkBase, table=True):
    """
    Short link model for storing shortened URLs in the database.

    A link is written once at creation time. Its visit log lives in the
    ``visits`` table and only ever grows.
    """

    __tablename__ = "short_links"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        description="Timestamp when this short link was created"
    )

    __table_args__ = (
        Index("ix_short_links_created_at", "created_at"),
    )


class ShortLinkCreate(ShortLinkBase):
    """Schema for creating a new short link."""
    pass

