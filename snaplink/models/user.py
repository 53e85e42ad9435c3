"""User account data models.

Users are created on their first successful identity-provider login and
are looked up by the provider's subject id afterwards.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    """Base model for user data."""

    google_id: str = Field(
        unique=True,
        index=True,
        description="Subject id issued by the identity provider"
    )
    name: Optional[str] = Field(default=None, description="Display name")
    email: str = Field(unique=True, description="Verified email address")
    profile_pic: Optional[str] = Field(default=None, description="Profile picture URL")


class User(UserBase, table=True):
    """User model backing the ``users`` table."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        description="Timestamp of the first login"
    )


class UserCreate(UserBase):
    """Schema for creating a user from verified identity claims."""
    pass
