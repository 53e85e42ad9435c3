"""
Data models for the SnapLink application.

This module imports and exports all SQLModel models used in the application.
"""

from sqlmodel import SQLModel

from snaplink.models.user import UserBase, UserCreate
from snaplink.models.link import ShortLinkBase, ShortLinkCreate
from snaplink.models.visit import VisitBase, VisitCreate, UNKNOWN_OS, DEFAULT_DEVICE

# Table models in dependency order (parent before child)
from snaplink.models.user import User
from snaplink.models.link import ShortLink
from snaplink.models.visit import Visit

__all__ = [
    "SQLModel",

    "User",
    "UserBase",
    "UserCreate",

    "ShortLink",
    "ShortLinkBase",
    "ShortLinkCreate",

    "Visit",
    "VisitBase",
    "VisitCreate",
    "UNKNOWN_OS",
    "DEFAULT_DEVICE",
]
