"""Repository layer for the SnapLink application.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from snaplink.repositories.base import (
    BaseRepository,
    RepositoryError,
    DuplicateEntityError
)
from snaplink.repositories.user_repository import UserRepository
from snaplink.repositories.link_repository import LinkRepository
from snaplink.repositories.visit_repository import VisitRepository

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "RepositoryError",
    "DuplicateEntityError",

    # Concrete repositories
    "UserRepository",
    "LinkRepository",
    "VisitRepository",
]
