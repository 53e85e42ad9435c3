"""Link Repository for the SnapLink application.

This module provides the LinkRepository class for database operations related to ShortLink models.
Following the Repository pattern, it abstracts database interactions for URL shortening operations.
"""

from typing import List, Optional, Union, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.models.link import ShortLink, ShortLinkCreate
from snaplink.repositories.base import BaseRepository, DuplicateEntityError


class LinkRepository(BaseRepository[ShortLink, ShortLinkCreate]):
    """
    Repository for ShortLink model database operations.

    Links are only ever inserted and read; the store's unique constraints on
    ``short_code`` and ``short_url`` are the final arbiter of uniqueness.
    """

    unique_field = "short_code"

    def __init__(self):
        super().__init__(ShortLink)

    async def create_short_link(
        self,
        db: AsyncSession,
        data: Union[ShortLinkCreate, Dict[str, Any]]
    ) -> ShortLink:
        """
        Create a new short link entry.

        Args:
            db: Database session
            data: Short link data (either as a ShortLinkCreate model or dictionary)

        Returns:
            The created ShortLink entity

        Raises:
            DuplicateEntityError: If the short code already exists
            RepositoryError: On other database errors
        """
        if isinstance(data, ShortLinkCreate):
            short_code = data.short_code
        else:
            short_code = data.get("short_code")

        if short_code and await self.check_short_code_exists(db, short_code):
            raise DuplicateEntityError(self.model_type, "short_code", short_code)

        # A concurrent insert between the check and here trips the unique index
        return await self.create(db, data)

    async def get_by_short_code(self, db: AsyncSession, short_code: str) -> Optional[ShortLink]:
        """
        Find a link by its short code.

        Returns:
            The ShortLink if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_one_by(db, short_code=short_code)

    async def check_short_code_exists(self, db: AsyncSession, short_code: str) -> bool:
        """Check if a short code is already assigned."""
        return await self.exists(db, short_code=short_code)

    async def get_by_topic(self, db: AsyncSession, topic: str) -> List[ShortLink]:
        """All links tagged with ``topic``, oldest first."""
        return await self.list_by(db, order_by=self.model_type.id, topic=topic)

    async def get_by_owner(self, db: AsyncSession, user_id: int) -> List[ShortLink]:
        """All links created by ``user_id``, oldest first."""
        return await self.list_by(db, order_by=self.model_type.id, created_by=user_id)
