"""User Repository for the SnapLink application."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.models.user import User, UserCreate
from snaplink.repositories.base import BaseRepository


class UserRepository(BaseRepository[User, UserCreate]):
    """Repository for User model database operations."""

    unique_field = "google_id"

    def __init__(self):
        super().__init__(User)

    async def get_by_google_id(self, db: AsyncSession, google_id: str) -> Optional[User]:
        return await self.get_one_by(db, google_id=google_id)

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        return await self.create(db, data)
