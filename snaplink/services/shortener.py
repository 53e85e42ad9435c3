"""URL shortening service for the SnapLink application.

This module contains the ShortenedURLService class which implements business logic
for short code generation and link creation.
"""

import logging
import random
import re
import string
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.config import settings
from snaplink.db.session import db_transaction
from snaplink.models.link import ShortLink
from snaplink.repositories.base import DuplicateEntityError, RepositoryError
from snaplink.repositories.link_repository import LinkRepository
from snaplink.services.exceptions import (
    AliasTakenError,
    InvalidURLError,
    MissingFieldError,
    ShortCodeGenerationError,
    URLCreationError,
    URLNotFoundError,
)

logger = logging.getLogger(__name__)

# Scheme optional, lowercase host with a 2-6 letter TLD, simple path
URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$")


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    This service handles short code generation, custom alias checks and
    link creation.
    """

    def __init__(self, link_repository: LinkRepository):
        """
        Initialize the URL shortening service.

        Args:
            link_repository: Repository for link data access
        """
        self.link_repository = link_repository

    @db_transaction(db_param_name="db")
    async def create_short_link(
        self,
        db: AsyncSession,
        long_url: Optional[str],
        custom_alias: Optional[str] = None,
        topic: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> ShortLink:
        """
        Create a short link with either a custom alias or a generated code.

        Args:
            db: Database session
            long_url: The original URL to shorten
            custom_alias: Optional caller-chosen short code
            topic: Optional grouping tag, defaults to ``DEFAULT_TOPIC``
            user_id: Id of the creating user

        Returns:
            ShortLink: The persisted link

        Raises:
            MissingFieldError: If long_url is missing
            InvalidURLError: If long_url is not URL shaped
            AliasTakenError: If custom_alias is already in use
            ShortCodeGenerationError: If no free code was found
            URLCreationError: If persistence fails for other reasons
        """
        if long_url is None or not str(long_url).strip():
            raise MissingFieldError("longUrl is required")
        long_url = str(long_url).strip()

        if not self._is_valid_url(long_url):
            raise InvalidURLError(f"Invalid URL format: {long_url}")

        topic = topic.strip() if topic and topic.strip() else settings.DEFAULT_TOPIC

        if custom_alias:
            link = await self._create_with_alias(db, long_url, custom_alias, topic, user_id)
        else:
            link = await self._create_with_generated_code(db, long_url, topic, user_id)

        logger.info(f"Created short link {link.short_code} for user {user_id}")
        return link

    async def _create_with_alias(
        self,
        db: AsyncSession,
        long_url: str,
        alias: str,
        topic: str,
        user_id: Optional[int],
    ) -> ShortLink:
        try:
            return await self.link_repository.create_short_link(
                db, self._link_data(long_url, alias, topic, user_id)
            )
        except DuplicateEntityError:
            raise AliasTakenError("Custom alias already taken")
        except RepositoryError as e:
            logger.error(f"Error creating short link with alias: {e}")
            raise URLCreationError(f"Failed to create short link: {e}")

    async def _create_with_generated_code(
        self,
        db: AsyncSession,
        long_url: str,
        topic: str,
        user_id: Optional[int],
    ) -> ShortLink:
        """
        Draw random codes until one is inserted without a collision.

        The pre-check inside the repository catches most collisions; a
        concurrent insert of the same code is caught by the unique index and
        retried the same way.
        """
        for attempt in range(1, settings.URL_CODE_MAX_ATTEMPTS + 1):
            code = self._generate_short_code()
            try:
                return await self.link_repository.create_short_link(
                    db, self._link_data(long_url, code, topic, user_id)
                )
            except DuplicateEntityError:
                logger.warning(f"Short code collision on attempt {attempt}: {code}")
            except RepositoryError as e:
                logger.error(f"Error creating short link: {e}")
                raise URLCreationError(f"Failed to create short link: {e}")

        raise ShortCodeGenerationError(
            f"Failed to generate a unique short code after {settings.URL_CODE_MAX_ATTEMPTS} attempts"
        )

    async def get_link_by_code(self, db: AsyncSession, short_code: str) -> ShortLink:
        """
        Retrieve a link by its short code.

        Raises:
            URLNotFoundError: If no link with this code exists
        """
        link = await self.link_repository.get_by_short_code(db, short_code)
        if link is None:
            raise URLNotFoundError(f"Short URL '{short_code}' not found")
        return link

    @staticmethod
    def build_short_url(short_code: str) -> str:
        return f"{settings.BASE_URL}/{short_code}"

    def _link_data(self, long_url: str, short_code: str, topic: str, user_id: Optional[int]) -> dict:
        return {
            "long_url": long_url,
            "short_code": short_code,
            "short_url": self.build_short_url(short_code),
            "topic": topic,
            "created_by": user_id,
        }

    def _generate_short_code(self, length: Optional[int] = None) -> str:
        """
        Generate a random short code.

        Args:
            length: Length of the code, ``URL_CODE_LENGTH`` by default

        Returns:
            str: A random alphanumeric code
        """
        chars = settings.URL_CODE_CHARS or (string.ascii_letters + string.digits)
        return "".join(random.choice(chars) for _ in range(length or settings.URL_CODE_LENGTH))

    def _is_valid_url(self, url: str) -> bool:
        return bool(URL_PATTERN.match(url))
