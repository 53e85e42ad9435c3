"""Redirect service: resolves short codes and records visits."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.user_agent import parse_user_agent
from snaplink.db.session import db_transaction
from snaplink.models.link import ShortLink
from snaplink.repositories.base import RepositoryError
from snaplink.repositories.visit_repository import VisitRepository
from snaplink.services.exceptions import VisitTrackingError
from snaplink.services.shortener import ShortenedURLService

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Resolves a short code and appends a visit to its log.

    The visit is committed before the caller issues the redirect, so every
    successful redirect is reflected in analytics.
    """

    def __init__(self, shortener_service: ShortenedURLService, visit_repository: VisitRepository):
        self.shortener_service = shortener_service
        self.visit_repository = visit_repository

    @db_transaction(db_param_name="db")
    async def record_visit(
        self,
        db: AsyncSession,
        short_code: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> ShortLink:
        """
        Record one visit of ``short_code`` and return its link.

        Raises:
            URLNotFoundError: If no link with this code exists (nothing is recorded)
            VisitTrackingError: If the visit could not be persisted
        """
        link = await self.shortener_service.get_link_by_code(db, short_code)
        os_type, device_type = parse_user_agent(user_agent)

        try:
            await self.visit_repository.create_visit(db, {
                "link_id": link.id,
                "ip_address": ip_address,
                "user_agent": user_agent,
                "os_type": os_type,
                "device_type": device_type,
            })
        except RepositoryError as e:
            logger.error(f"Error recording visit for {short_code}: {e}")
            raise VisitTrackingError(f"Failed to record visit for '{short_code}'") from e

        return link
