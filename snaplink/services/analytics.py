"""Analytics service for the SnapLink application.

This module contains the AnalyticsService class which aggregates visit logs
into the per-link, per-topic and per-owner reports.
"""

import logging
from itertools import chain
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.config import settings
from snaplink.db.session import db_transaction
from snaplink.models.user import User
from snaplink.models.visit import Visit
from snaplink.repositories.base import RepositoryError
from snaplink.repositories.link_repository import LinkRepository
from snaplink.repositories.visit_repository import VisitRepository
from snaplink.services.exceptions import (
    AnalyticsRetrievalError,
    NoLinksFoundError,
    TopicNotFoundError,
    URLNotFoundError,
)

logger = logging.getLogger(__name__)


def as_utc(moment: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to already be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass
class CategoryStats:
    """Click count and distinct visitor IPs for one bucket."""
    clicks: int = 0
    ips: Set[Optional[str]] = field(default_factory=set)

    def add(self, visit: Visit) -> None:
        self.clicks += 1
        self.ips.add(visit.ip_address)

    @property
    def unique_users(self) -> int:
        return len(self.ips)


@dataclass
class VisitSummary:
    """
    Running totals over a stream of visits.

    Buckets keep the order in which their key was first seen, so feeding
    visits in insertion order yields chronologically ordered dates.
    """
    total: CategoryStats = field(default_factory=CategoryStats)
    by_date: Dict[str, int] = field(default_factory=dict)
    by_os: Dict[str, CategoryStats] = field(default_factory=dict)
    by_device: Dict[str, CategoryStats] = field(default_factory=dict)

    def add(self, visit: Visit, count_date: bool = True) -> None:
        self.total.add(visit)
        if count_date:
            day = as_utc(visit.timestamp).date().isoformat()
            self.by_date[day] = self.by_date.get(day, 0) + 1
        self.by_os.setdefault(visit.os_type, CategoryStats()).add(visit)
        self.by_device.setdefault(visit.device_type, CategoryStats()).add(visit)

    def clicks_by_date(self) -> List[Dict[str, Any]]:
        return [{"date": day, "clicks": clicks} for day, clicks in self.by_date.items()]

    def os_breakdown(self) -> List[Dict[str, Any]]:
        return [
            {"os_name": name, "total_clicks": stats.clicks, "unique_users": stats.unique_users}
            for name, stats in self.by_os.items()
        ]

    def device_breakdown(self) -> List[Dict[str, Any]]:
        return [
            {"device_name": name, "total_clicks": stats.clicks, "unique_users": stats.unique_users}
            for name, stats in self.by_device.items()
        ]


class AnalyticsService:
    """
    Service for visit analytics business logic.

    All three views are read-only scans over visit logs; nothing is cached
    or precomputed.
    """

    def __init__(self, link_repository: LinkRepository, visit_repository: VisitRepository):
        """
        Initialize the analytics service.

        Args:
            link_repository: Repository for link data access
            visit_repository: Repository for visit data access
        """
        self.link_repository = link_repository
        self.visit_repository = visit_repository

    @db_transaction(db_param_name="db")
    async def get_link_analytics(
        self,
        db: AsyncSession,
        short_code: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Report on a single link.

        ``clicks_by_date`` only covers the last ``ANALYTICS_RECENT_DAYS`` days;
        the totals and the OS/device breakdowns cover every visit.

        Args:
            db: Database session
            short_code: The short code of the link
            now: Reference time for the recent window, UTC now by default

        Raises:
            URLNotFoundError: If no link with this code exists
            AnalyticsRetrievalError: If retrieval fails
        """
        try:
            link = await self.link_repository.get_by_short_code(db, short_code)
            if link is None:
                raise URLNotFoundError(f"Short URL '{short_code}' not found")
            visits = await self.visit_repository.get_visits_for_link(db, link.id)
        except RepositoryError as e:
            logger.error(f"Error retrieving analytics for {short_code}: {e}")
            raise AnalyticsRetrievalError(f"Failed to retrieve analytics: {e}") from e

        cutoff = as_utc(now or datetime.now(timezone.utc)) - timedelta(days=settings.ANALYTICS_RECENT_DAYS)
        summary = VisitSummary()
        for visit in visits:
            summary.add(visit, count_date=as_utc(visit.timestamp) >= cutoff)

        return {
            "short_code": link.short_code,
            "total_clicks": summary.total.clicks,
            "unique_users": summary.total.unique_users,
            "clicks_by_date": summary.clicks_by_date(),
            "os_type": summary.os_breakdown(),
            "device_type": summary.device_breakdown(),
        }

    @db_transaction(db_param_name="db")
    async def get_topic_analytics(self, db: AsyncSession, topic: str) -> Dict[str, Any]:
        """
        Report on every link tagged with ``topic``, whoever created it.

        Raises:
            TopicNotFoundError: If no link carries this topic
            AnalyticsRetrievalError: If retrieval fails
        """
        try:
            links = await self.link_repository.get_by_topic(db, topic)
            if not links:
                raise TopicNotFoundError(f"No URLs found for topic '{topic}'")
            visits_by_link = await self.visit_repository.get_visits_for_links(
                db, [link.id for link in links]
            )
        except RepositoryError as e:
            logger.error(f"Error retrieving analytics for topic {topic}: {e}")
            raise AnalyticsRetrievalError(f"Failed to retrieve topic analytics: {e}") from e

        summary = VisitSummary()
        urls = []
        for link in links:
            per_link = CategoryStats()
            for visit in visits_by_link[link.id]:
                per_link.add(visit)
                summary.add(visit)
            urls.append({
                "short_url": link.short_url,
                "total_clicks": per_link.clicks,
                "unique_users": per_link.unique_users,
            })

        return {
            "topic": topic,
            "total_clicks": summary.total.clicks,
            "unique_users": summary.total.unique_users,
            "clicks_by_date": summary.clicks_by_date(),
            "urls": urls,
        }

    @db_transaction(db_param_name="db")
    async def get_overall_analytics(self, db: AsyncSession, user: User) -> Dict[str, Any]:
        """
        Report across every link created by ``user``.

        Raises:
            NoLinksFoundError: If the user has not created any link
            AnalyticsRetrievalError: If retrieval fails
        """
        try:
            links = await self.link_repository.get_by_owner(db, user.id)
            if not links:
                raise NoLinksFoundError("No URLs found for this user")
            visits_by_link = await self.visit_repository.get_visits_for_links(
                db, [link.id for link in links]
            )
        except RepositoryError as e:
            logger.error(f"Error retrieving overall analytics for user {user.id}: {e}")
            raise AnalyticsRetrievalError(f"Failed to retrieve overall analytics: {e}") from e

        summary = VisitSummary()
        for visit in chain.from_iterable(visits_by_link[link.id] for link in links):
            summary.add(visit)

        return {
            "total_urls": len(links),
            "total_clicks": summary.total.clicks,
            "unique_users": summary.total.unique_users,
            "clicks_by_date": summary.clicks_by_date(),
            "os_type": summary.os_breakdown(),
            "device_type": summary.device_breakdown(),
        }
