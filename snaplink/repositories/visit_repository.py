"""Visit Repository for redirect tracking in the SnapLink application.

This module provides the VisitRepository class for database operations related to Visit models.
Visits are append-only: the repository inserts and reads them, nothing else.
"""

from typing import Dict, List, Sequence, Union, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.models.visit import Visit, VisitCreate
from snaplink.repositories.base import BaseRepository, RepositoryError


class VisitRepository(BaseRepository[Visit, VisitCreate]):
    """
    Repository for Visit model database operations.

    Reads always return visits in insertion order, which is the
    chronological order the analytics views rely on.
    """

    def __init__(self):
        super().__init__(Visit)

    async def create_visit(
        self,
        db: AsyncSession,
        data: Union[VisitCreate, Dict[str, Any]]
    ) -> Visit:
        """
        Append a visit to a link's log.

        Raises:
            RepositoryError: On database errors
        """
        return await self.create(db, data)

    async def get_visits_for_link(self, db: AsyncSession, link_id: int) -> List[Visit]:
        """Every visit of one link in insertion order."""
        return await self.list_by(db, order_by=self.model_type.id, link_id=link_id)

    async def get_visits_for_links(
        self,
        db: AsyncSession,
        link_ids: Sequence[int]
    ) -> Dict[int, List[Visit]]:
        """
        Every visit of several links, grouped by link id.

        Each link id in ``link_ids`` gets an entry, empty when it has no visits.

        Raises:
            RepositoryError: On database errors
        """
        grouped: Dict[int, List[Visit]] = {link_id: [] for link_id in link_ids}
        if not grouped:
            return grouped

        try:
            query = (
                select(self.model_type)
                .where(self.model_type.link_id.in_(list(grouped)))
                .order_by(self.model_type.id)
            )
            result = await db.execute(query)
            for visit in result.scalars().all():
                grouped[visit.link_id].append(visit)
            return grouped
        except Exception as e:
            raise RepositoryError(f"Error retrieving visits for links {list(grouped)}: {e}") from e
