"""Analytics endpoints for links, topics and a user's own links."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.api import schemas
from snaplink.api.dependencies import get_analytics_service, get_current_user
from snaplink.db.session import get_db
from snaplink.models.user import User
from snaplink.services.analytics import AnalyticsService
from snaplink.services.exceptions import (
    AnalyticsRetrievalError,
    NoLinksFoundError,
    TopicNotFoundError,
    URLNotFoundError,
)

router = APIRouter(tags=["analytics"])

_not_found = {404: {"model": schemas.ErrorResponse, "description": "Nothing to report on"}}


@router.get(
    "/analytics/topic/{topic}",
    response_model=schemas.TopicAnalyticsResponse,
    responses=_not_found
)
async def get_topic_analytics(
    topic: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
):
    try:
        return await analytics_service.get_topic_analytics(db, topic)
    except TopicNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AnalyticsRetrievalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/analytics/{short_code}",
    response_model=schemas.LinkAnalyticsResponse,
    responses=_not_found
)
async def get_link_analytics(
    short_code: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
):
    try:
        return await analytics_service.get_link_analytics(db, short_code)
    except URLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AnalyticsRetrievalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/overall/analytics",
    response_model=schemas.OverallAnalyticsResponse,
    responses=_not_found
)
async def get_overall_analytics(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
):
    try:
        return await analytics_service.get_overall_analytics(db, user)
    except NoLinksFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AnalyticsRetrievalError as e:
        raise HTTPException(status_code=500, detail=str(e))
