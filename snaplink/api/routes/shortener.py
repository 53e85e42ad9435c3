"""Short link creation endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.api import schemas
from snaplink.api.dependencies import enforce_creation_limit, get_shortener_service
from snaplink.db.session import get_db
from snaplink.models.user import User
from snaplink.services.exceptions import (
    AliasTakenError,
    URLCreationError,
    URLValidationError,
)
from snaplink.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Missing or invalid URL, or alias taken"},
        401: {"model": schemas.ErrorResponse, "description": "Not logged in"},
        429: {"model": schemas.ErrorResponse, "description": "Creation rate limit exceeded"},
    }
)
async def create_short_url(
    url_data: schemas.ShortenRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(enforce_creation_limit),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        link = await shortener_service.create_short_link(
            db=db,
            long_url=url_data.long_url,
            custom_alias=url_data.custom_alias,
            topic=url_data.topic,
            user_id=user.id,
        )
    except URLValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AliasTakenError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except URLCreationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return schemas.ShortenResponse(
        short_url=link.short_url,
        short_code=link.short_code,
        topic=link.topic,
        created_at=link.created_at,
    )
