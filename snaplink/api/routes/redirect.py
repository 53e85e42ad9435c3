"""URL redirection endpoint with visit tracking."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from snaplink.api.dependencies import get_client_ip, get_current_user, get_redirect_service
from snaplink.core.logging import log_url_access
from snaplink.db.session import get_db
from snaplink.models.user import User
from snaplink.services.exceptions import URLNotFoundError, VisitTrackingError
from snaplink.services.redirect import RedirectService

router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND
)
async def redirect_to_long_url(
    request: Request,
    short_code: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    redirect_service: RedirectService = Depends(get_redirect_service),
):
    """Record the visit, then redirect to the long URL."""
    ip_address = get_client_ip(request)
    user_agent = request.headers.get("user-agent", "")

    try:
        link = await redirect_service.record_visit(
            db=db,
            short_code=short_code,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except URLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VisitTrackingError as e:
        logger.error("Error tracking visit", short_code=short_code, error=str(e))
        raise HTTPException(status_code=500, detail=f"Redirect error: {str(e)}")

    log_url_access(short_code=short_code, ip_address=ip_address, user_agent=user_agent)
    return RedirectResponse(url=link.long_url, status_code=status.HTTP_302_FOUND)
