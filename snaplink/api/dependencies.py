"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access repositories, service instances, the current user and the
link creation rate limit.
"""

import ipaddress
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.config import settings
from snaplink.core.identity import GoogleIdentityVerifier
from snaplink.core.rate_limit import CreationRateLimiter, creation_rate_limiter
from snaplink.core.security import decode_session_token
from snaplink.db.session import get_db
from snaplink.models.user import User
from snaplink.repositories.link_repository import LinkRepository
from snaplink.repositories.user_repository import UserRepository
from snaplink.repositories.visit_repository import VisitRepository
from snaplink.services.analytics import AnalyticsService
from snaplink.services.auth import AuthService
from snaplink.services.exceptions import InvalidSessionError, RateLimitExceededError
from snaplink.services.redirect import RedirectService
from snaplink.services.shortener import ShortenedURLService

bearer_scheme = HTTPBearer(auto_error=False)

_identity_verifier: Optional[GoogleIdentityVerifier] = None


async def get_link_repository():
    """Get an instance of the link repository."""
    return LinkRepository()


async def get_visit_repository():
    """Get an instance of the visit repository."""
    return VisitRepository()


async def get_user_repository():
    """Get an instance of the user repository."""
    return UserRepository()


def get_identity_verifier() -> GoogleIdentityVerifier:
    """Get the shared identity token verifier."""
    global _identity_verifier
    if _identity_verifier is None:
        _identity_verifier = GoogleIdentityVerifier()
    return _identity_verifier


def get_rate_limiter() -> CreationRateLimiter:
    """Get the link creation rate limiter."""
    return creation_rate_limiter


async def get_shortener_service(
    link_repo: LinkRepository = Depends(get_link_repository),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(link_repository=link_repo)


async def get_redirect_service(
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    visit_repo: VisitRepository = Depends(get_visit_repository),
) -> RedirectService:
    """Get an instance of the redirect service."""
    return RedirectService(shortener_service=shortener_service, visit_repository=visit_repo)


async def get_analytics_service(
    link_repo: LinkRepository = Depends(get_link_repository),
    visit_repo: VisitRepository = Depends(get_visit_repository),
) -> AnalyticsService:
    """Get an instance of the analytics service."""
    return AnalyticsService(link_repository=link_repo, visit_repository=visit_repo)


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
) -> AuthService:
    """Get an instance of the authentication service."""
    return AuthService(user_repository=user_repo, identity_verifier=verifier)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    user_repo: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Resolve the session credential in the Authorization header to a user.

    Raises:
        HTTPException: 401 when the credential is missing, invalid, expired,
            or names a user that no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Unauthorized")

    try:
        claims = decode_session_token(credentials.credentials)
    except InvalidSessionError as e:
        raise _unauthorized(str(e))

    user = await user_repo.get_by_id(db, claims.user_id)
    if user is None:
        raise _unauthorized("Unauthorized")
    return user


async def enforce_creation_limit(
    user: User = Depends(get_current_user),
    limiter: CreationRateLimiter = Depends(get_rate_limiter),
) -> User:
    """
    Count a link creation attempt against the user's quota.

    Runs after authentication and before the handler, so a rejected
    request never reaches the shortener.

    Raises:
        HTTPException: 429 with ``Retry-After`` once the quota is used up
    """
    if not settings.RATE_LIMIT_ENABLED:
        return user

    try:
        await limiter.hit(user.id)
    except RateLimitExceededError as e:
        headers = {"Retry-After": str(e.retry_after)} if e.retry_after is not None else None
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
            headers=headers,
        )
    return user


def get_client_ip(request: Request) -> str:
    """Client IP, preferring the first valid ``X-Forwarded-For`` entry."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        candidate = forwarded.split(",")[0].strip()
        try:
            ipaddress.ip_address(candidate)
            return candidate
        except ValueError:
            pass
    return request.client.host if request.client else "unknown"
