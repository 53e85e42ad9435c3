"""Session credential issuing and validation.

Session tokens are HS256 JWTs carrying the user id (``sub``) and email,
valid for ``TOKEN_EXPIRE_MINUTES`` after issue.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from snaplink.core.config import settings
from snaplink.services.exceptions import InvalidSessionError


class SessionClaims(BaseModel):
    """Verified contents of a session token."""
    user_id: int
    email: str
    expires_at: datetime


def create_session_token(
    user_id: int,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a session token for ``user_id``."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> SessionClaims:
    """
    Validate a session token and return its claims.

    Raises:
        InvalidSessionError: If the token is expired, malformed or badly signed
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidSessionError("Session token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidSessionError("Invalid session token") from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise InvalidSessionError("Session token subject is not a user id") from e

    return SessionClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
