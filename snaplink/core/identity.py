"""Identity provider client.

Verifies Google Sign-In ID tokens and returns the verified claims.
"""

from typing import Optional

from fastapi.concurrency import run_in_threadpool
from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from loguru import logger
from pydantic import BaseModel

from snaplink.core.config import settings
from snaplink.services.exceptions import InvalidTokenError


class IdentityClaims(BaseModel):
    """Verified identity of a user as reported by the provider."""
    subject: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class GoogleIdentityVerifier:
    """
    Verifies Google ID tokens against the configured OAuth client id.

    The google-auth verifier is synchronous (it may fetch Google's signing
    certificates), so it runs in the threadpool.
    """

    def __init__(self, client_id: Optional[str] = None):
        self.client_id = client_id if client_id is not None else settings.GOOGLE_CLIENT_ID
        self._transport = google_requests.Request()

    def _verify_sync(self, token: str) -> dict:
        return id_token.verify_oauth2_token(token, self._transport, audience=self.client_id or None)

    async def verify(self, token: str) -> IdentityClaims:
        """
        Exchange an ID token for verified claims.

        Raises:
            InvalidTokenError: On any verification failure
        """
        if not token:
            raise InvalidTokenError("Identity token is required")

        try:
            payload = await run_in_threadpool(self._verify_sync, token)
        except (ValueError, GoogleAuthError) as e:
            logger.warning("Identity token verification failed", error=str(e))
            raise InvalidTokenError("Invalid identity token") from e

        if not payload.get("sub") or not payload.get("email"):
            raise InvalidTokenError("Identity token is missing subject or email")

        return IdentityClaims(
            subject=payload["sub"],
            email=payload["email"],
            name=payload.get("name"),
            picture=payload.get("picture"),
        )
