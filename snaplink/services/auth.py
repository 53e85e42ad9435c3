"""Authentication service for the SnapLink application.

Exchanges a verified Google identity for a SnapLink session credential,
creating the local user record on first login.
"""

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.identity import GoogleIdentityVerifier, IdentityClaims
from snaplink.core.security import create_session_token
from snaplink.db.session import db_transaction
from snaplink.models.user import User, UserCreate
from snaplink.repositories.base import DuplicateEntityError
from snaplink.repositories.user_repository import UserRepository
from snaplink.services.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


class AuthService:
    """Service for login and user provisioning."""

    def __init__(self, user_repository: UserRepository, identity_verifier: GoogleIdentityVerifier):
        self.user_repository = user_repository
        self.identity_verifier = identity_verifier

    @db_transaction(db_param_name="db")
    async def login(self, db: AsyncSession, token: str) -> Tuple[str, User]:
        """
        Verify an identity token and issue a session token.

        Args:
            db: Database session
            token: ID token issued by the identity provider

        Returns:
            Tuple of the session token and the logged-in user

        Raises:
            InvalidTokenError: If the identity token is rejected
                or its email belongs to another account
        """
        claims = await self.identity_verifier.verify(token)
        user = await self._get_or_create_user(db, claims)
        logger.info(f"User {user.id} logged in")
        return create_session_token(user.id, user.email), user

    async def _get_or_create_user(self, db: AsyncSession, claims: IdentityClaims) -> User:
        user = await self.user_repository.get_by_google_id(db, claims.subject)
        if user is not None:
            return user

        try:
            user = await self.user_repository.create_user(db, UserCreate(
                google_id=claims.subject,
                name=claims.name,
                email=claims.email,
                profile_pic=claims.picture,
            ))
            logger.info(f"Created user {user.id} for {claims.email}")
            return user
        except DuplicateEntityError:
            # Another login for the same account won the insert
            user = await self.user_repository.get_by_google_id(db, claims.subject)
            if user is None:
                logger.warning(f"Email {claims.email} already belongs to another account")
                raise InvalidTokenError("Email already linked to another account")
            return user
