# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential exchange.

Login accepts an email (matched case-insensitively) or a mobile number and
returns an access token for an active user.

Example:
    >>> auth_service = AuthService(db_session, jwt_manager, PasswordHasher())
    >>> token = await auth_service.login("teacher@school.test", "password")
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.errors import AuthenticationError
from school_portal.domains.auth.jwt import JWTManager
from school_portal.domains.auth.password import PasswordHasher
from school_portal.infrastructure.database.models import User
from school_portal.models.auth import TokenResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Exchanges credentials for access tokens.

    Attributes:
        _db: Async database session.
        _jwt_manager: Token issuer.
        _password_hasher: bcrypt verifier.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher | None = None,
    ) -> None:
        self._db = db
        self._jwt_manager = jwt_manager
        self._password_hasher = password_hasher or PasswordHasher()

    async def login(self, identifier: str, password: str) -> TokenResponse:
        """Authenticate by email or mobile and password.

        Args:
            identifier: Email address or mobile number.
            password: Plain text password.

        Returns:
            TokenResponse carrying the access token.

        Raises:
            AuthenticationError: If no active user matches or the password
                is wrong. Both cases share one message.
        """
        identifier = identifier.strip()
        result = await self._db.execute(
            select(User).where(
                User.is_active.is_(True),
                or_(User.email == identifier.lower(), User.mobile == identifier),
            )
        )
        user = result.scalars().first()

        if user is None or not self._password_hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid credentials")

        token = self._jwt_manager.create_access_token(
            user_id=user.id,
            role=user.role,
            school_id=user.school_id,
        )
        logger.info("User logged in: user=%s, role=%s", user.id, user.role)

        return TokenResponse(
            access_token=token,
            expires_in=self._jwt_manager.expires_in,
            user_id=user.id,
            role=user.role,
            school_id=user.school_id,
        )
