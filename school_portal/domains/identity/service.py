# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity resolution from an access token subject.

Role and school are always re-read from the users row; token claims are
informational only.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.errors import AuthenticationError, AuthorizationError
from school_portal.domains.identity.context import IdentityContext
from school_portal.infrastructure.database.models import User
from school_portal.models.common import Role

logger = logging.getLogger(__name__)


class IdentityService:
    """Builds IdentityContext values from stored users."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def resolve(self, user_id: str) -> IdentityContext:
        """Load the caller's identity.

        Args:
            user_id: Subject of a verified access token.

        Returns:
            IdentityContext for the user.

        Raises:
            AuthenticationError: If the user no longer exists.
            AuthorizationError: If the stored role is not a portal role.
        """
        result = await self._db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            logger.info("Token subject not found: user=%s", user_id)
            raise AuthenticationError("Must sign in")

        try:
            role = Role(user.role)
        except ValueError:
            logger.warning("Unrecognized role on user=%s: %s", user.id, user.role)
            raise AuthorizationError("Unrecognized role") from None

        return IdentityContext(
            user_id=user.id,
            role=role,
            school_id=user.school_id,
            is_active=user.is_active,
        )
