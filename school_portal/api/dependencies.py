# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Dependencies are used to:
- Get the request-scoped database session
- Resolve the caller's IdentityContext
- Get settings and the JWT manager

Example:
    @router.get("/dashboard")
    async def dashboard(identity: CurrentIdentity, db: DbSession):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.middleware.auth import get_token
from school_portal.core.config import Settings, get_settings
from school_portal.core.errors import AuthenticationError
from school_portal.domains.auth.jwt import JWTManager
from school_portal.domains.identity import IdentityContext, IdentityService
from school_portal.infrastructure.database.connection import get_session

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, committed on success, rolled back on error."""
    async with get_session() as session:
        yield session


def get_jwt_manager(settings: Annotated[Settings, Depends(get_settings)]) -> JWTManager:
    return JWTManager(settings.jwt)


async def require_identity(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IdentityContext:
    """Resolve the authenticated caller.

    Role and school come from the users row, not the token.

    Raises:
        HTTPException: 401 if there is no valid token or its user is gone.
    """
    token = get_token(request)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await IdentityService(db).resolve(token.sub)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
CurrentIdentity = Annotated[IdentityContext, Depends(require_identity)]
JWT = Annotated[JWTManager, Depends(get_jwt_manager)]
