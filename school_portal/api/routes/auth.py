# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication endpoints.

- POST /auth/login - Exchange email or mobile plus password for an access token
"""

import logging

from fastapi import APIRouter, Request

from school_portal.api.dependencies import JWT, DbSession
from school_portal.api.middleware.rate_limit import get_ip_only, limiter, login_limit
from school_portal.domains.auth import AuthService
from school_portal.models.auth import LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse, summary="Log in")
@limiter.limit(login_limit, key_func=get_ip_only)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
    jwt_manager: JWT,
) -> TokenResponse:
    """Exchange credentials for an access token.

    Raises:
        AuthenticationError: Mapped to 401 on bad credentials.
    """
    return await AuthService(db, jwt_manager).login(data.identifier, data.password)
