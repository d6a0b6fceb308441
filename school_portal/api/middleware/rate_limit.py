# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Limits are applied per client: the token subject when one is present,
otherwise the remote address. Login is keyed by address only.

Example:
    @router.post("/login")
    @limiter.limit(login_limit, key_func=get_ip_only)
    async def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from school_portal.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """User id if a token was accepted, otherwise the IP address."""
    token = getattr(request.state, "token", None)
    if token is not None:
        return f"user:{token.sub}"
    return f"ip:{get_remote_address(request)}"


def get_ip_only(request: Request) -> str:
    """Client IP address, for endpoints called before authentication."""
    return get_remote_address(request)


def login_limit() -> str:
    return f"{get_settings().rate_limit.login_per_minute}/minute"


def standard_limit() -> str:
    return f"{get_settings().rate_limit.requests_per_minute}/minute"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=get_settings().rate_limit.storage_uri,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Return 429 with a Retry-After hint."""
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please try again later."},
        headers={"Retry-After": "60"},
    )
