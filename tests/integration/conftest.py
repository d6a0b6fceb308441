# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for HTTP-level tests against the seeded database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from school_portal.api.app import create_app
from school_portal.api.dependencies import get_db
from school_portal.api.middleware.rate_limit import limiter
from school_portal.core.config import get_settings
from school_portal.domains.auth.jwt import JWTManager


@pytest_asyncio.fixture
async def api_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests share the test session."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    limiter.reset()


@pytest_asyncio.fixture
async def auth_headers(world):
    """Build Authorization headers for a seeded user key."""
    jwt_manager = JWTManager(get_settings().jwt)

    def headers(key: str) -> dict[str, str]:
        token = jwt_manager.create_access_token(world.ids[f"user:{key}"])
        return {"Authorization": f"Bearer {token}"}

    return headers
