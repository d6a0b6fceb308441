# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for the login endpoint.

    Attributes:
        identifier: Email address or mobile number.
        password: Plain text password.
    """

    identifier: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Access token issued on login."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user_id: str
    role: str
    school_id: str | None = None
