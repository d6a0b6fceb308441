# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access token issue and validation using python-jose.

The subject is the user id. Role and school claims are carried for
clients' convenience only; the server re-reads both from the database on
every request.

Example:
    >>> from school_portal.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token(user_id="user-123", role="student")
    >>> jwt_manager.decode_token(token).sub
    'user-123'
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from school_portal.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """Decoded access token claims.

    Attributes:
        sub: Subject (user id).
        type: Token type.
        role: Role at issue time (informational).
        school_id: Home school at issue time (informational).
        exp: Expiry, epoch seconds.
        iat: Issue time, epoch seconds.
        jti: Token id.
    """

    sub: str
    type: Literal["access"] = "access"
    role: str | None = None
    school_id: str | None = None
    exp: int
    iat: int
    jti: str


class JWTError(Exception):
    """A token could not be accepted."""

    pass


class TokenExpiredError(JWTError):
    """The token was well formed but is past its exp claim."""

    pass


class InvalidTokenError(JWTError):
    """Bad signature, malformed claims or the wrong token type."""

    pass


class JWTManager:
    """Creates and validates access tokens.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._settings.access_token_expire_minutes * 60

    def create_access_token(
        self,
        user_id: str,
        role: str | None = None,
        school_id: str | None = None,
    ) -> str:
        """Create a signed access token.

        Args:
            user_id: User identifier (token subject).
            role: Role code, informational.
            school_id: Home school id, informational.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "type": "access",
            "role": role,
            "school_id": school_id,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate an access token.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the signature, claims or type are invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired") from None
        except JoseJWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}") from None

        if payload.get("type") != "access":
            raise InvalidTokenError(f"Expected access token, got {payload.get('type')}")

        try:
            return TokenPayload.model_validate(payload)
        except ValueError as e:
            raise InvalidTokenError(f"Invalid token claims: {str(e)}") from None
