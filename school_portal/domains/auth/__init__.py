# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication boundary.

Exports:
    PasswordHasher: bcrypt hashing and verification.
    JWTManager: Access token creation and validation.
    AuthService: Email/mobile and password login.
"""

from school_portal.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from school_portal.domains.auth.password import PasswordHasher
from school_portal.domains.auth.service import AuthService

__all__ = [
    "AuthService",
    "InvalidTokenError",
    "JWTError",
    "JWTManager",
    "PasswordHasher",
    "TokenExpiredError",
    "TokenPayload",
]
