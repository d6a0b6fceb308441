# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the school portal.

Example:
    >>> from school_portal.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.reviews.comment_max_length)
    500
"""

from school_portal.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    DirectorySettings,
    JWTSettings,
    RateLimitSettings,
    ReviewSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "JWTSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
    "ReviewSettings",
    "DirectorySettings",
]
