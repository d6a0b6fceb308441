# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    AuthMiddleware: Bearer token decoding.
    RequestContextMiddleware: Request-scoped logging context.
    limiter: slowapi Limiter shared by the routes.
"""

from school_portal.api.middleware.auth import AuthMiddleware
from school_portal.api.middleware.rate_limit import limiter
from school_portal.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "AuthMiddleware",
    "RequestContextMiddleware",
    "limiter",
]
