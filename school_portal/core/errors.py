# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by every domain service.

Services raise these; the API layer maps each class to one HTTP status
(see school_portal.api.app). None of them is retried by the portal itself.
"""


class PortalError(Exception):
    """Base exception for portal errors.

    Attributes:
        message: Human-readable error description, safe to show the caller.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(PortalError):
    """Raised when no valid identity accompanies the request."""

    status_code = 401


class AuthorizationError(PortalError):
    """Raised when a valid identity attempts a disallowed action."""

    status_code = 403


class NotFoundError(PortalError):
    """Raised when a referenced entity id does not resolve."""

    status_code = 404


class ValidationError(PortalError):
    """Raised when input cannot be normalized into an acceptable value."""

    status_code = 422


class ServerError(PortalError):
    """Raised on storage or infrastructure failure. Safe for the caller to retry."""

    status_code = 503
