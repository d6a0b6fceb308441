# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity context: who the caller is.

Exports:
    IdentityContext: Frozen caller identity.
    IdentityService: Resolves a token subject into an IdentityContext.
"""

from school_portal.domains.identity.context import IdentityContext
from school_portal.domains.identity.service import IdentityService

__all__ = ["IdentityContext", "IdentityService"]
